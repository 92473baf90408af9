from app.core.effort import round_half_away, score_workout
from app.models.workout import Workout
from app.schemas.effort import HeartRateSample


def summarize_workout(workout: Workout, samples: list[HeartRateSample]) -> None:
    """Fill min/avg/max HR and the effort block from the recorded samples.

    Only valid readings are scored; with none, the effort block stays empty.
    """
    valid = [s for s in samples if s.heart_rate is not None]
    hrs = [s.heart_rate for s in valid]
    workout.avg_hr = round_half_away(sum(hrs) / len(hrs)) if hrs else None
    workout.max_hr = max(hrs) if hrs else None
    workout.min_hr = min(hrs) if hrs else None

    if not valid:
        workout.effort = None
        return
    quality = score_workout(
        valid,
        workout.hr_max,
        workout.duration_seconds or 0,
        workout.workout_type,
    )
    workout.effort = quality.model_dump(mode="json", exclude_none=True)
