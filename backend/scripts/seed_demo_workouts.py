from datetime import datetime, time, timedelta, timezone
import argparse
import random

from app.core.summary import summarize_workout
from app.db import SessionLocal
from app.models.heart_rate_sample import HeartRateSampleRow
from app.models.workout import Workout
from app.schemas.effort import HeartRateSample, WorkoutType

SAMPLE_INTERVAL_S = 30


def clear_recent_workouts(db, days: int = 60) -> None:
    """Delete workouts in the last N days so we can reseed cleanly."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    ids = [w.id for w in db.query(Workout.id).filter(Workout.started_at >= cutoff)]
    if ids:
        db.query(HeartRateSampleRow).filter(HeartRateSampleRow.workout_id.in_(ids)).delete(
            synchronize_session=False
        )
        db.query(Workout).filter(Workout.id.in_(ids)).delete(synchronize_session=False)
    db.commit()


def synthetic_stream(rng: random.Random, workout_type: WorkoutType, count: int, hr_max: int) -> list[int | None]:
    """Rough HR shape per workout type, as bpm values (None = dropped reading)."""
    values: list[int | None] = []
    for i in range(count):
        if workout_type == WorkoutType.weightlifting:
            # sets spike, rests drop back
            frac = 0.88 if i % 6 in (2, 3) else 0.62
        elif workout_type in (WorkoutType.hiit, WorkoutType.crossfit):
            frac = 0.92 if (i // 2) % 2 == 0 else 0.55
        elif workout_type in (WorkoutType.running, WorkoutType.cycling, WorkoutType.cardio):
            frac = 0.66
        else:
            frac = 0.55
        hr = int(hr_max * frac + rng.gauss(0, 3))
        values.append(None if rng.random() < 0.02 else hr)
    return values


def seed_demo_workouts(db, weeks: int = 4, hr_max: int = 190, seed: int | None = None) -> None:
    """Insert a few weeks of demo workouts (lifting, intervals, cardio)."""
    rng = random.Random(seed)
    today = datetime.now(timezone.utc).date()
    start_day = today - timedelta(weeks=weeks - 1)

    plan = [
        (0, WorkoutType.weightlifting, "00:50:00"),
        (2, WorkoutType.hiit, "00:30:00"),
        (4, WorkoutType.running, "01:00:00"),
        (6, WorkoutType.yoga, "00:45:00"),
    ]

    added = 0
    for week in range(weeks):
        week_start = start_day + timedelta(weeks=week)
        for offset, workout_type, dur_str in plan:
            d = week_start + timedelta(days=offset)
            # Skip future days
            if d > today:
                continue

            h, m, s = map(int, dur_str.split(":"))
            duration_seconds = h * 3600 + m * 60 + s
            started_at = datetime.combine(d, time(7, 0), tzinfo=timezone.utc)

            count = duration_seconds // SAMPLE_INTERVAL_S
            samples = [
                HeartRateSample(
                    heart_rate=hr,
                    timestamp=started_at + timedelta(seconds=i * SAMPLE_INTERVAL_S),
                )
                for i, hr in enumerate(synthetic_stream(rng, workout_type, count, hr_max))
            ]

            workout = Workout(
                workout_type=workout_type.value,
                status="completed",
                source="sensor",
                started_at=started_at,
                ended_at=started_at + timedelta(seconds=duration_seconds),
                duration_seconds=duration_seconds,
                hr_max=hr_max,
                notes="Demo workout",
            )
            summarize_workout(workout, samples)
            db.add(workout)
            db.flush()
            for i, sample in enumerate(samples):
                db.add(HeartRateSampleRow(
                    workout_id=workout.id,
                    idx=i,
                    heart_rate=sample.heart_rate,
                    recorded_at=sample.timestamp,
                ))
            added += 1

    db.commit()
    print(f"Seeded {added} demo workouts")


def main():
    parser = argparse.ArgumentParser(description="Seed demo workouts")
    parser.add_argument("--weeks", type=int, default=4)
    parser.add_argument("--hr-max", type=int, default=190)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    db = SessionLocal()
    try:
        clear_recent_workouts(db, days=args.weeks * 7 + 7)
        seed_demo_workouts(db, weeks=args.weeks, hr_max=args.hr_max, seed=args.seed)
    finally:
        db.close()


if __name__ == "__main__":
    main()
