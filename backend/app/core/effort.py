"""Heart rate effort scoring.

Turns heart rate readings into zone occupancy, intensity and a 0-100
quality score. Everything here is a pure function of its arguments, so
the same inputs always give the same output and calls can run from any
thread.

Rounding is half away from zero at every step that rounds. Stored
workouts were scored that way, so intermediate rounding must not be
folded together or reordered.
"""
import logging
import math
from typing import Iterable, Optional

from app.core.constants import (
    DEFAULT_VARIABILITY_SCORE,
    FULL_DURATION_SECONDS,
    HR_ZONE_FRACTIONS,
    INTENSITY_BAND_WIDTH,
    INTENSITY_MAX,
    INTENSITY_MIN,
    QUALITY_FLOOR,
    QUALITY_THRESHOLDS,
    SAMPLES_PER_EXPECTED_SPIKE,
    SAMPLES_PER_EXPECTED_TRANSITION,
    VARIABILITY_REFERENCE_BPM,
)
from app.core.exceptions import InvalidArgument
from app.schemas.effort import (
    ZONE_DESCRIPTIONS,
    ZONE_LABELS,
    ZONE_ORDER,
    EffortReading,
    HeartRateSample,
    Quality,
    WorkoutQuality,
    WorkoutSpecific,
    WorkoutType,
    Zone,
    ZoneBounds,
    ZoneRange,
)

logger = logging.getLogger(__name__)

CARDIO_TYPES = {WorkoutType.cardio, WorkoutType.running, WorkoutType.cycling}
INTERVAL_TYPES = {WorkoutType.hiit, WorkoutType.crossfit}


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _check_max_heart_rate(max_heart_rate) -> None:
    if (
        isinstance(max_heart_rate, bool)
        or not isinstance(max_heart_rate, (int, float))
        or not math.isfinite(max_heart_rate)
        or max_heart_rate <= 0
    ):
        raise InvalidArgument(
            f"max_heart_rate must be a positive number, got {max_heart_rate!r}",
            field="max_heart_rate",
        )


def _check_duration(duration_seconds) -> None:
    if (
        isinstance(duration_seconds, bool)
        or not isinstance(duration_seconds, (int, float))
        or not math.isfinite(duration_seconds)
        or duration_seconds < 0
    ):
        raise InvalidArgument(
            f"duration_seconds must be >= 0, got {duration_seconds!r}",
            field="duration_seconds",
        )


def compute_zones(max_heart_rate: float) -> ZoneBounds:
    """Zone bands for a max heart rate.

    Edges are round(M * f) for each fraction in HR_ZONE_FRACTIONS; the
    recovery band starts at 0 and the max band ends at M.
    """
    _check_max_heart_rate(max_heart_rate)
    edges = [0] + [round_half_away(max_heart_rate * f) for f in HR_ZONE_FRACTIONS]
    edges.append(max_heart_rate)
    bands = {
        zone.value: ZoneRange(min=edges[i], max=edges[i + 1])
        for i, zone in enumerate(ZONE_ORDER)
    }
    return ZoneBounds(**bands)


def _locate(heart_rate: float, zones: ZoneBounds) -> tuple[int, Zone, ZoneRange]:
    # Ascending scan; anything above the anaerobic ceiling lands in max.
    ranges = zones.ranges()
    for idx, (zone, band) in enumerate(ranges[:-1]):
        if heart_rate <= band.max:
            return idx, zone, band
    zone, band = ranges[-1]
    return len(ranges) - 1, zone, band


def _reading(heart_rate: float, zones: ZoneBounds) -> EffortReading:
    idx, zone, band = _locate(heart_rate, zones)
    floor = idx * INTENSITY_BAND_WIDTH
    width = band.max - band.min
    if width > 0:
        raw = floor + ((heart_rate - band.min) / width) * INTENSITY_BAND_WIDTH
    else:
        # collapsed band (tiny max HR): report its lower endpoint
        raw = floor
    intensity = min(max(round_half_away(raw), INTENSITY_MIN), INTENSITY_MAX)
    return EffortReading(
        zone=zone,
        label=ZONE_LABELS[zone],
        intensity=intensity,
        description=ZONE_DESCRIPTIONS[zone],
    )


def classify(heart_rate: float, max_heart_rate: float) -> EffortReading:
    """Zone and 0-100 intensity for a single heart rate value."""
    return _reading(heart_rate, compute_zones(max_heart_rate))


def quality_for(score: float) -> Quality:
    for threshold, label in QUALITY_THRESHOLDS:
        if score >= threshold:
            return Quality(label)
    return Quality(QUALITY_FLOOR)


def _as_workout_type(workout_type) -> Optional[WorkoutType]:
    if isinstance(workout_type, WorkoutType):
        return workout_type
    try:
        return WorkoutType(workout_type)
    except ValueError:
        logger.debug("Unknown workout type %r, using generic formula", workout_type)
        return None


def _population_stdev(values: list[int]) -> float:
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def score_workout(
    samples: Iterable[HeartRateSample],
    max_heart_rate: float,
    duration_seconds: float,
    workout_type=WorkoutType.other,
) -> WorkoutQuality:
    """Summarize a workout's heart rate stream into a quality score.

    Missing readings (heart_rate None) add 0 to the intensity series and
    count toward the zone-percentage denominator, but never fall into a
    zone. As a result zone percentages do not sum to 100 when readings are
    missing; stored records depend on that.

    Args:
        samples: readings in recording order
        max_heart_rate: athlete's max heart rate (> 0)
        duration_seconds: workout length (>= 0)
        workout_type: WorkoutType or any string; unknown values use the
            generic formula

    Raises:
        InvalidArgument: max_heart_rate <= 0 or duration_seconds < 0
    """
    _check_max_heart_rate(max_heart_rate)
    _check_duration(duration_seconds)
    samples = list(samples)
    if not samples:
        return WorkoutQuality.empty()

    zones = compute_zones(max_heart_rate)
    spike_threshold = zones.max.min
    aerobic = zones.aerobic

    total = len(samples)
    intensities: list[int] = []
    zone_counts = {zone: 0 for zone in ZONE_ORDER}
    valid: list[int] = []
    peak_spikes = 0
    longest_aerobic = 0
    current_aerobic = 0
    transitions = 0
    previous_zone: Optional[Zone] = None

    for sample in samples:
        hr = sample.heart_rate
        if hr is None:
            intensities.append(0)
            current_aerobic = 0
            continue

        reading = _reading(hr, zones)
        intensities.append(reading.intensity)
        zone_counts[reading.zone] += 1
        valid.append(hr)

        if hr > spike_threshold:
            peak_spikes += 1

        if aerobic.min <= hr <= aerobic.max:
            current_aerobic += 1
            longest_aerobic = max(longest_aerobic, current_aerobic)
        else:
            current_aerobic = 0

        if previous_zone is not None and previous_zone != reading.zone:
            transitions += 1
        previous_zone = reading.zone

    average_intensity = sum(intensities) / total
    max_intensity = max(intensities)
    time_in_zones = {
        zone.value: round_half_away(count / total * 100)
        for zone, count in zone_counts.items()
    }

    specific = WorkoutSpecific(
        peak_spikes=peak_spikes,
        sustained_aerobic=round_half_away(longest_aerobic / total * 100),
        zone_transitions=transitions,
    )
    if len(valid) > 1:
        specific.hr_variability = round_half_away(_population_stdev(valid))

    score = _weighted_score(
        _as_workout_type(workout_type),
        total=total,
        average_intensity=average_intensity,
        max_intensity=max_intensity,
        time_in_zones=time_in_zones,
        specific=specific,
        duration_seconds=duration_seconds,
    )
    logger.debug(
        "Scored %d samples (%d valid) as %s: %d",
        total, len(valid), workout_type, score,
    )
    return WorkoutQuality(
        average_intensity=round_half_away(average_intensity),
        max_intensity=max_intensity,
        time_in_zones=time_in_zones,
        quality=quality_for(score),
        score=score,
        workout_specific=specific,
    )


def _weighted_score(
    workout_type: Optional[WorkoutType],
    *,
    total: int,
    average_intensity: float,
    max_intensity: int,
    time_in_zones: dict[str, int],
    specific: WorkoutSpecific,
    duration_seconds: float,
) -> int:
    duration_score = min(duration_seconds / FULL_DURATION_SECONDS * 100, 100)
    high_intensity = time_in_zones[Zone.anaerobic.value] + time_in_zones[Zone.max.value]

    if workout_type == WorkoutType.weightlifting:
        # peaks and recovery swings between sets matter most
        # a flat series (variability 0) scores like an unknown one
        if not specific.hr_variability:
            variability_score = DEFAULT_VARIABILITY_SCORE
        else:
            variability_score = min(specific.hr_variability / VARIABILITY_REFERENCE_BPM * 100, 100)
        spikes_score = min(
            specific.peak_spikes / max(total / SAMPLES_PER_EXPECTED_SPIKE, 1) * 100, 100
        )
        return round_half_away(
            max_intensity * 0.30
            + spikes_score * 0.25
            + variability_score * 0.25
            + duration_score * 0.10
            + average_intensity * 0.10
        )

    if workout_type in CARDIO_TYPES:
        return round_half_away(
            (specific.sustained_aerobic or 0) * 0.35
            + average_intensity * 0.30
            + duration_score * 0.20
            + time_in_zones[Zone.aerobic.value] * 0.15
        )

    if workout_type in INTERVAL_TYPES:
        transitions_score = min(
            specific.zone_transitions / max(total / SAMPLES_PER_EXPECTED_TRANSITION, 1) * 100,
            100,
        )
        return round_half_away(
            high_intensity * 0.30
            + transitions_score * 0.25
            + max_intensity * 0.25
            + average_intensity * 0.20
        )

    return round_half_away(
        average_intensity * 0.35
        + max_intensity * 0.30
        + high_intensity * 0.20
        + duration_score * 0.15
    )
