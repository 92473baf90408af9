from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WorkoutType(str, Enum):
    weightlifting = "Weightlifting"
    cardio = "Cardio"
    hiit = "HIIT"
    crossfit = "CrossFit"
    running = "Running"
    cycling = "Cycling"
    yoga = "Yoga"
    other = "Other"


class Zone(str, Enum):
    """Heart rate zones, ordered from lowest to highest."""

    recovery = "recovery"
    fat_burn = "fatBurn"
    aerobic = "aerobic"
    anaerobic = "anaerobic"
    max = "max"


ZONE_ORDER = (Zone.recovery, Zone.fat_burn, Zone.aerobic, Zone.anaerobic, Zone.max)

ZONE_LABELS = {
    Zone.recovery: "Recovery",
    Zone.fat_burn: "Fat Burn",
    Zone.aerobic: "Aerobic",
    Zone.anaerobic: "Anaerobic",
    Zone.max: "Max",
}

ZONE_DESCRIPTIONS = {
    Zone.recovery: "Very Light",
    Zone.fat_burn: "Light",
    Zone.aerobic: "Moderate",
    Zone.anaerobic: "Hard",
    Zone.max: "Maximum",
}


class Quality(str, Enum):
    excellent = "Excellent"
    good = "Good"
    fair = "Fair"
    poor = "Poor"


class HeartRateSample(BaseModel):
    """One reading. `heart_rate=None` marks a missing/invalid reading."""

    model_config = ConfigDict(frozen=True)

    heart_rate: Optional[int] = Field(default=None, ge=0)
    timestamp: Optional[datetime] = None


class ZoneRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Union[int, float]
    max: Union[int, float]


class ZoneBounds(BaseModel):
    """Five contiguous bands; a value on a shared edge belongs to the lower band."""

    model_config = ConfigDict(frozen=True)

    recovery: ZoneRange
    fatBurn: ZoneRange
    aerobic: ZoneRange
    anaerobic: ZoneRange
    max: ZoneRange

    def for_zone(self, zone: Zone) -> ZoneRange:
        return getattr(self, zone.value)

    def ranges(self) -> list[tuple[Zone, ZoneRange]]:
        """Bands in ascending order."""
        return [(zone, self.for_zone(zone)) for zone in ZONE_ORDER]


class EffortReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    zone: Zone
    label: str
    intensity: int  # 0-100
    description: str


class WorkoutSpecific(BaseModel):
    """Type-specific metrics. Absent values stay None and are dropped on storage."""

    hr_variability: Optional[int] = None
    peak_spikes: Optional[int] = None
    # Declared for stored records; no formula produces it.
    recovery_efficiency: Optional[float] = None
    sustained_aerobic: Optional[int] = None
    zone_transitions: Optional[int] = None


class WorkoutQuality(BaseModel):
    model_config = ConfigDict(frozen=True)

    average_intensity: int
    max_intensity: int
    time_in_zones: dict[str, int]
    quality: Quality
    score: int
    workout_specific: Optional[WorkoutSpecific] = None

    @classmethod
    def empty(cls) -> "WorkoutQuality":
        return cls(
            average_intensity=0,
            max_intensity=0,
            time_in_zones={},
            quality=Quality.poor,
            score=0,
        )


class ScoreRequest(BaseModel):
    samples: list[HeartRateSample] = []
    max_heart_rate: float
    duration_seconds: float = 0
    # Plain string: unknown types fall back to the generic formula.
    workout_type: str = WorkoutType.other.value
