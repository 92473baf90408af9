from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.effort import EffortReading, HeartRateSample, WorkoutQuality, WorkoutType


class WorkoutStatus(str, Enum):
    active = "active"
    completed = "completed"


class SampleSource(str, Enum):
    manual = "manual"
    sensor = "sensor"
    fit = "fit"


class MaxHeartRateInput(BaseModel):
    """Either value may be given; max_heart_rate wins over age."""

    max_heart_rate: Optional[int] = None
    age: Optional[int] = None


class WorkoutStart(MaxHeartRateInput):
    workout_type: WorkoutType = WorkoutType.other
    source: SampleSource = SampleSource.manual


class WorkoutCreate(MaxHeartRateInput):
    """Schema for logging an already completed workout."""

    workout_type: WorkoutType = WorkoutType.other
    source: SampleSource = SampleSource.manual
    started_at: datetime
    ended_at: Optional[datetime] = None
    # "HH:MM:SS"; derived from started_at/ended_at when omitted
    duration: Optional[str] = None
    samples: list[HeartRateSample] = []
    notes: Optional[str] = None


class WorkoutUpdate(BaseModel):
    """Partial update. Changing the type re-scores the stored samples."""

    notes: Optional[str] = None
    workout_type: Optional[WorkoutType] = None

    model_config = ConfigDict(extra="ignore")


class SampleIn(BaseModel):
    heart_rate: Optional[int] = Field(default=None, ge=0)
    timestamp: Optional[datetime] = None


class LiveEffort(BaseModel):
    workout_id: int
    heart_rate: Optional[int] = None
    effort: Optional[EffortReading] = None
    average_heart_rate: Optional[int] = None
    sample_count: int
    elapsed_seconds: int
    elapsed: str  # 'M:SS' or 'H:MM:SS'
    hr_max: int


class WorkoutRead(BaseModel):
    """Schema returned when reading a workout."""

    id: int
    workout_type: str
    status: WorkoutStatus
    source: str
    date: date  # local date of started_at
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    duration: Optional[str] = None  # 'HH:MM:SS'
    hr_max: int
    avg_hr: Optional[int] = None
    max_hr: Optional[int] = None
    min_hr: Optional[int] = None
    effort: Optional[WorkoutQuality] = None
    notes: Optional[str] = None


class WorkoutDetail(WorkoutRead):
    samples: list[HeartRateSample] = []


class WorkoutStats(BaseModel):
    total_workouts: int
    last_score: Optional[int] = None
    average_score: Optional[float] = None
    by_type: dict[str, int]
