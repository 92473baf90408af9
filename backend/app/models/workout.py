from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.db import Base, JSONType


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)

    workout_type = Column(
        String(20),
        nullable=False,
        server_default="Other",  # Weightlifting, Cardio, HIIT, ...
    )

    # active while samples are being recorded, completed once scored
    status = Column(String(20), nullable=False, server_default="completed")

    # Where the heart rate samples came from: manual, sensor, fit
    source = Column(String(20), nullable=False, server_default="manual")

    started_at = Column(DateTime(timezone=True), nullable=False, index=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=True)

    # Max heart rate the workout was scored against
    hr_max = Column(Integer, nullable=False)

    # Summary over valid (non-null) samples
    avg_hr = Column(Integer, nullable=True)
    max_hr = Column(Integer, nullable=True)
    min_hr = Column(Integer, nullable=True)

    # WorkoutQuality block; absent fields are omitted
    effort = Column(JSONType, nullable=True)

    notes = Column(String, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
