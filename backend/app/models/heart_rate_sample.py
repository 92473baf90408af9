from sqlalchemy import Column, Integer, DateTime, ForeignKey
from app.db import Base


class HeartRateSampleRow(Base):
    __tablename__ = "heart_rate_samples"

    id = Column(Integer, primary_key=True, index=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)

    idx = Column(Integer, nullable=False)  # 0-based recording order
    heart_rate = Column(Integer, nullable=True)  # null = dropped/invalid reading
    recorded_at = Column(DateTime(timezone=True), nullable=True)
