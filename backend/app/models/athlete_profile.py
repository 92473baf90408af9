from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from app.db import Base

# Single athlete per deployment; the row always uses this id
PROFILE_ID = 1


class AthleteProfile(Base):
    __tablename__ = "athlete_profile"

    id = Column(Integer, primary_key=True, default=PROFILE_ID)

    age = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=True)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
