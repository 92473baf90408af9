import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import AGE_PREDICTED_HR_BASE
from app.db import get_db
from app.models.athlete_profile import PROFILE_ID, AthleteProfile
from app.schemas.profile import ProfileRead, ProfileUpsert


router = APIRouter(prefix="/profile", tags=["profile"])
logger = logging.getLogger(__name__)


def age_predicted_max(age: int) -> int:
    # Standard formula: 220 - age
    return AGE_PREDICTED_HR_BASE - age


def validate_max_hr_inputs(max_heart_rate: Optional[int], age: Optional[int]) -> None:
    if max_heart_rate is not None and not (
        settings.max_hr_lower <= max_heart_rate <= settings.max_hr_upper
    ):
        logger.warning("Rejected max heart rate %s", max_heart_rate)
        raise HTTPException(
            status_code=422,
            detail=f"max_heart_rate must be between {settings.max_hr_lower} and {settings.max_hr_upper} bpm",
        )
    if age is not None and not (settings.age_lower <= age <= settings.age_upper):
        logger.warning("Rejected age %s", age)
        raise HTTPException(
            status_code=422,
            detail=f"age must be between {settings.age_lower} and {settings.age_upper}",
        )


def get_profile(db: Session) -> Optional[AthleteProfile]:
    return db.query(AthleteProfile).filter(AthleteProfile.id == PROFILE_ID).first()


def resolve_max_heart_rate(
    db: Session,
    max_heart_rate: Optional[int] = None,
    age: Optional[int] = None,
) -> int:
    """Pick the max heart rate to score against.

    Order: explicit value, explicit age, profile max HR, profile age,
    configured hr_max, configured age.
    """
    validate_max_hr_inputs(max_heart_rate, age)
    if max_heart_rate is not None:
        return max_heart_rate
    if age is not None:
        return age_predicted_max(age)

    profile = get_profile(db)
    if profile is not None:
        if profile.max_heart_rate is not None:
            return profile.max_heart_rate
        if profile.age is not None:
            return age_predicted_max(profile.age)

    return settings.hr_max or age_predicted_max(settings.age)


def _to_read(db: Session, profile: Optional[AthleteProfile]) -> ProfileRead:
    age = profile.age if profile else None
    return ProfileRead(
        age=age,
        max_heart_rate=profile.max_heart_rate if profile else None,
        estimated_max_heart_rate=age_predicted_max(age) if age is not None else None,
        resolved_max_heart_rate=resolve_max_heart_rate(db),
    )


@router.get("", response_model=ProfileRead)
def read_profile(db: Session = Depends(get_db)):
    return _to_read(db, get_profile(db))


@router.put("", response_model=ProfileRead)
def upsert_profile(payload: ProfileUpsert, db: Session = Depends(get_db)):
    if payload.age is None and payload.max_heart_rate is None:
        raise HTTPException(status_code=422, detail="Provide age or max_heart_rate")
    validate_max_hr_inputs(payload.max_heart_rate, payload.age)

    row = get_profile(db)
    if not row:
        row = AthleteProfile(id=PROFILE_ID, age=payload.age, max_heart_rate=payload.max_heart_rate)
        db.add(row)
    else:
        row.age = payload.age
        row.max_heart_rate = payload.max_heart_rate
    db.commit()
    db.refresh(row)
    logger.info("Profile updated (age=%s, max_heart_rate=%s)", row.age, row.max_heart_rate)
    return _to_read(db, row)
