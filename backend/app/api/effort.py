from fastapi import APIRouter, Query

from app.core.effort import classify, compute_zones, score_workout
from app.schemas.effort import EffortReading, ScoreRequest, WorkoutQuality, ZoneBounds


router = APIRouter(prefix="/effort", tags=["effort"])


@router.get("/zones", response_model=ZoneBounds)
def get_zones(max_heart_rate: float = Query(...)):
    """Zone bands for a max heart rate, e.g. GET /effort/zones?max_heart_rate=190"""
    return compute_zones(max_heart_rate)


@router.get("/classify", response_model=EffortReading)
def classify_heart_rate(
    heart_rate: float = Query(...),
    max_heart_rate: float = Query(...),
):
    return classify(heart_rate, max_heart_rate)


@router.post("/score", response_model=WorkoutQuality)
def score(payload: ScoreRequest):
    return score_workout(
        payload.samples,
        payload.max_heart_rate,
        payload.duration_seconds,
        payload.workout_type,
    )
