import logging
import os
import tempfile
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fitparse import FitFile
from fitparse.utils import FitParseError
from sqlalchemy.orm import Session

from app.api.profile import resolve_max_heart_rate
from app.core.config import settings
from app.core.effort import classify, round_half_away
from app.core.summary import summarize_workout
from app.core.time_utils import (
    elapsed_seconds,
    ensure_aware,
    format_elapsed,
    hhmmss_to_seconds,
    seconds_to_hhmmss,
    to_local_datetime,
    to_utc,
    utc_now,
)
from app.db import get_db
from app.models.heart_rate_sample import HeartRateSampleRow
from app.models.workout import Workout
from app.schemas.effort import HeartRateSample, WorkoutQuality, WorkoutType
from app.schemas.workout import (
    LiveEffort,
    SampleIn,
    SampleSource,
    WorkoutCreate,
    WorkoutDetail,
    WorkoutRead,
    WorkoutStart,
    WorkoutStats,
    WorkoutStatus,
    WorkoutUpdate,
)

router = APIRouter(prefix="/workouts", tags=["workouts"])
logger = logging.getLogger(__name__)


# --------- Helpers --------- #

def _get_or_404(db: Session, workout_id: int) -> Workout:
    workout = db.query(Workout).filter(Workout.id == workout_id).first()
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


def _samples_for(db: Session, workout_id: int) -> list[HeartRateSample]:
    rows = (
        db.query(HeartRateSampleRow)
        .filter(HeartRateSampleRow.workout_id == workout_id)
        .order_by(HeartRateSampleRow.idx)
        .all()
    )
    return [
        HeartRateSample(
            heart_rate=r.heart_rate,
            timestamp=ensure_aware(r.recorded_at) if r.recorded_at else None,
        )
        for r in rows
    ]


def _store_samples(db: Session, workout_id: int, samples: list[HeartRateSample], start_idx: int = 0):
    for i, s in enumerate(samples, start=start_idx):
        db.add(HeartRateSampleRow(
            workout_id=workout_id,
            idx=i,
            heart_rate=s.heart_rate,
            recorded_at=to_utc(s.timestamp) if s.timestamp else None,
        ))


def _to_read(workout: Workout) -> WorkoutRead:
    started_at = ensure_aware(workout.started_at)
    return WorkoutRead(
        id=workout.id,
        workout_type=workout.workout_type,
        status=workout.status,
        source=workout.source,
        date=to_local_datetime(started_at, settings.timezone).date(),
        started_at=started_at,
        ended_at=ensure_aware(workout.ended_at) if workout.ended_at else None,
        duration_seconds=workout.duration_seconds,
        duration=(
            seconds_to_hhmmss(workout.duration_seconds)
            if workout.duration_seconds is not None else None
        ),
        hr_max=workout.hr_max,
        avg_hr=workout.avg_hr,
        max_hr=workout.max_hr,
        min_hr=workout.min_hr,
        effort=WorkoutQuality.model_validate(workout.effort) if workout.effort else None,
        notes=workout.notes,
    )


def _to_detail(db: Session, workout: Workout) -> WorkoutDetail:
    read = _to_read(workout)
    return WorkoutDetail(**read.model_dump(), samples=_samples_for(db, workout.id))


def _live(db: Session, workout: Workout) -> LiveEffort:
    samples = _samples_for(db, workout.id)
    latest = samples[-1].heart_rate if samples else None
    hrs = [s.heart_rate for s in samples if s.heart_rate is not None]
    end = workout.ended_at or utc_now()
    elapsed = elapsed_seconds(workout.started_at, end)
    return LiveEffort(
        workout_id=workout.id,
        heart_rate=latest,
        effort=classify(latest, workout.hr_max) if latest is not None else None,
        average_heart_rate=round_half_away(sum(hrs) / len(hrs)) if hrs else None,
        sample_count=len(samples),
        elapsed_seconds=elapsed,
        elapsed=format_elapsed(elapsed),
        hr_max=workout.hr_max,
    )


def _require_active(workout: Workout) -> None:
    if workout.status != WorkoutStatus.active.value:
        raise HTTPException(status_code=409, detail="Workout already finished")


# --------- Record store --------- #

@router.post("/", response_model=WorkoutDetail)
def create_workout(payload: WorkoutCreate, db: Session = Depends(get_db)):
    """Log a finished workout together with its heart rate samples."""
    hr_max = resolve_max_heart_rate(db, payload.max_heart_rate, payload.age)

    started_at = to_utc(payload.started_at)
    ended_at = to_utc(payload.ended_at) if payload.ended_at else None
    if ended_at is not None and ended_at < started_at:
        raise HTTPException(status_code=422, detail="ended_at must not be before started_at")

    if payload.duration:
        try:
            duration_seconds = hhmmss_to_seconds(payload.duration)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    elif ended_at is not None:
        duration_seconds = elapsed_seconds(started_at, ended_at)
    else:
        duration_seconds = 0

    if ended_at is None:
        ended_at = started_at + timedelta(seconds=duration_seconds)

    workout = Workout(
        workout_type=payload.workout_type.value,
        status=WorkoutStatus.completed.value,
        source=payload.source.value,
        started_at=started_at,
        ended_at=ended_at,
        duration_seconds=duration_seconds,
        hr_max=hr_max,
        notes=payload.notes,
    )
    db.add(workout)
    db.flush()  # assigns id for the sample rows

    _store_samples(db, workout.id, payload.samples)
    summarize_workout(workout, payload.samples)
    db.commit()
    db.refresh(workout)

    logger.info(
        "Logged %s workout %s (%d samples, score=%s)",
        workout.workout_type, workout.id, len(payload.samples),
        workout.effort["score"] if workout.effort else None,
    )
    return _to_detail(db, workout)


@router.get("/", response_model=list[WorkoutRead])
def list_workouts(
    workout_type: Optional[WorkoutType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """
    List workouts, newest first, optionally filtered by type and local date.

      GET /workouts?workout_type=HIIT&start_date=2025-01-06&end_date=2025-01-12
    """
    query = db.query(Workout)
    if workout_type is not None:
        query = query.filter(Workout.workout_type == workout_type.value)

    rows = query.order_by(Workout.started_at.desc(), Workout.id.desc()).all()

    # Date bounds apply to the local date, which depends on the configured tz
    results: list[WorkoutRead] = []
    for workout in rows:
        read = _to_read(workout)
        if start_date is not None and read.date < start_date:
            continue
        if end_date is not None and read.date > end_date:
            continue
        results.append(read)

    if limit is not None:
        results = results[:limit]
    return results


@router.get("/stats", response_model=WorkoutStats)
def get_workout_stats(db: Session = Depends(get_db)):
    rows = (
        db.query(Workout)
        .filter(Workout.status == WorkoutStatus.completed.value)
        .order_by(Workout.started_at.desc(), Workout.id.desc())
        .all()
    )

    by_type: dict[str, int] = {t.value: 0 for t in WorkoutType}
    scores: list[int] = []
    for w in rows:
        by_type[w.workout_type] = by_type.get(w.workout_type, 0) + 1
        if w.effort:
            scores.append(int(w.effort["score"]))

    return WorkoutStats(
        total_workouts=len(rows),
        last_score=scores[0] if scores else None,
        average_score=round(sum(scores) / len(scores), 1) if scores else None,
        by_type=by_type,
    )


@router.delete("/")
def clear_workouts(db: Session = Depends(get_db)):
    db.query(HeartRateSampleRow).delete()
    deleted = db.query(Workout).delete()
    db.commit()
    logger.info("Cleared %d workouts", deleted)
    return {"message": "Workouts cleared", "deleted": deleted}


# --------- Active workout --------- #

@router.post("/start", response_model=WorkoutRead)
def start_workout(payload: WorkoutStart, db: Session = Depends(get_db)):
    hr_max = resolve_max_heart_rate(db, payload.max_heart_rate, payload.age)
    workout = Workout(
        workout_type=payload.workout_type.value,
        status=WorkoutStatus.active.value,
        source=payload.source.value,
        started_at=utc_now(),
        hr_max=hr_max,
    )
    db.add(workout)
    db.commit()
    db.refresh(workout)
    logger.info("Started %s workout %s (hr_max=%s)", workout.workout_type, workout.id, hr_max)
    return _to_read(workout)


@router.post("/{workout_id}/samples", response_model=LiveEffort)
def add_sample(workout_id: int, payload: SampleIn, db: Session = Depends(get_db)):
    workout = _get_or_404(db, workout_id)
    _require_active(workout)

    hr = payload.heart_rate
    if (
        hr is not None
        and workout.source == SampleSource.manual.value
        and not (settings.manual_hr_min < hr < settings.manual_hr_max)
    ):
        logger.warning("Rejected manual reading %s for workout %s", hr, workout_id)
        raise HTTPException(
            status_code=422,
            detail=f"Please enter a heart rate between {settings.manual_hr_min} and {settings.manual_hr_max} bpm",
        )

    count = (
        db.query(HeartRateSampleRow)
        .filter(HeartRateSampleRow.workout_id == workout_id)
        .count()
    )
    sample = HeartRateSample(heart_rate=hr, timestamp=payload.timestamp or utc_now())
    _store_samples(db, workout_id, [sample], start_idx=count)
    db.commit()
    return _live(db, workout)


@router.get("/{workout_id}/live", response_model=LiveEffort)
def get_live_effort(workout_id: int, db: Session = Depends(get_db)):
    return _live(db, _get_or_404(db, workout_id))


@router.post("/{workout_id}/finish", response_model=WorkoutDetail)
def finish_workout(workout_id: int, db: Session = Depends(get_db)):
    workout = _get_or_404(db, workout_id)
    _require_active(workout)

    ended_at = utc_now()
    workout.ended_at = ended_at
    workout.duration_seconds = elapsed_seconds(workout.started_at, ended_at)
    workout.status = WorkoutStatus.completed.value
    summarize_workout(workout, _samples_for(db, workout_id))
    db.commit()
    db.refresh(workout)

    logger.info(
        "Finished workout %s after %ss (score=%s)",
        workout_id, workout.duration_seconds,
        workout.effort["score"] if workout.effort else None,
    )
    return _to_detail(db, workout)


# --------- FIT import --------- #

def _read_fit_samples(path: str):
    """Return (samples, first_timestamp, duration_seconds) from a FIT file.

    Every record message becomes one sample; records without a heart rate
    field become missing readings. Duration prefers session timer time
    (excludes pauses), then elapsed time, then the record span.
    """
    ff = FitFile(path)
    samples: list[HeartRateSample] = []
    start_ts = None
    end_ts = None
    for record in ff.get_messages("record"):
        fields = {f.name: f.value for f in record}
        ts = fields.get("timestamp")
        hr = fields.get("heart_rate")
        if ts and start_ts is None:
            start_ts = ts
        if ts:
            end_ts = ts
        samples.append(HeartRateSample(
            heart_rate=int(hr) if hr is not None else None,
            timestamp=ensure_aware(ts) if ts else None,
        ))

    session_timer_s = None
    session_elapsed_s = None
    for session in ff.get_messages("session"):
        fields = {f.name: f.value for f in session}
        if fields.get("total_timer_time") is not None and session_timer_s is None:
            session_timer_s = int(fields.get("total_timer_time"))
        if fields.get("total_elapsed_time") is not None and session_elapsed_s is None:
            session_elapsed_s = int(fields.get("total_elapsed_time"))

    duration_seconds = (
        session_timer_s if session_timer_s is not None else
        (session_elapsed_s if session_elapsed_s is not None else
        (elapsed_seconds(start_ts, end_ts) if start_ts and end_ts else 0)
    ))
    return samples, (ensure_aware(start_ts) if start_ts else None), duration_seconds


@router.post("/import", response_model=WorkoutDetail)
def import_workout(
    file: UploadFile = File(...),
    workout_type: WorkoutType = Query(WorkoutType.other),
    max_heart_rate: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    filename = os.path.basename(file.filename or "import.fit")
    ext = os.path.splitext(filename)[1].lower()
    if ext != ".fit":
        raise HTTPException(status_code=400, detail="Only .fit files are supported")

    hr_max = resolve_max_heart_rate(db, max_heart_rate)

    dir_path = os.path.join(settings.uploads_dir, "imports")
    os.makedirs(dir_path, exist_ok=True)
    # Unique name per upload; the file is moved next to its workout once parsed
    with tempfile.NamedTemporaryFile(dir=dir_path, suffix=".fit", delete=False) as out:
        out.write(file.file.read())
        save_path = out.name

    try:
        samples, started_at, duration_seconds = _read_fit_samples(save_path)
    except (FitParseError, ValueError, OSError) as e:
        os.remove(save_path)
        logger.warning("Rejected FIT upload %s: %s", filename, e)
        raise HTTPException(status_code=400, detail=f"Invalid file: {e}")

    started_at = started_at or utc_now()
    workout = Workout(
        workout_type=workout_type.value,
        status=WorkoutStatus.completed.value,
        source=SampleSource.fit.value,
        started_at=started_at,
        ended_at=started_at + timedelta(seconds=duration_seconds),
        duration_seconds=duration_seconds,
        hr_max=hr_max,
    )
    db.add(workout)
    db.flush()

    # Keep the original file next to the workout it produced
    workout_dir = os.path.join(settings.uploads_dir, "workouts", str(workout.id))
    os.makedirs(workout_dir, exist_ok=True)
    os.replace(save_path, os.path.join(workout_dir, filename))

    _store_samples(db, workout.id, samples)
    summarize_workout(workout, samples)
    db.commit()
    db.refresh(workout)

    logger.info("Imported %s as workout %s (%d samples)", filename, workout.id, len(samples))
    return _to_detail(db, workout)


# --------- Single record --------- #

@router.get("/{workout_id}", response_model=WorkoutDetail)
def get_workout(workout_id: int, db: Session = Depends(get_db)):
    return _to_detail(db, _get_or_404(db, workout_id))


@router.put("/{workout_id}", response_model=WorkoutDetail)
def update_workout(workout_id: int, payload: WorkoutUpdate, db: Session = Depends(get_db)):
    workout = _get_or_404(db, workout_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "notes" in update_data:
        workout.notes = update_data["notes"]

    new_type = update_data.get("workout_type")
    if new_type is not None and new_type.value != workout.workout_type:
        workout.workout_type = new_type.value
        # Score weights depend on the type
        if workout.status == WorkoutStatus.completed.value:
            summarize_workout(workout, _samples_for(db, workout_id))

    db.commit()
    db.refresh(workout)
    return _to_detail(db, workout)


@router.delete("/{workout_id}")
def delete_workout(workout_id: int, db: Session = Depends(get_db)):
    workout = _get_or_404(db, workout_id)
    db.query(HeartRateSampleRow).filter(HeartRateSampleRow.workout_id == workout_id).delete()
    db.delete(workout)
    db.commit()
    logger.info("Deleted workout %s", workout_id)
    return {"message": "Workout deleted"}
