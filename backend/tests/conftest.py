import os
import tempfile

# Settings are read at import time, so configure before any app import
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="hundred-uploads-"))
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("AGE", "30")
os.environ.setdefault("HR_MAX", "")

import pytest  # noqa: E402


@pytest.fixture
def client():
    from app.main import app  # noqa: WPS433
    from fastapi.testclient import TestClient  # noqa: WPS433
    return TestClient(app)


@pytest.fixture(autouse=True)
def clean_db():
    yield
    from app.main import app  # noqa: F401  (creates tables)
    from app.db import SessionLocal
    from app.models.athlete_profile import AthleteProfile
    from app.models.heart_rate_sample import HeartRateSampleRow
    from app.models.workout import Workout

    db = SessionLocal()
    try:
        db.query(HeartRateSampleRow).delete()
        db.query(Workout).delete()
        db.query(AthleteProfile).delete()
        db.commit()
    finally:
        db.close()
