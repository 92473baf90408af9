import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.effort import router as effort_router
from app.api.profile import router as profile_router
from app.api.workouts import router as workouts_router
from app.core.config import settings
from app.core.exceptions import InvalidArgument
from app.db import Base, engine
from app.models.workout import Workout  # noqa: F401  (import ensures table is registered)
from app.models.heart_rate_sample import HeartRateSampleRow  # noqa: F401
from app.models.athlete_profile import AthleteProfile  # noqa: F401

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Hundred")

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    logger.warning("Invalid argument on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


# Create DB tables on startup
Base.metadata.create_all(bind=engine)

# Ensure uploads directory exists
os.makedirs(settings.uploads_dir, exist_ok=True)

app.include_router(workouts_router)
app.include_router(effort_router)
app.include_router(profile_router)


@app.get("/")
def root():
    return {"message": "Hundred backend is running"}
