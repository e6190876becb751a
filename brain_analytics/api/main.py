"""
Brain Analytics - FastAPI Application

Main entry point for the prediction API.
This module configures the FastAPI app, logging, middleware, and routes.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

# Load environment variables before any config is read
load_dotenv()

from brain_analytics import __version__
from brain_analytics.api.dependencies import get_predictor
from brain_analytics.api.routes import difficulty, predictions
from brain_analytics.application.dtos.dtos import ErrorResponseDTO, HealthResponseDTO
from brain_analytics.application.use_cases.performance_predictor import PerformancePredictor
from brain_analytics.domain.exceptions import InvalidInputException
from brain_analytics.utils.time_utils import APP_TZ, get_current_time


class AppTimeFormatter(logging.Formatter):
    """Log timestamps in the application timezone."""

    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s


formatter = AppTimeFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
handler = logging.StreamHandler()
handler.setFormatter(formatter)
root_logger = logging.getLogger()
root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
root_logger.handlers = [handler]
logger = logging.getLogger(__name__)


APP_TITLE = "Brain Analytics"
APP_DESCRIPTION = """
**Adaptive Performance Predictor API**

Predicts brain-training game players' future performance from their
game history.

## Predictions

* **Score** - expected score for a game and difficulty
* **Engagement** - expected daily play frequency and trend
* **Churn** - probability of leaving, with retention suggestions
* **Difficulty** - recommended difficulty per game
* **Games** - ranked game suggestions
"""
APP_VERSION = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    from brain_analytics.api.dependencies import get_config, get_record_store
    from brain_analytics.infrastructure.repositories.game_record_repository import (
        SqlGameRecordRepository,
    )

    logger.info(f"Starting {APP_TITLE} v{APP_VERSION} (timezone {APP_TZ.zone})")

    config = get_config()
    logger.info(
        f"Cache refresh every {config.cache_refresh_interval_seconds:.0f}s, "
        f"confidence threshold {config.confidence_threshold}"
    )

    store = get_record_store()
    if isinstance(store, SqlGameRecordRepository):
        store.create_tables()

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


base_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
cors_origins = os.getenv("CORS_ORIGINS", "").split(",")
all_origins = list(set([o for o in base_origins + cors_origins if o]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=all_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputException)
async def invalid_input_handler(request: Request, exc: InvalidInputException):
    """Unknown games, difficulties or out-of-range parameters."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponseDTO(
            error="invalid_input",
            message=str(exc),
            details={"path": str(request.url)},
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponseDTO(
            error="internal_server_error",
            message="An unexpected error occurred",
            details={"path": str(request.url)},
        ).model_dump(),
    )


@app.get(
    "/health",
    response_model=HealthResponseDTO,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running and healthy.",
)
async def health_check() -> HealthResponseDTO:
    return HealthResponseDTO(
        status="healthy",
        version=APP_VERSION,
        timestamp=get_current_time(),
    )


@app.get(
    "/cache/status",
    tags=["Health"],
    summary="Prediction cache status",
)
def cache_status(predictor: PerformancePredictor = Depends(get_predictor)):
    cache = predictor.cache
    return {**cache.stats(), "last_update": cache.last_update}


@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Get basic API information and links.",
)
async def root():
    """Root endpoint with API info."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "predictions": "/api/v1/users/{user_id}/predictions/{score|engagement|churn|difficulty|games}",
            "behavior": "/api/v1/users/{user_id}/behavior",
            "difficulty": "/api/v1/users/{user_id}/difficulty/report",
            "settings": "/api/v1/games/{game_type}/settings/{difficulty}",
        },
    }


app.include_router(predictions.router, prefix="/api/v1")
app.include_router(difficulty.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "brain_analytics.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
