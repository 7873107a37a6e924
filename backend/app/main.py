from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import candidates, jobs, matches, skills
from app.config import settings
from app.database import Base, engine
from app.errors import (
    STORE_UNAVAILABLE,
    BatchCancelledError,
    BatchMatchError,
    InvalidInputError,
    MatchingError,
    NotFoundError,
    PersistenceError,
)
from app.logging_config import configure_logging
from app.models import candidate, job, match_result, skill  # noqa: F401


logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:80", "http://localhost:8000", "http://127.0.0.1:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    settings.ensure_directories()
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidInputError)
def handle_invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Persistence failure on %s: %s", request.url.path, exc)
    content = {"detail": STORE_UNAVAILABLE}
    if exc.candidate_id is not None and exc.job_id is not None:
        content.update(candidate_id=exc.candidate_id, job_id=exc.job_id)
    return JSONResponse(status_code=503, content=content)


@app.exception_handler(BatchMatchError)
def handle_batch_error(request: Request, exc: BatchMatchError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "completed": exc.completed,
            "failures": [failure.to_dict() for failure in exc.failures],
        },
    )


@app.exception_handler(BatchCancelledError)
def handle_batch_cancelled(request: Request, exc: BatchCancelledError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc), "completed": exc.completed, "total": exc.total})


@app.exception_handler(MatchingError)
def handle_matching_error(request: Request, exc: MatchingError) -> JSONResponse:
    logger.error("Matching failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, str]:
    return {"version": settings.app_version, "api": settings.app_name}


app.include_router(skills.router, prefix="/api/skills", tags=["skills"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["candidates"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(matches.router, prefix="/api/matches", tags=["matches"])
