from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.database import get_db
from app.models.job import Job, JobPreferredSkill, JobRequiredSkill
from app.models.match_result import MatchResult
from app.schemas.job import JobDetailOut, JobOut
from app.schemas.match import CandidateMatchOut
from app.services.matching_service import MatchingService, get_matching_service


router = APIRouter()


@router.get("", response_model=list[JobOut])
def list_jobs(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    q: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[Job]:
    query = db.query(Job)
    if q:
        query = query.filter(Job.title.ilike(f"%{q.strip()}%"))
    return query.order_by(Job.id.asc()).offset(offset).limit(limit).all()


@router.get("/{job_id}", response_model=JobDetailOut)
def get_job(job_id: int, db: Session = Depends(get_db)) -> Job:
    job = (
        db.query(Job)
        .options(
            selectinload(Job.required_skills).joinedload(JobRequiredSkill.skill),
            selectinload(Job.preferred_skills).joinedload(JobPreferredSkill.skill),
        )
        .filter(Job.id == job_id)
        .first()
    )
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.get("/{job_id}/matching-candidates", response_model=list[CandidateMatchOut])
def matching_candidates(
    job_id: int,
    limit: int = Query(default=settings.default_top_limit, ge=1, le=100),
    db: Session = Depends(get_db),
    service: MatchingService = Depends(get_matching_service),
) -> list[MatchResult]:
    return service.top_candidates_for_job(db, job_id, limit)
