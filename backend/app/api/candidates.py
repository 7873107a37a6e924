from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.database import get_db
from app.models.candidate import Candidate, CandidateSkill
from app.models.match_result import MatchResult
from app.schemas.candidate import CandidateDetailOut, CandidateOut
from app.schemas.match import JobMatchOut
from app.services.matching_service import MatchingService, get_matching_service


router = APIRouter()


@router.get("", response_model=list[CandidateOut])
def list_candidates(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> list[Candidate]:
    return db.query(Candidate).order_by(Candidate.id.asc()).offset(offset).limit(limit).all()


@router.get("/{candidate_id}", response_model=CandidateDetailOut)
def get_candidate(candidate_id: int, db: Session = Depends(get_db)) -> CandidateDetailOut:
    candidate = (
        db.query(Candidate)
        .options(selectinload(Candidate.skills).joinedload(CandidateSkill.skill))
        .filter(Candidate.id == candidate_id)
        .first()
    )
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    detail = CandidateDetailOut.model_validate(candidate)
    detail.skills.sort(key=lambda item: (item.skill.name.lower() if item.skill else "", item.skill_id))
    return detail


@router.get("/{candidate_id}/matching-jobs", response_model=list[JobMatchOut])
def matching_jobs(
    candidate_id: int,
    limit: int = Query(default=settings.default_top_limit, ge=1, le=100),
    db: Session = Depends(get_db),
    service: MatchingService = Depends(get_matching_service),
) -> list[MatchResult]:
    return service.top_jobs_for_candidate(db, candidate_id, limit)
