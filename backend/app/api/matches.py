from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.match_result import MatchResult
from app.schemas.match import BatchMatchOut, BatchMatchRequest, MatchCalculateRequest, MatchDetailOut, MatchResultOut
from app.services.matching_service import MatchingService, get_matching_service
from app.services.repository import MatchRepository


router = APIRouter()


@router.post("/calculate", response_model=MatchResultOut)
def calculate_match(
    payload: MatchCalculateRequest,
    db: Session = Depends(get_db),
    service: MatchingService = Depends(get_matching_service),
) -> MatchResult:
    return service.calculate_match(db, payload.candidate_id, payload.job_id)


@router.post("/batch-calculate", response_model=BatchMatchOut)
def calculate_batch_matches(
    payload: BatchMatchRequest,
    db: Session = Depends(get_db),
    service: MatchingService = Depends(get_matching_service),
) -> BatchMatchOut:
    outcome = service.calculate_batch(db, payload.candidate_ids, payload.job_ids)
    return BatchMatchOut(
        results=[MatchResultOut.model_validate(result) for result in outcome.results],
        failures=[failure.to_dict() for failure in outcome.failures],
    )


@router.get("/{match_id}", response_model=MatchDetailOut)
def get_match(match_id: int, db: Session = Depends(get_db)) -> MatchResult:
    match = MatchRepository(db).get_match(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match result not found")
    return match
