from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.candidate import CandidateOut
from app.schemas.job import JobOut


class MatchCalculateRequest(BaseModel):
    candidate_id: int
    job_id: int


class BatchMatchRequest(BaseModel):
    candidate_ids: list[int] = Field(min_length=1)
    job_ids: list[int] = Field(min_length=1)


class MatchResultOut(BaseModel):
    id: int
    candidate_id: int
    job_id: int
    overall_score: float
    required_score: float
    preferred_score: float
    experience_score: float
    breakdown: dict[str, Any] | None = None
    calculated_at: datetime | None = None

    class Config:
        from_attributes = True


class CandidateMatchOut(MatchResultOut):
    candidate: CandidateOut | None = None


class JobMatchOut(MatchResultOut):
    job: JobOut | None = None


class MatchDetailOut(MatchResultOut):
    candidate: CandidateOut | None = None
    job: JobOut | None = None


class PairFailureOut(BaseModel):
    candidate_id: int
    job_id: int
    error: str
    kind: str


class BatchMatchOut(BaseModel):
    results: list[MatchResultOut]
    failures: list[PairFailureOut] = []
