from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.database import Base


class MatchResult(Base):
    __tablename__ = "match_results"
    __table_args__ = (
        UniqueConstraint("candidate_id", "job_id", name="uq_candidate_job_match"),
        Index("idx_job_score", "job_id", "overall_score"),
        Index("idx_candidate_score", "candidate_id", "overall_score"),
    )

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    overall_score = Column(Float, nullable=False, default=0)
    required_score = Column(Float, nullable=False, default=0)
    preferred_score = Column(Float, nullable=False, default=0)
    experience_score = Column(Float, nullable=False, default=0)
    breakdown = Column(JSON)
    calculated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    candidate = relationship("Candidate")
    job = relationship("Job")
