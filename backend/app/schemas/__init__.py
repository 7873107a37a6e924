from app.schemas.candidate import CandidateDetailOut, CandidateOut, CandidateSkillOut
from app.schemas.job import JobDetailOut, JobOut, JobSkillOut
from app.schemas.match import (
    BatchMatchOut,
    BatchMatchRequest,
    CandidateMatchOut,
    JobMatchOut,
    MatchCalculateRequest,
    MatchDetailOut,
    MatchResultOut,
    PairFailureOut,
)
from app.schemas.skill import RelatedSkillOut, SkillDetailOut, SkillOut

__all__ = [
    "SkillOut",
    "SkillDetailOut",
    "RelatedSkillOut",
    "CandidateOut",
    "CandidateDetailOut",
    "CandidateSkillOut",
    "JobOut",
    "JobDetailOut",
    "JobSkillOut",
    "MatchCalculateRequest",
    "BatchMatchRequest",
    "MatchResultOut",
    "CandidateMatchOut",
    "JobMatchOut",
    "MatchDetailOut",
    "PairFailureOut",
    "BatchMatchOut",
]
