from app.models.candidate import Candidate, CandidateSkill
from app.models.job import Job, JobPreferredSkill, JobRequiredSkill
from app.models.match_result import MatchResult
from app.models.skill import Skill, SkillRelationship

__all__ = [
    "Skill",
    "SkillRelationship",
    "Candidate",
    "CandidateSkill",
    "Job",
    "JobRequiredSkill",
    "JobPreferredSkill",
    "MatchResult",
]
