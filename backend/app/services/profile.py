"""Read-only snapshots the scoring code works on.

The repository turns ORM rows into these frozen values once per computation,
so scoring never touches a session and batch workers can share them freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping

from app.services.recency import recency_factor


@dataclass(frozen=True)
class CandidateSkillEntry:
    skill_id: int
    proficiency: int
    years_experience: float
    last_used_date: date | None = None
    skill_name: str | None = None


@dataclass(frozen=True)
class SkillRequirement:
    skill_id: int
    weight: float
    minimum_years: float = 0
    skill_name: str | None = None


@dataclass(frozen=True)
class CandidateSnapshot:
    candidate_id: int
    years_experience: float
    skills: tuple[CandidateSkillEntry, ...] = ()


@dataclass(frozen=True)
class JobRequirements:
    job_id: int
    years_experience_required: float
    required: tuple[SkillRequirement, ...] = ()
    preferred: tuple[SkillRequirement, ...] = ()

    def skill_ids(self) -> set[int]:
        return {requirement.skill_id for requirement in self.required + self.preferred}


@dataclass(frozen=True)
class ProfileSkill:
    entry: CandidateSkillEntry
    recency_factor: float


@dataclass(frozen=True)
class CandidateProfile:
    candidate_id: int
    years_experience: float
    skills: Mapping[int, ProfileSkill] = field(default_factory=dict)

    @classmethod
    def build(cls, snapshot: CandidateSnapshot, today: date) -> CandidateProfile:
        skills = {
            entry.skill_id: ProfileSkill(entry=entry, recency_factor=recency_factor(entry.last_used_date, today))
            for entry in snapshot.skills
        }
        return cls(
            candidate_id=snapshot.candidate_id,
            years_experience=snapshot.years_experience,
            skills=MappingProxyType(skills),
        )

    def get(self, skill_id: int) -> ProfileSkill | None:
        return self.skills.get(skill_id)
