from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from app.schemas.skill import SkillOut


class CandidateOut(BaseModel):
    id: int
    name: str
    email: str
    years_experience: int

    class Config:
        from_attributes = True


class CandidateSkillOut(BaseModel):
    skill_id: int
    proficiency_level: int
    years_experience: int
    last_used_date: date | None = None
    skill: SkillOut | None = None

    class Config:
        from_attributes = True


class CandidateDetailOut(CandidateOut):
    skills: list[CandidateSkillOut] = []
