from __future__ import annotations

from pydantic import BaseModel

from app.schemas.skill import SkillOut


class JobOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    years_experience_required: int

    class Config:
        from_attributes = True


class JobSkillOut(BaseModel):
    skill_id: int
    importance_weight: int
    minimum_years: int
    skill: SkillOut | None = None

    class Config:
        from_attributes = True


class JobDetailOut(JobOut):
    required_skills: list[JobSkillOut] = []
    preferred_skills: list[JobSkillOut] = []
