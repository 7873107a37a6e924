from __future__ import annotations

from pydantic import BaseModel


class SkillOut(BaseModel):
    id: int
    name: str
    category: str
    popularity: float | None = None
    is_growing: bool | None = None

    class Config:
        from_attributes = True


class RelatedSkillOut(BaseModel):
    related_skill_id: int
    similarity_score: float
    related_skill: SkillOut | None = None

    class Config:
        from_attributes = True


class SkillDetailOut(SkillOut):
    related: list[RelatedSkillOut] = []
