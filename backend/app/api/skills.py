from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.skill import Skill, SkillRelationship
from app.schemas.skill import SkillDetailOut, SkillOut


router = APIRouter()


@router.get("", response_model=list[SkillOut])
def list_skills(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[Skill]:
    query = db.query(Skill)
    if category:
        query = query.filter(Skill.category == category)
    return query.order_by(Skill.name.asc()).offset(offset).limit(limit).all()


@router.get("/{skill_id}", response_model=SkillDetailOut)
def get_skill(skill_id: int, db: Session = Depends(get_db)) -> Skill:
    skill = (
        db.query(Skill)
        .options(selectinload(Skill.related).joinedload(SkillRelationship.related_skill))
        .filter(Skill.id == skill_id)
        .first()
    )
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    return skill
