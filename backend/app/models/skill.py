from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.database import Base


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    popularity = Column(Float, nullable=False, default=0.5)
    is_growing = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    related = relationship(
        "SkillRelationship",
        foreign_keys="SkillRelationship.skill_id",
        order_by="SkillRelationship.related_skill_id",
        cascade="all, delete-orphan",
    )


class SkillRelationship(Base):
    __tablename__ = "skill_relationships"
    __table_args__ = (
        UniqueConstraint("skill_id", "related_skill_id", name="uq_skill_relationship"),
        CheckConstraint("similarity_score >= 0 AND similarity_score <= 1", name="ck_similarity_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    related_skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False)
    similarity_score = Column(Float, nullable=False, default=0.5)

    related_skill = relationship("Skill", foreign_keys=[related_skill_id])
