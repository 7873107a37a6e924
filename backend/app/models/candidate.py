from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.database import Base


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    years_experience = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    skills = relationship("CandidateSkill", back_populates="candidate", cascade="all, delete-orphan")


class CandidateSkill(Base):
    __tablename__ = "candidate_skills"
    __table_args__ = (
        UniqueConstraint("candidate_id", "skill_id", name="uq_candidate_skill"),
        CheckConstraint("proficiency_level >= 1 AND proficiency_level <= 5", name="ck_proficiency_range"),
        CheckConstraint("years_experience >= 0", name="ck_candidate_skill_years"),
    )

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False)
    proficiency_level = Column(Integer, nullable=False, default=1)
    years_experience = Column(Integer, nullable=False, default=0)
    last_used_date = Column(Date)

    candidate = relationship("Candidate", back_populates="skills")
    skill = relationship("Skill")
