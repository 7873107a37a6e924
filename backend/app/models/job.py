from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from app.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text)
    years_experience_required = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    required_skills = relationship("JobRequiredSkill", back_populates="job", cascade="all, delete-orphan")
    preferred_skills = relationship("JobPreferredSkill", back_populates="job", cascade="all, delete-orphan")


class JobRequiredSkill(Base):
    __tablename__ = "job_required_skills"
    __table_args__ = (
        UniqueConstraint("job_id", "skill_id", name="uq_job_required_skill"),
        CheckConstraint("importance_weight >= 0", name="ck_required_weight"),
        CheckConstraint("minimum_years >= 0", name="ck_required_minimum_years"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False)
    importance_weight = Column(Integer, nullable=False, default=5)
    minimum_years = Column(Integer, nullable=False, default=0)

    job = relationship("Job", back_populates="required_skills")
    skill = relationship("Skill")


class JobPreferredSkill(Base):
    __tablename__ = "job_preferred_skills"
    __table_args__ = (
        UniqueConstraint("job_id", "skill_id", name="uq_job_preferred_skill"),
        CheckConstraint("importance_weight >= 0", name="ck_preferred_weight"),
        CheckConstraint("minimum_years >= 0", name="ck_preferred_minimum_years"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False)
    importance_weight = Column(Integer, nullable=False, default=3)
    minimum_years = Column(Integer, nullable=False, default=0)

    job = relationship("Job", back_populates="preferred_skills")
    skill = relationship("Skill")
