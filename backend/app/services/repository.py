from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.errors import PersistenceError
from app.models.candidate import Candidate, CandidateSkill
from app.models.job import Job, JobPreferredSkill, JobRequiredSkill
from app.models.match_result import MatchResult
from app.models.skill import SkillRelationship
from app.services.matcher import MatchComputation
from app.services.profile import CandidateSkillEntry, CandidateSnapshot, JobRequirements, SkillRequirement
from app.services.skill_graph import SkillGraph


class MatchRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def load_candidate(self, candidate_id: int) -> CandidateSnapshot | None:
        return self.load_candidates([candidate_id]).get(candidate_id)

    def load_candidates(self, candidate_ids: Iterable[int]) -> dict[int, CandidateSnapshot]:
        ids = list(candidate_ids)
        with self._guard("Failed to load candidates"):
            rows = (
                self.db.query(Candidate)
                .options(selectinload(Candidate.skills).joinedload(CandidateSkill.skill))
                .filter(Candidate.id.in_(ids))
                .all()
            )
        return {row.id: _candidate_snapshot(row) for row in rows}

    def load_job(self, job_id: int) -> JobRequirements | None:
        return self.load_jobs([job_id]).get(job_id)

    def load_jobs(self, job_ids: Iterable[int]) -> dict[int, JobRequirements]:
        ids = list(job_ids)
        with self._guard("Failed to load jobs"):
            rows = (
                self.db.query(Job)
                .options(
                    selectinload(Job.required_skills).joinedload(JobRequiredSkill.skill),
                    selectinload(Job.preferred_skills).joinedload(JobPreferredSkill.skill),
                )
                .filter(Job.id.in_(ids))
                .all()
            )
        return {row.id: _job_requirements(row) for row in rows}

    def load_skill_graph(self, skill_ids: Iterable[int]) -> SkillGraph:
        ids = sorted(set(skill_ids))
        if not ids:
            return SkillGraph()
        with self._guard("Failed to load skill relationships"):
            rows = (
                self.db.query(
                    SkillRelationship.skill_id,
                    SkillRelationship.related_skill_id,
                    SkillRelationship.similarity_score,
                )
                .filter(SkillRelationship.skill_id.in_(ids))
                .all()
            )
        return SkillGraph.from_edges((row[0], row[1], row[2]) for row in rows)

    def candidate_exists(self, candidate_id: int) -> bool:
        with self._guard("Failed to look up candidate"):
            return self.db.query(Candidate.id).filter(Candidate.id == candidate_id).first() is not None

    def job_exists(self, job_id: int) -> bool:
        with self._guard("Failed to look up job"):
            return self.db.query(Job.id).filter(Job.id == job_id).first() is not None

    def upsert_match(self, computation: MatchComputation) -> MatchResult:
        values = {
            "overall_score": computation.overall_score,
            "required_score": computation.required_score,
            "preferred_score": computation.preferred_score,
            "experience_score": computation.experience_score,
            "breakdown": computation.breakdown,
        }
        with self._guard("Failed to store match result", computation.candidate_id, computation.job_id):
            existing = (
                self.db.query(MatchResult)
                .filter(MatchResult.candidate_id == computation.candidate_id, MatchResult.job_id == computation.job_id)
                .first()
            )
            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                row = existing
            else:
                row = MatchResult(candidate_id=computation.candidate_id, job_id=computation.job_id, **values)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return row

    def get_match(self, match_id: int) -> MatchResult | None:
        with self._guard("Failed to load match result"):
            return (
                self.db.query(MatchResult)
                .options(joinedload(MatchResult.candidate), joinedload(MatchResult.job))
                .filter(MatchResult.id == match_id)
                .first()
            )

    def top_matches_for_job(self, job_id: int, limit: int) -> list[MatchResult]:
        with self._guard("Failed to load matches for job"):
            return (
                self.db.query(MatchResult)
                .options(joinedload(MatchResult.candidate))
                .filter(MatchResult.job_id == job_id)
                .order_by(MatchResult.overall_score.desc(), MatchResult.id.asc())
                .limit(limit)
                .all()
            )

    def top_matches_for_candidate(self, candidate_id: int, limit: int) -> list[MatchResult]:
        with self._guard("Failed to load matches for candidate"):
            return (
                self.db.query(MatchResult)
                .options(joinedload(MatchResult.job))
                .filter(MatchResult.candidate_id == candidate_id)
                .order_by(MatchResult.overall_score.desc(), MatchResult.id.asc())
                .limit(limit)
                .all()
            )

    @contextmanager
    def _guard(self, message: str, candidate_id: int | None = None, job_id: int | None = None) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"{message}: {exc}", candidate_id=candidate_id, job_id=job_id) from exc


def _candidate_snapshot(candidate: Candidate) -> CandidateSnapshot:
    entries = tuple(
        CandidateSkillEntry(
            skill_id=row.skill_id,
            proficiency=row.proficiency_level,
            years_experience=row.years_experience or 0,
            last_used_date=row.last_used_date,
            skill_name=row.skill.name if row.skill else None,
        )
        for row in sorted(candidate.skills, key=lambda item: item.skill_id)
    )
    return CandidateSnapshot(
        candidate_id=candidate.id,
        years_experience=candidate.years_experience or 0,
        skills=entries,
    )


def _requirements(rows: Iterable[JobRequiredSkill | JobPreferredSkill]) -> tuple[SkillRequirement, ...]:
    return tuple(
        SkillRequirement(
            skill_id=row.skill_id,
            weight=row.importance_weight,
            minimum_years=row.minimum_years or 0,
            skill_name=row.skill.name if row.skill else None,
        )
        for row in sorted(rows, key=lambda item: item.skill_id)
    )


def _job_requirements(job: Job) -> JobRequirements:
    return JobRequirements(
        job_id=job.id,
        years_experience_required=job.years_experience_required or 0,
        required=_requirements(job.required_skills),
        preferred=_requirements(job.preferred_skills),
    )
