from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Iterator

from sqlalchemy.orm import Session

from app.config import BATCH_FAILURE_POLICIES, settings
from app.errors import (
    BatchCancelledError,
    BatchMatchError,
    InvalidInputError,
    NotFoundError,
    PairFailure,
    PersistenceError,
)
from app.models.match_result import MatchResult
from app.services.matcher import MatchComputation, SkillMatcher
from app.services.profile import CandidateProfile, CandidateSnapshot, JobRequirements
from app.services.repository import MatchRepository
from app.services.skill_graph import SkillGraph


logger = logging.getLogger(__name__)

Pair = tuple[CandidateSnapshot, JobRequirements]


@dataclass
class BatchOutcome:
    results: list[MatchResult] = field(default_factory=list)
    failures: list[PairFailure] = field(default_factory=list)


def unique_ids(values: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class MatchingService:
    """Entry point for single, batch and top-N match operations.

    ``session_factory`` is used by batch workers, each of which writes its
    result through a session of its own. Single-pair and query operations use
    the caller's session.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        matcher: SkillMatcher | None = None,
        max_workers: int | None = None,
        failure_policy: str | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.matcher = matcher or SkillMatcher()
        self.max_workers = max(1, max_workers if max_workers is not None else settings.batch_max_workers)
        self.failure_policy = failure_policy or settings.batch_failure_policy
        if self.failure_policy not in BATCH_FAILURE_POLICIES:
            raise ValueError(f"Unknown batch failure policy: {self.failure_policy!r}")
        self.clock = clock or _utc_today

    def calculate_match(self, db: Session, candidate_id: int, job_id: int) -> MatchResult:
        repository = MatchRepository(db)
        try:
            candidate = repository.load_candidate(candidate_id)
            job = repository.load_job(job_id) if candidate is not None else None
            graph = repository.load_skill_graph(job.skill_ids()) if job is not None else None
        except PersistenceError as exc:
            raise PersistenceError(str(exc), candidate_id=candidate_id, job_id=job_id) from exc
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        if job is None:
            raise NotFoundError("Job", job_id)

        computation = self.compute(candidate, job, graph, self.clock())
        result = repository.upsert_match(computation)
        logger.info(
            "Match candidate=%s job=%s overall=%.2f required=%.2f preferred=%.2f experience=%.0f",
            candidate_id,
            job_id,
            computation.overall_score,
            computation.required_score,
            computation.preferred_score,
            computation.experience_score,
        )
        return result

    def compute(
        self,
        candidate: CandidateSnapshot,
        job: JobRequirements,
        graph: SkillGraph,
        today: date,
    ) -> MatchComputation:
        profile = CandidateProfile.build(candidate, today)
        return self.matcher.compute(profile, job, graph)

    def calculate_batch(
        self,
        db: Session,
        candidate_ids: Iterable[int],
        job_ids: Iterable[int],
        cancel_event: threading.Event | None = None,
    ) -> BatchOutcome:
        candidate_ids = unique_ids(candidate_ids)
        job_ids = unique_ids(job_ids)
        if not candidate_ids or not job_ids:
            raise InvalidInputError("candidate_ids and job_ids must both contain at least one id")

        repository = MatchRepository(db)
        candidates = repository.load_candidates(candidate_ids)
        missing_candidates = [candidate_id for candidate_id in candidate_ids if candidate_id not in candidates]
        if missing_candidates:
            raise NotFoundError("Candidate", missing_candidates)
        jobs = repository.load_jobs(job_ids)
        missing_jobs = [job_id for job_id in job_ids if job_id not in jobs]
        if missing_jobs:
            raise NotFoundError("Job", missing_jobs)

        skill_ids: set[int] = set()
        for job in jobs.values():
            skill_ids |= job.skill_ids()
        graph = repository.load_skill_graph(skill_ids)

        pairs: list[Pair] = [
            (candidates[candidate_id], jobs[job_id]) for candidate_id in candidate_ids for job_id in job_ids
        ]
        logger.info(
            "Batch match started: %s candidates x %s jobs = %s pairs, workers=%s, policy=%s",
            len(candidate_ids),
            len(job_ids),
            len(pairs),
            self.max_workers,
            self.failure_policy,
        )
        outcome = self._execute(pairs, graph, self.clock(), cancel_event)
        logger.info("Batch match finished: %s stored, %s failed", len(outcome.results), len(outcome.failures))
        return outcome

    def top_candidates_for_job(self, db: Session, job_id: int, limit: int | None = None) -> list[MatchResult]:
        limit = self._resolve_limit(limit)
        repository = MatchRepository(db)
        if not repository.job_exists(job_id):
            raise NotFoundError("Job", job_id)
        return repository.top_matches_for_job(job_id, limit)

    def top_jobs_for_candidate(self, db: Session, candidate_id: int, limit: int | None = None) -> list[MatchResult]:
        limit = self._resolve_limit(limit)
        repository = MatchRepository(db)
        if not repository.candidate_exists(candidate_id):
            raise NotFoundError("Candidate", candidate_id)
        return repository.top_matches_for_candidate(candidate_id, limit)

    def _resolve_limit(self, limit: int | None) -> int:
        resolved = settings.default_top_limit if limit is None else limit
        if resolved < 1:
            raise InvalidInputError("limit must be a positive integer")
        return resolved

    def _execute(
        self,
        pairs: list[Pair],
        graph: SkillGraph,
        today: date,
        cancel_event: threading.Event | None,
    ) -> BatchOutcome:
        abort = threading.Event()

        def task(candidate: CandidateSnapshot, job: JobRequirements) -> MatchResult | None:
            if abort.is_set() or (cancel_event is not None and cancel_event.is_set()):
                return None
            return self._match_pair(candidate, job, graph, today)

        outcome = BatchOutcome()
        skipped = 0
        for (candidate, job), result, error in self._dispatch(task, pairs):
            if error is not None:
                failure = PairFailure.from_exception(candidate.candidate_id, job.job_id, error)
                logger.warning(
                    "Batch pair failed candidate=%s job=%s (%s): %s",
                    failure.candidate_id,
                    failure.job_id,
                    failure.kind,
                    error,
                )
                outcome.failures.append(failure)
                if self.failure_policy == "fail_fast":
                    abort.set()
            elif result is None:
                skipped += 1
            else:
                outcome.results.append(result)

        if outcome.failures and self.failure_policy == "fail_fast":
            raise BatchMatchError(outcome.failures, completed=len(outcome.results))
        if skipped:
            raise BatchCancelledError(completed=len(outcome.results), total=len(pairs))
        return outcome

    def _dispatch(
        self,
        task: Callable[[CandidateSnapshot, JobRequirements], MatchResult | None],
        pairs: list[Pair],
    ) -> Iterator[tuple[Pair, MatchResult | None, Exception | None]]:
        if self.max_workers <= 1 or len(pairs) <= 1:
            for pair in pairs:
                try:
                    result = task(*pair)
                except Exception as exc:
                    yield pair, None, exc
                else:
                    yield pair, result, None
            return

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pairs)), thread_name_prefix="match-batch") as executor:
            futures = {executor.submit(task, *pair): pair for pair in pairs}
            for future in as_completed(futures):
                pair = futures[future]
                try:
                    result = future.result()
                except Exception as exc:
                    yield pair, None, exc
                else:
                    yield pair, result, None

    def _match_pair(
        self,
        candidate: CandidateSnapshot,
        job: JobRequirements,
        graph: SkillGraph,
        today: date,
    ) -> MatchResult:
        computation = self.compute(candidate, job, graph, today)
        with self.session_factory() as session:
            return MatchRepository(session).upsert_match(computation)


_service: MatchingService | None = None
_service_lock = threading.Lock()


def get_matching_service() -> MatchingService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                from app.database import SessionLocal

                _service = MatchingService(SessionLocal)
    return _service
