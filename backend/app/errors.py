from __future__ import annotations

from dataclasses import dataclass


class MatchingError(Exception):
    """Base class for every error the matching core raises."""


class NotFoundError(MatchingError):
    def __init__(self, entity: str, ids: int | list[int]) -> None:
        self.entity = entity
        self.ids = [ids] if isinstance(ids, int) else list(ids)
        joined = ", ".join(str(value) for value in self.ids)
        super().__init__(f"{entity} not found: {joined}")


class InvalidInputError(MatchingError):
    pass


class ComputationError(MatchingError):
    pass


class PersistenceError(MatchingError):
    def __init__(self, message: str, candidate_id: int | None = None, job_id: int | None = None) -> None:
        self.candidate_id = candidate_id
        self.job_id = job_id
        if candidate_id is not None and job_id is not None:
            message = f"{message} (candidate_id={candidate_id}, job_id={job_id})"
        super().__init__(message)


STORE_UNAVAILABLE = "Match store unavailable"

PERSISTENCE_FAILURE = "persistence"
COMPUTATION_FAILURE = "computation"


@dataclass(frozen=True)
class PairFailure:
    candidate_id: int
    job_id: int
    error: str
    kind: str = COMPUTATION_FAILURE

    @classmethod
    def from_exception(cls, candidate_id: int, job_id: int, exc: Exception) -> PairFailure:
        # Store errors carry driver and SQL detail, which stays in the logs.
        if isinstance(exc, PersistenceError):
            return cls(candidate_id, job_id, STORE_UNAVAILABLE, PERSISTENCE_FAILURE)
        return cls(candidate_id, job_id, str(exc) or type(exc).__name__, COMPUTATION_FAILURE)

    def to_dict(self) -> dict[str, int | str]:
        return {"candidate_id": self.candidate_id, "job_id": self.job_id, "error": self.error, "kind": self.kind}


class BatchMatchError(MatchingError):
    def __init__(self, failures: list[PairFailure], completed: int) -> None:
        self.failures = failures
        self.completed = completed
        pairs = ", ".join(f"({f.candidate_id}, {f.job_id})" for f in failures)
        super().__init__(f"Batch aborted after {completed} completed pairs; failed pairs: {pairs}")


class BatchCancelledError(MatchingError):
    def __init__(self, completed: int, total: int) -> None:
        self.completed = completed
        self.total = total
        super().__init__(f"Batch cancelled after {completed} of {total} pairs")
