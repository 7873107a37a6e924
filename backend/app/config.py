from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote


BATCH_FAILURE_POLICIES = ("collect", "fail_fast")


@dataclass
class Settings:
    app_name: str = "Skill Match"
    app_version: str = "1.0.0"
    environment: str = os.getenv("ENV", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/skill_match.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    batch_max_workers: int = max(1, int(os.getenv("MATCH_BATCH_MAX_WORKERS", "4")))
    batch_failure_policy: str = os.getenv("MATCH_BATCH_FAILURE_POLICY", "collect").strip().lower()
    default_top_limit: int = int(os.getenv("MATCH_TOP_LIMIT", "10"))

    def __post_init__(self) -> None:
        if self.batch_failure_policy not in BATCH_FAILURE_POLICIES:
            raise ValueError(
                f"MATCH_BATCH_FAILURE_POLICY must be one of {', '.join(BATCH_FAILURE_POLICIES)}, "
                f"got {self.batch_failure_policy!r}"
            )

    def ensure_directories(self) -> None:
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
