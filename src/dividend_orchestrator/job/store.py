"""Persisted job snapshots.

Jobs are written to a single JSON file after every transition so that
``dividend-orchestrator jobs`` can list them from another process. The file is
a record, not a queue: nothing is resumed from it.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from dividend_orchestrator.job.job import Job

logger = logging.getLogger(__name__)


@dataclass
class JobStore:
    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def _load_unlocked(self) -> list[Job]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable job state", extra={"path": str(self.path)})
            return []
        if not isinstance(raw, list):
            return []
        return [Job.model_validate(item) for item in raw]

    def _save_unlocked(self, jobs: list[Job]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [j.model_dump(mode="json") for j in jobs]
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def list(self) -> list[Job]:
        with self._lock:
            return self._load_unlocked()

    def get(self, job_id: str) -> Job | None:
        with self._lock:
            for job in self._load_unlocked():
                if job.id == job_id:
                    return job
            return None

    def upsert(self, job: Job) -> None:
        """Insert `job`, or replace the stored snapshot with the same id."""
        snapshot = job.model_copy(deep=True)
        with self._lock:
            jobs = self._load_unlocked()
            for idx, existing in enumerate(jobs):
                if existing.id == job.id:
                    jobs[idx] = snapshot
                    break
            else:
                jobs.append(snapshot)
            self._save_unlocked(jobs)
