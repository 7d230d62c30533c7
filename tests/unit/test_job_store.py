"""Unit tests for persisted job snapshots."""

from __future__ import annotations

from pathlib import Path

from dividend_orchestrator.job import Job, JobStore, Requirement, Status


def test_job_store_roundtrip(tmp_path: Path, similarity_requirement: Requirement) -> None:
    store = JobStore(tmp_path / "state" / "jobs.json")
    assert store.list() == []

    job = Job.create(similarity_requirement, 2)
    store.upsert(job)
    job.assign_task()
    store.upsert(job)

    jobs = store.list()
    assert len(jobs) == 1
    loaded = store.get(job.id)
    assert loaded is not None
    assert loaded.status is Status.PROCESSING
    assert loaded == job
    assert store.get("unknown") is None


def test_job_store_snapshot_is_detached(tmp_path: Path, gmx_requirement: Requirement) -> None:
    store = JobStore(tmp_path / "jobs.json")
    job = Job.create(gmx_requirement, 1)
    store.upsert(job)

    job.cancel()

    stored = store.get(job.id)
    assert stored is not None
    assert stored.status is Status.CREATED


def test_job_store_ignores_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text("{not json", encoding="utf-8")

    assert JobStore(path).list() == []
