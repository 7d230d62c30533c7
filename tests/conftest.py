"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from dividend_orchestrator.config import (
    DataConfig,
    GromacsConfig,
    OrchestratorSettings,
    RunnerConfig,
)
from dividend_orchestrator.data import InMemoryDatasetStore
from dividend_orchestrator.job import Requirement
from dividend_orchestrator.kinds import DatasetKind, GmxCommandKind, SimilaritySearchKind
from dividend_orchestrator.operators.gmx_command import GmxCommandInput
from dividend_orchestrator.operators.similarity import SimilarityInput


@pytest.fixture
def data_config(tmp_path: Path) -> DataConfig:
    """Provide a data configuration with one entry per dividend."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return DataConfig(data_dir=data_dir, entries_per_dividend=1)


@pytest.fixture
def gromacs_config(tmp_path: Path) -> GromacsConfig:
    """Provide a GROMACS configuration with an empty work dir."""
    work_dir = tmp_path / "gromacs"
    work_dir.mkdir()
    return GromacsConfig(work_dir=work_dir, executable="gmx")


@pytest.fixture
def runner_config(tmp_path: Path) -> RunnerConfig:
    """Provide a runner configuration writing under tmp_path."""
    return RunnerConfig(
        max_workers=2,
        report_dir=tmp_path / "reports",
        job_state_path=tmp_path / "state" / "jobs.json",
    )


@pytest.fixture
def settings(
    data_config: DataConfig,
    gromacs_config: GromacsConfig,
    runner_config: RunnerConfig,
) -> OrchestratorSettings:
    """Provide test settings."""
    return OrchestratorSettings(
        log_level="DEBUG",
        data=data_config,
        gromacs=gromacs_config,
        runner=runner_config,
    )


@pytest.fixture
def dataset_store(data_config: DataConfig) -> InMemoryDatasetStore:
    return InMemoryDatasetStore(data_config)


@pytest.fixture
def similarity_requirement() -> Requirement:
    """Similarity search over the in-memory dummy dataset."""
    return Requirement(
        input=SimilarityInput(smiles="c1ccccc1", threshold=0.045).model_dump_json(),
        operator=SimilaritySearchKind(),
        dataset=DatasetKind.DUMMY,
    )


@pytest.fixture
def gmx_requirement() -> Requirement:
    return Requirement(
        input=GmxCommandInput(
            simulation_id="lysozyme",
            sub_command="pdb2gmx",
            arguments=["-f", "in.pdb"],
            prompts=["15"],
        ).model_dump_json(),
        operator=GmxCommandKind(),
        dataset=DatasetKind.EMPTY,
    )
