"""Unit tests for configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dividend_orchestrator.config import (
    DataConfig,
    GromacsConfig,
    OrchestratorSettings,
    RunnerConfig,
)


def test_data_config_defaults() -> None:
    """Test data config default values."""
    config = DataConfig()

    assert config.data_dir == Path("data")
    assert config.entries_per_dividend == 1000
    assert config.pubchem_limit == 100_000


def test_gromacs_config_defaults() -> None:
    config = GromacsConfig()

    assert config.work_dir == Path("gromacs")
    assert config.executable == "gmx"


def test_runner_config_defaults() -> None:
    config = RunnerConfig()

    assert config.max_workers == 4
    assert config.report_dir == Path("reports")
    assert config.job_state_path == Path("agent_state/jobs.json")


def test_settings_composition() -> None:
    """Test top level settings with nested configs."""
    settings = OrchestratorSettings(log_level="DEBUG", debug=True)

    assert settings.log_level == "DEBUG"
    assert settings.debug is True
    assert isinstance(settings.data, DataConfig)
    assert isinstance(settings.gromacs, GromacsConfig)
    assert isinstance(settings.runner, RunnerConfig)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIVIDEND_DATA_ENTRIES_PER_DIVIDEND", "250")
    monkeypatch.setenv("DIVIDEND_GROMACS_EXECUTABLE", "gmx_mpi")

    settings = OrchestratorSettings()

    assert settings.data.entries_per_dividend == 250
    assert settings.gromacs.executable == "gmx_mpi"


def test_env_file_override(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("DIVIDEND_LOG_LEVEL=WARNING\n", encoding="utf-8")

    settings = OrchestratorSettings(_env_file=env_file)

    assert settings.log_level == "WARNING"


def test_entries_per_dividend_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        DataConfig(entries_per_dividend=0)
