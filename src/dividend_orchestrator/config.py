"""Configuration for the orchestrator.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Settings are only read at the outer edge (the CLI). Library code receives the
relevant config object through its constructor and never looks at the
environment itself.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataConfig(BaseSettings):
    """Where datasets live and how they are cut into dividends."""

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding dataset files (ChEMBL chemreps, PubChem dump)",
    )
    entries_per_dividend: int = Field(
        default=1000,
        gt=0,
        description="Number of dataset entries handled by one dividend",
    )
    pubchem_limit: int = Field(
        default=100_000,
        gt=0,
        description="Maximum number of entries read from the PubChem dump",
    )

    model_config = SettingsConfigDict(
        env_prefix="DIVIDEND_DATA_",
        env_file=".env",
        extra="ignore",
    )


class GromacsConfig(BaseSettings):
    """Configuration for the GROMACS command operator."""

    work_dir: Path = Field(
        default=Path("gromacs"),
        description="Root directory holding one working directory per simulation id",
    )
    executable: str = Field(
        default="gmx",
        description="GROMACS executable name or path",
    )

    model_config = SettingsConfigDict(
        env_prefix="DIVIDEND_GROMACS_",
        env_file=".env",
        extra="ignore",
    )


class RunnerConfig(BaseSettings):
    """Configuration for the local job runner."""

    max_workers: int = Field(
        default=4,
        gt=0,
        description="Number of dividends computed in parallel",
    )
    report_dir: Path = Field(
        default=Path("reports"),
        description="Directory where job reports are written",
    )
    job_state_path: Path = Field(
        default=Path("agent_state/jobs.json"),
        description="Path where job records are persisted",
    )

    model_config = SettingsConfigDict(
        env_prefix="DIVIDEND_RUNNER_",
        env_file=".env",
        extra="ignore",
    )


class OrchestratorSettings(BaseSettings):
    """Top level settings.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `OrchestratorSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging for this package",
    )

    data: DataConfig = Field(default_factory=DataConfig)
    gromacs: GromacsConfig = Field(default_factory=GromacsConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)

    model_config = SettingsConfigDict(
        env_prefix="DIVIDEND_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        from dividend_orchestrator.logging import configure_logging

        configure_logging(self.log_level)
        if self.debug:
            logging.getLogger("dividend_orchestrator").setLevel(logging.DEBUG)
