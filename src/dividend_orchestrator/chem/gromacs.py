"""Running GROMACS ``gmx`` sub-commands as external processes."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from dividend_orchestrator.errors import ProcessInvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    returncode: int
    stdout: str
    stderr: str

    @property
    def is_success(self) -> bool:
        return self.returncode == 0


def run_gmx_command(
    sub_command: str,
    arguments: list[str],
    work_dir: Path,
    prompts: list[str],
    *,
    executable: str = "gmx",
) -> CommandOutput:
    """Run ``<executable> <sub_command> <arguments...>`` inside `work_dir`.

    Interactive prompts (e.g. group selections) are answered in order, one per
    line on stdin. Blocks until the process exits.

    Raises:
        ProcessInvocationError: If the executable cannot be launched.
    """

    command = [executable, sub_command, *arguments]
    answers = "".join(f"{prompt}\n" for prompt in prompts)

    logger.info(
        "Running GROMACS command",
        extra={"command": command, "work_dir": str(work_dir)},
    )
    try:
        completed = subprocess.run(
            command,
            cwd=work_dir,
            input=answers,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ProcessInvocationError(f"Failed to run {executable} {sub_command}: {e}") from e

    logger.debug(
        "GROMACS command finished",
        extra={"command": command, "returncode": completed.returncode},
    )
    return CommandOutput(
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
