"""Thin wrapper around :mod:`subprocess` for running external tools."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import ToolExecutionError, ToolNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class ToolOutput:
    """Exit status and captured streams of one tool run."""

    exit_code: int
    stdout: str
    stderr: str
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandExecutor:
    """Run commands with a timeout and capture their output."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def execute(
        self,
        command: str,
        args: Iterable[str] = (),
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ToolOutput:
        """Run ``command`` with ``args`` and return its output.

        A non-zero exit status is reported through
        :attr:`ToolOutput.exit_code`, not raised.

        Raises:
            ToolNotFoundError: If ``command`` cannot be executed.
            ToolExecutionError: If the command exceeds its timeout.
        """
        argv: List[str] = [command, *args]
        limit = timeout if timeout is not None else self.timeout
        logger.info("Executing: %s", " ".join(argv))
        start = time.monotonic()
        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=limit,
            )
        except FileNotFoundError as exc:
            raise ToolNotFoundError(f"Command not found: {command}") from exc
        except PermissionError as exc:
            raise ToolNotFoundError(f"Permission denied running {command}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ToolExecutionError(f"Command timed out after {limit}s: {command}") from exc

        duration = time.monotonic() - start
        logger.debug("%s finished in %.3fs with exit code %d", command, duration, completed.returncode)
        return ToolOutput(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration=duration,
        )

    def find_command(self, command: str, search_paths: Iterable[str] = ()) -> Optional[str]:
        """Locate ``command`` on ``PATH`` or in one of ``search_paths``."""
        found = shutil.which(command)
        if found:
            return found
        for directory in search_paths:
            candidate = os.path.join(os.path.expanduser(directory), command)
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                logger.info("Found %s at: %s", command, candidate)
                return candidate
        return None
