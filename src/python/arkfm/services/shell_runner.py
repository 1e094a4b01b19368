"""
Thin wrapper around external processes (archive tools, default applications).
"""

import logging
import subprocess
from typing import Any, List, Optional, Sequence

from ..config import CONFIG
from ..core.errors import ShellCommandError

logger = logging.getLogger(__name__)

# Marks "use the runner default"; an explicit None disables the timeout.
_DEFAULT_TIMEOUT = object()


class ShellRunner:
    """Runs external binaries with a timeout and uniform error reporting."""

    def __init__(self, timeout: Optional[float] = CONFIG["ARCHIVE_LIST_TIMEOUT"]):
        self.timeout = timeout

    def run(self, args: Sequence[str], timeout: Any = _DEFAULT_TIMEOUT,
            cwd: Optional[str] = None) -> str:
        """Run ``args`` to completion and return its stdout.

        ``timeout=None`` runs without a limit (long extractions).

        Raises:
            ShellCommandError: the binary is missing, exits non-zero, or
                exceeds the timeout.
        """
        command: List[str] = list(args)
        limit = self.timeout if timeout is _DEFAULT_TIMEOUT else timeout
        logger.debug("Running %s", command)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=limit,
            )
        except FileNotFoundError as e:
            raise ShellCommandError(f"Command not found: {command[0]}", command) from e
        except subprocess.TimeoutExpired as e:
            raise ShellCommandError(f"Command timed out after {limit}s: {command[0]}", command) from e
        except OSError as e:
            raise ShellCommandError(f"Could not run {command[0]}: {e}", command) from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            raise ShellCommandError(
                f"{command[0]} exited with status {completed.returncode}: {stderr}",
                command,
                completed.returncode,
                stderr,
            )
        return completed.stdout

    def launch(self, args: Sequence[str], cwd: Optional[str] = None) -> None:
        """Start a detached process (e.g. open a file with its application)."""
        command = list(args)
        logger.info("Launching %s", command)
        try:
            subprocess.Popen(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ShellCommandError(f"Could not launch {command[0]}: {e}", command) from e
