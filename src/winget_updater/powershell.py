"""
PowerShell runner.

Every package-manager call goes through here. A non-zero exit code or a
timeout is returned as a failed CommandResult; only a missing PowerShell
executable raises.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional, Sequence

from common.exceptions import PowerShellNotFoundError

from .models import CommandResult

logger = logging.getLogger(__name__)

SCRIPT_PREFIX = "\n".join([
    '$ErrorActionPreference = "Stop"',
    '$ProgressPreference = "SilentlyContinue"',
    "[Console]::OutputEncoding = [System.Text.UTF8Encoding]::new()",
    "$OutputEncoding = [System.Text.UTF8Encoding]::new()",
])


def quote(value: str) -> str:
    """Render ``value`` as a single-quoted PowerShell string literal."""
    return "'" + str(value).replace("'", "''") + "'"


class PowerShellRunner:
    """Runs PowerShell scripts and captures their output."""

    CANDIDATES = ("pwsh", "powershell.exe", "powershell")

    def __init__(self, executable: Optional[str] = None, timeout: Optional[float] = None):
        self._executable = executable
        self.timeout = timeout

    @property
    def executable(self) -> str:
        """
        Path of the PowerShell executable, resolved on first use.

        Raises:
            PowerShellNotFoundError: If none of the candidates is on PATH.
        """
        if self._executable is None:
            self._executable = self._locate(self.CANDIDATES)
        return self._executable

    @staticmethod
    def _locate(candidates: Sequence[str]) -> str:
        for name in candidates:
            path = shutil.which(name)
            if path:
                logger.debug(f"Using PowerShell at {path}")
                return path
        raise PowerShellNotFoundError(candidates)

    def build_command(self, script: str) -> list:
        return [
            self.executable,
            "-NoLogo",
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy", "Bypass",
            "-Command", f"{SCRIPT_PREFIX}\n{script}",
        ]

    def run(self, script: str) -> CommandResult:
        """
        Run a script.

        Args:
            script: PowerShell source; the UTF-8/stop-on-error prefix is added.

        Returns:
            CommandResult; ``success`` is True only for exit code 0.
        """
        cmd = self.build_command(script)
        logger.debug(f"PowerShell: {script.strip()}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"PowerShell command timed out after {self.timeout}s")
            return CommandResult.failed(f"timed out after {self.timeout}s")
        except OSError as e:
            return CommandResult.failed(f"could not start PowerShell: {e}")

        stdout = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode != 0:
            error = stderr or stdout or f"exit code {result.returncode}"
            logger.debug(f"PowerShell exited with {result.returncode}: {error}")
            return CommandResult.failed(error, returncode=result.returncode, stdout=stdout, stderr=stderr)

        return CommandResult(success=True, returncode=0, stdout=stdout, stderr=stderr)
