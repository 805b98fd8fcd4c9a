"""
Runtime settings.

There is no configuration file. Defaults can be overridden through
environment variables, and the CLI overrides those.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from common.exceptions import InvalidConfigError

ENV_LOG_DIR = "WINGET_UPDATER_LOG_DIR"
ENV_POWERSHELL = "WINGET_UPDATER_POWERSHELL"
ENV_TIMEOUT = "WINGET_UPDATER_TIMEOUT"
ENV_SCOPE = "WINGET_UPDATER_SCOPE"

VALID_SCOPES = ("System", "User")


def default_log_dir() -> Path:
    """Transcripts go under the invoking user's home directory."""
    return Path.home() / "winget-update-logs"


@dataclass
class UpdaterSettings:
    """Settings for one update run."""
    log_dir: Path = field(default_factory=default_log_dir)
    powershell: Optional[str] = None
    timeout: Optional[float] = None
    scope: str = "System"
    provider: str = "NuGet"
    module: str = "Microsoft.WinGet.Client"
    # Console verbosity; the transcript records at the same level
    log_level: int = logging.INFO

    def __post_init__(self):
        self.log_dir = Path(self.log_dir).expanduser()
        if self.scope not in VALID_SCOPES:
            raise InvalidConfigError("scope", self.scope, f"must be one of {', '.join(VALID_SCOPES)}")
        if self.timeout is not None and self.timeout <= 0:
            raise InvalidConfigError("timeout", self.timeout, "must be a positive number of seconds")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "UpdaterSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            overrides: Values that win over the environment; None is ignored

        Raises:
            InvalidConfigError: If a variable holds an unusable value.
        """
        if environ is None:
            environ = os.environ

        values = {}

        if environ.get(ENV_LOG_DIR):
            values["log_dir"] = Path(environ[ENV_LOG_DIR])

        if environ.get(ENV_POWERSHELL):
            values["powershell"] = environ[ENV_POWERSHELL]

        raw_timeout = environ.get(ENV_TIMEOUT)
        if raw_timeout:
            try:
                values["timeout"] = float(raw_timeout)
            except ValueError:
                raise InvalidConfigError(ENV_TIMEOUT, raw_timeout, "not a number")

        raw_scope = environ.get(ENV_SCOPE)
        if raw_scope:
            # Accept any casing, store the cmdlet spelling
            matches = [s for s in VALID_SCOPES if s.lower() == raw_scope.strip().lower()]
            values["scope"] = matches[0] if matches else raw_scope

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
