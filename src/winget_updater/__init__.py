"""
winget-updater

Keeps WinGet-managed applications up to date:
- Installs the Microsoft.WinGet.Client PowerShell module when missing
- Lists installed applications with a pending update
- Updates each one, falling back to uninstall + reinstall
- Records every run in a timestamped transcript
"""

from .models import (
    PackageRecord,
    PackageOutcome,
    OutcomeStatus,
    UpdateAction,
    CommandResult,
    RunReport,
)
from .config import UpdaterSettings
from .client import WinGetClient
from .bootstrap import ClientBootstrapper
from .enumerator import find_updatable_packages
from .applier import UpdateApplier
from .orchestrator import UpdateRun, run_updates

__all__ = [
    "PackageRecord",
    "PackageOutcome",
    "OutcomeStatus",
    "UpdateAction",
    "CommandResult",
    "RunReport",
    "UpdaterSettings",
    "WinGetClient",
    "ClientBootstrapper",
    "find_updatable_packages",
    "UpdateApplier",
    "UpdateRun",
    "run_updates",
]
