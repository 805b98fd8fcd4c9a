"""
Data types for an update run.

Package records come fresh from each query and are never persisted. Outcomes
are collected per package and summarized at the end of the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from common.exceptions import UpdaterError


class UpdateAction(Enum):
    """Package-manager action attempted for a package."""
    UPDATE = "update"
    UNINSTALL = "uninstall"
    INSTALL = "install"


class OutcomeStatus(Enum):
    """Terminal status of one package in a run."""
    UPDATED = "updated"
    REINSTALLED = "reinstalled"
    FAILED = "failed"
    # Uninstalled by the fallback but the reinstall did not complete
    BROKEN = "broken"

    @property
    def succeeded(self) -> bool:
        return self in (OutcomeStatus.UPDATED, OutcomeStatus.REINSTALLED)


@dataclass
class CommandResult:
    """Result of a single package-manager call."""
    success: bool
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    error: str = ""

    @classmethod
    def failed(cls, error: str, returncode: int = -1, stdout: str = "", stderr: str = "") -> "CommandResult":
        return cls(success=False, returncode=returncode, stdout=stdout, stderr=stderr, error=error)

    def __bool__(self) -> bool:
        return self.success


@dataclass
class PackageRecord:
    """An installed application as reported by the package manager."""
    name: str
    id: str
    installed_version: str = ""
    available_version: str = ""
    is_update_available: bool = False

    @classmethod
    def from_winget(cls, data: Dict[str, Any]) -> "PackageRecord":
        """
        Build a record from a ``Get-WinGetPackage`` JSON object.

        ``AvailableVersions`` is a list with the newest version first; some
        client versions emit a single ``AvailableVersion`` string instead.
        """
        available = data.get("AvailableVersions")
        if isinstance(available, list):
            available = available[0] if available else ""
        if not available:
            available = data.get("AvailableVersion") or ""

        package_id = data.get("Id") or ""
        return cls(
            name=data.get("Name") or package_id,
            id=package_id,
            installed_version=str(data.get("InstalledVersion") or ""),
            available_version=str(available),
            is_update_available=bool(data.get("IsUpdateAvailable", False)),
        )

    @property
    def version_str(self) -> str:
        if self.available_version:
            return f"{self.installed_version} -> {self.available_version}"
        return self.installed_version


@dataclass
class PackageOutcome:
    """What happened to one package during a run."""
    package_id: str
    name: str
    status: OutcomeStatus
    actions: List[UpdateAction] = field(default_factory=list)
    error: str = ""
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status.succeeded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.package_id,
            "name": self.name,
            "status": self.status.value,
            "actions": [a.value for a in self.actions],
            "error": self.error,
            "duration": round(self.duration, 3),
        }


@dataclass
class RunReport:
    """Summary of a whole update run."""
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    transcript_path: Optional[Path] = None
    packages: List[PackageRecord] = field(default_factory=list)
    outcomes: List[PackageOutcome] = field(default_factory=list)
    # Bootstrap or query failure that stopped the run before any update
    abort_error: Optional[UpdaterError] = None

    @property
    def aborted(self) -> bool:
        return self.abort_error is not None

    @property
    def up_to_date(self) -> bool:
        return not self.aborted and not self.packages

    @property
    def succeeded(self) -> List[PackageOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[PackageOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def ok(self) -> bool:
        """True if the run completed and every package ended up updated."""
        return not self.aborted and not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(timespec="seconds"),
            "finished_at": self.finished_at.isoformat(timespec="seconds") if self.finished_at else None,
            "transcript": str(self.transcript_path) if self.transcript_path else None,
            "aborted": self.aborted,
            "error": self.abort_error.to_dict() if self.abort_error else None,
            "up_to_date": self.up_to_date,
            "packages": [
                {
                    "id": p.id,
                    "name": p.name,
                    "installed_version": p.installed_version,
                    "available_version": p.available_version,
                }
                for p in self.packages
            ],
            "outcomes": [o.to_dict() for o in self.outcomes],
            "summary": {
                "total": len(self.outcomes),
                "succeeded": len(self.succeeded),
                "failed": len(self.failed),
            },
        }
