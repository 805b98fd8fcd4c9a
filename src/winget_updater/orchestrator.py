"""
Update run orchestration.

Sequences bootstrap, enumeration and the update loop inside a transcript.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from common.exceptions import BootstrapError, PackageManagerError

from .applier import UpdateApplier
from .bootstrap import ClientBootstrapper
from .client import WinGetClient
from .config import UpdaterSettings
from .enumerator import find_updatable_packages
from .models import RunReport
from .powershell import PowerShellRunner
from .report import render_summary
from .transcript import Transcript, default_transcript_path

logger = logging.getLogger(__name__)

UP_TO_DATE_MESSAGE = "All applications are up to date."


class UpdateRun:
    """
    One complete update run.

    Workflow:
    1. Open the transcript
    2. Ensure the WinGet client module is installed (abort on failure)
    3. List packages with pending updates
    4. Update each package, reinstalling on failure
    5. Log the summary and close the transcript
    """

    def __init__(
        self,
        settings: Optional[UpdaterSettings] = None,
        client: Optional[WinGetClient] = None,
        transcript_path: Optional[Path] = None,
    ):
        self.settings = settings or UpdaterSettings()
        self.client = client or WinGetClient(
            PowerShellRunner(self.settings.powershell, self.settings.timeout),
            scope=self.settings.scope,
            module=self.settings.module,
        )
        self.transcript_path = transcript_path
        self.bootstrapper = ClientBootstrapper(self.client, provider=self.settings.provider)
        self.applier = UpdateApplier(self.client)

    def execute(self, check_only: bool = False) -> RunReport:
        """
        Run the workflow.

        Args:
            check_only: Stop after listing pending updates.

        Returns:
            RunReport describing what happened. Aborted runs are reported,
            not raised.
        """
        report = RunReport()
        path = self.transcript_path or default_transcript_path(self.settings.log_dir, report.started_at)
        report.transcript_path = path

        with Transcript(path, level=self.settings.log_level):
            try:
                self._run(report, check_only)
            finally:
                report.finished_at = datetime.now()

        return report

    def _run(self, report: RunReport, check_only: bool) -> None:
        try:
            self.bootstrapper.ensure_client()
        except (BootstrapError, PackageManagerError) as e:
            logger.error(f"Cannot continue without {self.client.module}: {e}")
            report.abort_error = e
            return

        try:
            report.packages = find_updatable_packages(self.client)
        except PackageManagerError as e:
            logger.error(f"Update check failed: {e}")
            report.abort_error = e
            return

        if not report.packages:
            logger.info(UP_TO_DATE_MESSAGE)
            return

        logger.info(f"{len(report.packages)} application(s) can be updated:")
        for package in report.packages:
            logger.info(f"  {package.name} ({package.id}): {package.version_str}")

        if check_only:
            return

        report.outcomes = self.applier.apply(report.packages)

        for line in render_summary(report).splitlines():
            logger.info(line)


def run_updates(settings: Optional[UpdaterSettings] = None, check_only: bool = False) -> RunReport:
    """
    Convenience function for a full update run.

    Args:
        settings: Run settings (default: from the environment).
        check_only: Only list pending updates.
    """
    if settings is None:
        settings = UpdaterSettings.from_env()
    return UpdateRun(settings).execute(check_only=check_only)
