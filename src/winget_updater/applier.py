"""
Update applier.

Brings each package to its latest version, one at a time. A failed in-place
update gets a single fallback: uninstall, then install again. Failures are
recorded and the loop moves on to the next package.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from common.decorators import timed

from .client import WinGetClient
from .models import OutcomeStatus, PackageOutcome, PackageRecord, UpdateAction

logger = logging.getLogger(__name__)


class UpdateApplier:
    """
    Applies updates to a sequence of packages.

    Per package, exactly one terminal status is logged:
    updated, reinstalled, failed (uninstall failed, old version still
    installed) or broken (uninstalled, reinstall failed).
    """

    def __init__(
        self,
        client: WinGetClient,
        on_outcome: Optional[Callable[[PackageOutcome], None]] = None,
    ):
        self.client = client
        self._on_outcome = on_outcome

    @timed
    def apply(self, packages: Sequence[PackageRecord]) -> List[PackageOutcome]:
        """
        Update every package in order.

        Args:
            packages: Packages to update (required).

        Returns:
            One outcome per package, in the same order.
        """
        if packages is None:
            raise ValueError("packages is required")

        outcomes = []
        total = len(packages)
        for index, package in enumerate(packages, 1):
            logger.info(f"[{index}/{total}] Updating {package.name} ({package.id}) {package.version_str}")
            outcome = self.apply_one(package)
            outcomes.append(outcome)
            if self._on_outcome:
                self._on_outcome(outcome)
        return outcomes

    def apply_one(self, package: PackageRecord) -> PackageOutcome:
        start = time.perf_counter()
        outcome = self._update_or_reinstall(package)
        outcome.duration = time.perf_counter() - start
        return outcome

    def _update_or_reinstall(self, package: PackageRecord) -> PackageOutcome:
        actions = [UpdateAction.UPDATE]

        result = self.client.update(package.id)
        if result:
            logger.info(f"{package.name} updated to the latest version.")
            return PackageOutcome(package.id, package.name, OutcomeStatus.UPDATED, actions)

        logger.warning(f"Update of {package.name} failed: {result.error}")
        logger.info(f"Attempting to reinstall {package.name}...")

        actions.append(UpdateAction.UNINSTALL)
        result = self.client.uninstall(package.id)
        if not result:
            logger.error(f"Failed to reinstall {package.name}: uninstall failed: {result.error}")
            return PackageOutcome(package.id, package.name, OutcomeStatus.FAILED, actions, result.error)

        actions.append(UpdateAction.INSTALL)
        result = self.client.install(package.id)
        if not result:
            logger.error(
                f"Failed to reinstall {package.name}: it was uninstalled but "
                f"the install failed and it is no longer installed: {result.error}"
            )
            return PackageOutcome(package.id, package.name, OutcomeStatus.BROKEN, actions, result.error)

        logger.info(f"{package.name} reinstalled successfully.")
        return PackageOutcome(package.id, package.name, OutcomeStatus.REINSTALLED, actions)
