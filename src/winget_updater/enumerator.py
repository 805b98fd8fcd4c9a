"""Find installed packages that have an update available."""

from __future__ import annotations

import logging
from typing import List

from .client import WinGetClient
from .models import PackageRecord

logger = logging.getLogger(__name__)


def find_updatable_packages(client: WinGetClient) -> List[PackageRecord]:
    """
    Query the package manager for packages with a pending update.

    The order reported by the package manager is kept. No deduplication:
    each identifier already addresses exactly one package.

    Raises:
        PackageQueryError: If the query fails.
    """
    logger.info("Checking for application updates...")
    packages = [p for p in client.list_updatable() if p.is_update_available]
    logger.debug(f"{len(packages)} package(s) with pending updates")
    return packages
