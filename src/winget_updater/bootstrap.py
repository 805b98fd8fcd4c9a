"""
Client bootstrap.

Makes sure the WinGet PowerShell module is available before any query runs.
"""

from __future__ import annotations

import logging

from common.exceptions import ClientInstallError, ProviderRegistrationError

from .client import WinGetClient

logger = logging.getLogger(__name__)


class ClientBootstrapper:
    """
    Ensures the package-manager client is installed.

    Fail-fast: each step must succeed before the next runs, and there is no
    retry. Errors are raised to the caller, which decides whether to abort.
    """

    def __init__(self, client: WinGetClient, provider: str = "NuGet"):
        self.client = client
        self.provider = provider

    def ensure_client(self) -> bool:
        """
        Install the client module if it is missing.

        Returns:
            True if something was installed, False if the module was
            already present (no side effects in that case).

        Raises:
            ProviderRegistrationError: Registering the package provider failed.
            ClientInstallError: Installing the client module failed.
        """
        if self.client.is_module_installed():
            logger.debug(f"{self.client.module} is already installed")
            return False

        logger.info(f"{self.client.module} not found, installing it")

        logger.info(f"Registering package provider {self.provider}...")
        result = self.client.register_package_provider(self.provider)
        if not result:
            raise ProviderRegistrationError(self.provider, result.error)

        logger.info(f"Installing {self.client.module}...")
        result = self.client.install_module()
        if not result:
            raise ClientInstallError(self.client.module, result.error)

        logger.info(f"{self.client.module} installed")
        return True
