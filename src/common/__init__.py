"""
winget-updater common utilities

Exception hierarchy, logging setup and decorators shared by the updater.
"""

from .exceptions import (
    UpdaterError, BootstrapError, ProviderRegistrationError, ClientInstallError,
    PackageManagerError, PowerShellNotFoundError, PackageQueryError,
    ConfigError, InvalidConfigError,
)
from .decorators import timed
from .logging_config import setup_logging, ColoredFormatter

__all__ = [
    # Exceptions
    "UpdaterError", "BootstrapError", "ProviderRegistrationError", "ClientInstallError",
    "PackageManagerError", "PowerShellNotFoundError", "PackageQueryError",
    "ConfigError", "InvalidConfigError",
    # Decorators
    "timed",
    # Logging
    "setup_logging", "ColoredFormatter",
]
