"""
winget-updater Exception Hierarchy

Errors that abort a run. Failures of individual package-manager calls are
not exceptions: they come back as explicit command results and are recorded
per package.
"""

from typing import Optional, Dict, Any


class UpdaterError(Exception):
    """
    Base exception for all winget-updater errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context as key-value pairs
        cause: Original exception that caused this error
        recoverable: Whether the run can continue after this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable

    def __str__(self):
        s = f"[{self.code}] {self.message}"
        if self.details:
            s += f" (details: {self.details})"
        if self.cause:
            s += f" caused by: {self.cause}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Bootstrap errors
# =============================================================================

class BootstrapError(UpdaterError):
    """The package-manager client could not be made available."""
    pass


class ProviderRegistrationError(BootstrapError):
    """Registering the package source provider failed."""
    def __init__(self, provider: str, reason: str):
        super().__init__(
            f"Failed to register package provider '{provider}': {reason}",
            code="PROVIDER_REGISTRATION_FAILED",
            details={"provider": provider, "reason": reason},
            recoverable=False,
        )


class ClientInstallError(BootstrapError):
    """Installing the package-manager client module failed."""
    def __init__(self, module: str, reason: str):
        super().__init__(
            f"Failed to install client module '{module}': {reason}",
            code="CLIENT_INSTALL_FAILED",
            details={"module": module, "reason": reason},
            recoverable=False,
        )


# =============================================================================
# Package manager errors
# =============================================================================

class PackageManagerError(UpdaterError):
    """Base for errors talking to the package manager."""
    pass


class PowerShellNotFoundError(PackageManagerError):
    """No PowerShell executable could be located."""
    def __init__(self, candidates):
        super().__init__(
            "PowerShell executable not found",
            code="POWERSHELL_NOT_FOUND",
            details={"searched": list(candidates)},
            recoverable=False,
        )


class PackageQueryError(PackageManagerError):
    """Listing packages with pending updates failed."""
    def __init__(self, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Could not query installed packages: {reason}",
            code="PACKAGE_QUERY_FAILED",
            details={"reason": reason},
            cause=cause,
            recoverable=False,
        )


# =============================================================================
# Configuration errors
# =============================================================================

class ConfigError(UpdaterError):
    """Base for configuration errors."""
    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration."""
    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration: {field}={value}: {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value), "reason": reason},
        )
