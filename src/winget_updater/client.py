"""
WinGet client wrapper.

Thin layer over the ``Microsoft.WinGet.Client`` PowerShell module. Each
method maps to one capability the updater consumes and returns an explicit
result instead of relying on PowerShell's last-command status.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from common.exceptions import PackageQueryError

from .models import CommandResult, PackageRecord
from .powershell import PowerShellRunner, quote

logger = logging.getLogger(__name__)

STATUS_OK = "Ok"


class WinGetClient:
    """
    Package-manager client.

    Capabilities:
    - check whether the client module is installed
    - register a package provider / install the client module (bootstrap)
    - list packages with an available update
    - update, uninstall and install a package by id
    """

    MODULE = "Microsoft.WinGet.Client"

    def __init__(
        self,
        runner: Optional[PowerShellRunner] = None,
        scope: str = "System",
        module: str = MODULE,
    ):
        self.runner = runner or PowerShellRunner()
        self.scope = scope
        self.module = module

    # ------------------------------------------------------------------
    # Bootstrap capabilities
    # ------------------------------------------------------------------

    def is_module_installed(self) -> bool:
        result = self.runner.run(
            f"if (Get-Module -ListAvailable -Name {quote(self.module)}) {{ exit 0 }} else {{ exit 1 }}"
        )
        return result.success

    def register_package_provider(self, name: str = "NuGet") -> CommandResult:
        """Register the package source provider the module is installed from."""
        return self.runner.run(
            f"Install-PackageProvider -Name {quote(name)} -Force -Scope AllUsers | Out-Null"
        )

    def install_module(self) -> CommandResult:
        return self.runner.run(
            f"Install-Module -Name {quote(self.module)} -Force -Scope AllUsers -AllowClobber | Out-Null"
        )

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def list_updatable(self) -> List[PackageRecord]:
        """
        List installed packages that have an update available.

        Returns:
            Package records in the order the package manager reports them.

        Raises:
            PackageQueryError: If the query fails or its output is not JSON.
        """
        script = "\n".join([
            f"Import-Module {quote(self.module)}",
            "$packages = @(Get-WinGetPackage | Where-Object { $_.IsUpdateAvailable })",
            "if ($packages.Count -gt 0) {",
            "  ConvertTo-Json -Compress -Depth 3 -InputObject @($packages |",
            "    Select-Object Name, Id, InstalledVersion, AvailableVersions, IsUpdateAvailable)",
            "}",
        ])
        result = self.runner.run(script)
        if not result:
            raise PackageQueryError(result.error)

        return [PackageRecord.from_winget(item) for item in self._parse_json_list(result.stdout)]

    @staticmethod
    def _parse_json_list(output: str) -> List[dict]:
        if not output:
            return []
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise PackageQueryError("package list is not valid JSON", cause=e)

        # ConvertTo-Json collapses a one-element array into a bare object
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise PackageQueryError(f"unexpected package list type: {type(data).__name__}")
        return [item for item in data if isinstance(item, dict) and item.get("Id")]

    # ------------------------------------------------------------------
    # Package actions
    # ------------------------------------------------------------------

    def update(self, package_id: str) -> CommandResult:
        return self._package_action(
            "Update-WinGetPackage", package_id, f"-Mode Silent -Scope {self.scope} -Force"
        )

    def uninstall(self, package_id: str) -> CommandResult:
        # Uninstall-WinGetPackage has no -Scope parameter
        return self._package_action("Uninstall-WinGetPackage", package_id, "-Mode Silent -Force")

    def install(self, package_id: str) -> CommandResult:
        return self._package_action(
            "Install-WinGetPackage", package_id, f"-Mode Silent -Scope {self.scope} -Force"
        )

    def _package_action(self, cmdlet: str, package_id: str, flags: str) -> CommandResult:
        script = "\n".join([
            f"Import-Module {quote(self.module)}",
            f"$result = {cmdlet} -Id {quote(package_id)} -MatchOption Equals {flags}",
            "$result | Select-Object Id, Name,",
            "  @{ Name = 'Status'; Expression = { \"$($_.Status)\" } },",
            "  RebootRequired,",
            "  @{ Name = 'ExtendedErrorCode'; Expression = { \"$($_.ExtendedErrorCode.HResult)\" } } | ConvertTo-Json -Compress",
        ])
        result = self.runner.run(script)
        if not result:
            return result
        return self._check_status(cmdlet, result)

    @staticmethod
    def _check_status(cmdlet: str, result: CommandResult) -> CommandResult:
        """The cmdlet exits cleanly even when the operation failed; trust Status."""
        payload: Any = None
        if result.stdout:
            try:
                payload = json.loads(result.stdout)
            except json.JSONDecodeError:
                payload = None
        if isinstance(payload, list):
            payload = payload[-1] if payload else None

        if not isinstance(payload, dict):
            return CommandResult.failed(
                f"{cmdlet} returned no result object",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        status = payload.get("Status") or ""
        if status == STATUS_OK:
            if payload.get("RebootRequired"):
                logger.info(f"{payload.get('Name') or payload.get('Id')}: a reboot is required to finish")
            return result

        error = f"status {status or 'unknown'}"
        code = _format_hresult(payload.get("ExtendedErrorCode"))
        if code:
            error += f" ({code})"
        return CommandResult.failed(
            error, returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )


def _format_hresult(value: Any) -> str:
    """Render an HRESULT the way WinGet documents it (0x8A150011); pass anything else through."""
    if value is None or value == "":
        return ""
    try:
        code = int(value)
    except (TypeError, ValueError):
        return str(value)
    return f"0x{code & 0xFFFFFFFF:08X}" if code else ""
