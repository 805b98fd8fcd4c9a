"""
Pytest configuration and shared fixtures for winget-updater tests.

Provides fakes for PowerShell and the WinGet client so no system command
ever runs.
"""

import logging
import os
import pytest
from unittest.mock import MagicMock, patch
from pathlib import Path
from typing import Generator
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============ Environment Fixtures ============

@pytest.fixture
def temp_home(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary home directory for tests."""
    old_home = os.environ.get('HOME')
    old_profile = os.environ.get('USERPROFILE')
    os.environ['HOME'] = str(tmp_path)
    os.environ['USERPROFILE'] = str(tmp_path)

    yield tmp_path

    for key, value in (('HOME', old_home), ('USERPROFILE', old_profile)):
        if value:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def clean_root_logger():
    """Keep handlers added by a test from leaking into the next one."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        # Only ours; pytest's capture handlers are subclasses
        if handler not in handlers and type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# ============ Subprocess Fixtures ============

@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for tests."""
    with patch('subprocess.run') as mock_run:
        mock_run.return_value = MagicMock(
            returncode=0,
            stdout="",
            stderr="",
        )
        yield mock_run


# ============ PowerShell / WinGet Fakes ============

class FakeRunner:
    """Stands in for PowerShellRunner; replays queued results."""

    def __init__(self, results=None):
        self.scripts = []
        self.results = list(results or [])

    def run(self, script):
        from winget_updater.models import CommandResult

        self.scripts.append(script)
        if self.results:
            return self.results.pop(0)
        return CommandResult(success=True)


class FakeWinGetClient:
    """
    In-memory WinGet client.

    ``failures`` maps an action name ("update", "uninstall", "install") to
    the set of package ids for which that action fails.
    """

    module = "Microsoft.WinGet.Client"

    def __init__(self, packages=None, module_installed=True, failures=None,
                 provider_ok=True, module_install_ok=True):
        self.packages = list(packages or [])
        self.module_installed = module_installed
        self.failures = {k: set(v) for k, v in (failures or {}).items()}
        self.provider_ok = provider_ok
        self.module_install_ok = module_install_ok
        self.calls = []

    def _result(self, ok, error="simulated failure"):
        from winget_updater.models import CommandResult
        return CommandResult(success=True) if ok else CommandResult.failed(error, returncode=1)

    def is_module_installed(self):
        self.calls.append(("is_module_installed",))
        return self.module_installed

    def register_package_provider(self, name="NuGet"):
        self.calls.append(("register_package_provider", name))
        return self._result(self.provider_ok, "provider registration refused")

    def install_module(self):
        self.calls.append(("install_module",))
        if self.module_install_ok:
            self.module_installed = True
        return self._result(self.module_install_ok, "module install refused")

    def list_updatable(self):
        self.calls.append(("list_updatable",))
        return list(self.packages)

    def _action(self, name, package_id):
        self.calls.append((name, package_id))
        return self._result(package_id not in self.failures.get(name, set()))

    def update(self, package_id):
        return self._action("update", package_id)

    def uninstall(self, package_id):
        return self._action("uninstall", package_id)

    def install(self, package_id):
        return self._action("install", package_id)

    def action_calls(self):
        return [c for c in self.calls if c[0] in ("update", "uninstall", "install")]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_client():
    """Factory for FakeWinGetClient instances."""
    return FakeWinGetClient


@pytest.fixture
def sample_packages():
    """Two packages with pending updates."""
    from winget_updater.models import PackageRecord

    return [
        PackageRecord(name="Foo", id="A.B", installed_version="1.0",
                      available_version="1.1", is_update_available=True),
        PackageRecord(name="Bar", id="C.D", installed_version="2.0",
                      available_version="3.0", is_update_available=True),
    ]


# ============ Marker Configuration ============

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "unit: fast unit tests with no external deps"
    )
