"""
Tests for the common module: exceptions, decorators, logging and atomic writes.
"""

import json
import pytest
import logging
import time


class TestExceptions:
    """Tests for exception hierarchy."""

    def test_updater_error_basic(self):
        """Test basic UpdaterError."""
        from common.exceptions import UpdaterError

        error = UpdaterError("Something failed")
        assert str(error) == "[UpdaterError] Something failed"
        assert error.recoverable is True

    def test_updater_error_with_details(self):
        """Test UpdaterError with details."""
        from common.exceptions import UpdaterError

        error = UpdaterError(
            "Operation failed",
            code="OP_FAILED",
            details={"field": "value"},
            recoverable=False,
        )

        assert error.code == "OP_FAILED"
        assert error.details == {"field": "value"}
        assert error.recoverable is False
        assert "details:" in str(error)

    def test_updater_error_to_dict(self):
        """Test JSON serialization."""
        from common.exceptions import UpdaterError

        error = UpdaterError("Test", code="TEST", details={"key": 1})
        d = error.to_dict()

        assert d["error"] == "TEST"
        assert d["message"] == "Test"
        assert d["details"]["key"] == 1

    def test_bootstrap_errors_are_fatal(self):
        from common.exceptions import (
            BootstrapError, ProviderRegistrationError, ClientInstallError,
        )

        provider = ProviderRegistrationError("NuGet", "offline")
        module = ClientInstallError("Microsoft.WinGet.Client", "denied")

        for error in (provider, module):
            assert isinstance(error, BootstrapError)
            assert error.recoverable is False

        assert provider.code == "PROVIDER_REGISTRATION_FAILED"
        assert provider.details["provider"] == "NuGet"
        assert "offline" in provider.message

    def test_query_error_keeps_cause(self):
        from common.exceptions import PackageQueryError, PackageManagerError

        cause = ValueError("bad json")
        error = PackageQueryError("unreadable output", cause=cause)
        assert isinstance(error, PackageManagerError)
        assert error.cause is cause
        assert "caused by: bad json" in str(error)

    def test_powershell_not_found_lists_candidates(self):
        from common.exceptions import PowerShellNotFoundError

        error = PowerShellNotFoundError(("pwsh", "powershell.exe"))
        assert error.details["searched"] == ["pwsh", "powershell.exe"]


class TestDecorators:

    def test_timed_decorator(self, caplog):
        """Test @timed logs execution time."""
        from common.decorators import timed

        @timed
        def slow_func():
            time.sleep(0.01)
            return "done"

        with caplog.at_level(logging.DEBUG, logger="common.decorators"):
            result = slow_func()

        assert result == "done"
        assert "slow_func finished in" in caplog.text

    def test_timed_logs_on_exception(self, caplog):
        from common.decorators import timed

        @timed
        def failing():
            raise RuntimeError("nope")

        with caplog.at_level(logging.DEBUG, logger="common.decorators"):
            with pytest.raises(RuntimeError):
                failing()

        assert "failing finished in" in caplog.text


class TestLogging:
    """Tests for logging configuration."""

    def test_setup_logging_creates_handlers(self):
        """Test setup_logging configures handlers."""
        from common.logging_config import setup_logging

        setup_logging(level=logging.DEBUG)

        root = logging.getLogger()
        assert len(root.handlers) >= 1

    def test_colored_formatter_restores_levelname(self):
        from common.logging_config import ColoredFormatter

        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "msg", None, None)
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[31m" in output
        assert record.levelname == "ERROR"


class TestAtomicWrite:

    def test_write_json(self, tmp_path):
        from utils.atomic_write import atomic_write_json

        target = tmp_path / "nested" / "data.json"
        atomic_write_json(target, {"name": "Foo"})

        assert json.loads(target.read_text(encoding="utf-8")) == {"name": "Foo"}

    def test_failed_write_leaves_target_untouched(self, tmp_path):
        from utils.atomic_write import atomic_write_json

        target = tmp_path / "data.json"
        target.write_text("original", encoding="utf-8")

        with pytest.raises(TypeError):
            atomic_write_json(target, {"bad": object()})

        assert target.read_text(encoding="utf-8") == "original"
        assert list(tmp_path.glob(".*.tmp")) == []
