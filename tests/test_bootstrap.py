"""
Tests for the client bootstrapper and the update enumerator.
"""

import pytest


class TestClientBootstrapper:

    @pytest.mark.unit
    def test_module_present_has_no_side_effects(self, make_client):
        from winget_updater.bootstrap import ClientBootstrapper

        client = make_client(module_installed=True)
        installed = ClientBootstrapper(client).ensure_client()

        assert installed is False
        assert client.calls == [("is_module_installed",)]

    @pytest.mark.unit
    def test_missing_module_registers_provider_then_installs(self, make_client):
        from winget_updater.bootstrap import ClientBootstrapper

        client = make_client(module_installed=False)
        installed = ClientBootstrapper(client).ensure_client()

        assert installed is True
        assert client.calls == [
            ("is_module_installed",),
            ("register_package_provider", "NuGet"),
            ("install_module",),
        ]

    @pytest.mark.unit
    def test_provider_failure_stops_before_module_install(self, make_client):
        from common.exceptions import ProviderRegistrationError, BootstrapError
        from winget_updater.bootstrap import ClientBootstrapper

        client = make_client(module_installed=False, provider_ok=False)

        with pytest.raises(ProviderRegistrationError) as exc_info:
            ClientBootstrapper(client).ensure_client()

        assert isinstance(exc_info.value, BootstrapError)
        assert exc_info.value.recoverable is False
        assert ("install_module",) not in client.calls

    @pytest.mark.unit
    def test_module_install_failure(self, make_client):
        from common.exceptions import ClientInstallError
        from winget_updater.bootstrap import ClientBootstrapper

        client = make_client(module_installed=False, module_install_ok=False)

        with pytest.raises(ClientInstallError) as exc_info:
            ClientBootstrapper(client).ensure_client()

        assert exc_info.value.code == "CLIENT_INSTALL_FAILED"
        assert "module install refused" in str(exc_info.value)

    @pytest.mark.unit
    def test_second_call_is_idempotent(self, make_client):
        from winget_updater.bootstrap import ClientBootstrapper

        client = make_client(module_installed=False)
        bootstrapper = ClientBootstrapper(client)
        bootstrapper.ensure_client()
        client.calls.clear()

        assert bootstrapper.ensure_client() is False
        assert client.calls == [("is_module_installed",)]


class TestFindUpdatablePackages:

    @pytest.mark.unit
    def test_filters_on_update_flag_and_keeps_order(self, make_client):
        from winget_updater.enumerator import find_updatable_packages
        from winget_updater.models import PackageRecord

        packages = [
            PackageRecord(name="One", id="X.One", is_update_available=True),
            PackageRecord(name="Two", id="X.Two", is_update_available=False),
            PackageRecord(name="Three", id="X.Three", is_update_available=True),
        ]
        result = find_updatable_packages(make_client(packages=packages))

        assert [p.id for p in result] == ["X.One", "X.Three"]

    @pytest.mark.unit
    def test_empty(self, make_client):
        from winget_updater.enumerator import find_updatable_packages

        assert find_updatable_packages(make_client()) == []
