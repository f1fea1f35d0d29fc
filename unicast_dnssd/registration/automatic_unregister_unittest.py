import pytest

from unicast_dnssd.errors import TransportError
from unicast_dnssd.registration.automatic_unregister import AutomaticUnregister
from unicast_dnssd.registration.registrator import DnsSDRegistrator
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport

HTTP = ServiceType("_http", Transport.TCP)
ONE = ServiceName("one", HTTP, "example.com.")
TWO = ServiceName("two", HTTP, "example.com.")


class TestAutomaticUnregister:
    @pytest.fixture
    def registrator(self, mocker):
        return mocker.create_autospec(DnsSDRegistrator, instance=True)

    @pytest.fixture
    def hooks(self, mocker):
        return mocker.MagicMock(), mocker.MagicMock()

    @pytest.fixture
    def auto(self, registrator, hooks):
        register_hook, unregister_hook = hooks
        return AutomaticUnregister(
            registrator,
            register_exit_hook=register_hook,
            unregister_exit_hook=unregister_hook,
        )

    def test_hook_installed_only_while_started_and_non_empty(self, auto, hooks):
        register_hook, unregister_hook = hooks

        auto.add_service(ONE)
        register_hook.assert_not_called()

        auto.start()
        register_hook.assert_called_once_with(auto.unregister_all)
        assert auto.hook_installed

        auto.add_service(TWO)
        assert register_hook.call_count == 1

        auto.remove_service(ONE)
        unregister_hook.assert_not_called()
        auto.remove_service(TWO)
        unregister_hook.assert_called_once_with(auto.unregister_all)
        assert not auto.hook_installed

    def test_start_with_empty_set_installs_nothing(self, auto, hooks):
        register_hook, _ = hooks
        auto.start()
        assert auto.is_started
        register_hook.assert_not_called()
        auto.add_service(ONE)
        register_hook.assert_called_once()

    def test_stop_removes_hook_and_keeps_services(self, auto, hooks):
        _, unregister_hook = hooks
        auto.start()
        auto.add_service(ONE)

        auto.stop()
        unregister_hook.assert_called_once_with(auto.unregister_all)
        assert not auto.is_started
        assert auto.registered_services() == {ONE}

    def test_remove_unknown_service(self, auto):
        auto.remove_service(ONE)
        assert auto.registered_services() == set()

    def test_registered_services_is_snapshot(self, auto):
        auto.add_service(ONE)
        snapshot = auto.registered_services()
        snapshot.add(TWO)
        assert auto.registered_services() == {ONE}

    def test_unregister_all(self, auto, registrator, hooks):
        _, unregister_hook = hooks
        auto.start()
        auto.add_service(ONE)
        auto.add_service(TWO)

        auto.unregister_all()

        unregistered = {c.args[0] for c in registrator.unregister_service.call_args_list}
        assert unregistered == {ONE, TWO}
        assert auto.registered_services() == set()
        unregister_hook.assert_called_once()

    def test_unregister_all_reports_errors_to_stderr(
        self, auto, registrator, capsys
    ):
        registrator.unregister_service.side_effect = [
            TransportError("server down"),
            True,
        ]
        auto.add_service(ONE)
        auto.add_service(TWO)

        auto.unregister_all()

        assert registrator.unregister_service.call_count == 2
        err = capsys.readouterr().err
        assert "WARNING: Failed to unregister service" in err
        assert "server down" in err

    def test_requires_registrator(self):
        with pytest.raises(ValueError):
            AutomaticUnregister(None)
