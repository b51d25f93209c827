"""Tests for static facade dispatch."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from facadewire.container import Container
from facadewire.exceptions import (
    FacadeWireContainerNotSetError,
    FacadeWireInvocationError,
    FacadeWireUndefinedMethodError,
    FacadeWireUnknownFacadeError,
)
from facadewire.facade import Facade
from facadewire.registry import FacadeRegistry
from facadewire.simple_container import SimpleContainer


class SmtpMailer:
    def __init__(self) -> None:
        self.outbox: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, body: str) -> bool:
        self.outbox.append((to, subject, body))
        return True

    def get_driver(self) -> str:
        return "smtp"

    def format(self, subject: str, *, prefix: str = "") -> str:
        return f"{prefix}{subject}"

    def clear(self) -> str:
        self.outbox.clear()
        return "cleared"

    def fail(self) -> None:
        msg = "connection refused"
        raise ConnectionError(msg)


class FakeMailer:
    def get_driver(self) -> str:
        return "mock-driver"


class Mail(Facade):
    accessor = "mailer"


class Unbound(Facade):
    pass


class RequestState(Facade):
    accessor = "request.state"
    context_safe = True


class State:
    def __init__(self) -> None:
        self.user: str | None = None

    def set_user(self, user: str) -> None:
        self.user = user

    def get_user(self) -> str | None:
        return self.user


@pytest.fixture()
def mail_registry(registry: FacadeRegistry, container: Container) -> FacadeRegistry:
    container.bind("mailer", lambda: SmtpMailer())
    container.bind("request.state", State)
    registry.bindings.bind(Mail, "mailer")
    return registry


@pytest.fixture()
def context_safe_mail(mail_registry: FacadeRegistry) -> Iterator[type[Mail]]:
    Mail.enable_context_safe_mode()
    try:
        yield Mail
    finally:
        Mail.disable_context_safe_mode()


class TestDispatch:
    def test_static_call_is_forwarded(self, mail_registry: FacadeRegistry) -> None:
        assert Mail.send("a@b.com", "Welcome", "Hello") is True
        assert Mail.get_driver() == "smtp"
        assert Mail.get_instance().outbox == [("a@b.com", "Welcome", "Hello")]

    def test_keyword_arguments_are_forwarded(self, mail_registry: FacadeRegistry) -> None:
        assert Mail.format("Welcome", prefix="[app] ") == "[app] Welcome"

    def test_call_reaches_names_shadowed_by_facade_api(
        self,
        mail_registry: FacadeRegistry,
    ) -> None:
        assert Mail.call("clear") == "cleared"

    def test_forwarder_is_named_after_method(self, mail_registry: FacadeRegistry) -> None:
        forwarder = Mail.send

        assert forwarder.__name__ == "send"
        assert forwarder.__qualname__ == "Mail.send"

    def test_attribute_access_does_not_resolve(self, mail_registry: FacadeRegistry) -> None:
        _ = Mail.send

        assert not Mail.is_resolved()

    def test_private_names_are_not_forwarded(self, mail_registry: FacadeRegistry) -> None:
        with pytest.raises(AttributeError):
            _ = Mail._outbox  # noqa: SLF001

    def test_undefined_method(self, mail_registry: FacadeRegistry) -> None:
        with pytest.raises(
            FacadeWireUndefinedMethodError,
            match="Undefined method undefined_method for facade .*Mail",
        ):
            Mail.undefined_method()

    def test_method_errors_are_wrapped(self, mail_registry: FacadeRegistry) -> None:
        with pytest.raises(FacadeWireInvocationError) as exc_info:
            Mail.fail()

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.method == "fail"
        assert "connection refused" in str(exc_info.value)

    def test_unbound_facade(self, registry: FacadeRegistry) -> None:
        with pytest.raises(FacadeWireUnknownFacadeError, match="Unknown facade"):
            Unbound.anything()

    def test_accessor_without_binding_is_unknown_in_proxy_mode(
        self,
        registry: FacadeRegistry,
    ) -> None:
        with pytest.raises(FacadeWireUnknownFacadeError):
            Mail.get_driver()

    def test_missing_container(self) -> None:
        empty = FacadeRegistry()
        empty.bindings.bind(Mail, "mailer")
        previous = Facade.get_registry()
        Facade.use_registry(empty)
        try:
            with pytest.raises(FacadeWireContainerNotSetError):
                Mail.get_driver()
        finally:
            Facade.use_registry(previous)


class TestResolution:
    def test_container_is_queried_once(self, registry: FacadeRegistry) -> None:
        mailer = SmtpMailer()
        services = Mock(spec=SimpleContainer)
        services.has.return_value = True
        services.get.return_value = mailer
        Mail.set_container(services)
        registry.bindings.bind(Mail, "mailer")

        assert Mail.get_instance() is mailer
        assert Mail.get_driver() == "smtp"

        services.has.assert_called_once_with("mailer")
        services.get.assert_called_once_with("mailer")

    def test_clear_resolves_again(self, registry: FacadeRegistry) -> None:
        services = Mock(spec=SimpleContainer)
        services.has.return_value = True
        services.get.return_value = SmtpMailer()
        Mail.set_container(services)
        registry.bindings.bind(Mail, "mailer")

        Mail.get_driver()
        Mail.clear()
        Mail.get_driver()

        assert services.get.call_count == 2

    def test_is_resolved(self, mail_registry: FacadeRegistry) -> None:
        assert not Mail.is_resolved()

        Mail.get_driver()

        assert Mail.is_resolved()

    def test_is_resolved_without_binding_is_false(self, registry: FacadeRegistry) -> None:
        assert not Unbound.is_resolved()

    def test_has_method(self, mail_registry: FacadeRegistry) -> None:
        assert Mail.has_method("send")
        assert not Mail.has_method("missing")
        assert not Mail.has_method("_private")

    def test_has_method_swallows_resolution_errors(self, registry: FacadeRegistry) -> None:
        assert not Unbound.has_method("send")

    def test_get_service_id(self, mail_registry: FacadeRegistry) -> None:
        assert Mail.get_service_id() == "mailer"

        mail_registry.bindings.bind(Unbound, "unbound.service")
        assert Unbound.get_service_id() == "unbound.service"

    def test_get_service_id_unknown(self, registry: FacadeRegistry) -> None:
        with pytest.raises(FacadeWireUnknownFacadeError):
            Unbound.get_service_id()

    def test_clear_all_drops_every_facade(self, mail_registry: FacadeRegistry) -> None:
        mail_registry.bindings.bind(Unbound, "mailer")
        Mail.get_driver()
        Unbound.get_driver()

        Mail.clear_all()

        assert Mail.resolved_instances() == {}

    def test_resolved_instances(self, mail_registry: FacadeRegistry) -> None:
        instance = Mail.get_instance()

        assert Mail.resolved_instances() == {Mail: instance}


class TestMocks:
    def test_mock_instance(self, mail_registry: FacadeRegistry) -> None:
        Mail.mock(FakeMailer())

        assert Mail.get_driver() == "mock-driver"

    def test_mock_object_from_unittest(self, mail_registry: FacadeRegistry) -> None:
        double = Mock()
        double.get_driver.return_value = "mock-driver"
        Mail.mock(double)

        assert Mail.get_driver() == "mock-driver"
        double.get_driver.assert_called_once_with()

    def test_mock_factory(self, mail_registry: FacadeRegistry) -> None:
        Mail.mock(FakeMailer)  # a class is an instance to return, not a factory
        assert Mail.get_instance() is FakeMailer

        Mail.mock(lambda: FakeMailer())
        assert isinstance(Mail.get_instance(), FakeMailer)
        assert Mail.get_instance() is not Mail.get_instance()

    def test_clear_mock_restores_service(self, mail_registry: FacadeRegistry) -> None:
        Mail.mock(FakeMailer())

        Mail.clear_mock()

        assert Mail.get_driver() == "smtp"

    def test_mock_works_without_container(self) -> None:
        empty = FacadeRegistry()
        previous = Facade.get_registry()
        Facade.use_registry(empty)
        try:
            Unbound.mock(FakeMailer())
            assert Unbound.get_driver() == "mock-driver"
        finally:
            Facade.use_registry(previous)

    def test_mock_applies_in_context_safe_mode(self, context_safe_mail: type[Mail]) -> None:
        context_safe_mail.mock(FakeMailer())

        assert context_safe_mail.get_driver() == "mock-driver"
        assert not context_safe_mail.is_resolved()


class TestContextSafeMode:
    def test_mode_switch(self, context_safe_mail: type[Mail]) -> None:
        assert context_safe_mail.is_context_safe_mode()

        context_safe_mail.disable_context_safe_mode()

        assert not context_safe_mail.is_context_safe_mode()
        assert not Unbound.is_context_safe_mode()

    def test_mode_is_per_facade_class(self, mail_registry: FacadeRegistry) -> None:
        assert RequestState.is_context_safe_mode()
        assert not Mail.is_context_safe_mode()

    def test_accessor_is_resolved_without_binding(self, mail_registry: FacadeRegistry) -> None:
        RequestState.set_user("ada")

        assert RequestState.get_user() == "ada"
        assert RequestState.resolved_instances() == {}

    def test_binding_is_used_without_accessor(self, mail_registry: FacadeRegistry) -> None:
        mail_registry.bindings.bind(Unbound, "mailer")
        Unbound.enable_context_safe_mode()
        try:
            assert Unbound.get_driver() == "smtp"
        finally:
            Unbound.disable_context_safe_mode()

    def test_unknown_without_accessor_or_binding(self, registry: FacadeRegistry) -> None:
        Unbound.enable_context_safe_mode()
        try:
            with pytest.raises(FacadeWireUnknownFacadeError):
                Unbound.get_instance()
        finally:
            Unbound.disable_context_safe_mode()

    @pytest.mark.asyncio
    async def test_concurrent_tasks_are_isolated(self, mail_registry: FacadeRegistry) -> None:
        async def handle(user: str) -> str | None:
            RequestState.set_user(user)
            await asyncio.sleep(0)
            return RequestState.get_user()

        users = await asyncio.gather(*(handle(f"user-{index}") for index in range(5)))

        assert users == [f"user-{index}" for index in range(5)]

    @pytest.mark.asyncio
    async def test_clear_only_affects_current_task(self, mail_registry: FacadeRegistry) -> None:
        cleared = asyncio.Event()
        resolved = asyncio.Event()

        async def keeper() -> bool:
            RequestState.set_user("keeper")
            resolved.set()
            await cleared.wait()
            return RequestState.get_user() == "keeper"

        async def clearer() -> bool:
            await resolved.wait()
            RequestState.set_user("clearer")
            RequestState.clear()
            cleared.set()
            return RequestState.get_user() is None

        assert await asyncio.gather(keeper(), clearer()) == [True, True]

    def test_clear_all_drops_current_slice(self, context_safe_mail: type[Mail]) -> None:
        mailer = context_safe_mail.get_instance()
        RequestState.set_user("ada")

        context_safe_mail.clear_all()

        assert context_safe_mail.get_instance() is not mailer
        assert RequestState.get_user() is None

    def test_switching_modes_uses_separate_caches(self, mail_registry: FacadeRegistry) -> None:
        process_wide = Mail.get_instance()
        Mail.enable_context_safe_mode()
        try:
            per_context = Mail.get_instance()
        finally:
            Mail.disable_context_safe_mode()

        assert per_context is not process_wide
        assert Mail.get_instance() is process_wide


class TestRegistryInstallation:
    def test_subclass_registry_overrides_base(self, mail_registry: FacadeRegistry) -> None:
        isolated = FacadeRegistry(SimpleContainer())
        isolated.bindings.mock(Mail, FakeMailer())
        Mail.use_registry(isolated)
        try:
            assert Mail.get_registry() is isolated
            assert Unbound.get_registry() is mail_registry
            assert Mail.get_driver() == "mock-driver"
        finally:
            del Mail._registry  # noqa: SLF001

        assert Mail.get_registry() is mail_registry
