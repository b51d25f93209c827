"""Mail facade: call a container service through a static proxy.

Bind the facade to a service id, point it at a container, and call the
service's methods on the facade class. Swap the service for a mock in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from facadewire import Container, Facade, FacadeRegistry


class MailerInterface(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> bool: ...

    @abstractmethod
    def get_driver(self) -> str: ...


class SmtpMailer(MailerInterface):
    def send(self, to: str, subject: str, body: str) -> bool:
        print(f"Sending email to {to} with subject '{subject}'")
        print(f"Body: {body}")
        return True

    def get_driver(self) -> str:
        return "smtp"


class FakeMailer(MailerInterface):
    def send(self, to: str, subject: str, body: str) -> bool:
        return False

    def get_driver(self) -> str:
        return "mock-driver"


class Mail(Facade):
    accessor = "mailer"


def main() -> None:
    container = Container()
    container.singleton("mailer", SmtpMailer)

    registry = FacadeRegistry(container)
    registry.bindings.bind(Mail, "mailer")
    Mail.use_registry(registry)

    sent = Mail.send("user@example.com", "Welcome", "Thanks for signing up!")
    print(f"sent={sent}")  # => sent=True
    print(f"driver={Mail.get_driver()}")  # => driver=smtp

    Mail.mock(FakeMailer())
    print(f"mocked_driver={Mail.get_driver()}")  # => mocked_driver=mock-driver

    Mail.clear_mock()
    print(f"restored_driver={Mail.get_driver()}")  # => restored_driver=smtp


if __name__ == "__main__":
    main()
