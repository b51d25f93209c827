"""Autowiring with a class-level singleton marker.

``HttpClient`` is never bound, yet the container builds it (and its
``Logger``) from type hints and caches it because of ``@singleton``.
"""

from __future__ import annotations

from facadewire import Container, singleton


class Logger:
    pass


@singleton
class HttpClient:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


def main() -> None:
    container = Container()

    first = container.make(HttpClient)
    second = container.make(HttpClient)

    print(f"same_client={first is second}")  # => same_client=True
    print(f"logger={type(first.logger).__name__}")  # => logger=Logger


if __name__ == "__main__":
    main()
