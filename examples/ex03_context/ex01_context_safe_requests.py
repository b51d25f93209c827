"""Context-safe facades: one service instance per asyncio task.

Concurrent "requests" store their user on a request-scoped service through
the same facade class without seeing each other's state.
"""

from __future__ import annotations

import asyncio

from facadewire import Container, Facade, FacadeRegistry, detect_runtime


class RequestState:
    def __init__(self) -> None:
        self.user: str | None = None

    def set_user(self, user: str) -> None:
        self.user = user

    def get_user(self) -> str | None:
        return self.user


class Request(Facade):
    accessor = "request.state"
    context_safe = True


async def handle(user: str) -> str:
    Request.set_user(user)
    await asyncio.sleep(0)
    return f"{user}->{Request.get_user()}"


async def serve() -> list[str]:
    return list(await asyncio.gather(handle("ada"), handle("grace")))


def main() -> None:
    container = Container()
    container.bind("request.state", RequestState)
    Request.use_registry(FacadeRegistry(container))

    print(f"runtime={detect_runtime().value}")  # => runtime=process
    for line in asyncio.run(serve()):
        print(line)  # => ada->ada, then grace->grace


if __name__ == "__main__":
    main()
