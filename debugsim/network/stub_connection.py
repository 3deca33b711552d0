# debugsim/network/stub_connection.py
"""
Guarded stand-in for a live client transport.

Occupies the connection slot of clients on live devices. Status listeners
are accepted; any data-carrying operation fails immediately so platform
code under test can never silently reach for a real transport.
"""

from typing import Any

from debugsim.clients.connection import ClientConnection, ConnectionStatusChange

__all__ = ["StubConnection", "create_stub_connection"]


def _misuse(operation: str) -> RuntimeError:
    return RuntimeError(
        f"{operation} should not be called in the simulated environment"
    )


class StubConnection(ClientConnection):
    """Connection that refuses to move data."""

    def subscribe_to_events(self, callback: ConnectionStatusChange) -> None:
        pass

    def close(self) -> None:
        raise _misuse("close")

    def send(self, data: dict[str, Any]) -> None:
        raise _misuse("send")

    async def send_expect_response(self, data: dict[str, Any]) -> Any:
        raise _misuse("send_expect_response")

    def __repr__(self) -> str:
        return "<StubConnection>"


def create_stub_connection() -> StubConnection:
    return StubConnection()
