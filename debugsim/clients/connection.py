# debugsim/clients/connection.py
"""Transport interface between the platform and a client process."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any


class ConnectionStatus(Enum):
    CONNECTED = "connected"
    CLOSED = "closed"
    ERROR = "error"


ConnectionStatusChange = Callable[[ConnectionStatus], None]


class ClientConnection(ABC):
    """Bidirectional channel to a client process."""

    @abstractmethod
    def subscribe_to_events(self, callback: ConnectionStatusChange) -> None:
        """Register a status listener."""

    @abstractmethod
    def close(self) -> None:
        """Close the channel."""

    @abstractmethod
    def send(self, data: dict[str, Any]) -> None:
        """Send a message without waiting for a response."""

    @abstractmethod
    async def send_expect_response(self, data: dict[str, Any]) -> Any:
        """Send a message and wait for the client's response."""
