# debugsim/network/protocol_emulator.py
"""
Client protocol emulator.

Answers the handshake part of the client-to-platform remote-call surface
without a transport:

- getPlugins            -> {"plugins": [supported plugin ids]}
- getBackgroundPlugins  -> {"plugins": [background plugin ids]}

Anything else fails, unless a test-supplied interceptor answers it first.
Outbound fire-and-forget traffic is recorded by ``OutboundCallLog``.
"""

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from debugsim.logging_system import get_logger

__all__ = ["OnSend", "OutboundCall", "OutboundCallLog", "ProtocolEmulator"]

logger = get_logger(__name__)

# Returns None to fall through to the built-in methods
OnSend = Callable[[str, Any], Any]


class ProtocolEmulator:
    """
    Remote-call handler installed on simulated clients.

    Example:
        >>> emulator = ProtocolEmulator(["Network"], background_plugins=["Logs"])
        >>> await emulator("getPlugins", False, {})
        {'plugins': ['Network']}
    """

    def __init__(
        self,
        supported_plugins: Iterable[str],
        background_plugins: Iterable[str] | None = None,
        on_send: OnSend | None = None,
    ):
        """
        Initialise emulator.

        Args:
            supported_plugins: Plugin ids reported by getPlugins
            background_plugins: Plugin ids reported by getBackgroundPlugins
            on_send: Interceptor called with (method, params) before the
                built-in methods; a non-None result is returned as is
        """
        self.supported_plugins = list(supported_plugins)
        self.background_plugins = list(background_plugins or [])
        self.on_send = on_send

        self._methods: dict[str, Callable[[Any], Any]] = {
            "getPlugins": self._get_plugins,
            "getBackgroundPlugins": self._get_background_plugins,
        }

    async def __call__(self, method: str, from_plugin: bool, params: Any = None) -> Any:
        """Answer a raw call.

        Raises:
            RuntimeError: If the method is neither intercepted nor built in
        """
        if self.on_send is not None:
            intercepted = self.on_send(method, params)
            if inspect.isawaitable(intercepted):
                intercepted = await intercepted
            if intercepted is not None:
                logger.debug(f"Intercepted raw call '{method}'")
                return intercepted

        handler = self._methods.get(method)
        if handler is None:
            raise RuntimeError(f"Test client doesn't support raw_call method '{method}'")
        return handler(params)

    def _get_plugins(self, params: Any) -> dict[str, list[str]]:
        return {"plugins": list(self.supported_plugins)}

    def _get_background_plugins(self, params: Any) -> dict[str, list[str]]:
        return {"plugins": list(self.background_plugins)}

    @property
    def supported_methods(self) -> list[str]:
        return list(self._methods)


@dataclass(frozen=True)
class OutboundCall:
    """A fire-and-forget message a client tried to send."""

    method: str
    params: Any = None


class OutboundCallLog:
    """
    Send observer recording outbound messages instead of sending them.

    Installed on every simulated client; tests inspect ``calls`` to assert
    on outbound traffic.
    """

    def __init__(self):
        self.calls: list[OutboundCall] = []

    def __call__(self, method: str, params: Any = None) -> None:
        self.calls.append(OutboundCall(method, params))

    def calls_for(self, method: str) -> list[OutboundCall]:
        return [call for call in self.calls if call.method == method]

    def clear(self) -> None:
        self.calls.clear()

    def __len__(self) -> int:
        return len(self.calls)
