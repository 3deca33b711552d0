# debugsim/clients/client.py
"""
Debuggable app process connected to the platform.

A client is bound to exactly one device for its whole life. Outbound
traffic goes through two hooks:
- ``raw_call`` (request/response), served by ``call_handler`` when one is
  installed, otherwise by the connection
- ``raw_send`` (fire and forget), observed by ``send_observer`` when one
  is installed, otherwise sent over the connection
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

from debugsim.clients.client_id import ClientQuery
from debugsim.clients.connection import ClientConnection, ConnectionStatus
from debugsim.logging_system import PlatformLogger
from debugsim.plugins.definitions import PluginDefinition
from debugsim.plugins.plugin_instance import PluginInstance

if TYPE_CHECKING:
    from debugsim.devices.base_device import BaseDevice
    from debugsim.state.store import Store

CallHandler = Callable[[str, bool, Any], Awaitable[Any]]
SendObserver = Callable[[str, Any], None]


class Client:
    """
    A client process running on a device.

    Example:
        >>> client = Client(client_id, query, connection, logger, store, {"Network"}, device)
        >>> await client.init()
        >>> client.plugins
        ['Network']
    """

    def __init__(
        self,
        client_id: str,
        query: ClientQuery,
        connection: ClientConnection | None,
        logger: PlatformLogger,
        store: Store,
        supported_plugins: Iterable[str] | None,
        device: BaseDevice,
    ):
        """
        Initialise client.

        Args:
            client_id: Identity derived from the query
            query: Identity tuple of the app process
            connection: Transport, or None for imported clients
            logger: Platform logger
            store: Application store
            supported_plugins: Plugin ids the client declares before the handshake
            device: Owning device

        Raises:
            ValueError: If client_id is empty or device is missing
        """
        if not client_id:
            raise ValueError("client_id cannot be empty")
        if device is None:
            raise ValueError("A client must be bound to a device")

        self.id = client_id
        self.query = query
        self.connection = connection
        self.logger = logger
        self.store = store
        self.device = device

        self.plugins: list[str] = list(supported_plugins or ())
        self.background_plugins: list[str] = []
        self.plugin_instances: dict[str, PluginInstance] = {}

        self.call_handler: CallHandler | None = None
        self.send_observer: SendObserver | None = None

        self.connected = False
        self.imported = False

    # ----------------------------------------------------------------
    # Identity
    # ----------------------------------------------------------------

    def resolve_device(self) -> BaseDevice:
        """Return the device this client runs on."""
        return self.device

    @property
    def app(self) -> str:
        return self.query.app

    # ----------------------------------------------------------------
    # Handshake
    # ----------------------------------------------------------------

    async def init(self) -> Client:
        """
        Live handshake.

        1. Listen to connection status changes
        2. Ask the client for its plugins and background plugins
        3. Initialise background plugins on the client side
        4. Start enabled and background plugins
        """
        # Clients may share an id, the mark must not
        mark = f"client-init:{id(self)}"
        self.logger.mark(mark)

        try:
            if self.connection is not None:
                self.connection.subscribe_to_events(self._on_connection_status)

            await self.load_plugins()
            await self.load_background_plugins()

            self.connected = True
            self._start_plugins(
                lambda plugin_id: plugin_id in self._enabled_plugin_ids()
                or self.is_background_plugin(plugin_id)
            )

            self.logger.track_time_since(mark, "client-init", {"client": self.id})
        finally:
            self.logger.discard_mark(mark)
        return self

    async def init_from_import(self, initial_states: dict[str, Any]) -> Client:
        """
        Archived handshake: no connection, every supported plugin is started
        with its imported state.

        Args:
            initial_states: Plugin id -> imported plugin state
        """
        self.imported = True
        self._start_plugins(lambda plugin_id: True, initial_states)
        self.logger.track("lifecycle", "client-import", {"client": self.id})
        return self

    async def load_plugins(self) -> list[str]:
        response = await self.raw_call("getPlugins", False, {})
        self.plugins = self._plugin_list("getPlugins", response)
        self.logger.debug(f"Client '{self.id}' supports plugins {self.plugins}")
        return self.plugins

    async def load_background_plugins(self) -> list[str]:
        response = await self.raw_call("getBackgroundPlugins", False, {})
        self.background_plugins = self._plugin_list("getBackgroundPlugins", response)
        for plugin_id in self.background_plugins:
            if self.supports_plugin(plugin_id):
                self.raw_send("init", {"plugin": plugin_id})
        return self.background_plugins

    def _plugin_list(self, method: str, response: Any) -> list[str]:
        """Extract the plugin ids from a handshake response.

        Raises:
            RuntimeError: If the response is not a mapping with a plugin list
        """
        if response is None:
            return []
        plugins = response.get("plugins", []) if isinstance(response, dict) else None
        if not isinstance(plugins, (list, tuple)):
            raise RuntimeError(
                f"Client '{self.id}' answered '{method}' with an invalid response: {response!r}"
            )
        return list(plugins)

    # ----------------------------------------------------------------
    # Plugins
    # ----------------------------------------------------------------

    def supports_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self.plugins

    def is_background_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self.background_plugins

    def start_plugin(
        self,
        definition: PluginDefinition,
        initial_state: dict[str, Any] | None = None,
    ) -> PluginInstance | None:
        """Start a client plugin if the client supports it."""
        if not self.supports_plugin(definition.id):
            return None
        if definition.id in self.plugin_instances:
            return self.plugin_instances[definition.id]

        instance = PluginInstance(definition, self, initial_state)
        instance.activate()
        self.plugin_instances[definition.id] = instance

        if self.connected and not self.is_background_plugin(definition.id):
            self.raw_send("init", {"plugin": definition.id})
        return instance

    def stop_plugin(self, plugin_id: str) -> bool:
        instance = self.plugin_instances.pop(plugin_id, None)
        if instance is None:
            return False
        instance.destroy()
        if self.connected and not self.is_background_plugin(plugin_id):
            self.raw_send("deinit", {"plugin": plugin_id})
        return True

    def _enabled_plugin_ids(self) -> tuple[str, ...]:
        return self.store.get_state().connections.enabled_plugins.get(self.query.app, ())

    def _start_plugins(
        self,
        should_start: Callable[[str], bool],
        initial_states: dict[str, Any] | None = None,
    ) -> None:
        catalog = self.store.get_state().plugins.client_plugins
        for plugin_id in self.plugins:
            definition = catalog.get(plugin_id)
            if definition is None or not should_start(plugin_id):
                continue
            initial_state = None
            if initial_states is not None:
                initial_state = initial_states.get(plugin_id, {})
            self.start_plugin(definition, initial_state)

    # ----------------------------------------------------------------
    # Communication
    # ----------------------------------------------------------------

    async def raw_call(self, method: str, from_plugin: bool, params: Any = None) -> Any:
        """Request/response call to the client process.

        Raises:
            RuntimeError: If no handler is installed and there is no connection
        """
        if self.call_handler is not None:
            return await self.call_handler(method, from_plugin, params)
        if self.connection is None:
            raise RuntimeError(f"Client '{self.id}' has no connection to call '{method}'")
        return await self.connection.send_expect_response(
            {"method": method, "params": params}
        )

    def raw_send(self, method: str, params: Any = None) -> None:
        """Fire-and-forget message to the client process.

        Raises:
            RuntimeError: If no observer is installed and there is no connection
        """
        if self.send_observer is not None:
            self.send_observer(method, params)
            return
        if self.connection is None:
            raise RuntimeError(f"Client '{self.id}' has no connection to send '{method}'")
        self.connection.send({"method": method, "params": params})

    async def call(self, plugin_id: str, method: str, params: Any = None) -> Any:
        """Call a method on a plugin's client-side counterpart."""
        return await self.raw_call(
            "execute", True, {"api": plugin_id, "method": method, "params": params}
        )

    def send(self, plugin_id: str, method: str, params: Any = None) -> None:
        self.raw_send("execute", {"api": plugin_id, "method": method, "params": params})

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------

    def _on_connection_status(self, status: ConnectionStatus) -> None:
        if status in (ConnectionStatus.CLOSED, ConnectionStatus.ERROR):
            self.logger.warning(f"Client '{self.id}' connection {status.value}")
            self.connected = False

    def disconnect(self) -> None:
        self.connected = False

    def destroy(self) -> None:
        self.disconnect()
        for plugin_id in list(self.plugin_instances):
            instance = self.plugin_instances.pop(plugin_id)
            instance.destroy()

    def __repr__(self) -> str:
        return f"<Client '{self.id}' (connected: {self.connected})>"
