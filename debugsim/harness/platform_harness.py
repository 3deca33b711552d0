# debugsim/harness/platform_harness.py
"""
Simulated platform harness - main orchestrator for tests.

Builds a fully in-memory platform:
- Application store with the plugin registry initialised
- Devices (live or archived) registered into the store
- Clients bound to those devices, handshaken through a protocol
  emulator instead of a real transport

Every operation is a coroutine; all work interleaves on one event loop, so
the counters and device/client lists need no locking.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from debugsim.clients.client import Client, SendObserver
from debugsim.clients.client_id import ClientQuery, client_id_for_query
from debugsim.config.config_loader import ConfigLoader, HarnessSettings
from debugsim.devices.archived_device import ArchivedDevice
from debugsim.devices.base_device import BaseDevice, SupportsPlugin
from debugsim.logging_system import PlatformLogger, get_instance, get_logger
from debugsim.network.protocol_emulator import OnSend, OutboundCallLog, ProtocolEmulator
from debugsim.network.stub_connection import create_stub_connection
from debugsim.plugins.definitions import PluginDefinition
from debugsim.plugins.platform_lib import initialize_platform_lib
from debugsim.plugins.plugin_manager import plugin_manager
from debugsim.state import actions
from debugsim.state.app_state import AppState, initial_app_state
from debugsim.state.store import Store, create_store

logger = get_logger(__name__)


@dataclass
class HarnessContext:
    """Result of ``init_with_device_and_client``."""

    harness: PlatformHarness
    device: BaseDevice
    client: Client


class PlatformHarness:
    """
    Orchestrator owning the store, devices and clients of one test.

    Example:
        >>> harness = PlatformHarness()
        >>> await harness.init(plugins=[client_plugin("Network")])
        >>> device = await harness.create_device(serial="abc")
        >>> client = await harness.create_client(device, name="myApp")
        >>> harness.get_state().connections.selected_app == client.id
        True
        >>> await harness.destroy()
    """

    def __init__(self, settings: HarnessSettings | None = None):
        """Initialise harness.

        Args:
            settings: Harness configuration (defaults when None)
        """
        self.settings = settings or HarnessSettings()

        self._store: Store | None = None
        self._logger: PlatformLogger | None = None
        self._unsubscribe_plugin_manager = None

        self._devices: list[BaseDevice] = []
        self._clients: list[Client] = []
        self._device_counter = 0
        self._client_counter = 0

    @classmethod
    def from_config(cls, config_dir=None) -> PlatformHarness:
        """Create a harness with settings read from ``harness.yml``."""
        return cls(ConfigLoader(config_dir).load_settings())

    # ----------------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------------

    @property
    def store(self) -> Store:
        if self._store is None:
            raise RuntimeError("PlatformHarness.init() must be awaited first")
        return self._store

    @property
    def logger(self) -> PlatformLogger:
        if self._logger is None:
            raise RuntimeError("PlatformHarness.init() must be awaited first")
        return self._logger

    @property
    def devices(self) -> tuple[BaseDevice, ...]:
        return tuple(self._devices)

    @property
    def clients(self) -> tuple[Client, ...]:
        return tuple(self._clients)

    @property
    def dispatch(self):
        return self.store.dispatch

    def get_state(self) -> AppState:
        return self.store.get_state()

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------

    async def init(self, plugins: Iterable[PluginDefinition] | None = None) -> PlatformHarness:
        """
        Build a fresh store and register plugins.

        1. Create the store
        2. Obtain the platform logger
        3. Subscribe the plugin manager (synchronous side effects by default)
        4. Bind the platform library to the store
        5. Dispatch plugin registration

        Args:
            plugins: Plugin definitions to register (default none)
        """
        if self._unsubscribe_plugin_manager is not None:
            logger.warning("Harness initialised twice, dropping the previous store")
            await self.destroy()

        self._store = create_store(initial_app_state(self.settings.enabled_device_plugins))
        self._logger = get_instance()
        self._unsubscribe_plugin_manager = plugin_manager(
            self._store,
            self._logger,
            run_side_effects_synchronously=self.settings.run_side_effects_synchronously,
        )
        initialize_platform_lib(self._store, self._logger)

        plugins = list(plugins or [])
        self._store.dispatch(actions.register_plugins(plugins))

        logger.info(f"Harness initialised with {len(plugins)} plugin(s)")
        return self

    async def destroy(self) -> None:
        """Unsubscribe the plugin manager. Devices and clients are left as is."""
        if self._unsubscribe_plugin_manager is not None:
            self._unsubscribe_plugin_manager()
            self._unsubscribe_plugin_manager = None
            logger.debug("Harness destroyed")

    async def init_with_device_and_client(
        self,
        app_options: dict[str, Any] | None = None,
        device_options: dict[str, Any] | None = None,
        client_options: dict[str, Any] | None = None,
    ) -> HarnessContext:
        """Run ``init``, ``create_device`` and ``create_client`` in one go.

        Args:
            app_options: Keyword arguments for init
            device_options: Keyword arguments for create_device
            client_options: Keyword arguments for create_client
        """
        await self.init(**(app_options or {}))
        device = await self.create_device(**(device_options or {}))
        client = await self.create_client(device, **(client_options or {}))
        return HarnessContext(harness=self, device=device, client=client)

    async def __aenter__(self) -> PlatformHarness:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.destroy()

    # ----------------------------------------------------------------
    # Devices
    # ----------------------------------------------------------------

    async def create_device(
        self,
        serial: str | None = None,
        supports_plugin: SupportsPlugin | None = None,
        archived: bool = False,
    ) -> BaseDevice:
        """
        Create and register a device.

        Args:
            serial: Device serial (default ``serial_<n>``)
            supports_plugin: Capability predicate (default supports everything)
            archived: Create an archived (imported) device

        Returns:
            The registered device
        """
        if serial is None:
            self._device_counter += 1
            serial = f"serial_{self._device_counter}"
        elif any(d.serial == serial for d in self._devices):
            logger.warning(f"Device serial '{serial}' is already used in this harness")

        predicate = supports_plugin or (lambda details: True)

        if archived:
            profile = self.settings.archived_device
            device = ArchivedDevice(
                serial, profile.device_type, profile.title, profile.os, predicate
            )
        else:
            profile = self.settings.live_device
            device = BaseDevice(
                serial, profile.device_type, profile.title, profile.os, predicate
            )

        return await self.load_device(device)

    async def load_device(self, device: BaseDevice) -> BaseDevice:
        """Register an existing device and start its enabled device plugins."""
        store = self.store
        store.dispatch(actions.register_device(device))

        state = store.get_state()
        device.load_device_plugins(
            state.plugins.device_plugins,
            state.connections.enabled_device_plugins,
        )
        self._devices.append(device)

        logger.debug(f"Loaded device {device!r}")
        return device

    # ----------------------------------------------------------------
    # Clients
    # ----------------------------------------------------------------

    async def create_client(
        self,
        device: BaseDevice,
        name: str | None = None,
        supported_plugins: Iterable[str] | None = None,
        background_plugins: Iterable[str] | None = None,
        on_send: OnSend | None = None,
        skip_register: bool = False,
        query: ClientQuery | None = None,
        sdk_version: int | None = None,
        send_observer: SendObserver | None = None,
    ) -> Client:
        """
        Create a client on ``device`` and run its handshake.

        Args:
            device: Owning device, created or loaded by this harness
            name: App name (default ``serial_<n>``)
            supported_plugins: Plugin ids reported by getPlugins
                (default every registered client plugin)
            background_plugins: Plugin ids reported by getBackgroundPlugins
            on_send: Raw call interceptor, see ProtocolEmulator
            skip_register: Do not announce the client to the store
            query: Explicit identity (overrides name and sdk_version)
            sdk_version: SDK version of a synthesized query
            send_observer: Outbound message observer (default OutboundCallLog)

        Returns:
            The client, after its handshake completed

        Raises:
            ValueError: If device was not created or loaded by this harness
        """
        if not any(d is device for d in self._devices):
            raise ValueError("The provided device does not exist")

        store = self.store

        if query is None:
            if name is None:
                self._client_counter += 1
                name = f"serial_{self._client_counter}"
            query = ClientQuery(
                app=name,
                os=device.os,
                device=device.title,
                device_id=device.serial,
                sdk_version=self.settings.sdk_version if sdk_version is None else sdk_version,
            )

        client_id = client_id_for_query(query)

        if supported_plugins is None:
            supported_plugins = [p.id for p in store.get_state().plugins.client_plugins.values()]
        supported_plugins = list(dict.fromkeys(supported_plugins))

        client = Client(
            client_id,
            query,
            None if device.is_archived else create_stub_connection(),
            self.logger,
            store,
            supported_plugins,
            device,
        )
        client.call_handler = ProtocolEmulator(supported_plugins, background_plugins, on_send)
        client.send_observer = send_observer or OutboundCallLog()

        if not device.is_archived:
            await client.init()
        else:
            await client.init_from_import({})

        # Announced clients become the selected app
        if not skip_register:
            store.dispatch(actions.new_client(client))

        self._clients.append(client)

        logger.debug(f"Created client {client!r}")
        return client

    def __repr__(self) -> str:
        return (
            f"<PlatformHarness devices={len(self._devices)} "
            f"clients={len(self._clients)} "
            f"initialised={self._store is not None}>"
        )
