# debugsim/state/app_state.py
"""
Immutable application state shape.

Reducers never mutate these objects; they build new ones with
``dataclasses.replace``. Side effects compare sub-states by identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from debugsim.clients.client import Client
    from debugsim.devices.base_device import BaseDevice
    from debugsim.plugins.definitions import PluginDefinition


@dataclass(frozen=True)
class PluginCommand:
    """A queued plugin operation processed by the plugin manager.

    Attributes:
        command: "load" (install/replace a definition) or "switch" (toggle enabled)
        plugin: Definition to load or switch
        selected_app: Client app a client plugin is switched for (None = selected app)
    """

    command: str
    plugin: PluginDefinition
    selected_app: str | None = None


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class PluginsState:
    """Plugin catalogs.

    Attributes:
        device_plugins: Registered device plugins by id
        client_plugins: Registered client plugins by id
        plugin_commands: Commands waiting for the plugin manager
    """

    device_plugins: Mapping[str, PluginDefinition] = field(default_factory=_empty_mapping)
    client_plugins: Mapping[str, PluginDefinition] = field(default_factory=_empty_mapping)
    plugin_commands: tuple[PluginCommand, ...] = ()


@dataclass(frozen=True)
class ConnectionsState:
    """Devices, clients and what is currently selected.

    Attributes:
        devices: Registered devices, registration order
        clients: Announced clients, announcement order
        selected_device: Device shown in the UI
        selected_app: Id of the selected client
        selected_plugin: Id of the selected plugin
        deep_link_payload: Payload passed along with the last plugin selection
        enabled_plugins: Enabled client plugin ids per app name
        enabled_device_plugins: Enabled device plugin ids
    """

    devices: tuple[BaseDevice, ...] = ()
    clients: tuple[Client, ...] = ()
    selected_device: BaseDevice | None = None
    selected_app: str | None = None
    selected_plugin: str | None = None
    deep_link_payload: Any = None
    enabled_plugins: Mapping[str, tuple[str, ...]] = field(default_factory=_empty_mapping)
    enabled_device_plugins: frozenset[str] = frozenset()

    def get_client(self, client_id: str) -> Client | None:
        for client in self.clients:
            if client.id == client_id:
                return client
        return None

    def get_device(self, serial: str) -> BaseDevice | None:
        for device in self.devices:
            if device.serial == serial:
                return device
        return None


@dataclass(frozen=True)
class AppState:
    """Root state."""

    plugins: PluginsState = field(default_factory=PluginsState)
    connections: ConnectionsState = field(default_factory=ConnectionsState)


def initial_app_state(enabled_device_plugins=()) -> AppState:
    """Build a fresh root state.

    Args:
        enabled_device_plugins: Device plugin ids enabled from the start
    """
    return AppState(
        plugins=PluginsState(),
        connections=ConnectionsState(
            enabled_device_plugins=frozenset(enabled_device_plugins)
        ),
    )
