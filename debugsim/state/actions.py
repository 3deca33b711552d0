# debugsim/state/actions.py
"""Action types and creators understood by the root reducer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from debugsim.state.app_state import PluginCommand
from debugsim.state.store import Action

if TYPE_CHECKING:
    from debugsim.clients.client import Client
    from debugsim.devices.base_device import BaseDevice
    from debugsim.plugins.definitions import PluginDefinition

REGISTER_PLUGINS = "REGISTER_PLUGINS"
LOAD_PLUGIN = "LOAD_PLUGIN"
SWITCH_PLUGIN = "SWITCH_PLUGIN"
PLUGIN_COMMANDS_PROCESSED = "PLUGIN_COMMANDS_PROCESSED"
PLUGIN_LOADED = "PLUGIN_LOADED"
REGISTER_DEVICE = "REGISTER_DEVICE"
NEW_CLIENT = "NEW_CLIENT"
CLIENT_REMOVED = "CLIENT_REMOVED"
SELECT_DEVICE = "SELECT_DEVICE"
SELECT_PLUGIN = "SELECT_PLUGIN"
SET_PLUGIN_ENABLED = "SET_PLUGIN_ENABLED"
SET_DEVICE_PLUGIN_ENABLED = "SET_DEVICE_PLUGIN_ENABLED"


def register_plugins(plugins: Iterable[PluginDefinition]) -> Action:
    return Action(REGISTER_PLUGINS, tuple(plugins))


def load_plugin(plugin: PluginDefinition) -> Action:
    return Action(LOAD_PLUGIN, PluginCommand("load", plugin))


def switch_plugin(plugin: PluginDefinition, selected_app: str | None = None) -> Action:
    return Action(SWITCH_PLUGIN, PluginCommand("switch", plugin, selected_app))


def plugin_commands_processed(count: int) -> Action:
    return Action(PLUGIN_COMMANDS_PROCESSED, count)


def plugin_loaded(plugin: PluginDefinition) -> Action:
    return Action(PLUGIN_LOADED, plugin)


def register_device(device: BaseDevice) -> Action:
    return Action(REGISTER_DEVICE, device)


def new_client(client: Client) -> Action:
    return Action(NEW_CLIENT, client)


def client_removed(client_id: str) -> Action:
    return Action(CLIENT_REMOVED, client_id)


def select_device(device: BaseDevice) -> Action:
    return Action(SELECT_DEVICE, device)


def select_plugin(
    plugin_id: str | None,
    selected_app: str | None = None,
    selected_device: BaseDevice | None = None,
    deep_link_payload: Any = None,
) -> Action:
    return Action(
        SELECT_PLUGIN,
        {
            "selected_plugin": plugin_id,
            "selected_app": selected_app,
            "selected_device": selected_device,
            "deep_link_payload": deep_link_payload,
        },
    )


def set_plugin_enabled(app: str, plugin_id: str, enabled: bool) -> Action:
    return Action(
        SET_PLUGIN_ENABLED, {"app": app, "plugin_id": plugin_id, "enabled": enabled}
    )


def set_device_plugin_enabled(plugin_id: str, enabled: bool) -> Action:
    return Action(SET_DEVICE_PLUGIN_ENABLED, {"plugin_id": plugin_id, "enabled": enabled})
