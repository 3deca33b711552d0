# debugsim/state/reducers.py
"""
Reducers for the application state.

Each reducer takes the current sub-state and an action and returns either
the same object (action not relevant) or a new object. Unknown action
types leave the state untouched.
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType

from debugsim.config.config_loader import DEFAULT_ENABLED_DEVICE_PLUGINS
from debugsim.logging_system import get_logger
from debugsim.state import actions
from debugsim.state.app_state import (
    AppState,
    ConnectionsState,
    PluginsState,
    initial_app_state,
)
from debugsim.state.store import Action

logger = get_logger(__name__)


# ----------------------------------------------------------------
# Plugins
# ----------------------------------------------------------------


def plugins_reducer(state: PluginsState, action: Action) -> PluginsState:
    if action.type == actions.REGISTER_PLUGINS:
        device_plugins = {}
        client_plugins = {}
        for plugin in action.payload:
            target = device_plugins if plugin.is_device_plugin else client_plugins
            if plugin.id in device_plugins or plugin.id in client_plugins:
                logger.warning(f"Plugin '{plugin.id}' registered twice, keeping the last one")
                device_plugins.pop(plugin.id, None)
                client_plugins.pop(plugin.id, None)
            target[plugin.id] = plugin
        return replace(
            state,
            device_plugins=MappingProxyType(device_plugins),
            client_plugins=MappingProxyType(client_plugins),
        )

    if action.type == actions.PLUGIN_LOADED:
        plugin = action.payload
        device_plugins = {k: v for k, v in state.device_plugins.items() if k != plugin.id}
        client_plugins = {k: v for k, v in state.client_plugins.items() if k != plugin.id}
        if plugin.is_device_plugin:
            device_plugins[plugin.id] = plugin
        else:
            client_plugins[plugin.id] = plugin
        return replace(
            state,
            device_plugins=MappingProxyType(device_plugins),
            client_plugins=MappingProxyType(client_plugins),
        )

    if action.type in (actions.LOAD_PLUGIN, actions.SWITCH_PLUGIN):
        return replace(state, plugin_commands=state.plugin_commands + (action.payload,))

    if action.type == actions.PLUGIN_COMMANDS_PROCESSED:
        return replace(state, plugin_commands=state.plugin_commands[action.payload :])

    return state


# ----------------------------------------------------------------
# Connections
# ----------------------------------------------------------------


def connections_reducer(state: ConnectionsState, action: Action) -> ConnectionsState:
    if action.type == actions.REGISTER_DEVICE:
        device = action.payload
        devices = list(state.devices)
        for index, existing in enumerate(devices):
            if existing.serial == device.serial:
                logger.warning(
                    f"Device with serial '{device.serial}' already registered, replacing it"
                )
                devices[index] = device
                break
        else:
            devices.append(device)

        selected_device = state.selected_device
        if selected_device is None or selected_device.serial == device.serial:
            selected_device = device

        return replace(state, devices=tuple(devices), selected_device=selected_device)

    if action.type == actions.NEW_CLIENT:
        client = action.payload
        clients = [c for c in state.clients if c.id != client.id]
        if len(clients) != len(state.clients):
            logger.warning(f"Client '{client.id}' announced twice, replacing it")
        clients.append(client)
        return replace(
            state,
            clients=tuple(clients),
            selected_app=client.id,
            selected_device=client.resolve_device(),
        )

    if action.type == actions.CLIENT_REMOVED:
        client_id = action.payload
        clients = tuple(c for c in state.clients if c.id != client_id)
        if state.selected_app == client_id:
            return replace(state, clients=clients, selected_app=None, selected_plugin=None)
        return replace(state, clients=clients)

    if action.type == actions.SELECT_DEVICE:
        device = action.payload
        selected_app = state.selected_app
        selected_client = state.get_client(selected_app) if selected_app else None
        if selected_client is not None and selected_client.resolve_device() is not device:
            selected_app = None
        return replace(state, selected_device=device, selected_app=selected_app)

    if action.type == actions.SELECT_PLUGIN:
        payload = action.payload
        selected_app = payload["selected_app"] or state.selected_app
        selected_device = payload["selected_device"]
        if selected_device is None and payload["selected_app"]:
            client = state.get_client(payload["selected_app"])
            selected_device = client.resolve_device() if client else None
        return replace(
            state,
            selected_plugin=payload["selected_plugin"],
            selected_app=selected_app,
            selected_device=selected_device or state.selected_device,
            deep_link_payload=payload["deep_link_payload"],
        )

    if action.type == actions.SET_PLUGIN_ENABLED:
        app = action.payload["app"]
        plugin_id = action.payload["plugin_id"]
        current = state.enabled_plugins.get(app, ())
        if action.payload["enabled"]:
            if plugin_id in current:
                return state
            updated = current + (plugin_id,)
        else:
            if plugin_id not in current:
                return state
            updated = tuple(p for p in current if p != plugin_id)
        enabled_plugins = dict(state.enabled_plugins)
        enabled_plugins[app] = updated
        return replace(state, enabled_plugins=MappingProxyType(enabled_plugins))

    if action.type == actions.SET_DEVICE_PLUGIN_ENABLED:
        plugin_id = action.payload["plugin_id"]
        if action.payload["enabled"]:
            enabled = state.enabled_device_plugins | {plugin_id}
        else:
            enabled = state.enabled_device_plugins - {plugin_id}
        if enabled == state.enabled_device_plugins:
            return state
        return replace(state, enabled_device_plugins=enabled)

    return state


# ----------------------------------------------------------------
# Root
# ----------------------------------------------------------------


def root_reducer(state: AppState | None, action: Action) -> AppState:
    if state is None:
        state = initial_app_state(DEFAULT_ENABLED_DEVICE_PLUGINS)

    plugins = plugins_reducer(state.plugins, action)
    connections = connections_reducer(state.connections, action)

    if plugins is state.plugins and connections is state.connections:
        return state
    return AppState(plugins=plugins, connections=connections)
