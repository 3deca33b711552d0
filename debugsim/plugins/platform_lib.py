# debugsim/plugins/platform_lib.py
"""
Process-wide platform library binding.

Plugins reach the platform through a single library object bound to the
current store and logger. The harness (re)binds it on every init.
"""

from __future__ import annotations

from typing import Any

from debugsim.clients.client import Client
from debugsim.devices.base_device import BaseDevice
from debugsim.logging_system import PlatformLogger
from debugsim.state import actions
from debugsim.state.store import Store


class PlatformLib:
    """Platform capabilities exposed to plugins."""

    def __init__(self, store: Store, logger: PlatformLogger):
        self.store = store
        self.logger = logger

    def select_plugin(
        self,
        target: Client | BaseDevice,
        plugin_id: str,
        deep_link: Any = None,
    ) -> None:
        """Select a plugin on a client or device, optionally with a deep link."""
        if isinstance(target, Client):
            self.store.dispatch(
                actions.select_plugin(
                    plugin_id,
                    selected_app=target.id,
                    selected_device=target.resolve_device(),
                    deep_link_payload=deep_link,
                )
            )
        else:
            self.store.dispatch(
                actions.select_plugin(
                    plugin_id, selected_device=target, deep_link_payload=deep_link
                )
            )

    def is_plugin_available(
        self,
        device: BaseDevice,
        client: Client | None,
        plugin_id: str,
    ) -> bool:
        """Check whether ``plugin_id`` can run on the client or device."""
        plugins = self.store.get_state().plugins
        if plugin_id in plugins.device_plugins:
            return device.supports_plugin(plugins.device_plugins[plugin_id].details)
        if client is not None and plugin_id in plugins.client_plugins:
            return client.supports_plugin(plugin_id)
        return False

    def enable_plugin(self, target: Client | BaseDevice, plugin_id: str) -> bool:
        """Enable a plugin if it is registered and not enabled yet.

        Returns:
            True if a switch was queued
        """
        state = self.store.get_state()
        connections = state.connections
        if plugin_id in state.plugins.device_plugins:
            if plugin_id in connections.enabled_device_plugins:
                return False
            self.store.dispatch(actions.switch_plugin(state.plugins.device_plugins[plugin_id]))
            return True
        if isinstance(target, Client) and plugin_id in state.plugins.client_plugins:
            if plugin_id in connections.enabled_plugins.get(target.query.app, ()):
                return False
            self.store.dispatch(
                actions.switch_plugin(
                    state.plugins.client_plugins[plugin_id], selected_app=target.query.app
                )
            )
            return True
        self.logger.warning(f"Cannot enable unknown plugin '{plugin_id}'")
        return False

    def log(self, message: str) -> None:
        self.logger.info(message)


_platform_lib: PlatformLib | None = None


def initialize_platform_lib(store: Store, logger: PlatformLogger) -> PlatformLib:
    """Bind the process-wide platform library to ``store`` and ``logger``."""
    global _platform_lib
    _platform_lib = PlatformLib(store, logger)
    return _platform_lib


def get_platform_lib() -> PlatformLib:
    """Return the bound platform library.

    Raises:
        RuntimeError: If initialize_platform_lib was never called
    """
    if _platform_lib is None:
        raise RuntimeError("Platform library has not been initialised")
    return _platform_lib
