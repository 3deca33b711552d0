# debugsim/devices/base_device.py
"""
Simulated device (phone or emulator).

Provides:
- Device identity (serial, type, title, OS)
- Plugin capability predicate
- Device plugin instances
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from debugsim.logging_system import get_logger
from debugsim.plugins.definitions import PluginDefinition, PluginDetails
from debugsim.plugins.plugin_instance import PluginInstance

SupportsPlugin = Callable[[PluginDetails], bool]


class BaseDevice:
    """
    A device registered with the platform.

    Devices are responsible for:
    - Declaring which plugins they can run (``supports_plugin``)
    - Running enabled device plugins
    - Anchoring the clients running on them

    Example:
        >>> device = BaseDevice("serial_1", "physical", "MockAndroidDevice", "Android")
        >>> device.supports_plugin(device_plugin("DeviceLogs").details)
        True
    """

    is_archived = False

    def __init__(
        self,
        serial: str,
        device_type: str,
        title: str,
        os: str,
        supports_plugin: SupportsPlugin | None = None,
    ):
        """
        Initialise device.

        Args:
            serial: Unique device serial
            device_type: "physical", "emulator", ...
            title: Human-readable device name
            os: Operating system tag ("Android", "iOS", ...)
            supports_plugin: Capability predicate overriding the OS check
        """
        if not serial or not isinstance(serial, str):
            raise ValueError("serial must be a non-empty string")

        self.serial = serial
        self.device_type = device_type
        self.title = title
        self.os = os
        self._supports_plugin = supports_plugin

        self.connected = True
        self.plugin_instances: dict[str, PluginInstance] = {}

        self.logger = get_logger(self.__class__.__name__, component=serial)
        self.logger.debug(
            f"Initialised {device_type} device '{title}' (serial: {serial}, os: {os})"
        )

    # ----------------------------------------------------------------
    # Plugins
    # ----------------------------------------------------------------

    def supports_plugin(self, details: PluginDetails) -> bool:
        """Check whether a device plugin can run on this device."""
        if self._supports_plugin is not None:
            return bool(self._supports_plugin(details))
        return not details.supported_os or self.os in details.supported_os

    def load_device_plugins(
        self,
        device_plugins: Mapping[str, PluginDefinition],
        enabled_device_plugins: Iterable[str],
    ) -> list[str]:
        """
        Start every enabled device plugin this device supports.

        Args:
            device_plugins: Device plugin catalog by id
            enabled_device_plugins: Ids of enabled device plugins

        Returns:
            Ids of the plugins that are running afterwards
        """
        enabled = set(enabled_device_plugins)
        for plugin in device_plugins.values():
            if plugin.id in enabled:
                self.load_device_plugin(plugin)
        return list(self.plugin_instances)

    def load_device_plugin(self, plugin: PluginDefinition) -> PluginInstance | None:
        """Start a device plugin if supported; returns the running instance."""
        if not self.supports_plugin(plugin.details):
            self.logger.debug(f"Device '{self.serial}' does not support '{plugin.id}'")
            return None
        if plugin.id in self.plugin_instances:
            return self.plugin_instances[plugin.id]

        instance = PluginInstance(plugin, self, self._initial_plugin_state(plugin.id))
        instance.activate()
        self.plugin_instances[plugin.id] = instance
        self.logger.debug(f"Loaded device plugin '{plugin.id}' on '{self.serial}'")
        return instance

    def unload_device_plugin(self, plugin_id: str) -> bool:
        instance = self.plugin_instances.pop(plugin_id, None)
        if instance is None:
            return False
        instance.destroy()
        return True

    def _initial_plugin_state(self, plugin_id: str) -> dict[str, Any] | None:
        return None

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------

    def display_title(self) -> str:
        return self.title if self.connected else f"{self.title} (Offline)"

    def disconnect(self) -> None:
        self.connected = False
        self.logger.info(f"Device '{self.serial}' disconnected")

    def destroy(self) -> None:
        self.disconnect()
        for plugin_id in list(self.plugin_instances):
            self.unload_device_plugin(plugin_id)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"'{self.serial}' "
            f"({self.device_type}, {self.os}, connected: {self.connected})>"
        )
