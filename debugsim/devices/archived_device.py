# debugsim/devices/archived_device.py
"""Device restored from an exported session; never connected."""

from typing import Any

from debugsim.devices.base_device import BaseDevice, SupportsPlugin


class ArchivedDevice(BaseDevice):
    """
    An imported, offline device.

    Device plugins started on an archived device are seeded with the
    imported plugin states instead of talking to hardware.
    """

    is_archived = True

    def __init__(
        self,
        serial: str,
        device_type: str,
        title: str,
        os: str,
        supports_plugin: SupportsPlugin | None = None,
        plugin_states: dict[str, dict[str, Any]] | None = None,
    ):
        super().__init__(serial, device_type, title, os, supports_plugin)
        self.connected = False
        self.plugin_states = dict(plugin_states or {})

    def _initial_plugin_state(self, plugin_id: str) -> dict[str, Any] | None:
        return self.plugin_states.get(plugin_id)

    def display_title(self) -> str:
        return f"{self.title} (Imported)"
