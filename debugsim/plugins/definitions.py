# debugsim/plugins/definitions.py
"""
Plugin definitions registered into the store.

The harness treats plugins as opaque identifiers plus a kind; the store
splits them into device and client catalogs on registration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PluginKind(Enum):
    """Where a plugin runs."""

    CLIENT = "client"  # Talks to an app process
    DEVICE = "device"  # Talks to the device itself


@dataclass(frozen=True)
class PluginDetails:
    """Package-level metadata of a plugin, as seen by device predicates."""

    id: str
    title: str
    version: str
    plugin_type: str
    supported_os: tuple[str, ...] = ()


@dataclass(frozen=True)
class PluginDefinition:
    """A plugin known to the platform.

    Attributes:
        id: Unique plugin identifier
        title: Human-readable name
        kind: Client or device plugin
        supported_os: OS tags the plugin supports (empty = all)
        version: Plugin version string
        default_state: Initial state for new plugin instances
    """

    id: str
    title: str = ""
    kind: PluginKind = PluginKind.CLIENT
    supported_os: tuple[str, ...] = ()
    version: str = "1.0.0"
    default_state: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("plugin id must be a non-empty string")

    @property
    def is_device_plugin(self) -> bool:
        return self.kind == PluginKind.DEVICE

    @property
    def details(self) -> PluginDetails:
        return PluginDetails(
            id=self.id,
            title=self.title or self.id,
            version=self.version,
            plugin_type=self.kind.value,
            supported_os=self.supported_os,
        )

    def supports_os(self, os: str) -> bool:
        """Check whether the plugin runs on the given OS."""
        return not self.supported_os or os in self.supported_os


def client_plugin(plugin_id: str, title: str = "", **kwargs) -> PluginDefinition:
    """Shorthand for a client plugin definition."""
    return PluginDefinition(id=plugin_id, title=title, kind=PluginKind.CLIENT, **kwargs)


def device_plugin(plugin_id: str, title: str = "", **kwargs) -> PluginDefinition:
    """Shorthand for a device plugin definition."""
    return PluginDefinition(id=plugin_id, title=title, kind=PluginKind.DEVICE, **kwargs)
