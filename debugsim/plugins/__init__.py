"""Plugin definitions, plugin manager side effect and platform library."""

from debugsim.plugins.definitions import (
    PluginDefinition,
    PluginDetails,
    PluginKind,
    client_plugin,
    device_plugin,
)

__all__ = [
    "PluginDefinition",
    "PluginDetails",
    "PluginKind",
    "client_plugin",
    "device_plugin",
]
