"""Application state store, state shape and reducers."""

from debugsim.state.app_state import (
    AppState,
    ConnectionsState,
    PluginCommand,
    PluginsState,
    initial_app_state,
)
from debugsim.state.store import Action, Store, create_store

__all__ = [
    "Action",
    "AppState",
    "ConnectionsState",
    "PluginCommand",
    "PluginsState",
    "Store",
    "create_store",
    "initial_app_state",
]
