# debugsim/plugins/plugin_manager.py
"""
Plugin manager side effect.

Drains the plugin command queue in the store:
- "load": install or replace a plugin definition, restarting running instances
- "switch": enable/disable a plugin for an app (client plugin) or for all
  devices (device plugin), starting or stopping instances accordingly
"""

from collections.abc import Callable

from debugsim.logging_system import PlatformLogger
from debugsim.plugins.side_effect import side_effect
from debugsim.state import actions
from debugsim.state.app_state import AppState, PluginCommand
from debugsim.state.store import Store


def plugin_manager(
    store: Store,
    logger: PlatformLogger,
    *,
    run_side_effects_synchronously: bool = False,
) -> Callable[[], None]:
    """Subscribe the plugin manager to ``store``.

    Args:
        store: Application store
        logger: Platform logger for usage tracking
        run_side_effects_synchronously: Process commands inside the dispatch
            that queued them (deterministic for tests)

    Returns:
        Function that unsubscribes the plugin manager
    """

    def process(commands: tuple[PluginCommand, ...], store: Store) -> None:
        if not commands:
            return
        for command in commands:
            if command.command == "load":
                _load_plugin(store, logger, command)
            elif command.command == "switch":
                _switch_plugin(store, logger, command)
            else:
                logger.warning(f"Unknown plugin command '{command.command}'")
        store.dispatch(actions.plugin_commands_processed(len(commands)))

    return side_effect(
        store,
        lambda state: state.plugins.plugin_commands,
        process,
        run_synchronously=run_side_effects_synchronously,
        fire_immediately=True,
        name="plugin_manager",
    )


def _load_plugin(store: Store, logger: PlatformLogger, command: PluginCommand) -> None:
    plugin = command.plugin
    store.dispatch(actions.plugin_loaded(plugin))

    state: AppState = store.get_state()
    if plugin.is_device_plugin:
        for device in state.connections.devices:
            if plugin.id in device.plugin_instances:
                device.unload_device_plugin(plugin.id)
                device.load_device_plugin(plugin)
    else:
        for client in state.connections.clients:
            if plugin.id in client.plugin_instances:
                client.stop_plugin(plugin.id)
                client.start_plugin(plugin)

    logger.track("usage", "plugin-manager:load", {"version": plugin.version}, plugin.id)


def _switch_plugin(store: Store, logger: PlatformLogger, command: PluginCommand) -> None:
    plugin = command.plugin
    connections = store.get_state().connections

    if plugin.is_device_plugin:
        enable = plugin.id not in connections.enabled_device_plugins
        store.dispatch(actions.set_device_plugin_enabled(plugin.id, enable))
        for device in store.get_state().connections.devices:
            if enable:
                device.load_device_plugin(plugin)
            else:
                device.unload_device_plugin(plugin.id)
        logger.track(
            "usage", "plugin-manager:switch", {"enabled": enable}, plugin.id
        )
        return

    app = command.selected_app
    if app is None and connections.selected_app is not None:
        selected = connections.get_client(connections.selected_app)
        app = selected.query.app if selected else None
    if app is None:
        logger.warning(f"Cannot switch plugin '{plugin.id}': no app selected")
        return

    enable = plugin.id not in connections.enabled_plugins.get(app, ())
    store.dispatch(actions.set_plugin_enabled(app, plugin.id, enable))
    for client in store.get_state().connections.clients:
        if client.query.app != app or not client.supports_plugin(plugin.id):
            continue
        if enable:
            client.start_plugin(plugin)
        else:
            client.stop_plugin(plugin.id)

    logger.track(
        "usage", "plugin-manager:switch", {"enabled": enable, "app": app}, plugin.id
    )
