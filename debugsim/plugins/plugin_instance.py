# debugsim/plugins/plugin_instance.py
"""Running plugin bound to a device or client."""

from typing import Any

from debugsim.plugins.definitions import PluginDefinition


class PluginInstance:
    """
    A plugin started for one target (device or client).

    Holds the plugin's state, seeded from the definition's default state and
    any imported initial state.
    """

    def __init__(
        self,
        definition: PluginDefinition,
        target: Any,
        initial_state: dict[str, Any] | None = None,
    ):
        self.definition = definition
        self.target = target
        self.state: dict[str, Any] = dict(definition.default_state)
        if initial_state:
            self.state.update(initial_state)
        self.imported = initial_state is not None
        self.active = False
        self.destroyed = False

    @property
    def id(self) -> str:
        return self.definition.id

    def activate(self) -> None:
        if self.destroyed:
            raise RuntimeError(f"Plugin '{self.id}' was already destroyed")
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def destroy(self) -> None:
        self.active = False
        self.destroyed = True

    def __repr__(self) -> str:
        return f"<PluginInstance '{self.id}' (active: {self.active})>"
