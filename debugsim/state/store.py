# debugsim/state/store.py
"""
Central application state store.

Single source of truth for the simulated platform: devices, clients,
plugin catalogs and selection. State is immutable; every change goes
through ``dispatch`` and a reducer, and listeners are notified after
each dispatch.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from debugsim.logging_system import get_logger

logger = get_logger(__name__)

Reducer = Callable[[Any, "Action"], Any]
Listener = Callable[[], None]


@dataclass(frozen=True)
class Action:
    """A state change request.

    Attributes:
        type: Action type identifier (e.g. "REGISTER_DEVICE")
        payload: Action-specific data
    """

    type: str
    payload: Any = None


class Store:
    """
    Dispatch/query surface over a reducer.

    ``dispatch`` is synchronous: the reducer runs, the new state is stored,
    then every listener subscribed at that moment is called. Listeners may
    dispatch again; nested dispatches complete before the outer one returns.

    Example:
        >>> store = create_store()
        >>> store.dispatch(register_plugins([]))
        >>> store.get_state().plugins.client_plugins
        {}
    """

    def __init__(self, reducer: Reducer, initial_state: Any = None):
        """Initialise store.

        Args:
            reducer: Function (state, action) -> new state
            initial_state: Starting state (None lets the reducer build it)
        """
        self._reducer = reducer
        self._listeners: list[Listener] = []
        self._dispatch_depth = 0
        self._state = reducer(initial_state, Action("@@INIT"))

    def get_state(self) -> Any:
        """Return the current state snapshot."""
        return self._state

    def dispatch(self, action: Action) -> Action:
        """Apply an action and notify listeners.

        Args:
            action: Action to apply

        Returns:
            The dispatched action

        Raises:
            ValueError: If action is not an Action
            RuntimeError: If called from inside a reducer
        """
        if not isinstance(action, Action):
            raise ValueError(f"dispatch expects an Action, got {type(action).__name__}")
        if self._dispatch_depth:
            raise RuntimeError(f"Reducers may not dispatch actions ({action.type})")

        self._dispatch_depth += 1
        try:
            self._state = self._reducer(self._state, action)
        finally:
            self._dispatch_depth -= 1

        logger.debug(f"Dispatched {action.type}")

        for listener in list(self._listeners):
            listener()

        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every dispatch.

        Returns:
            Function removing the listener (safe to call more than once)
        """
        if not callable(listener):
            raise ValueError("listener must be callable")

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"<Store listeners={len(self._listeners)}>"


def create_store(initial_state: Any = None) -> Store:
    """Create a store over the root reducer."""
    from debugsim.state.reducers import root_reducer

    return Store(root_reducer, initial_state)
