# debugsim/plugins/side_effect.py
"""
Store side effects.

A side effect watches one slice of the state and runs a function whenever
that slice changes (compared by identity, states are immutable).
"""

import asyncio
from collections.abc import Callable
from typing import Any

from debugsim.logging_system import get_logger
from debugsim.state.store import Store

logger = get_logger(__name__)


def side_effect(
    store: Store,
    selector: Callable[[Any], Any],
    effect: Callable[[Any, Store], None],
    *,
    run_synchronously: bool = False,
    fire_immediately: bool = False,
    name: str = "side_effect",
) -> Callable[[], None]:
    """Subscribe ``effect`` to changes of ``selector(state)``.

    Args:
        store: Store to watch
        selector: Extracts the watched value from the state
        effect: Called with (selected value, store) after a change
        run_synchronously: Run inside the dispatch that caused the change.
            Otherwise the run is scheduled on the running event loop and
            several changes collapse into one run.
        fire_immediately: Run once right away with the current value
        name: Used in log messages

    Returns:
        Function that unsubscribes the side effect
    """
    last_value = selector(store.get_state())
    scheduled: asyncio.Handle | None = None

    def run() -> None:
        nonlocal scheduled
        scheduled = None
        try:
            effect(selector(store.get_state()), store)
        except Exception:
            logger.exception(f"Error while running side effect '{name}'")
            if run_synchronously:
                raise

    def on_change() -> None:
        nonlocal last_value, scheduled
        value = selector(store.get_state())
        if value is last_value:
            return
        last_value = value

        if run_synchronously:
            run()
            return
        if scheduled is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop for side effect '{name}', running inline")
            run()
            return
        scheduled = loop.call_soon(run)

    unsubscribe_store = store.subscribe(on_change)

    if fire_immediately:
        run()

    def unsubscribe() -> None:
        nonlocal scheduled
        if scheduled is not None:
            scheduled.cancel()
            scheduled = None
        unsubscribe_store()

    return unsubscribe
