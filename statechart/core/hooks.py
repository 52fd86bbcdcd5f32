# statechart/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from statechart.core.states import StateNode

logger = logging.getLogger(__name__)


@runtime_checkable
class HookProtocol(Protocol):
    """
    Observer of machine lifecycle events. Any subset of the methods may be
    implemented; missing ones are skipped.
    """

    def on_enter(self, state: "StateNode") -> None:
        ...

    def on_exit(self, state: "StateNode") -> None:
        ...

    def on_error(self, error: Exception) -> None:
        ...


class HookManager:
    """
    Manages the registration and execution of hooks that listen to state machine
    lifecycle events (on_enter, on_exit, on_error). Users can attach logging,
    monitoring, or custom side effects without altering core logic.

    A hook that raises is logged at ERROR and skipped; the remaining hooks still run.
    """

    def __init__(self, hooks: Optional[List[HookProtocol]] = None) -> None:
        self._hooks: List[HookProtocol] = list(hooks or [])

    @property
    def hooks(self) -> List[HookProtocol]:
        return list(self._hooks)

    def register_hook(self, hook: HookProtocol) -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some of the HookProtocol methods.
        """
        self._hooks.append(hook)

    def execute_on_enter(self, state: "StateNode") -> None:
        """Run all hooks' on_enter logic when entering a state."""
        self._invoke("on_enter", state)

    def execute_on_exit(self, state: "StateNode") -> None:
        """Run all hooks' on_exit logic when exiting a state."""
        self._invoke("on_exit", state)

    def execute_on_error(self, error: Exception) -> None:
        """Run all hooks' on_error logic when an exception occurs."""
        self._invoke("on_error", error)

    def _invoke(self, method: str, argument: object) -> None:
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            try:
                callback(argument)
            except Exception:
                logger.exception("Hook %r failed in %s", hook, method)
