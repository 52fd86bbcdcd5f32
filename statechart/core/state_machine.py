# statechart/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from statechart.core.errors import (
    AlreadyRunningError,
    ConfigurationError,
    NotRunningError,
    ReentrantDispatchError,
    UnknownEventError,
)
from statechart.core.events import ENTRY, EXIT, INIT, Candidate, EventSpec
from statechart.core.hooks import HookManager, HookProtocol
from statechart.core.states import StateNode, StateTree, build_tree
from statechart.core.validations import Validator
from statechart.interfaces.types import StateID, StatesConfig
from statechart.runtime.graph import compute_transition, resolve_init_chain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Step:
    """One lifecycle handler to fire while executing a transition."""

    event_name: str
    state: StateNode
    candidate: Optional[Candidate]


class Statechart:
    """
    A hierarchical state machine driven by named events.

    The machine owns a single mutable pointer, the current leaf. Every
    dispatch is planned completely (lookup, guard selection, validation and
    path computation) before the first callback runs, so a rejected dispatch
    leaves the machine exactly as it was.
    """

    def __init__(
        self,
        states: StatesConfig,
        initial_state: StateID,
        hooks: Optional[Union[HookManager, Sequence[HookProtocol]]] = None,
        validator: Optional[Validator] = None,
    ) -> None:
        """
        :param states: Mapping of root-level state name to state configuration.
        :param initial_state: Name of the state the machine starts in.
        :param hooks: A HookManager, or a list of hook objects to wrap in one.
        :param validator: Optional validator for the reserved-event rules.
        :raises ConfigurationError: If the state configuration is malformed.
        :raises NameNotFoundError: If `initial_state` names no state.
        """
        self._tree = build_tree(states)
        self._initial_state = self._tree.find(initial_state)
        self._validator = validator or Validator()
        self._hooks = hooks if isinstance(hooks, HookManager) else HookManager(hooks)
        self._current_state: Optional[StateNode] = None
        self._started = False
        self._in_flight = False

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        hooks: Optional[Union[HookManager, Sequence[HookProtocol]]] = None,
        validator: Optional[Validator] = None,
    ) -> "Statechart":
        """
        Build a machine from a single mapping holding ``states`` and ``initial_state``.

        ``initialState`` is accepted as an alias of ``initial_state``. `hooks`
        and `validator` are passed through to the constructor.
        """
        initial = config.get("initial_state", config.get("initialState"))
        if initial is None:
            raise ConfigurationError("Configuration must name an 'initial_state'")
        if "states" not in config:
            raise ConfigurationError("Configuration must contain 'states'")
        return cls(config["states"], initial, hooks=hooks, validator=validator)

    def __repr__(self) -> str:
        current = self._current_state.name if self._current_state else None
        return f"Statechart(current={current!r}, running={self._started})"

    @property
    def tree(self) -> StateTree:
        return self._tree

    @property
    def hooks(self) -> HookManager:
        return self._hooks

    @property
    def is_running(self) -> bool:
        return self._started

    def current_state(self) -> Optional[StateNode]:
        """The current leaf, or None before `run()` positioned the machine."""
        return self._current_state

    def is_in(self, name: StateID) -> bool:
        """True if the named state is the current leaf or one of its ancestors."""
        return any(node.name == name for node in self.active_states())

    def active_states(self) -> List[StateNode]:
        """Active states from the root level down to the current leaf."""
        if self._current_state is None:
            return []
        return list(self._current_state.path)

    def validate(self) -> List[str]:
        """Report configuration problems without raising."""
        return self._validator.validate_tree(self._tree)

    def run(self) -> None:
        """
        Start the machine: enter the initial state and descend through its ``init`` chain.

        Entry handlers fire once per state, shallowest first, from the root
        level down to the resulting leaf. If the descent is rejected the
        machine stays positioned on the initial state, no entry handler fires
        and it is not marked as started.

        :raises AlreadyRunningError: If the machine was already started.
        :raises ReentrantDispatchError: If called from a callback of an in-flight dispatch.
        """
        try:
            with self._dispatching("run"):
                if self._started:
                    raise AlreadyRunningError("State machine is already running")

                self._current_state = self._initial_state
                entering = list(self._initial_state.path)
                entering.extend(resolve_init_chain(self._tree, self._initial_state, self._validator))
                steps = [self._plan(ENTRY, node) for node in entering]

                logger.debug("Starting in %s", entering[-1].name)
                self._fire(steps)
                self._current_state = entering[-1]
                self._started = True
        except Exception as error:
            self._hooks.execute_on_error(error)
            raise

    def dispatch(self, event_name: str) -> None:
        """
        Deliver an event to the current leaf, bubbling up through its ancestors.

        :param event_name: Custom event name or one of ``init``, ``entry``, ``exit``.
        :raises NotRunningError: If `run()` has not completed.
        :raises UnknownEventError: If no active state defines the event (``init`` is a silent no-op).
        :raises ReentrantDispatchError: If called from a callback of an in-flight dispatch.
        :raises ValidationError: If the selected specification breaks a reserved-event rule.
        :raises NameNotFoundError: If the transition targets an unknown state.
        """
        try:
            with self._dispatching(event_name):
                self._dispatch(event_name)
        except Exception as error:
            self._hooks.execute_on_error(error)
            raise

    def _dispatch(self, event_name: str) -> None:
        if not self._started:
            raise NotRunningError(f"Cannot dispatch '{event_name}' before the machine is running")

        found = self._bubble(event_name)
        if found is None:
            if event_name == INIT:
                logger.debug("No 'init' defined above %s; ignoring", self._current_state.name)
                return
            raise UnknownEventError(event_name, self._current_state.name)

        owner, spec = found
        candidate = spec.select()
        self._validator.validate_candidate(spec, candidate, owner.name)
        if candidate is None:
            logger.debug("No guard passed for '%s' on %s", event_name, owner.name)
            return

        if candidate.target is None:
            logger.debug("Handling '%s' on %s without transition", event_name, owner.name)
            if candidate.action is not None:
                candidate.action()
            return

        path = compute_transition(self._tree, self._current_state, candidate.target, self._validator)
        steps = [self._plan(EXIT, node) for node in path.exit_path]
        steps.extend(self._plan(ENTRY, node) for node in path.entry_path)

        logger.debug("'%s' moves %s -> %s", event_name, path.source.name, path.leaf.name)
        self._fire(steps)
        self._current_state = path.leaf
        if candidate.action is not None:
            candidate.action()

    def _bubble(self, event_name: str) -> Optional[Tuple[StateNode, EventSpec]]:
        """Find the nearest active state defining `event_name`, starting at the leaf."""
        current: Optional[StateNode] = self._current_state
        while current is not None:
            spec = current.lookup(event_name)
            if spec is not None:
                return current, spec
            current = current.parent
        return None

    def _plan(self, event_name: str, state: StateNode) -> _Step:
        """Select and validate a state's own `entry`/`exit` handler; no bubbling."""
        spec = state.lookup(event_name)
        if spec is None:
            return _Step(event_name, state, None)
        candidate = spec.select()
        self._validator.validate_candidate(spec, candidate, state.name)
        return _Step(event_name, state, candidate)

    def _fire(self, steps: List[_Step]) -> None:
        for step in steps:
            logger.debug("%s %s", "Exiting" if step.event_name == EXIT else "Entering", step.state.name)
            if step.candidate is not None and step.candidate.action is not None:
                step.candidate.action()
            if step.event_name == EXIT:
                self._hooks.execute_on_exit(step.state)
            else:
                self._hooks.execute_on_enter(step.state)

    @contextmanager
    def _dispatching(self, operation: str) -> Iterator[None]:
        if self._in_flight:
            raise ReentrantDispatchError(f"'{operation}' issued while another dispatch is still in progress")
        self._in_flight = True
        try:
            yield
        finally:
            self._in_flight = False
