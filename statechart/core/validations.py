# statechart/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from statechart.core.errors import InvalidInitSpecError, ReservedEventTargetError
from statechart.core.events import ENTRY, EXIT, INIT, Candidate, EventSpec, SpecKind

if TYPE_CHECKING:
    from statechart.core.states import StateNode, StateTree


class Validator:
    """
    Enforces the legality rules of the reserved lifecycle events against a
    selected candidate, before anything is executed.
    """

    def __init__(self) -> None:
        self._rules = _DefaultValidationRules

    def validate_candidate(self, spec: EventSpec, candidate: Optional[Candidate], state_name: str) -> None:
        """
        Check the candidate selected from `spec` on the state `state_name`.

        :param spec: The specification the candidate was selected from.
        :param candidate: The selected candidate, or None when no guard passed.
        :param state_name: Name of the state that defines the specification.
        :raises InvalidInitSpecError: If an `init` specification is not a plain string.
        :raises ReservedEventTargetError: If an `entry`/`exit` object or selected array element has a target.
        """
        if spec.event_name == INIT:
            self._rules.validate_init(spec, state_name)
        elif spec.event_name in (ENTRY, EXIT):
            self._rules.validate_lifecycle(spec, candidate, state_name)

    def validate_tree(self, tree: "StateTree") -> List[str]:
        """
        Collect configuration problems that would surface as runtime errors.

        :return: A list of human-readable problem descriptions, empty if none.
        """
        problems: List[str] = []
        for node in tree:
            problems.extend(self._rules.check_node(node, tree))
        return problems


class _DefaultValidationRules:
    """
    Built-in rules for the reserved events `init`, `entry` and `exit`.
    """

    @staticmethod
    def validate_init(spec: EventSpec, state_name: str) -> None:
        # The shape alone decides; guards and content are irrelevant.
        if spec.kind is not SpecKind.STRING:
            raise InvalidInitSpecError(
                f"'init' of state '{state_name}' must be the name of a state, not a {spec.kind.name.lower()}"
            )

    @staticmethod
    def validate_lifecycle(spec: EventSpec, candidate: Optional[Candidate], state_name: str) -> None:
        # A single object is checked whatever its guard says; arrays by the selected candidate.
        if spec.kind is SpecKind.OBJECT:
            candidate = spec.candidates[0]
        if candidate is not None and candidate.target is not None:
            raise ReservedEventTargetError(
                f"'{spec.event_name}' of state '{state_name}' may not transition (target '{candidate.target}')"
            )

    @staticmethod
    def check_node(node: "StateNode", tree: "StateTree") -> List[str]:
        problems = []
        for spec in node.specs():
            for target in spec.targets:
                if target not in tree:
                    problems.append(
                        f"State '{node.name}': '{spec.event_name}' targets unknown state '{target}'"
                    )
            if spec.event_name in (ENTRY, EXIT) and spec.targets:
                problems.append(f"State '{node.name}': '{spec.event_name}' may not carry a target")

        if node.init is not None:
            if node.init.kind is not SpecKind.STRING:
                problems.append(f"State '{node.name}': 'init' must be a state name")
            else:
                target = node.init.candidates[0].target
                if target in tree and not tree.find(target).is_descendant_of(node):
                    problems.append(f"State '{node.name}': 'init' target '{target}' is not one of its substates")
        return problems
