# statechart/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterable, List, Optional, Tuple

from statechart.core.errors import ConfigurationError
from statechart.interfaces.types import ActionExec, CandidateConfig, EventID, GuardCheck, RawEventSpec, StateID

INIT = "init"
ENTRY = "entry"
EXIT = "exit"
RESERVED_EVENTS = frozenset({INIT, ENTRY, EXIT})

# Keys of a state configuration that are not event names
CHILDREN_KEY = "states"


def _always() -> bool:
    return True


class SpecKind(Enum):
    """The shape an event specification was written in."""

    FUNCTION = auto()
    OBJECT = auto()
    ARRAY = auto()
    STRING = auto()


@dataclass(frozen=True)
class Candidate:
    """
    A normalized, guarded transition option derived from an event specification.

    :param guard: Zero-argument callable returning True when the candidate is eligible.
    :param action: Optional zero-argument callable run when the candidate fires.
    :param target: Optional name of the state to transition to.
    """

    guard: GuardCheck = _always
    action: Optional[ActionExec] = None
    target: Optional[StateID] = None

    def check(self) -> bool:
        return bool(self.guard())


@dataclass(frozen=True)
class EventSpec:
    """
    An event specification resolved once into its shape and ordered candidates.
    """

    event_name: EventID
    kind: SpecKind
    candidates: Tuple[Candidate, ...] = field(default_factory=tuple)

    def select(self) -> Optional[Candidate]:
        """Return the first candidate whose guard passes, or None."""
        return select(self.candidates)

    @property
    def targets(self) -> List[StateID]:
        """Every target named by the candidates, in order."""
        return [c.target for c in self.candidates if c.target is not None]


def classify(spec: Any) -> SpecKind:
    """
    Determine the shape of a raw event specification.

    :raises ConfigurationError: If the value is not one of the recognized shapes.
    """
    if isinstance(spec, str):
        return SpecKind.STRING
    if isinstance(spec, Mapping):
        return SpecKind.OBJECT
    if isinstance(spec, (list, tuple)):
        return SpecKind.ARRAY
    if callable(spec):
        return SpecKind.FUNCTION
    raise ConfigurationError(f"Unrecognized event specification {spec!r}")


def _candidate_from_mapping(spec: CandidateConfig, event_name: EventID) -> Candidate:
    guard = spec.get("guard")
    action = spec.get("action")
    target = spec.get("target")
    if guard is not None and not callable(guard):
        raise ConfigurationError(f"Guard of event '{event_name}' must be callable")
    if action is not None and not callable(action):
        raise ConfigurationError(f"Action of event '{event_name}' must be callable")
    if target is not None and not isinstance(target, str):
        raise ConfigurationError(f"Target of event '{event_name}' must be a state name")
    return Candidate(guard=guard or _always, action=action, target=target)


def resolve(spec: RawEventSpec, event_name: EventID) -> List[Candidate]:
    """
    Normalize a raw event specification into an ordered list of candidates.

    A bare string is a target shorthand only for ``init``; under any other
    event name it produces no candidates at all.

    :param spec: Callable, mapping, list of mappings or string.
    :param event_name: Name the specification is attached to.
    :return: Candidates in declaration order.
    :raises ConfigurationError: If the specification or one of its elements is malformed.
    """
    kind = classify(spec)
    if kind is SpecKind.FUNCTION:
        return [Candidate(action=spec)]
    if kind is SpecKind.OBJECT:
        return [_candidate_from_mapping(spec, event_name)]
    if kind is SpecKind.ARRAY:
        candidates = []
        for element in spec:
            if not isinstance(element, Mapping):
                raise ConfigurationError(
                    f"Event '{event_name}' lists {element!r}; array elements must be mappings"
                )
            candidates.append(_candidate_from_mapping(element, event_name))
        return candidates
    if event_name == INIT:
        return [Candidate(target=spec)]
    return []


def select(candidates: Iterable[Candidate]) -> Optional[Candidate]:
    """
    Pick the first candidate whose guard evaluates to True.

    Guards after the winning candidate are never evaluated.
    """
    for candidate in candidates:
        if candidate.check():
            return candidate
    return None


def parse_spec(spec: RawEventSpec, event_name: EventID) -> EventSpec:
    """Classify and resolve a raw specification in one step."""
    return EventSpec(event_name=event_name, kind=classify(spec), candidates=tuple(resolve(spec, event_name)))
