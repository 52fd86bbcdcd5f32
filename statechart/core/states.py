# statechart/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from statechart.core.errors import ConfigurationError, NameNotFoundError
from statechart.core.events import CHILDREN_KEY, ENTRY, EXIT, INIT, RESERVED_EVENTS, EventSpec, parse_spec
from statechart.interfaces.types import StateID, StatesConfig


@dataclass(eq=False)
class StateNode:
    """
    A node of the state tree. Nodes compare by identity; names are unique
    across the whole tree.
    """

    name: StateID
    entry: Optional[EventSpec] = None
    exit: Optional[EventSpec] = None
    init: Optional[EventSpec] = None
    events: Dict[str, EventSpec] = field(default_factory=dict)
    children: Dict[StateID, "StateNode"] = field(default_factory=dict)
    parent: Optional["StateNode"] = field(default=None, repr=False)

    def __repr__(self) -> str:
        return f"StateNode({self.name!r})"

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def depth(self) -> int:
        """Distance from the root level; root-level states have depth 0."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    @property
    def path(self) -> Tuple["StateNode", ...]:
        """Nodes from the root-level ancestor down to this node, inclusive."""
        nodes = []
        current: Optional[StateNode] = self
        while current is not None:
            nodes.append(current)
            current = current.parent
        return tuple(reversed(nodes))

    def is_descendant_of(self, other: "StateNode") -> bool:
        """True if `other` is a proper ancestor of this node."""
        current = self.parent
        while current is not None:
            if current is other:
                return True
            current = current.parent
        return False

    def lookup(self, event_name: str) -> Optional[EventSpec]:
        """
        Return this node's own specification for `event_name`.

        Reserved names read the dedicated lifecycle fields; anything else reads `events`.
        """
        if event_name == ENTRY:
            return self.entry
        if event_name == EXIT:
            return self.exit
        if event_name == INIT:
            return self.init
        return self.events.get(event_name)

    def specs(self) -> Iterator[EventSpec]:
        """Iterate over every specification attached to this node."""
        for spec in (self.init, self.entry, self.exit):
            if spec is not None:
                yield spec
        yield from self.events.values()


class StateTree:
    """
    The immutable-after-load state tree with a flat, global name index.
    """

    def __init__(self, roots: Dict[StateID, StateNode], index: Dict[StateID, StateNode]) -> None:
        self._roots = roots
        self._index = index

    @property
    def roots(self) -> Dict[StateID, StateNode]:
        """The root-level node map."""
        return dict(self._roots)

    def find(self, name: StateID) -> StateNode:
        """
        Look a state up by name, regardless of its depth.

        :raises NameNotFoundError: If no state carries that name.
        """
        try:
            return self._index[name]
        except KeyError:
            raise NameNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[StateNode]:
        return iter(self._index.values())

    def __len__(self) -> int:
        return len(self._index)

    def names(self) -> List[StateID]:
        return list(self._index)


class _TreeBuilder:
    """
    Internal helper turning nested configuration mappings into StateNodes.
    """

    def __init__(self) -> None:
        self._index: Dict[StateID, StateNode] = {}

    def build(self, states: StatesConfig) -> StateTree:
        roots = self._build_level(states, parent=None)
        return StateTree(roots, self._index)

    def _build_level(self, states: Any, parent: Optional[StateNode]) -> Dict[StateID, StateNode]:
        if not isinstance(states, Mapping):
            owner = f"state '{parent.name}'" if parent else "the root level"
            raise ConfigurationError(f"'{CHILDREN_KEY}' of {owner} must be a mapping of state names")

        level: Dict[StateID, StateNode] = {}
        for name, config in states.items():
            level[name] = self._build_node(name, config, parent)
        return level

    def _build_node(self, name: StateID, config: Any, parent: Optional[StateNode]) -> StateNode:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"State names must be non-empty strings, got {name!r}")
        if name in self._index:
            raise ConfigurationError(f"State name '{name}' is used more than once")
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Configuration of state '{name}' must be a mapping")

        node = StateNode(name=name, parent=parent)
        self._index[name] = node

        for key, value in config.items():
            if key == CHILDREN_KEY:
                continue
            spec = parse_spec(value, key)
            if key in RESERVED_EVENTS:
                setattr(node, key, spec)
            else:
                node.events[key] = spec

        if CHILDREN_KEY in config:
            node.children = self._build_level(config[CHILDREN_KEY], parent=node)
        return node


def build_tree(states: StatesConfig) -> StateTree:
    """
    Build the state tree from the host's configuration.

    :param states: Mapping of root-level state name to state configuration.
    :return: The built tree.
    :raises ConfigurationError: If the configuration is malformed or a name repeats.
    """
    return _TreeBuilder().build(states)


def find_by_name(tree: StateTree, name: StateID) -> StateNode:
    """Global name lookup; raises NameNotFoundError if absent."""
    return tree.find(name)
