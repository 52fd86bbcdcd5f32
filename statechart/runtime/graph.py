"""Ancestry and exit/entry path computation over the state tree."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.errors import InitCycleError, InvalidInitSpecError
from ..core.states import StateNode, StateTree
from ..core.validations import Validator
from ..interfaces.types import StateID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionPath:
    """
    The firing order of a transition.

    ``exit_path`` is deepest first, ``entry_path`` shallowest first and already
    includes the default-``init`` descent below the target. ``leaf`` is the
    state that becomes current once every step has fired.
    """

    source: StateNode
    target: StateNode
    lca: Optional[StateNode]
    leaf: StateNode
    exit_path: Tuple[StateNode, ...] = field(default_factory=tuple)
    entry_path: Tuple[StateNode, ...] = field(default_factory=tuple)


def get_ancestors(node: StateNode) -> List[StateNode]:
    """Get all ancestor states in order from immediate parent to root."""
    ancestors = []
    current = node.parent
    while current is not None:
        ancestors.append(current)
        current = current.parent
    return ancestors


def lowest_common_ancestor(a: StateNode, b: StateNode) -> Optional[StateNode]:
    """
    Deepest node that is an ancestor of, or equal to, both `a` and `b`.

    Returns None when the two nodes live under different root-level states.
    """
    lca = None
    for left, right in zip(a.path, b.path):
        if left is not right:
            break
        lca = left
    return lca


def _descend(start: StateNode, target: StateNode) -> List[StateNode]:
    """Nodes strictly below `start` down to and including `target`."""
    nodes = []
    current: Optional[StateNode] = target
    while current is not None and current is not start:
        nodes.append(current)
        current = current.parent
    nodes.reverse()
    return nodes


def resolve_init_chain(tree: StateTree, node: StateNode, validator: Optional[Validator] = None) -> List[StateNode]:
    """
    Follow default ``init`` targets from `node` until reaching a state without one.

    :return: The nodes entered below `node`, shallowest first; empty if `node` has no ``init``.
    :raises InvalidInitSpecError: If an ``init`` is not a plain string or leaves the subtree.
    :raises InitCycleError: If an ``init`` points back at its own state or an ancestor.
    :raises NameNotFoundError: If an ``init`` names an unknown state.
    """
    validator = validator or Validator()
    chain: List[StateNode] = []
    current = node
    while current.init is not None:
        spec = current.init
        candidate = spec.select()
        validator.validate_candidate(spec, candidate, current.name)

        target = tree.find(candidate.target)
        if target is current or current.is_descendant_of(target):
            raise InitCycleError(f"'init' of state '{current.name}' leads back to '{target.name}'")
        if not target.is_descendant_of(current):
            raise InvalidInitSpecError(
                f"'init' of state '{current.name}' names '{target.name}', which is not one of its substates"
            )
        chain.extend(_descend(current, target))
        current = target
    return chain


def compute_transition(
    tree: StateTree, source: StateNode, target_name: StateID, validator: Optional[Validator] = None
) -> TransitionPath:
    """
    Compute the exit and entry sequences for moving from `source` to the state named `target_name`.

    States shared by both branches (the LCA and everything above it) are
    neither exited nor entered.

    :param tree: The state tree.
    :param source: The current leaf.
    :param target_name: Global name of the destination.
    :raises NameNotFoundError: If the target or a state on its ``init`` chain is unknown.
    """
    target = tree.find(target_name)
    lca = lowest_common_ancestor(source, target)

    exit_path = []
    current: Optional[StateNode] = source
    while current is not None and current is not lca:
        exit_path.append(current)
        current = current.parent

    entry_path = _descend(lca, target)
    init_chain = resolve_init_chain(tree, target, validator)
    entry_path.extend(init_chain)
    leaf = init_chain[-1] if init_chain else target

    logger.debug(
        "Path %s -> %s via %s: exit %s, entry %s",
        source.name,
        target.name,
        lca.name if lca else "<root>",
        [n.name for n in exit_path],
        [n.name for n in entry_path],
    )
    return TransitionPath(
        source=source,
        target=target,
        lca=lca,
        leaf=leaf,
        exit_path=tuple(exit_path),
        entry_path=tuple(entry_path),
    )
