# statechart/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Hierarchical state machine engine driven by declarative state trees.
"""

from statechart.core.errors import (
    AlreadyRunningError,
    ConfigurationError,
    InitCycleError,
    InvalidInitSpecError,
    NameNotFoundError,
    NotRunningError,
    ReentrantDispatchError,
    ReservedEventTargetError,
    StatechartError,
    StateNotFoundError,
    TransitionError,
    UnknownEventError,
    ValidationError,
)
from statechart.core.events import Candidate, EventSpec, SpecKind, resolve, select
from statechart.core.hooks import HookManager, HookProtocol
from statechart.core.state_machine import Statechart
from statechart.core.states import StateNode, StateTree, build_tree, find_by_name
from statechart.runtime.graph import TransitionPath, compute_transition

__version__ = "0.1.0"

__all__ = [
    "AlreadyRunningError",
    "Candidate",
    "ConfigurationError",
    "EventSpec",
    "HookManager",
    "HookProtocol",
    "InitCycleError",
    "InvalidInitSpecError",
    "NameNotFoundError",
    "NotRunningError",
    "ReentrantDispatchError",
    "ReservedEventTargetError",
    "SpecKind",
    "StateNode",
    "StateNotFoundError",
    "StateTree",
    "Statechart",
    "StatechartError",
    "TransitionError",
    "TransitionPath",
    "UnknownEventError",
    "ValidationError",
    "build_tree",
    "compute_transition",
    "find_by_name",
    "resolve",
    "select",
]
