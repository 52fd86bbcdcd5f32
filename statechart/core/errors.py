# statechart/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class StatechartError(Exception):
    """
    Base exception class for errors within the statechart library.
    """


class StateNotFoundError(StatechartError):
    """
    Raised when a requested state does not exist in the state tree.
    """


class NameNotFoundError(StateNotFoundError):
    """
    Raised when a `target` or `init` string names a state absent from the tree.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"State '{name}' does not exist in the state tree")
        self.name = name


class TransitionError(StatechartError):
    """
    Raised when an attempted dispatch or transition cannot be carried out.
    """


class UnknownEventError(TransitionError):
    """
    Raised when no state on the active ancestor chain defines the dispatched event.
    """

    def __init__(self, event_name: str, state_name: str) -> None:
        super().__init__(f"Event '{event_name}' is not defined on '{state_name}' or any of its ancestors")
        self.event_name = event_name
        self.state_name = state_name


class ReentrantDispatchError(TransitionError):
    """
    Raised when `dispatch` or `run` is invoked from a callback of an in-flight dispatch.
    """


class AlreadyRunningError(TransitionError):
    """
    Raised when `run` is called on a machine that has already started.
    """


class NotRunningError(TransitionError):
    """
    Raised when an event is dispatched before the machine was started.
    """


class ValidationError(StatechartError):
    """
    Raised when validation detects configuration or runtime constraints violations.
    """


class ConfigurationError(ValidationError):
    """
    Raised at build time when the state configuration is malformed.
    """


class InvalidInitSpecError(ValidationError):
    """
    Raised when `init` is given as anything but the plain string name of a descendant.
    """


class ReservedEventTargetError(ValidationError):
    """
    Raised when a selected `entry` or `exit` candidate carries a target.
    """


class InitCycleError(ValidationError):
    """
    Raised when following `init` targets would never reach a state without `init`.
    """
