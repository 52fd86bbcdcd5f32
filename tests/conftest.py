# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from statechart.core.state_machine import Statechart


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


class Spies:
    """Lazily created MagicMock callbacks, addressed as ``spies.A_entry``."""

    def __init__(self) -> None:
        self._mocks = {}

    def __getattr__(self, name: str) -> MagicMock:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._mocks.setdefault(name, MagicMock(name=name))


class Recorder:
    """Records callback invocations in a shared, ordered log."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, label: str):
        def _record():
            self.calls.append(label)

        return _record


@pytest.fixture
def spies():
    return Spies()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def flat_states(spies):
    """Two root-level states A and C that move back and forth."""
    return {
        "A": {
            "entry": spies.A_entry,
            "exit": spies.A_exit,
            "goA": {"target": "A"},
            "goB": {"target": "B"},
            "goC": {"target": "C"},
        },
        "C": {
            "entry": spies.C_entry,
            "exit": spies.C_exit,
            "goA": {"target": "A"},
        },
    }


@pytest.fixture
def flat_machine(flat_states):
    machine = Statechart(flat_states, "A")
    machine.run()
    return machine


@pytest.fixture
def nested_states(spies):
    """
    A
    └─ childrenOfA (init: D)
       ├─ D
       │  └─ childrenOfD (init: F)
       │     └─ F
       └─ E
    C
    """
    return {
        "A": {
            "entry": spies.A_entry,
            "exit": spies.A_exit,
            "goA": {"target": "A"},
            "goC": {"target": "C"},
            "goD": {"target": "D"},
            "goE": {"target": "E"},
            "goChildren": {"target": "childrenOfA"},
            "states": {
                "childrenOfA": {
                    "init": "D",
                    "states": {
                        "D": {
                            "entry": spies.D_entry,
                            "exit": spies.D_exit,
                            "goE2": {"target": "E"},
                            "goF": {"target": "F"},
                            "states": {
                                "childrenOfD": {
                                    "init": "F",
                                    "states": {
                                        "F": {
                                            "entry": spies.F_entry,
                                            "exit": spies.F_exit,
                                            "goE3": {"target": "E"},
                                        }
                                    },
                                }
                            },
                        },
                        "E": {
                            "entry": spies.E_entry,
                            "exit": spies.E_exit,
                            "goD2": {"target": "D"},
                        },
                    },
                }
            },
        },
        "C": {"goA": {"target": "A"}},
    }


@pytest.fixture
def nested_machine(nested_states):
    machine = Statechart(nested_states, "A")
    machine.run()
    return machine
