# tests/unit/core/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock

import pytest

from statechart.core.errors import UnknownEventError
from statechart.core.hooks import HookManager, HookProtocol
from statechart.core.state_machine import Statechart


class RecordingHook:
    def __init__(self, name: str = "RecordingHook", fail_on: str = None):
        self.name = name
        self.fail_on = fail_on
        self.calls = []

    def __repr__(self):
        return self.name

    def _record(self, method, argument):
        self.calls.append((method, getattr(argument, "name", argument)))
        if method == self.fail_on:
            raise RuntimeError(f"{self.name} {method} failed")

    def on_enter(self, state):
        self._record("on_enter", state)

    def on_exit(self, state):
        self._record("on_exit", state)

    def on_error(self, error):
        self._record("on_error", error)


def test_hook_manager_dispatches_to_hooks():
    hook = MagicMock()
    hm = HookManager(hooks=[hook])
    state = MagicMock(name="State")
    hm.execute_on_enter(state)
    hook.on_enter.assert_called_once_with(state)
    hm.execute_on_exit(state)
    hook.on_exit.assert_called_once_with(state)
    err = Exception("TestError")
    hm.execute_on_error(err)
    hook.on_error.assert_called_once_with(err)


def test_hook_manager_register():
    hm = HookManager()
    assert hm.hooks == []
    hook = RecordingHook()
    hm.register_hook(hook)
    assert hm.hooks == [hook]


def test_partial_hooks_are_allowed():
    class EnterOnly:
        def __init__(self):
            self.entered = []

        def on_enter(self, state):
            self.entered.append(state)

    hook = EnterOnly()
    hm = HookManager([hook])
    hm.execute_on_enter("S")
    hm.execute_on_exit("S")
    hm.execute_on_error(ValueError())
    assert hook.entered == ["S"]


def test_recording_hook_satisfies_protocol():
    assert isinstance(RecordingHook(), HookProtocol)


def test_failing_hook_is_logged_and_others_still_run(caplog: pytest.LogCaptureFixture):
    failing = RecordingHook("FailingHook", fail_on="on_enter")
    good = RecordingHook("GoodHook")
    hm = HookManager([failing, good])

    with caplog.at_level(logging.ERROR):
        hm.execute_on_enter("STATE_TEST")

    assert good.calls == [("on_enter", "STATE_TEST")]
    assert "FailingHook on_enter failed" in caplog.text


def test_machine_notifies_hooks_in_firing_order(flat_states):
    hook = RecordingHook()
    machine = Statechart(flat_states, "A", hooks=[hook])
    machine.run()
    machine.dispatch("goC")
    assert hook.calls == [("on_enter", "A"), ("on_exit", "A"), ("on_enter", "C")]


def test_machine_reports_errors_to_hooks(flat_states):
    hook = RecordingHook()
    machine = Statechart(flat_states, "A", hooks=HookManager([hook]))
    machine.run()
    with pytest.raises(UnknownEventError) as exc_info:
        machine.dispatch("nope")
    assert hook.calls[-1] == ("on_error", exc_info.value)


def test_failing_hook_does_not_break_transition(flat_states, spies, caplog):
    machine = Statechart(flat_states, "A", hooks=[RecordingHook("Broken", fail_on="on_exit")])
    machine.run()
    with caplog.at_level(logging.ERROR):
        machine.dispatch("goC")
    assert machine.current_state().name == "C"
    spies.C_entry.assert_called_once_with()
    assert "Broken on_exit failed" in caplog.text
