# tests/unit/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from eventfsm.core.errors import (
    AllGuardsFailedError,
    EventFSMError,
    GuardFailedError,
    InvalidStateError,
    InvalidTransitionError,
    MachineDefinitionError,
    NoTransitionForStateError,
    TransitionFailedError,
    TriggerError,
    TriggerFailure,
    UnknownEventError,
)


@pytest.mark.parametrize(
    "error_class",
    [
        InvalidStateError,
        InvalidTransitionError,
        MachineDefinitionError,
        TransitionFailedError,
        GuardFailedError,
        TriggerError,
    ],
)
def test_error_hierarchy(error_class):
    assert issubclass(error_class, EventFSMError)


def test_lookup_failures_are_transition_failures():
    assert issubclass(UnknownEventError, TransitionFailedError)
    assert issubclass(NoTransitionForStateError, TransitionFailedError)
    assert issubclass(UnknownEventError, TriggerError)
    assert issubclass(NoTransitionForStateError, TriggerError)


def test_all_guards_failed_is_a_guard_failure():
    assert issubclass(AllGuardsFailedError, GuardFailedError)
    assert issubclass(AllGuardsFailedError, TriggerError)
    assert not issubclass(AllGuardsFailedError, TransitionFailedError)


def test_trigger_errors_have_distinct_reasons():
    reasons = {
        UnknownEventError("e").reason,
        NoTransitionForStateError("e", "x").reason,
        AllGuardsFailedError("e", "x", ["y"]).reason,
    }
    assert reasons == set(TriggerFailure)


def test_unknown_event_error():
    e = UnknownEventError("missing")
    assert e.event == "missing"
    assert e.reason is TriggerFailure.UNKNOWN_EVENT
    assert str(e) == "Event 'missing' not found"


def test_no_transition_for_state_error():
    e = NoTransitionForStateError("event_2", "x")
    assert e.event == "event_2"
    assert e.from_state == "x"
    assert str(e) == "State 'x' not found for event 'event_2'"


def test_all_guards_failed_error():
    e = AllGuardsFailedError("event_3", "x", ["y", "z"])
    assert e.failed_targets == ("y", "z")
    assert e.from_state == "x"
    assert str(e) == "All guards returned false when triggering event 'event_3'"


def test_transition_failed_error_message():
    e = TransitionFailedError("x", "z")
    assert (e.from_state, e.to_state) == ("x", "z")
    assert str(e) == "Cannot transition from 'x' to 'z'"


def test_guard_failed_error_keeps_guard():
    def guard(obj, transition, metadata):
        return False

    e = GuardFailedError("x", "y", guard=guard)
    assert e.guard is guard
    assert "returned false" in str(e)
