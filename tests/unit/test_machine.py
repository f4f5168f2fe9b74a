# tests/unit/test_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum
from unittest.mock import MagicMock

import pytest

from eventfsm.core.callbacks import PendingTransition
from eventfsm.core.errors import (
    GuardFailedError,
    InvalidStateError,
    InvalidTransitionError,
    TransitionFailedError,
)
from eventfsm.core.history import MemoryHistory
from eventfsm.core.machine import Machine
from eventfsm.interfaces.protocols import TransitionEngine


@pytest.fixture
def plain_machine_class():
    class OrderMachine(Machine):
        pass

    OrderMachine.state("pending", initial=True)
    OrderMachine.state("paid")
    OrderMachine.state("cancelled")
    OrderMachine.transition(from_="pending", to=["paid", "cancelled"])
    OrderMachine.transition(from_="paid", to="cancelled")
    return OrderMachine


# -----------------------------------------------------------------------------
# DECLARATIONS
# -----------------------------------------------------------------------------


def test_declared_states_and_successors(plain_machine_class):
    assert plain_machine_class.states() == ("pending", "paid", "cancelled")
    assert plain_machine_class.initial_state() == "pending"
    assert plain_machine_class.successors() == {"pending": ("paid", "cancelled"), "paid": ("cancelled",)}


def test_second_initial_state_is_rejected(plain_machine_class):
    with pytest.raises(InvalidStateError):
        plain_machine_class.state("paid", initial=True)


def test_transition_to_unknown_state_is_rejected(plain_machine_class):
    with pytest.raises(InvalidStateError):
        plain_machine_class.transition(from_="pending", to="refunded")


def test_enum_states_are_normalized():
    class Status(Enum):
        OPEN = "open"
        CLOSED = "closed"

    class TicketMachine(Machine):
        pass

    TicketMachine.state(Status.OPEN, initial=True)
    TicketMachine.state(Status.CLOSED)
    TicketMachine.transition(from_=Status.OPEN, to=Status.CLOSED)

    machine = TicketMachine()
    assert machine.current_state == "open"
    machine.transition_to(Status.CLOSED)
    assert machine.in_state(Status.CLOSED)


def test_machine_without_initial_state():
    class Empty(Machine):
        pass

    with pytest.raises(InvalidStateError):
        Empty()


def test_callback_for_undeclared_transition_is_rejected(plain_machine_class):
    with pytest.raises(InvalidTransitionError):
        plain_machine_class.guard_transition(lambda *a: True, from_="paid", to="pending")


def test_callback_for_unknown_state_is_rejected(plain_machine_class):
    with pytest.raises(InvalidStateError):
        plain_machine_class.before_transition(lambda *a: None, to="refunded")


def test_subclass_declarations_do_not_leak_to_parent(plain_machine_class):
    class Child(plain_machine_class):
        pass

    Child.state("refunded")
    Child.transition(from_="paid", to="refunded")

    assert "refunded" in Child.states()
    assert "refunded" not in plain_machine_class.states()
    assert plain_machine_class.successors()["paid"] == ("cancelled",)


# -----------------------------------------------------------------------------
# TRANSITIONS
# -----------------------------------------------------------------------------


def test_initial_state(plain_machine_class):
    machine = plain_machine_class()
    assert machine.current_state == "pending"
    assert machine.last_transition is None
    assert machine.history == []


def test_transition_to_records_history(plain_machine_class):
    machine = plain_machine_class()
    meta = {"amount": 10}
    assert machine.transition_to("paid", meta) is True
    assert machine.current_state == "paid"
    assert machine.last_transition.to_state == "paid"
    assert machine.last_transition.metadata is meta


def test_transition_to_defaults_metadata_to_empty_dict(plain_machine_class):
    machine = plain_machine_class()
    machine.transition_to("paid")
    assert machine.last_transition.metadata == {}


def test_undeclared_transition_raises(plain_machine_class):
    machine = plain_machine_class()
    machine.transition_to("cancelled")
    with pytest.raises(TransitionFailedError):
        machine.transition_to("paid")
    assert machine.current_state == "cancelled"


def test_guard_receives_object_transition_and_metadata(plain_machine_class):
    model = object()
    guard = MagicMock(return_value=True)
    plain_machine_class.guard_transition(guard, from_="pending", to="paid")

    plain_machine_class(model).transition_to("paid", {"k": "v"})
    guard.assert_called_once_with(model, PendingTransition("pending", "paid"), {"k": "v"})


def test_failing_guard_raises_and_keeps_state(plain_machine_class):
    plain_machine_class.guard_transition(lambda *a: False, from_="pending", to="paid")
    machine = plain_machine_class()
    with pytest.raises(GuardFailedError):
        machine.transition_to("paid")
    assert machine.current_state == "pending"
    assert machine.history == []


def test_guard_registered_as_decorator(plain_machine_class):
    @plain_machine_class.guard_transition(to="paid")
    def never(obj, transition, metadata):
        return False

    assert callable(never)
    assert plain_machine_class().can_transition_to("paid") is False


def test_attempt_transition_returns_false_on_guard_failure(plain_machine_class):
    plain_machine_class.guard_transition(lambda *a: False, to="paid")
    machine = plain_machine_class()
    assert machine.attempt_transition("paid") is False
    assert machine.attempt_transition("cancelled") is True


def test_attempt_transition_propagates_other_failures(plain_machine_class):
    machine = plain_machine_class()
    machine.transition_to("cancelled")
    with pytest.raises(TransitionFailedError):
        machine.attempt_transition("paid")


def test_guard_exceptions_propagate(plain_machine_class):
    def broken(obj, transition, metadata):
        raise KeyError("amount")

    plain_machine_class.guard_transition(broken, to="paid")
    with pytest.raises(KeyError):
        plain_machine_class().attempt_transition("paid")


def test_callbacks_run_in_order(plain_machine_class):
    calls = []
    plain_machine_class.before_transition(lambda o, t, m: calls.append(("before", t.to_state)))
    plain_machine_class.after_transition(lambda o, t, m: calls.append(("after", t.to_state)), to="paid")
    plain_machine_class.guard_transition(lambda o, t, m: calls.append(("guard", t.to_state)) or True)

    plain_machine_class().transition_to("paid")
    assert calls == [("guard", "paid"), ("before", "paid"), ("after", "paid")]


def test_failure_callbacks(plain_machine_class):
    guard_failures = MagicMock()
    transition_failures = MagicMock()
    plain_machine_class.guard_transition(lambda *a: False, from_="pending", to="paid")
    plain_machine_class.after_guard_failure(guard_failures)
    plain_machine_class.after_transition_failure(transition_failures)

    model = object()
    machine = plain_machine_class(model)
    with pytest.raises(GuardFailedError):
        machine.transition_to("paid")
    guard_failures.assert_called_once()
    assert guard_failures.call_args.args[0] is model
    assert isinstance(guard_failures.call_args.args[1], GuardFailedError)

    machine.transition_to("cancelled")
    with pytest.raises(TransitionFailedError):
        machine.transition_to("pending")
    transition_failures.assert_called_once()


def test_allowed_transitions_and_can_transition_to(plain_machine_class):
    plain_machine_class.guard_transition(lambda *a: False, to="cancelled")
    machine = plain_machine_class()
    assert machine.allowed_transitions() == ["paid"]
    assert machine.can_transition_to("paid") is True
    assert machine.can_transition_to("cancelled") is False
    assert machine.can_transition_to("nowhere") is False


def test_in_state(plain_machine_class):
    machine = plain_machine_class()
    assert machine.in_state("pending")
    assert machine.in_state("paid", "pending")
    assert not machine.in_state("paid")


def test_custom_history_adapter(plain_machine_class):
    history = MemoryHistory()
    machine = plain_machine_class(history=history)
    machine.transition_to("paid")
    assert len(history) == 1
    assert plain_machine_class(history=history).current_state == "paid"


def test_machine_satisfies_engine_protocol(plain_machine_class):
    assert isinstance(plain_machine_class(), TransitionEngine)
