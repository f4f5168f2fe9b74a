# eventfsm/core/event_transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Hashable


class EventTransitions:
    """
    Builder returned by Events.event(). Each transition() call adds a
    (from, to) declaration to the event; it works chained or as a context manager:

        with OrderMachine.event("pay") as pay:
            pay.transition(from_="pending", to="paid")
            pay.transition(from_="overdue", to=["paid", "cancelled"])
    """

    def __init__(self, machine: type, name: Hashable) -> None:
        self._machine = machine
        self._name = name
        machine.define_event(name, [])

    @property
    def name(self) -> Hashable:
        return self._name

    def transition(self, from_: Any, to: Any) -> "EventTransitions":
        self._machine.define_event(self._name, [(from_, to)])
        return self

    def __enter__(self) -> "EventTransitions":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None
