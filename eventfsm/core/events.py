# eventfsm/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, List, Optional, Tuple

from eventfsm.core.base import state_list, state_name
from eventfsm.core.errors import AllGuardsFailedError, MachineDefinitionError, NoTransitionForStateError, TriggerError
from eventfsm.core.event_transitions import EventTransitions
from eventfsm.core.machine import Machine
from eventfsm.core.registry import EventRegistry
from eventfsm.interfaces.types import EventName, Metadata, StateID, Targets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriggerResult:
    """Outcome of resolving and attempting one event."""

    event: EventName
    from_state: StateID
    to_state: Optional[StateID] = None
    failed_targets: Tuple[StateID, ...] = ()
    error: Optional[TriggerError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def unwrap(self) -> bool:
        """Return True on success, raise the recorded error otherwise."""
        if self.error is not None:
            raise self.error
        return True


class Events:
    """
    Mixin adding named events to a Machine subclass.

    An event groups one or more declared transitions under a name. Triggering
    it looks up the candidate targets for the current state and tries them in
    declaration order; the first one whose guards pass wins.

        class OrderMachine(Events, Machine):
            pass

        OrderMachine.define_event("pay", [("pending", ["paid"])])
        OrderMachine(order).trigger_or_raise("pay")
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not issubclass(cls, Machine):
            raise MachineDefinitionError(f"{cls.__name__}: Events mixed in without Machine")

    # ------------------------------------------------------------------
    # Class-level declarations
    # ------------------------------------------------------------------

    @classmethod
    def event_registry(cls) -> EventRegistry:
        """The class's event table, stored and inherited with its states and transitions."""
        return cls._definition().events

    @classmethod
    def events(cls) -> Tuple[EventName, ...]:
        """Every event name registered on this class, in registration order."""
        return cls.event_registry().events()

    @classmethod
    def define_event(cls, name: EventName, transitions: Iterable[Tuple[Any, Any]]) -> None:
        """
        Register or extend an event.

        Each (from, to) pair is also declared as a machine transition, so the
        states must already exist. Every pair is checked before anything is
        declared; a rejected call leaves the class unchanged.

        :param name: Event name, stored as given.
        :param transitions: (from_state, to_states) pairs; to_states may be a
            single state or a list, tuple or set.
        :raises InvalidStateError: If a state was not declared.
        """
        normalized = [(state_name(from_state), state_list(to_states)) for from_state, to_states in transitions]
        for from_state, targets in normalized:
            cls._validate_states([from_state, *targets])

        for from_state, targets in normalized:
            if targets:
                cls.transition(from_=from_state, to=targets)
        cls.event_registry().define_event(name, normalized)

    @classmethod
    def event(cls, name: EventName) -> EventTransitions:
        return EventTransitions(cls, name)

    # ------------------------------------------------------------------
    # Triggering
    # ------------------------------------------------------------------

    def available_transitions(self, event_name: EventName) -> Targets:
        """
        Candidate targets of event_name for the current state, in attempt order.

        :raises UnknownEventError: If the event was never registered.
        :raises NoTransitionForStateError: If the event has nothing for the current state.
        """
        state = self.current_state
        candidates = type(self).event_registry().lookup(event_name)
        try:
            return candidates[state]
        except KeyError:
            raise NoTransitionForStateError(event_name, state) from None

    def available_events(self) -> List[EventName]:
        """Events that declare at least one target for the current state, in registration order."""
        state = self.current_state
        registry = type(self).event_registry()
        return [name for name in registry.events() if state in registry.lookup(name)]

    def trigger_or_raise(self, event_name: EventName, metadata: Optional[Metadata] = None) -> bool:
        """
        Trigger an event, raising if it cannot move the machine.

        :param event_name: The event to trigger.
        :param metadata: Passed unchanged to every transition attempt. Defaults to an empty dict.
        :return: True once a candidate transition has been applied.
        :raises UnknownEventError: If the event was never registered.
        :raises NoTransitionForStateError: If the event has nothing for the current state.
        :raises AllGuardsFailedError: If every candidate was rejected by a guard.
        """
        return self._trigger(event_name, metadata).unwrap()

    def trigger_or_false(self, event_name: EventName, metadata: Optional[Metadata] = None) -> bool:
        """
        Trigger an event, returning False instead of raising when the event
        cannot move the machine. Errors outside the trigger taxonomy still propagate.
        """
        return self._trigger(event_name, metadata).succeeded

    def _trigger(self, event_name: Hashable, metadata: Optional[Metadata]) -> TriggerResult:
        metadata = {} if metadata is None else metadata
        from_state = self.current_state
        try:
            targets = self.available_transitions(event_name)
        except TriggerError as e:
            logger.debug("%s: %s", type(self).__name__, e)
            return TriggerResult(event=event_name, from_state=from_state, error=e)

        failed: List[StateID] = []
        for target in targets:
            logger.debug("%s: event '%s' trying '%s' -> '%s'", type(self).__name__, event_name, from_state, target)
            if self.attempt_transition(target, metadata):
                logger.info("%s: event '%s' moved '%s' -> '%s'", type(self).__name__, event_name, from_state, target)
                return TriggerResult(
                    event=event_name, from_state=from_state, to_state=target, failed_targets=tuple(failed)
                )
            failed.append(target)

        error = AllGuardsFailedError(event_name, from_state, failed)
        logger.debug("%s: %s", type(self).__name__, error)
        return TriggerResult(event=event_name, from_state=from_state, failed_targets=tuple(failed), error=error)
