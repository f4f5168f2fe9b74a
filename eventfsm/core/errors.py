# eventfsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum
from typing import Any, Hashable, Optional, Sequence, Tuple


class EventFSMError(Exception):
    """
    Base exception class for errors within the event state machine library.
    """


class InvalidStateError(EventFSMError):
    """
    Raised when a state is referenced that the machine never declared, or when
    state declarations conflict (e.g. two initial states).
    """


class InvalidTransitionError(EventFSMError):
    """
    Raised when a callback or event names a transition the machine does not allow.
    """


class MachineDefinitionError(EventFSMError):
    """
    Raised when a machine class is assembled incorrectly.
    """


class TransitionFailedError(EventFSMError):
    """
    Raised when the machine cannot move from one state to another because the
    transition was never declared.
    """

    def __init__(self, from_state: Any, to_state: Any, message: Optional[str] = None) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(message or f"Cannot transition from '{from_state}' to '{to_state}'")


class GuardFailedError(EventFSMError):
    """
    Raised when a guard rejects an otherwise valid transition.
    """

    def __init__(self, from_state: Any, to_state: Any, guard: Any = None, message: Optional[str] = None) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.guard = guard
        super().__init__(message or f"Guard on transition from '{from_state}' to '{to_state}' returned false")


class TriggerFailure(Enum):
    """Why a triggered event could not move the machine."""

    UNKNOWN_EVENT = "unknown_event"
    NO_TRANSITION_FOR_STATE = "no_transition_for_state"
    ALL_GUARDS_FAILED = "all_guards_failed"


class TriggerError(EventFSMError):
    """
    Base for the failures reported by event triggering. Every subclass carries
    the event name and a TriggerFailure reason so callers can tell the causes apart.
    """

    reason: TriggerFailure

    def __init__(self, event: Hashable, message: str) -> None:
        self.event = event
        # EventFSMError subclasses further down the MRO take their own arguments
        Exception.__init__(self, message)


class UnknownEventError(TriggerError, TransitionFailedError):
    """
    Raised when an event name was never registered on the machine class.
    """

    reason = TriggerFailure.UNKNOWN_EVENT

    def __init__(self, event: Hashable) -> None:
        self.from_state = None
        self.to_state = None
        super().__init__(event, f"Event '{event}' not found")


class NoTransitionForStateError(TriggerError, TransitionFailedError):
    """
    Raised when an event exists but declares nothing for the current state.
    """

    reason = TriggerFailure.NO_TRANSITION_FOR_STATE

    def __init__(self, event: Hashable, state: Any) -> None:
        self.from_state = state
        self.to_state = None
        super().__init__(event, f"State '{state}' not found for event '{event}'")


class AllGuardsFailedError(TriggerError, GuardFailedError):
    """
    Raised when every candidate target of an event was attempted and rejected.
    """

    reason = TriggerFailure.ALL_GUARDS_FAILED

    def __init__(self, event: Hashable, state: Any, failed_targets: Sequence[Any]) -> None:
        self.from_state = state
        self.to_state = None
        self.guard = None
        self.failed_targets: Tuple[Any, ...] = tuple(failed_targets)
        super().__init__(event, f"All guards returned false when triggering event '{event}'")
