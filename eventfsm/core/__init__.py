"""
Core package: the state machine engine and the event layer built on it.

Architecture:
- machine.py owns states, transitions, guards, callbacks and history
- registry.py holds the per-class event transition table
- events.py resolves and triggers events against the machine

Import order matters to avoid circular dependencies.
"""

from .errors import (
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
from .history import MemoryHistory, MemoryTransition
from .callbacks import PendingTransition
from .machine import Machine
from .registry import EventRegistry
from .event_transitions import EventTransitions
from .events import Events, TriggerResult

__all__ = [
    # Errors
    "AllGuardsFailedError",
    "EventFSMError",
    "GuardFailedError",
    "InvalidStateError",
    "InvalidTransitionError",
    "MachineDefinitionError",
    "NoTransitionForStateError",
    "TransitionFailedError",
    "TriggerError",
    "TriggerFailure",
    "UnknownEventError",
    # Engine
    "Machine",
    "MemoryHistory",
    "MemoryTransition",
    "PendingTransition",
    # Events
    "EventRegistry",
    "EventTransitions",
    "Events",
    "TriggerResult",
]
