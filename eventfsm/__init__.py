"""eventfsm: named events for finite state machines

A machine class declares states, transitions and guards, then groups
transitions under event names. Triggering an event tries the event's
candidate targets for the current state in declaration order and applies the
first one whose guards pass.

Responsibilities:
    - State and transition declaration
    - Guarded transitions with before/after callbacks
    - In-memory transition history
    - Event registration and triggering

Cross-cutting Concerns:
    Thread Safety:
        - Class-level declarations must complete before any instance triggers
        - Each instance is driven by a single caller; no internal locking

    Error Handling:
        - Structured error hierarchy rooted at EventFSMError
        - Trigger failures keep their cause (unknown event, no transition for
          the current state, all guards failed)

    Logging:
        - Standard library logging under the "eventfsm" logger namespace
        - No handlers are configured by the library
"""

from eventfsm.core import (
    AllGuardsFailedError,
    EventFSMError,
    EventRegistry,
    Events,
    EventTransitions,
    GuardFailedError,
    InvalidStateError,
    InvalidTransitionError,
    Machine,
    MachineDefinitionError,
    MemoryHistory,
    MemoryTransition,
    NoTransitionForStateError,
    PendingTransition,
    TransitionFailedError,
    TriggerError,
    TriggerFailure,
    TriggerResult,
    UnknownEventError,
)

__version__ = "0.1.0"

__all__ = [
    "AllGuardsFailedError",
    "EventFSMError",
    "EventRegistry",
    "Events",
    "EventTransitions",
    "GuardFailedError",
    "InvalidStateError",
    "InvalidTransitionError",
    "Machine",
    "MachineDefinitionError",
    "MemoryHistory",
    "MemoryTransition",
    "NoTransitionForStateError",
    "PendingTransition",
    "TransitionFailedError",
    "TriggerError",
    "TriggerFailure",
    "TriggerResult",
    "UnknownEventError",
]
