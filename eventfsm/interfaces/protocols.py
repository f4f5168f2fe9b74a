# eventfsm/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, List, Optional, Protocol, runtime_checkable

from eventfsm.interfaces.types import Metadata, StateID


@runtime_checkable
class Guard(Protocol):
    """
    Guard protocol for type checking.

    A guard is any callable taking the machine's model object, the pending
    transition and the metadata supplied by the caller.

    Runtime Invariants:
    - Guards decide, they do not change state.
    - A falsy return value rejects the transition.

    Error Handling:
    - Exceptions raised by a guard are not rejections; they propagate to the caller.
    """

    def __call__(self, obj: Any, transition: Any, metadata: Metadata) -> bool: ...


@runtime_checkable
class TransitionRecord(Protocol):
    """
    Protocol for an entry in a machine's transition history.

    Runtime Invariants:
    - Records are appended, never rewritten.
    - sort_key increases strictly with each record.
    """

    to_state: StateID
    sort_key: int
    metadata: Metadata


@runtime_checkable
class HistoryAdapter(Protocol):
    """
    Storage for transition history.

    Methods:
        create(): Record a transition and return the new record.
        history(): Return every record, oldest first.
        last(): Return the newest record or None.
    """

    def create(self, from_state: Optional[StateID], to_state: StateID, metadata: Metadata) -> TransitionRecord: ...

    def history(self) -> List[TransitionRecord]: ...

    def last(self) -> Optional[TransitionRecord]: ...


@runtime_checkable
class TransitionEngine(Protocol):
    """
    The contract the event layer needs from a state machine.

    Methods:
        current_state: The state the machine is currently in.
        attempt_transition(): Try a guarded transition. True when it was applied,
            False when a guard rejected it. Any other failure propagates.

    Runtime Invariants:
    - A rejected attempt leaves current_state unchanged.
    - metadata is forwarded as given, never copied or inspected.
    """

    @property
    def current_state(self) -> StateID: ...

    def attempt_transition(self, to_state: StateID, metadata: Optional[Metadata] = None) -> bool: ...
