# eventfsm/core/callbacks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from eventfsm.core.errors import GuardFailedError
from eventfsm.interfaces.types import Metadata, StateID

BEFORE = "before"
AFTER = "after"
GUARDS = "guards"
AFTER_TRANSITION_FAILURE = "after_transition_failure"
AFTER_GUARD_FAILURE = "after_guard_failure"

PHASES = (BEFORE, AFTER, GUARDS, AFTER_TRANSITION_FAILURE, AFTER_GUARD_FAILURE)


@dataclass(frozen=True)
class PendingTransition:
    """Describes a transition that is about to happen, handed to guards and callbacks."""

    from_state: StateID
    to_state: StateID


class Callback:
    """
    Wraps a user callable together with optional from/to filters. A filter left
    as None matches any state.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        from_state: Optional[StateID] = None,
        to_states: Optional[List[StateID]] = None,
    ) -> None:
        """
        :param callback: The user callable.
        :param from_state: Only fire when leaving this state.
        :param to_states: Only fire when entering one of these states.
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._callback = callback
        self._from_state = from_state
        self._to_states = list(to_states) if to_states else []

    @property
    def callback(self) -> Callable[..., Any]:
        return self._callback

    @property
    def from_state(self) -> Optional[StateID]:
        return self._from_state

    @property
    def to_states(self) -> List[StateID]:
        return list(self._to_states)

    def applies_to(self, from_state: StateID, to_state: StateID) -> bool:
        """Return True if this callback should run for the given transition."""
        if self._from_state is not None and self._from_state != from_state:
            return False
        if self._to_states and to_state not in self._to_states:
            return False
        return True

    def __call__(self, *args: Any) -> Any:
        return self._callback(*args)

    def __repr__(self) -> str:
        name = getattr(self._callback, "__name__", repr(self._callback))
        return f"{type(self).__name__}({name}, from_state={self._from_state!r}, to_states={self._to_states!r})"


class GuardCallback(Callback):
    """
    A callback whose falsy return value rejects the transition.
    """

    def __call__(self, obj: Any, transition: PendingTransition, metadata: Metadata) -> bool:
        if not self._callback(obj, transition, metadata):
            raise GuardFailedError(transition.from_state, transition.to_state, guard=self._callback)
        return True


class CallbackRunner:
    """
    Runs the callbacks registered for one phase, in registration order, for a
    given transition.
    """

    def __init__(self, callbacks: Dict[str, List[Callback]]) -> None:
        self._callbacks = callbacks

    def select(self, phase: str, transition: PendingTransition) -> List[Callback]:
        return [
            cb for cb in self._callbacks.get(phase, []) if cb.applies_to(transition.from_state, transition.to_state)
        ]

    def run(self, phase: str, transition: PendingTransition, *args: Any) -> None:
        """
        Call every matching callback for the phase with args.

        :raises GuardFailedError: From the first rejecting guard, when phase is GUARDS.
        """
        for cb in self.select(phase, transition):
            cb(*args)
