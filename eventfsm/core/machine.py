# eventfsm/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from eventfsm.core.base import class_scoped, state_list, state_name
from eventfsm.core.callbacks import (
    AFTER,
    AFTER_GUARD_FAILURE,
    AFTER_TRANSITION_FAILURE,
    BEFORE,
    GUARDS,
    PHASES,
    Callback,
    CallbackRunner,
    GuardCallback,
    PendingTransition,
)
from eventfsm.core.errors import GuardFailedError, InvalidStateError, InvalidTransitionError, TransitionFailedError
from eventfsm.core.history import MemoryHistory
from eventfsm.core.registry import EventRegistry
from eventfsm.interfaces.protocols import Guard, HistoryAdapter, TransitionRecord
from eventfsm.interfaces.types import Metadata, StateID, TransitionCallback

logger = logging.getLogger(__name__)

StateArg = Any
StatesArg = Union[StateArg, Iterable[StateArg], None]


@dataclass
class _MachineDefinition:
    """Internal record of everything a machine class declares."""

    states: List[StateID] = field(default_factory=list)
    initial_state: Optional[StateID] = None
    successors: Dict[StateID, List[StateID]] = field(default_factory=dict)
    callbacks: Dict[str, List[Callback]] = field(default_factory=lambda: {phase: [] for phase in PHASES})
    events: EventRegistry = field(default_factory=EventRegistry)

    def copy(self) -> "_MachineDefinition":
        return _MachineDefinition(
            states=list(self.states),
            initial_state=self.initial_state,
            successors={k: list(v) for k, v in self.successors.items()},
            callbacks={k: list(v) for k, v in self.callbacks.items()},
            events=self.events.copy(),
        )


class Machine:
    """
    A finite state machine bound to a model object.

    States, transitions and callbacks are declared once per class through the
    classmethods below and shared by every instance. Each instance tracks its
    own position through a history adapter: the current state is the target of
    the newest history record, or the initial state when there is none.

    Example:
        class OrderMachine(Machine):
            pass

        OrderMachine.state("pending", initial=True)
        OrderMachine.state("paid")
        OrderMachine.transition(from_="pending", to="paid")

        machine = OrderMachine(order)
        machine.transition_to("paid", {"amount": 10})
    """

    # ------------------------------------------------------------------
    # Class-level declarations
    # ------------------------------------------------------------------

    @classmethod
    def _definition(cls) -> _MachineDefinition:
        return class_scoped(cls, "_machine_definition", _MachineDefinition, _MachineDefinition.copy)

    @classmethod
    def state(cls, name: StateArg, initial: bool = False) -> StateID:
        """
        Declare a state.

        :param name: State identifier; Enum members use their value.
        :param initial: Make this the state new instances start in.
        :raises InvalidStateError: If another initial state is already declared.
        """
        definition = cls._definition()
        name = state_name(name)
        if initial:
            if definition.initial_state is not None and definition.initial_state != name:
                raise InvalidStateError(
                    f"Cannot set initial state to '{name}', already set to '{definition.initial_state}'"
                )
            definition.initial_state = name
        if name not in definition.states:
            definition.states.append(name)
        return name

    @classmethod
    def transition(cls, from_: StateArg, to: StatesArg) -> None:
        """
        Declare that the machine may move from one state to each of the given states.

        :raises InvalidStateError: If any state was not declared.
        """
        definition = cls._definition()
        from_state = state_name(from_)
        to_states = state_list(to)
        cls._validate_states([from_state, *to_states])
        successors = definition.successors.setdefault(from_state, [])
        for to_state in to_states:
            if to_state not in successors:
                successors.append(to_state)

    @classmethod
    def states(cls) -> Tuple[StateID, ...]:
        return tuple(cls._definition().states)

    @classmethod
    def initial_state(cls) -> Optional[StateID]:
        return cls._definition().initial_state

    @classmethod
    def successors(cls) -> Dict[StateID, Tuple[StateID, ...]]:
        return {k: tuple(v) for k, v in cls._definition().successors.items()}

    @classmethod
    def before_transition(
        cls, callback: Optional[TransitionCallback] = None, *, from_: StateArg = None, to: StatesArg = None
    ):
        """Register a callback run with (obj, transition, metadata) before a transition is recorded."""
        return cls._add_callback(BEFORE, Callback, callback, from_, to)

    @classmethod
    def after_transition(
        cls, callback: Optional[TransitionCallback] = None, *, from_: StateArg = None, to: StatesArg = None
    ):
        """Register a callback run with (obj, transition, metadata) after a transition is recorded."""
        return cls._add_callback(AFTER, Callback, callback, from_, to)

    @classmethod
    def guard_transition(cls, callback: Optional[Guard] = None, *, from_: StateArg = None, to: StatesArg = None):
        """
        Register a guard. Guards are called with (obj, transition, metadata) and
        a falsy return value rejects the transition.

        Can be used directly or as a decorator:

            @OrderMachine.guard_transition(from_="pending", to="paid")
            def has_funds(order, transition, metadata):
                return order.balance >= metadata["amount"]
        """
        return cls._add_callback(GUARDS, GuardCallback, callback, from_, to)

    @classmethod
    def after_transition_failure(
        cls, callback: Optional[Callable] = None, *, from_: StateArg = None, to: StatesArg = None
    ):
        """Register a callback run with (obj, error) when an undeclared transition is attempted."""
        return cls._add_callback(AFTER_TRANSITION_FAILURE, Callback, callback, from_, to)

    @classmethod
    def after_guard_failure(cls, callback: Optional[Callable] = None, *, from_: StateArg = None, to: StatesArg = None):
        """Register a callback run with (obj, error) when a guard rejects a transition."""
        return cls._add_callback(AFTER_GUARD_FAILURE, Callback, callback, from_, to)

    @classmethod
    def _add_callback(
        cls,
        phase: str,
        callback_class: Type[Callback],
        callback: Optional[Callable],
        from_: StateArg,
        to: StatesArg,
    ):
        if callback is None:

            def decorator(fn: Callable) -> Callable:
                cls._add_callback(phase, callback_class, fn, from_, to)
                return fn

            return decorator

        from_state = state_name(from_) if from_ is not None else None
        to_states = state_list(to)
        cls._validate_callback_condition(from_state, to_states)
        cls._definition().callbacks[phase].append(callback_class(callback, from_state=from_state, to_states=to_states))
        return callback

    @classmethod
    def _validate_states(cls, states: Iterable[StateID]) -> None:
        known = cls._definition().states
        for state in states:
            if state not in known:
                raise InvalidStateError(f"Invalid state '{state}' given. Valid states are {known}")

    @classmethod
    def _validate_callback_condition(cls, from_state: Optional[StateID], to_states: List[StateID]) -> None:
        cls._validate_states(([from_state] if from_state is not None else []) + to_states)
        if from_state is None:
            return
        successors = cls._definition().successors.get(from_state, [])
        for to_state in to_states:
            if to_state not in successors:
                raise InvalidTransitionError(
                    f"Cannot register callback for transition from '{from_state}' to '{to_state}': "
                    "no such transition is declared"
                )

    # ------------------------------------------------------------------
    # Instance behaviour
    # ------------------------------------------------------------------

    def __init__(self, obj: Any = None, history: Optional[HistoryAdapter] = None) -> None:
        """
        :param obj: The model object handed to guards and callbacks.
        :param history: Where transitions are recorded. Defaults to a fresh MemoryHistory.
        :raises InvalidStateError: If the class declares no initial state.
        """
        if type(self).initial_state() is None:
            raise InvalidStateError(f"No initial state defined for {type(self).__name__}")
        self._object = obj
        self._history = history if history is not None else MemoryHistory()
        self._callbacks = CallbackRunner(type(self)._definition().callbacks)

    @property
    def object(self) -> Any:
        return self._object

    @property
    def current_state(self) -> StateID:
        """The target of the newest history record, or the initial state."""
        last = self._history.last()
        return last.to_state if last is not None else type(self).initial_state()

    @property
    def history(self) -> List[TransitionRecord]:
        return self._history.history()

    @property
    def last_transition(self) -> Optional[TransitionRecord]:
        return self._history.last()

    def in_state(self, *states: StateArg) -> bool:
        return self.current_state in state_list(list(states))

    def allowed_transitions(self) -> List[StateID]:
        """Successors of the current state whose guards currently pass."""
        successors = type(self)._definition().successors.get(self.current_state, [])
        return [state for state in successors if self.can_transition_to(state)]

    def can_transition_to(self, new_state: StateArg, metadata: Optional[Metadata] = None) -> bool:
        metadata = {} if metadata is None else metadata
        transition = PendingTransition(self.current_state, state_name(new_state))
        try:
            self._validate_transition(transition, metadata)
        except (TransitionFailedError, GuardFailedError):
            return False
        return True

    def transition_to(self, new_state: StateArg, metadata: Optional[Metadata] = None) -> bool:
        """
        Move to new_state, recording the transition in history.

        :param new_state: Target state.
        :param metadata: Stored on the history record and passed to guards and
            callbacks unchanged. Defaults to an empty dict.
        :return: True once the transition is recorded.
        :raises TransitionFailedError: If the transition was never declared.
        :raises GuardFailedError: If a guard rejects the transition.
        """
        metadata = {} if metadata is None else metadata
        transition = PendingTransition(self.current_state, state_name(new_state))

        try:
            self._validate_transition(transition, metadata)
        except GuardFailedError as e:
            self._callbacks.run(AFTER_GUARD_FAILURE, transition, self._object, e)
            raise
        except TransitionFailedError as e:
            self._callbacks.run(AFTER_TRANSITION_FAILURE, transition, self._object, e)
            raise

        self._callbacks.run(BEFORE, transition, self._object, transition, metadata)
        self._history.create(transition.from_state, transition.to_state, metadata)
        self._callbacks.run(AFTER, transition, self._object, transition, metadata)
        logger.info(
            "%s transitioned from '%s' to '%s'", type(self).__name__, transition.from_state, transition.to_state
        )
        return True

    def attempt_transition(self, new_state: StateArg, metadata: Optional[Metadata] = None) -> bool:
        """
        Guarded transition primitive. Returns False when a guard rejects the
        transition; every other error propagates.
        """
        try:
            return self.transition_to(new_state, metadata)
        except GuardFailedError as e:
            logger.debug("%s: %s", type(self).__name__, e)
            return False

    def _validate_transition(self, transition: PendingTransition, metadata: Metadata) -> None:
        successors = type(self)._definition().successors.get(transition.from_state, [])
        if transition.to_state not in successors:
            raise TransitionFailedError(transition.from_state, transition.to_state)
        self._callbacks.run(GUARDS, transition, self._object, transition, metadata)
