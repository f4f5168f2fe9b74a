# eventfsm/core/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

from eventfsm.core.errors import UnknownEventError
from eventfsm.interfaces.types import EventName, StateID, TransitionsBySource

logger = logging.getLogger(__name__)


def _targets(to_states: Any) -> List[StateID]:
    if isinstance(to_states, (list, tuple, set, frozenset)):
        return list(to_states)
    return [to_states]


class EventRegistry:
    """
    Transition table for the events of one machine class.

    Maps each event name to an ordered mapping of source state to the candidate
    target states, in the order they were declared. Declaration order matters
    twice: events() lists names in registration order, and targets are tried in
    the order they were added.

    The table only grows. Declaring the same (event, from) pair again appends
    the new targets after the existing ones; a target already listed for that
    pair is not added a second time.
    """

    def __init__(self) -> None:
        self._events: Dict[EventName, Dict[StateID, List[StateID]]] = {}

    def copy(self) -> "EventRegistry":
        registry = type(self)()
        registry._events = {name: {k: list(v) for k, v in table.items()} for name, table in self._events.items()}
        return registry

    def define_event(self, name: EventName, transitions: Iterable[Tuple[StateID, Sequence[StateID]]]) -> None:
        """
        Register an event, or extend an existing one.

        New targets for a source state go after the ones already listed, in
        the order given. A target that is already listed for that source is
        not added again, so each candidate is attempted at most once per trigger.

        :param name: The event name.
        :param transitions: (from_state, to_states) pairs; to_states may be a
            single state or a list, tuple or set. Pairs with no targets add nothing.
        """
        table = self._events.setdefault(name, {})
        for from_state, to_states in transitions:
            targets = _targets(to_states)
            if not targets:
                continue
            existing = table.setdefault(from_state, [])
            for target in targets:
                if target not in existing:
                    existing.append(target)
            logger.debug("Event '%s' from '%s' now targets %s", name, from_state, existing)

    def lookup(self, name: EventName) -> TransitionsBySource:
        """
        Return a read-only view of the event's targets by source state.

        :raises UnknownEventError: If the event was never registered.
        """
        try:
            table = self._events[name]
        except KeyError:
            raise UnknownEventError(name) from None
        return MappingProxyType({from_state: tuple(targets) for from_state, targets in table.items()})

    def events(self) -> Tuple[EventName, ...]:
        return tuple(self._events)

    def __contains__(self, name: object) -> bool:
        return name in self._events

    def __iter__(self) -> Iterator[EventName]:
        return iter(self.events())

    def __len__(self) -> int:
        return len(self._events)
