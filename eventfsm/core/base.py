# eventfsm/core/base.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum
from typing import Any, Callable, List, TypeVar

T = TypeVar("T")


def state_name(state: Any) -> str:
    """Normalize a declared state (str, Enum member, ...) to its string id."""
    if isinstance(state, Enum):
        return str(state.value)
    return str(state)


def class_scoped(owner: type, attr: str, factory: Callable[[], T], inherit: Callable[[T], T]) -> T:
    """
    Return the value stored under attr in owner's own __dict__, creating it on
    first access. A class that has not stored one yet starts from a copy of the
    nearest base class's value, so subclasses never mutate their parent's data.
    """
    if attr not in owner.__dict__:
        for base in owner.__mro__[1:]:
            if attr in base.__dict__:
                value = inherit(base.__dict__[attr])
                break
        else:
            value = factory()
        setattr(owner, attr, value)
    return owner.__dict__[attr]


def state_list(states: Any) -> List[str]:
    """Normalize None, a single state, or a list/tuple/set of states to a list of string ids."""
    if states is None:
        return []
    if isinstance(states, (list, tuple, set, frozenset)):
        return [state_name(s) for s in states]
    return [state_name(states)]
