# eventfsm/core/history.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eventfsm.interfaces.types import StateID

SORT_KEY_STEP = 10


@dataclass
class MemoryTransition:
    """A transition recorded in memory."""

    to_state: StateID
    sort_key: int
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)


class MemoryHistory:
    """
    In-memory transition history for a single machine instance.

    Records are kept in creation order and each one gets a sort_key ten higher
    than the previous record, starting at 10.
    """

    def __init__(self) -> None:
        self._records: List[MemoryTransition] = []

    def create(self, from_state: Optional[StateID], to_state: StateID, metadata: Dict[str, Any]) -> MemoryTransition:
        """
        Append a record for a transition into to_state.

        :param from_state: The state being left. Kept for adapters that store it.
        :param to_state: The state being entered.
        :param metadata: Caller-supplied metadata, stored as given.
        :return: The new record.
        """
        record = MemoryTransition(to_state=to_state, sort_key=self._next_sort_key(), metadata=metadata)
        self._records.append(record)
        return record

    def history(self) -> List[MemoryTransition]:
        return list(self._records)

    def last(self) -> Optional[MemoryTransition]:
        return self._records[-1] if self._records else None

    def _next_sort_key(self) -> int:
        last = self.last()
        return (last.sort_key if last else 0) + SORT_KEY_STEP

    def __len__(self) -> int:
        return len(self._records)
