# eventfsm/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Dict, Hashable, Mapping, Tuple

StateID = str
EventName = Hashable
Metadata = Dict[str, Any]

# Candidate targets for one source state, in attempt order
Targets = Tuple[StateID, ...]
TransitionsBySource = Mapping[StateID, Targets]

# Callback Types
TransitionCallback = Callable[[Any, Any, Metadata], None]
