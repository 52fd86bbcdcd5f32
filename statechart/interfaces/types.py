# statechart/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

StateID = str
EventID = str

# Callback Types
GuardCheck = Callable[[], bool]
ActionExec = Callable[[], None]

# Raw configuration as supplied by the host
CandidateConfig = Mapping[str, Any]
RawEventSpec = Union[ActionExec, CandidateConfig, List[CandidateConfig], Tuple[CandidateConfig, ...], str]
StateConfig = Mapping[str, Any]
StatesConfig = Dict[StateID, StateConfig]
