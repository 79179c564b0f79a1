# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Core value model, generic operators, merge and cells."""

from .values import (
    NOTHING,
    Contradiction,
    Nothing,
    as_frozenset,
    describe,
    is_anything,
    is_contradiction,
    is_nothing,
    is_set,
)
from .errors import (
    DispatchError,
    InconsistencyError,
    MalformedNetworkError,
    PropagationLimitError,
    PropagatorError,
)
from .generic import (
    DispatchEntry,
    GenericOperator,
    create_generic_operator,
    extend_operator,
    invoke,
)
from .merge import (
    default_contradictory,
    default_merge,
    install_set_merge,
    make_contradiction_operator,
    make_merge_operator,
    make_set_merge_operator,
)
from .cell import Cell
from .checkpoint import CheckpointManager, SystemCheckpoint

__all__ = [
    # Values
    "NOTHING",
    "Nothing",
    "Contradiction",
    "as_frozenset",
    "describe",
    "is_anything",
    "is_contradiction",
    "is_nothing",
    "is_set",
    # Errors
    "PropagatorError",
    "InconsistencyError",
    "DispatchError",
    "MalformedNetworkError",
    "PropagationLimitError",
    # Generic operators
    "DispatchEntry",
    "GenericOperator",
    "create_generic_operator",
    "extend_operator",
    "invoke",
    # Merge
    "default_merge",
    "default_contradictory",
    "make_merge_operator",
    "make_contradiction_operator",
    "make_set_merge_operator",
    "install_set_merge",
    # Cells and checkpoints
    "Cell",
    "SystemCheckpoint",
    "CheckpointManager",
]
