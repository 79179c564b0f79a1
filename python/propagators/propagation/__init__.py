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
"""Propagators and the fixed-point scheduler.

Key components:
- Propagator: One function wired from input cells to an output cell
- lift: Turns a function into a propagator constructor
- System: Cells, propagators and the worklist scheduler
- FIFOWorklist / PriorityWorklist: Scheduling order of dirty propagators
- SystemBuilder: Fluent builder for systems
"""

from .propagator import (
    DEFAULT_PRIORITY,
    Propagator,
    PropagatorConstructor,
    lift,
)
from .worklist import (
    FIFOWorklist,
    PriorityWorklist,
    StepLimiter,
)
from .system import PropagationResult, System
from .builder import SystemBuilder

__all__ = [
    # Propagators
    "DEFAULT_PRIORITY",
    "Propagator",
    "PropagatorConstructor",
    "lift",
    # Worklist
    "FIFOWorklist",
    "PriorityWorklist",
    "StepLimiter",
    # System
    "System",
    "PropagationResult",
    "SystemBuilder",
]
