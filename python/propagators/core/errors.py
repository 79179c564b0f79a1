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
"""Exceptions raised by propagator networks."""

from __future__ import annotations

from typing import Any, Hashable, Optional, Tuple


class PropagatorError(Exception):
    """Base class for all propagator network errors."""


class InconsistencyError(PropagatorError):
    """A write produced a contradiction in a cell.

    Attributes:
        cell: Name of the cell whose merge failed
        reason: Description of the conflicting values
        value: The contradiction value produced by the merge
    """

    def __init__(self, cell: Hashable, reason: str, value: Any = None):
        self.cell = cell
        self.reason = reason
        self.value = value
        super().__init__(f"Inconsistency in cell {cell!r}: {reason}")


class DispatchError(PropagatorError, TypeError):
    """A generic operator had no handler applicable to its arguments."""

    def __init__(self, operator: str, args: Tuple[Any, ...], message: Optional[str] = None):
        self.operator = operator
        self.args_given = args
        detail = message or "no applicable handler"
        super().__init__(
            f"Generic operator {operator!r} cannot handle {len(args)} "
            f"argument(s) {args!r}: {detail}"
        )


class MalformedNetworkError(PropagatorError, ValueError):
    """Wiring was rejected before any propagation happened."""


class PropagationLimitError(PropagatorError):
    """A single propagation pass exceeded the configured step ceiling.

    Attributes:
        limit: The ceiling that was exceeded
    """

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Propagation did not reach a fixed point within {limit} steps"
        )
