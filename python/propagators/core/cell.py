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
"""Cells: named slots of partial information."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Hashable, List

from .errors import InconsistencyError
from .values import NOTHING, describe

if TYPE_CHECKING:
    from propagators.propagation.propagator import Propagator
    from propagators.propagation.system import System

logger = logging.getLogger(__name__)


class Cell:
    """A named container for one value plus its subscribed propagators.

    A cell belongs to exactly one System. Its value starts as NOTHING and
    is only ever replaced through write(), which merges the proposed value
    with the current one.

    Attributes:
        name: Unique, hashable cell identifier within its System
        value: Current content
        neighbors: Propagators to re-run when the value changes, in
            subscription order
    """

    __slots__ = ("name", "value", "neighbors")

    def __init__(self, name: Hashable):
        self.name = name
        self.value: Any = NOTHING
        self.neighbors: List[Propagator] = []

    def read(self) -> Any:
        """Return the current value."""
        return self.value

    def subscribe(self, propagator: Propagator) -> None:
        """Add a propagator to this cell's neighbors (once)."""
        if propagator not in self.neighbors:
            self.neighbors.append(propagator)

    def write(self, value: Any, system: System) -> bool:
        """Merge value into this cell.

        Args:
            value: Proposed increment
            system: Owning system (supplies merge, contradiction check and
                scheduling)

        Returns:
            True if the cell's value changed and neighbors were scheduled

        Raises:
            InconsistencyError: If the merge yields a contradiction. The
                cell keeps its previous value.
        """
        merged = system.merge(self.value, value)

        if system.contradictory(merged):
            reason = getattr(merged, "reason", describe(merged))
            logger.warning(f"Contradiction in cell {self.name!r}: {reason}")
            system.record_write(self.name, changed=False, contradiction=True)
            raise InconsistencyError(self.name, reason, value=merged)

        if merged == self.value:
            system.record_write(self.name, changed=False)
            return False

        logger.debug(f"Cell {self.name!r}: {describe(self.value)} -> {describe(merged)}")
        self.value = merged
        system.record_write(self.name, changed=True)
        system.schedule(self.neighbors)
        return True

    def __repr__(self) -> str:
        return f"Cell({self.name!r}, {describe(self.value)})"
