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
"""Fluent construction of propagator systems."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from propagators.config import DEFAULT_CONFIG, SystemConfig, WorklistKind
from propagators.observability.collector import MetricsCollector
from propagators.relations.arithmetic import ArithmeticOperators

from .system import ContradictionCheck, MergeFunction, System

# A wiring step: something like lift(f) or sum_relation, plus its cells
Wiring = Tuple[Callable[..., Any], Tuple[Any, ...]]


class SystemBuilder:
    """Builder for constructing propagator systems.

    Wiring is applied in the order given, then initial values are added,
    so the resulting system has already propagated them.

    Example:
        >>> system = (
        ...     SystemBuilder()
        ...     .with_set_values()
        ...     .with_max_steps(500)
        ...     .with_wiring(sum_relation, "a", "b", "total")
        ...     .with_value("a", 1)
        ...     .with_value("b", 2)
        ...     .build()
        ... )
    """

    def __init__(self):
        """Initialize the builder."""
        self._config: SystemConfig = DEFAULT_CONFIG
        self._merge: Optional[MergeFunction] = None
        self._contradictory: Optional[ContradictionCheck] = None
        self._operators: Optional[ArithmeticOperators] = None
        self._collector: Optional[MetricsCollector] = None
        self._cells: List[Hashable] = []
        self._wiring: List[Wiring] = []
        self._values: Dict[Hashable, Any] = {}

    def with_config(self, config: SystemConfig) -> SystemBuilder:
        self._config = config
        return self

    def with_max_steps(self, max_steps: Optional[int]) -> SystemBuilder:
        self._config = replace(self._config, max_steps=max_steps)
        return self

    def with_worklist(self, kind: WorklistKind) -> SystemBuilder:
        self._config = replace(self._config, worklist=kind)
        return self

    def with_strict_cells(self, strict: bool = True) -> SystemBuilder:
        self._config = replace(self._config, strict_cells=strict)
        return self

    def with_set_values(self, enabled: bool = True) -> SystemBuilder:
        """Install set merge and set arithmetic on the built system."""
        self._config = replace(self._config, set_values=enabled)
        return self

    def with_merge(self, merge: MergeFunction) -> SystemBuilder:
        self._merge = merge
        return self

    def with_contradiction_check(self, check: ContradictionCheck) -> SystemBuilder:
        self._contradictory = check
        return self

    def with_operators(self, operators: ArithmeticOperators) -> SystemBuilder:
        """Share an arithmetic operator bundle with the built system."""
        self._operators = operators
        return self

    def with_collector(self, collector: MetricsCollector) -> SystemBuilder:
        self._collector = collector
        return self

    def with_cell(self, name: Hashable) -> SystemBuilder:
        """Declare a cell (needed before wiring under strict_cells)."""
        self._cells.append(name)
        return self

    def with_wiring(self, constructor: Callable[..., Any], *args: Any) -> SystemBuilder:
        """Queue ``constructor(system, *args)``.

        Args:
            constructor: A PropagatorConstructor or relation function
            *args: Cells (and any extra arguments) after the system
        """
        self._wiring.append((constructor, args))
        return self

    def with_value(self, name: Hashable, value: Any) -> SystemBuilder:
        """Queue an initial value, added after all wiring."""
        self._values[name] = value
        return self

    def build(self) -> System:
        """Build the configured system.

        Raises:
            InconsistencyError: If the initial values contradict each other
        """
        system = System(
            merge=self._merge,
            contradictory=self._contradictory,
            config=self._config,
            operators=self._operators,
            collector=self._collector,
        )

        for name in self._cells:
            system.declare_cell(name)

        for constructor, args in self._wiring:
            constructor(system, *args)

        for name, value in self._values.items():
            system.add_value(name, value)

        return system
