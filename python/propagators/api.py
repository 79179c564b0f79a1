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
"""Functional interface to propagator systems.

Thin wrappers over System and GenericOperator for callers who prefer
free functions:

    >>> system = create_system()
    >>> plus = create_generic_operator(operator.add, name="plus")
    >>> lift(plus)(system, "a", "b", "c")
    >>> add_value(system, "a", 1)
    >>> add_value(system, "b", 2)
    >>> get_value(system, "c")
    3
"""

from __future__ import annotations

from typing import Any, Hashable, Optional

from propagators.config import SystemConfig
from propagators.core.generic import (
    GenericOperator,
    Handler,
    Predicate,
    create_generic_operator,
)
from propagators.observability.collector import MetricsCollector
from propagators.propagation.propagator import lift
from propagators.propagation.system import ContradictionCheck, MergeFunction, System
from propagators.relations.arithmetic import ArithmeticOperators


def create_system(
    merge: Optional[MergeFunction] = None,
    contradictory: Optional[ContradictionCheck] = None,
    config: Optional[SystemConfig] = None,
    collector: Optional[MetricsCollector] = None,
    operators: Optional[ArithmeticOperators] = None,
) -> System:
    """Create an empty system.

    Args:
        merge: Merge function or generic operator (default_merge if omitted)
        contradictory: Contradiction predicate or generic operator
        config: System settings
        collector: Optional metrics collector
        operators: Arithmetic operators to share with other systems

    Returns:
        A new System with no cells and no propagators
    """
    return System(
        merge=merge,
        contradictory=contradictory,
        config=config,
        operators=operators,
        collector=collector,
    )


def add_value(system: System, cell: Hashable, value: Any) -> System:
    """Merge value into cell and propagate to a fixed point."""
    return system.add_value(cell, value)


def get_value(system: System, cell: Hashable) -> Any:
    """Current value of cell (NOTHING if it has none)."""
    return system.get_value(cell)


def extend_operator(
    operator: GenericOperator,
    handler: Handler,
    *predicates: Predicate,
) -> GenericOperator:
    """Extend operator in place; every existing holder sees the new entry."""
    return operator.extend(handler, *predicates)


__all__ = [
    "add_value",
    "create_generic_operator",
    "create_system",
    "extend_operator",
    "get_value",
    "lift",
]
