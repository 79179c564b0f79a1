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
"""Relations built from propagators.

Each function here wires one or more propagators into a System and
returns the System (or, for constant(), the name of the new cell).

Multidirectional relations install one propagator per direction:

    sum_relation(system, "a", "b", "c")
        c = a + b,  a = c - b,  b = c - a

so information may enter through any subset of the cells. Arithmetic
relations lift the System's generic operators, not Python's, so they
follow the System's value domain (exact rationals, set-valued cells).
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Callable, Hashable, Optional

from propagators.core.values import NOTHING
from propagators.propagation.propagator import lift

if TYPE_CHECKING:
    from propagators.propagation.system import System

logger = logging.getLogger(__name__)


def constant(system: System, value: Any, name: Optional[Hashable] = None) -> Hashable:
    """Allocate a cell pre-loaded with value.

    Args:
        system: Target system
        value: The constant
        name: Cell name to use; a fresh "constant-N" name if omitted

    Returns:
        The cell name
    """
    cell = name if name is not None else system.fresh_cell("constant")
    system.add_value(cell, value)
    logger.debug(f"Seeded constant cell {cell!r} with {value!r}")
    return cell


def one_way(system: System, function: Callable[..., Any], *cells: Hashable) -> System:
    """Wire ``output = function(*inputs)`` with no reverse direction.

    The last cell is the output.
    """
    return lift(function)(system, *cells)


def bijection(
    system: System,
    a: Hashable,
    b: Hashable,
    function: Callable[[Any], Any],
    inverse: Callable[[Any], Any],
) -> System:
    """Wire ``b = function(a)`` and ``a = inverse(b)``.

    inverse(function(x)) must equal x over the values the cells will
    hold, otherwise the two directions disagree and the network reports
    a contradiction.
    """
    lift(function, arity=1)(system, a, b)
    lift(inverse, arity=1)(system, b, a)
    return system


def sum_relation(system: System, a: Hashable, b: Hashable, total: Hashable) -> System:
    """Wire ``total = a + b`` in all three directions."""
    ops = system.operators
    lift(ops.plus, arity=2)(system, a, b, total)
    lift(ops.minus, arity=2)(system, total, b, a)
    lift(ops.minus, arity=2)(system, total, a, b)
    return system


def difference_relation(
    system: System, a: Hashable, b: Hashable, difference: Hashable
) -> System:
    """Wire ``difference = a - b`` (that is, ``a = b + difference``)."""
    return sum_relation(system, b, difference, a)


def product_relation(
    system: System, a: Hashable, b: Hashable, product: Hashable
) -> System:
    """Wire ``product = a * b`` in all three directions.

    Solving for a factor when the other factor is zero is undetermined
    and leaves the factor's cell alone.
    """
    ops = system.operators
    lift(ops.times, arity=2)(system, a, b, product)
    lift(ops.divide, arity=2)(system, product, b, a)
    lift(ops.divide, arity=2)(system, product, a, b)
    return system


def quotient_relation(
    system: System, a: Hashable, b: Hashable, quotient: Hashable
) -> System:
    """Wire ``quotient = a / b`` (that is, ``a = b * quotient``)."""
    return product_relation(system, b, quotient, a)


def celsius_fahrenheit(system: System, celsius: Hashable, fahrenheit: Hashable) -> System:
    """Wire ``fahrenheit = celsius * 9/5 + 32`` both ways.

    Built from two constant cells and the generic sum and product
    relations, through one intermediate cell.
    """
    scale = constant(system, Fraction(9, 5))
    offset = constant(system, 32)
    scaled = system.fresh_cell("scaled")
    product_relation(system, celsius, scale, scaled)
    sum_relation(system, scaled, offset, fahrenheit)
    return system


def _switch(control: Any, value: Any) -> Any:
    return value if control else NOTHING


def switch(system: System, control: Hashable, value: Hashable, output: Hashable) -> System:
    """Copy value to output while control holds a truthy value."""
    return lift(_switch, name="switch", arity=2)(system, control, value, output)
