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
"""Generic arithmetic used by derived relations.

Every System owns an ArithmeticOperators bundle (or shares one handed to
it). Relations such as sum_relation lift these operators rather than raw
Python functions, so extending an operator - for example with set
lifting - changes the behavior of every relation already wired with it.

Division of two rationals is exact (Fraction, normalised back to int
when whole). Division by zero is undetermined and answers NOTHING, which
leaves the output cell untouched.

Set lifting applies an operator element-wise:

    {1, 2} + {10, 20} = {11, 12, 21, 22}
    {1, 2} * 3        = {3, 6}
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from fractions import Fraction
from numbers import Rational
from typing import Any, Callable, Dict, Iterator

from propagators.core.generic import GenericOperator
from propagators.core.values import NOTHING, is_anything, is_nothing, is_set

SET_ARITHMETIC_EXTENSION = "set_arithmetic"


def exact_divide(numerator: Any, denominator: Any) -> Any:
    """Divide, keeping rationals exact and treating x/0 as undetermined."""
    if denominator == 0:
        return NOTHING
    if isinstance(numerator, Rational) and isinstance(denominator, Rational):
        quotient = Fraction(numerator) / Fraction(denominator)
        return int(quotient) if quotient.denominator == 1 else quotient
    return numerator / denominator


def _members(value: Any) -> Any:
    return value if is_set(value) else (value,)


def lift_over_sets(op: GenericOperator) -> Callable[[Any, Any], Any]:
    """Build a handler that applies op to every combination of members.

    Undetermined (NOTHING) element results are dropped; if every
    combination is undetermined the whole result is NOTHING.
    """

    def elementwise(left: Any, right: Any) -> Any:
        results = set()
        for x in _members(left):
            for y in _members(right):
                r = op(x, y)
                if not is_nothing(r):
                    results.add(r)
        if not results:
            return NOTHING
        return frozenset(results)

    elementwise.__name__ = f"{op.name}_over_sets"
    return elementwise


@dataclass
class ArithmeticOperators:
    """The four generic operators behind sum and product relations.

    Attributes:
        plus: a + b
        minus: a - b
        times: a * b
        divide: exact a / b, NOTHING when b == 0
    """

    plus: GenericOperator = field(
        default_factory=lambda: GenericOperator("plus", operator.add)
    )
    minus: GenericOperator = field(
        default_factory=lambda: GenericOperator("minus", operator.sub)
    )
    times: GenericOperator = field(
        default_factory=lambda: GenericOperator("times", operator.mul)
    )
    divide: GenericOperator = field(
        default_factory=lambda: GenericOperator("divide", exact_divide)
    )

    def __iter__(self) -> Iterator[GenericOperator]:
        return iter((self.plus, self.minus, self.times, self.divide))

    def as_dict(self) -> Dict[str, GenericOperator]:
        return {op.name: op for op in self}


def make_arithmetic_operators() -> ArithmeticOperators:
    """Create a fresh, unextended operator bundle."""
    return ArithmeticOperators()


def install_set_arithmetic(ops: ArithmeticOperators) -> ArithmeticOperators:
    """Extend every operator in the bundle with set lifting (in place).

    Operators that already carry set lifting are left alone, so a bundle
    shared by several systems is lifted once.
    """
    for op in ops:
        if not op.mark_extension(SET_ARITHMETIC_EXTENSION):
            continue
        handler = lift_over_sets(op)
        op.extend(handler, is_set, is_anything)
        op.extend(handler, is_anything, is_set)
    return ops
