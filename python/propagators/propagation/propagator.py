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
"""Propagators and propagator constructors.

A propagator watches zero or more input cells and writes one output cell.
Whenever an input changes it reads every input; if any of them is still
NOTHING it does nothing, otherwise it applies its function to the input
values and writes the result. The function may itself answer NOTHING to
say "not determined yet".

Propagators are stateless apart from their wiring. Two propagators with
the same function, inputs and output are the same propagator.

``lift`` turns an ordinary function (or a GenericOperator) into a
constructor that wires such propagators into a System:

    >>> plus = lift(operator.add)
    >>> plus(system, "a", "b", "c")     # c = a + b
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Hashable, Optional, Tuple

from propagators.core.errors import InconsistencyError, MalformedNetworkError
from propagators.core.values import describe, is_nothing

if TYPE_CHECKING:
    from .system import System

logger = logging.getLogger(__name__)

# Default scheduling priority (lower = evaluated first under PRIORITY order)
DEFAULT_PRIORITY = 100


def _function_name(function: Callable[..., Any]) -> str:
    return (
        getattr(function, "name", None)
        or getattr(function, "__name__", None)
        or type(function).__name__
    )


@dataclass(frozen=True)
class Propagator:
    """One unit of computation wired between cells.

    Attributes:
        function: Pure function of the input values
        inputs: Input cell names, in argument order
        output: Output cell name
        name: Label for logs (not part of identity)
        priority: Scheduling priority (not part of identity)
    """

    function: Callable[..., Any]
    inputs: Tuple[Hashable, ...]
    output: Hashable
    name: str = field(default="", compare=False)
    priority: int = field(default=DEFAULT_PRIORITY, compare=False)

    def __post_init__(self) -> None:
        if not callable(self.function):
            raise MalformedNetworkError(
                f"Propagator function must be callable, got {self.function!r}"
            )
        if self.output is None:
            raise MalformedNetworkError("Propagator needs an output cell")
        if not self.name:
            object.__setattr__(self, "name", _function_name(self.function))

    @property
    def cells(self) -> Tuple[Hashable, ...]:
        """Every cell this propagator touches (inputs then output)."""
        return self.inputs + (self.output,)

    def run(self, system: System) -> bool:
        """Evaluate once against the current cell contents.

        Args:
            system: The system this propagator is wired into

        Returns:
            True if the output cell changed

        Raises:
            InconsistencyError: If the write contradicts the output cell,
                or if the function itself answers a contradiction
        """
        values = [system.get_value(cell) for cell in self.inputs]
        if any(is_nothing(v) for v in values):
            return False

        result = self.function(*values)
        if is_nothing(result):
            return False
        if system.contradictory(result):
            reason = getattr(result, "reason", describe(result))
            logger.debug(f"{self!r} produced a contradiction: {reason}")
            raise InconsistencyError(self.output, reason, value=result)

        return system.write(self.output, result)

    def __repr__(self) -> str:
        args = ", ".join(repr(c) for c in self.inputs)
        return f"Propagator({self.name}({args}) -> {self.output!r})"


class PropagatorConstructor:
    """Wires propagators computing one function into systems.

    Calling the constructor with a system followed by N input cells and one
    output cell installs a propagator and returns the system.

    Attributes:
        function: The lifted function
        name: Label given to wired propagators
        priority: Priority given to wired propagators
        arity: Expected number of inputs, or None to accept any
    """

    def __init__(
        self,
        function: Callable[..., Any],
        name: Optional[str] = None,
        priority: int = DEFAULT_PRIORITY,
        arity: Optional[int] = None,
    ):
        if not callable(function):
            raise MalformedNetworkError(f"Cannot lift non-callable {function!r}")
        self.function = function
        self.name = name or _function_name(function)
        self.priority = priority
        self.arity = arity

    def build(self, *cells: Hashable) -> Propagator:
        """Create (but do not wire) a propagator over cells."""
        if not cells:
            raise MalformedNetworkError(
                f"{self.name}: propagator needs at least an output cell"
            )
        inputs, output = tuple(cells[:-1]), cells[-1]
        if self.arity is not None and len(inputs) != self.arity:
            raise MalformedNetworkError(
                f"{self.name}: expected {self.arity} input cell(s), got {len(inputs)}"
            )
        return Propagator(
            function=self.function,
            inputs=inputs,
            output=output,
            name=self.name,
            priority=self.priority,
        )

    def __call__(self, system: System, *cells: Hashable) -> System:
        return system.add_propagator(self.build(*cells))

    def __repr__(self) -> str:
        return f"PropagatorConstructor({self.name})"


def lift(
    function: Callable[..., Any],
    name: Optional[str] = None,
    priority: int = DEFAULT_PRIORITY,
    arity: Optional[int] = None,
) -> PropagatorConstructor:
    """Turn a function into a propagator constructor.

    Lifting a GenericOperator keeps a reference to the operator itself, so
    propagators wired now pick up extensions made to it later.

    Args:
        function: Function (or GenericOperator) of the input values
        name: Label for the wired propagators
        priority: Scheduling priority of the wired propagators
        arity: Optional check on the number of input cells

    Returns:
        A PropagatorConstructor
    """
    return PropagatorConstructor(function, name=name, priority=priority, arity=arity)
