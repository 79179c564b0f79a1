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
"""Propagator systems: cells, propagators and the fixed-point scheduler.

A System owns a set of cells and the propagators wired between them.
Writing a value into a cell merges it with what the cell already knows.
If the cell's value changes, every propagator watching it is put on a
worklist; each evaluation may change further cells and schedule further
propagators, until the worklist is empty (a fixed point) or a merge
produces a contradiction.

Key properties:
- Synchronous: add_value() returns only once the network has settled
- Confluent: merge is commutative and associative and propagators are
  pure, so the fixed point does not depend on evaluation order
- Atomic: an update that ends in an error is rolled back entirely

Example:
    >>> system = System()
    >>> lift(operator.add)(system, "a", "b", "c")
    >>> system.add_value("a", 1).add_value("b", 2)
    >>> system.get_value("c")
    3
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Set, Union

from propagators.config import DEFAULT_CONFIG, SystemConfig, WorklistKind
from propagators.core.cell import Cell
from propagators.core.checkpoint import CheckpointManager, SystemCheckpoint
from propagators.core.errors import (
    InconsistencyError,
    MalformedNetworkError,
    PropagationLimitError,
)
from propagators.core.generic import GenericOperator
from propagators.core.merge import (
    install_set_merge,
    make_contradiction_operator,
    make_merge_operator,
)
from propagators.core.values import NOTHING
from propagators.observability.collector import MetricsCollector
from propagators.observability.metrics import RunMetrics, RunOutcome
from propagators.relations.arithmetic import (
    ArithmeticOperators,
    install_set_arithmetic,
    make_arithmetic_operators,
)

from .propagator import Propagator
from .worklist import FIFOWorklist, PriorityWorklist, StepLimiter, Worklist

logger = logging.getLogger(__name__)

MergeFunction = Union[GenericOperator, Callable[[Any, Any], Any]]
ContradictionCheck = Union[GenericOperator, Callable[[Any], bool]]


@dataclass
class PropagationResult:
    """Result of the most recent update.

    Attributes:
        converged: Whether the network reached a fixed point
        evaluations: Number of propagator evaluations performed
        changed_cells: Cells whose value changed
        duration_ms: Wall time of the update
        error: The error that aborted the update, if any
    """

    converged: bool = True
    evaluations: int = 0
    changed_cells: Set[Hashable] = field(default_factory=set)
    duration_ms: float = 0.0
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        """True if propagation converged without errors."""
        return self.converged and self.error is None


def _as_operator(
    function: Optional[Union[GenericOperator, Callable[..., Any]]],
    factory: Callable[[], GenericOperator],
    name: str,
) -> GenericOperator:
    if function is None:
        return factory()
    if isinstance(function, GenericOperator):
        return function
    if not callable(function):
        raise TypeError(f"{name} must be callable, got {function!r}")
    return GenericOperator(name, function)


class System:
    """A network of cells and propagators driven to a fixed point.

    The system maintains:
    - Cells by name, each with its subscribed propagators
    - All registered propagators, in registration order
    - A merge operator and a contradiction predicate (both generic
      operators, extensible after creation)
    - The arithmetic operators derived relations are built from
    - A worklist of propagators awaiting evaluation

    Propagation uses a worklist algorithm:
    1. A write changes a cell; its propagators join the worklist
    2. Pop one propagator and evaluate it
    3. If it changes its output cell, that cell's propagators join
    4. Repeat until the worklist is empty or an error is raised
    """

    def __init__(
        self,
        merge: Optional[MergeFunction] = None,
        contradictory: Optional[ContradictionCheck] = None,
        config: Optional[SystemConfig] = None,
        operators: Optional[ArithmeticOperators] = None,
        collector: Optional[MetricsCollector] = None,
    ):
        """Initialize an empty system.

        Args:
            merge: Merge function or operator (defaults to a fresh operator
                over default_merge). Generic operators are shared, not copied.
            contradictory: Contradiction predicate or operator
            config: System settings (defaults to DEFAULT_CONFIG)
            operators: Arithmetic operators for derived relations
            collector: Optional metrics collector
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self.merge = _as_operator(merge, make_merge_operator, "merge")
        self.contradictory = _as_operator(
            contradictory, make_contradiction_operator, "contradictory?"
        )
        self.operators = operators if operators is not None else make_arithmetic_operators()
        self.collector = collector

        if self.config.set_values:
            install_set_merge(self.merge)
            install_set_arithmetic(self.operators)

        self._cells: Dict[Hashable, Cell] = {}
        self._propagators: List[Propagator] = []
        self._registered: Set[Propagator] = set()
        self._worklist: Worklist = (
            PriorityWorklist()
            if self.config.worklist == WorklistKind.PRIORITY
            else FIFOWorklist()
        )
        self._limiter = StepLimiter(self.config.max_steps)
        self._history = CheckpointManager(self.config.checkpoint_history)
        self._fresh_names = itertools.count(1)
        self._propagating = False
        self._pass_added: List[Propagator] = []
        self._revision = 0
        self.last_result = PropagationResult()

        self._history.record(self.checkpoint())

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    @property
    def cells(self) -> Dict[Hashable, Cell]:
        """Mapping of cell names to cells (a copy)."""
        return dict(self._cells)

    @property
    def cell_names(self) -> List[Hashable]:
        return list(self._cells.keys())

    @property
    def revision(self) -> int:
        """Number of updates that have settled successfully."""
        return self._revision

    def has_cell(self, name: Hashable) -> bool:
        return name in self._cells

    def declare_cell(self, name: Hashable) -> Cell:
        """Create a cell if it does not exist yet.

        Raises:
            MalformedNetworkError: If name is not hashable
        """
        try:
            cell = self._cells.get(name)
        except TypeError as e:
            raise MalformedNetworkError(f"Cell name {name!r} is not hashable") from e
        if cell is None:
            cell = Cell(name)
            self._cells[name] = cell
        return cell

    def cell(self, name: Hashable) -> Cell:
        """Look up a cell, creating it unless strict_cells is set.

        Raises:
            MalformedNetworkError: Unknown cell under strict_cells
        """
        try:
            existing = self._cells.get(name)
        except TypeError as e:
            raise MalformedNetworkError(f"Cell name {name!r} is not hashable") from e
        if existing is not None:
            return existing
        if self.config.strict_cells:
            raise MalformedNetworkError(f"Unknown cell {name!r}")
        return self.declare_cell(name)

    def fresh_cell(self, prefix: str = "cell") -> Hashable:
        """Allocate a new cell with a system-unique generated name."""
        while True:
            name = f"{prefix}-{next(self._fresh_names)}"
            if name not in self._cells:
                self.declare_cell(name)
                return name

    def get_value(self, name: Hashable) -> Any:
        """Current value of a cell; NOTHING for unknown cells."""
        try:
            cell = self._cells.get(name)
        except TypeError:
            return NOTHING
        return NOTHING if cell is None else cell.value

    # ------------------------------------------------------------------
    # Propagators
    # ------------------------------------------------------------------

    @property
    def propagators(self) -> List[Propagator]:
        """All registered propagators, in registration order (a copy)."""
        return list(self._propagators)

    def propagators_for(self, name: Hashable) -> List[Propagator]:
        """Propagators subscribed to a cell, in subscription order."""
        cell = self._cells.get(name)
        return list(cell.neighbors) if cell is not None else []

    def add_propagator(self, propagator: Propagator) -> System:
        """Wire a propagator into the network and run it once.

        Wiring an already registered propagator is a no-op.

        Raises:
            MalformedNetworkError: If it references unknown cells under
                strict_cells
            InconsistencyError: If its first evaluation contradicts the
                network (the propagator is not kept)
        """
        if propagator in self._registered:
            return self

        cells = [self.cell(name) for name in propagator.cells]

        def wire() -> None:
            for cell in cells[:-1]:
                cell.subscribe(propagator)
            self._propagators.append(propagator)
            self._registered.add(propagator)
            self._pass_added.append(propagator)
            logger.debug(f"Wired {propagator!r}")
            self.schedule([propagator])

        self._update("add_propagator", wire)
        return self

    def _unwire(self, propagator: Propagator) -> None:
        for name in propagator.inputs:
            cell = self._cells.get(name)
            if cell is not None and propagator in cell.neighbors:
                cell.neighbors.remove(propagator)
        if propagator in self._registered:
            self._registered.discard(propagator)
            self._propagators.remove(propagator)

    # ------------------------------------------------------------------
    # Writes and scheduling
    # ------------------------------------------------------------------

    def add_value(self, name: Hashable, value: Any) -> System:
        """Write a value into a cell and propagate to a fixed point.

        Called from inside a propagator, the write joins the pass already
        running instead of starting a new one.

        Args:
            name: Cell name
            value: Value to merge into the cell

        Returns:
            Self for chaining

        Raises:
            InconsistencyError: If any merge during propagation
                contradicts; every cell is restored to its prior value
            PropagationLimitError: If max_steps is exceeded
        """
        self._update("add_value", lambda: self.write(name, value))
        return self

    def write(self, name: Hashable, value: Any) -> bool:
        """Merge value into a cell and schedule its neighbors.

        Unlike add_value() this does not run the scheduler; it is the
        write path used by propagators during a pass.

        Returns:
            True if the cell's value changed
        """
        changed = self.cell(name).write(value, self)
        if changed:
            self.last_result.changed_cells.add(name)
        return changed

    def schedule(self, propagators: Iterable[Propagator]) -> None:
        """Put propagators on the worklist (duplicates coalesce)."""
        for propagator in propagators:
            self._worklist.add(propagator, priority=propagator.priority)

    def record_write(
        self,
        name: Hashable,
        changed: bool,
        contradiction: bool = False,
    ) -> None:
        """Report a cell write to the metrics collector."""
        if self.collector is not None:
            self.collector.record_write(name, changed, contradiction)

    def _update(self, trigger: str, action: Callable[[], None]) -> None:
        """Run action and propagate, rolling everything back on error."""
        if self._propagating:
            action()
            return

        snapshot = self.checkpoint()
        run = self.collector.start_run(trigger) if self.collector else None
        self.last_result = PropagationResult()
        self._limiter.reset()
        self._pass_added = []
        self._propagating = True
        start = time.perf_counter()

        try:
            action()
            self._run_to_fixpoint()
        except Exception as e:
            self._worklist.clear()
            self._restore_values(snapshot)
            for propagator in self._pass_added:
                self._unwire(propagator)
            self.last_result.converged = False
            self.last_result.error = e
            self.last_result.changed_cells = set()
            self._finish(run, start, e)
            logger.debug(f"{trigger} rolled back after {type(e).__name__}: {e}")
            raise
        finally:
            self._propagating = False
            self._pass_added = []

        self._revision += 1
        self._history.record(self.checkpoint())
        self._finish(run, start, None)
        logger.debug(
            f"{trigger} settled at revision {self._revision}: "
            f"{self.last_result.evaluations} evaluations, "
            f"{len(self.last_result.changed_cells)} cells changed"
        )

    def _run_to_fixpoint(self) -> None:
        while self._worklist:
            propagator = self._worklist.pop()
            if not self._limiter.increment():
                logger.warning(
                    f"Propagation exceeded {self._limiter.max_steps} steps; aborting"
                )
                raise PropagationLimitError(self._limiter.max_steps)
            self.last_result.evaluations += 1
            propagator.run(self)

    def _finish(
        self,
        run: Optional[RunMetrics],
        start: float,
        error: Optional[Exception],
    ) -> None:
        self.last_result.duration_ms = (time.perf_counter() - start) * 1000
        if run is None:
            return
        if error is None:
            outcome = RunOutcome.CONVERGED
        elif isinstance(error, InconsistencyError):
            outcome = RunOutcome.CONTRADICTION
        elif isinstance(error, PropagationLimitError):
            outcome = RunOutcome.STEP_LIMIT
        else:
            outcome = RunOutcome.ERROR
        self.collector.finish_run(
            run,
            evaluations=self.last_result.evaluations,
            changed_cells=len(self.last_result.changed_cells),
            duration_ms=self.last_result.duration_ms,
            outcome=outcome,
            error=str(error) if error is not None else None,
        )

    # ------------------------------------------------------------------
    # Checkpoints
    # ------------------------------------------------------------------

    def checkpoint(self) -> SystemCheckpoint:
        """Snapshot every cell value and the wiring at the current revision."""
        return SystemCheckpoint(
            revision=self._revision,
            values={name: cell.value for name, cell in self._cells.items()},
            propagators=tuple(self._propagators),
        )

    def _restore_values(self, checkpoint: SystemCheckpoint) -> None:
        for name, cell in self._cells.items():
            cell.value = checkpoint.values.get(name, NOTHING)

    def restore(self, checkpoint: SystemCheckpoint) -> System:
        """Reset every cell and the wiring to the state in a checkpoint.

        Propagators wired after the checkpoint are unwired, so the restored
        network is the fixed point it was at that revision. Cells created
        after the checkpoint are reset to NOTHING.
        """
        if self._propagating:
            raise RuntimeError("Cannot restore a checkpoint during propagation")
        kept = set(checkpoint.propagators)
        for propagator in [p for p in self._propagators if p not in kept]:
            self._unwire(propagator)
        self._restore_values(checkpoint)
        self._revision = checkpoint.revision
        self._history.rollback_to(checkpoint.revision)
        logger.debug(f"Restored checkpoint at revision {checkpoint.revision}")
        return self

    def rollback_to(self, revision: int) -> bool:
        """Return the network to a settled revision kept in history.

        Returns:
            True if the revision was found and restored
        """
        checkpoint = self._history.rollback_to(revision)
        if checkpoint is None:
            return False
        self.restore(checkpoint)
        return True

    def __repr__(self) -> str:
        return (
            f"System(cells={len(self._cells)}, propagators={len(self._propagators)}, "
            f"revision={self._revision})"
        )
