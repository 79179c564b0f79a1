# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Central metrics collection for propagator systems."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional

from .metrics import CellMetrics, EvaluationMetrics, RunMetrics, RunOutcome

logger = logging.getLogger(__name__)


@dataclass
class MetricsCollector:
    """Central collector for propagation metrics.

    Thread-safe collector shared by any number of systems. It aggregates
    per-cell write statistics and per-run evaluation counts, and fires
    alert callbacks on contradictions and step-limit aborts.

    Attributes:
        max_history: Maximum number of finished runs to keep
        enable_detailed: Keep per-run records (aggregates are always kept)
    """

    max_history: int = 1000
    enable_detailed: bool = True

    _cells: Dict[Hashable, CellMetrics] = field(default_factory=dict)
    _evaluations: EvaluationMetrics = field(default_factory=EvaluationMetrics)
    _outcomes: Dict[str, int] = field(default_factory=dict)
    _completed_runs: List[RunMetrics] = field(default_factory=list)

    _lock: threading.Lock = field(default_factory=threading.Lock)

    _alert_callbacks: List[Callable[[str, Dict[str, Any]], None]] = field(
        default_factory=list
    )
    _run_callbacks: List[Callable[[RunMetrics], None]] = field(default_factory=list)

    def start_run(self, trigger: str, run_id: Optional[str] = None) -> RunMetrics:
        """Open a record for a propagation run.

        Args:
            trigger: What started the run
            run_id: Optional run ID (generated if not provided)

        Returns:
            The RunMetrics to pass to finish_run()
        """
        return RunMetrics(run_id=run_id or str(uuid.uuid4())[:8], trigger=trigger)

    def finish_run(
        self,
        run: RunMetrics,
        evaluations: int,
        changed_cells: int,
        duration_ms: float,
        outcome: RunOutcome = RunOutcome.CONVERGED,
        error: Optional[str] = None,
    ) -> RunMetrics:
        """Close a run record and fold it into the aggregates."""
        run.evaluations = evaluations
        run.changed_cells = changed_cells
        run.duration_ms = duration_ms
        run.outcome = outcome
        run.error = error

        with self._lock:
            self._evaluations.record(evaluations, duration_ms)
            key = str(outcome)
            self._outcomes[key] = self._outcomes.get(key, 0) + 1
            if self.enable_detailed:
                self._completed_runs.append(run)
                if len(self._completed_runs) > self.max_history:
                    self._completed_runs = self._completed_runs[-self.max_history :]
            callbacks = list(self._run_callbacks)

        for callback in callbacks:
            try:
                callback(run)
            except Exception as e:
                logger.warning(f"Run callback error: {e}")

        if outcome == RunOutcome.STEP_LIMIT:
            self._trigger_alert(
                "step_limit",
                {"run_id": run.run_id, "evaluations": evaluations, "trigger": run.trigger},
            )
        return run

    def record_write(
        self,
        cell: Hashable,
        changed: bool,
        contradiction: bool = False,
    ) -> None:
        """Record one write to a cell.

        Args:
            cell: Cell name
            changed: Whether the value changed
            contradiction: Whether the merge was contradictory
        """
        with self._lock:
            if cell not in self._cells:
                self._cells[cell] = CellMetrics(cell)
            self._cells[cell].record(changed, contradiction)

        if contradiction:
            self._trigger_alert("contradiction", {"cell": repr(cell)})

    def register_alert_callback(
        self, callback: Callable[[str, Dict[str, Any]], None]
    ) -> None:
        """Register a callback for alerts.

        Args:
            callback: Function(alert_type, data) to call on alerts
        """
        with self._lock:
            self._alert_callbacks.append(callback)

    def register_run_callback(self, callback: Callable[[RunMetrics], None]) -> None:
        """Register a callback invoked with every finished RunMetrics.

        Runs are reported whether or not enable_detailed keeps them.
        """
        with self._lock:
            self._run_callbacks.append(callback)

    def _trigger_alert(self, alert_type: str, data: Dict[str, Any]) -> None:
        """Trigger alert callbacks (called without the lock held)."""
        with self._lock:
            callbacks = list(self._alert_callbacks)
        for callback in callbacks:
            try:
                callback(alert_type, data)
            except Exception as e:
                logger.warning(f"Alert callback error: {e}")

    def get_cell_metrics(self, cell: Hashable) -> Optional[CellMetrics]:
        """Get write metrics for one cell."""
        with self._lock:
            return self._cells.get(cell)

    def get_evaluation_metrics(self) -> EvaluationMetrics:
        """Get aggregate evaluation metrics."""
        with self._lock:
            return self._evaluations

    def get_recent_runs(self, n: int = 10) -> List[RunMetrics]:
        """Get the N most recent completed runs."""
        with self._lock:
            return self._completed_runs[-n:]

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics.

        Returns:
            Dictionary with aggregate statistics
        """
        with self._lock:
            return {
                "evaluations": self._evaluations.to_dict(),
                "outcomes": dict(self._outcomes),
                "cells": {
                    repr(name): metrics.to_dict()
                    for name, metrics in self._cells.items()
                },
                "contradictions": sum(m.contradictions for m in self._cells.values()),
                "completed_runs": len(self._completed_runs),
            }

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._cells.clear()
            self._evaluations = EvaluationMetrics()
            self._outcomes.clear()
            self._completed_runs.clear()
