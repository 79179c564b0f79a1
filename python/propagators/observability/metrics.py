# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Metric data structures for propagator observability."""

from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional


class RunOutcome(Enum):
    """How a propagation run ended."""

    CONVERGED = "converged"
    CONTRADICTION = "contradiction"
    STEP_LIMIT = "step_limit"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass
class CellMetrics:
    """Write statistics for one cell.

    Attributes:
        cell: Cell name
        writes: Total writes attempted
        changes: Writes that changed the value
        contradictions: Writes rejected as contradictory
    """

    cell: Hashable
    writes: int = 0
    changes: int = 0
    contradictions: int = 0

    def record(self, changed: bool, contradiction: bool = False) -> None:
        """Record one write."""
        self.writes += 1
        if changed:
            self.changes += 1
        if contradiction:
            self.contradictions += 1

    @property
    def noop_writes(self) -> int:
        """Writes that merged to the value already present."""
        return self.writes - self.changes - self.contradictions

    def to_dict(self) -> Dict[str, Any]:
        """Export metrics as dictionary."""
        return {
            "cell": repr(self.cell),
            "writes": self.writes,
            "changes": self.changes,
            "noop_writes": self.noop_writes,
            "contradictions": self.contradictions,
        }


@dataclass
class RunMetrics:
    """One propagation run (an add_value or add_propagator call).

    Attributes:
        run_id: Identifier assigned by the collector
        trigger: What started the run ("add_value", "add_propagator")
        evaluations: Propagator evaluations performed
        changed_cells: Number of cells whose value changed
        duration_ms: Wall time of the run
        outcome: How the run ended
        error: Error message for failed runs
    """

    run_id: str
    trigger: str
    evaluations: int = 0
    changed_cells: int = 0
    duration_ms: float = 0.0
    outcome: RunOutcome = RunOutcome.CONVERGED
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Export metrics as dictionary."""
        return {
            "run_id": self.run_id,
            "trigger": self.trigger,
            "evaluations": self.evaluations,
            "changed_cells": self.changed_cells,
            "duration_ms": round(self.duration_ms, 3),
            "outcome": str(self.outcome),
            "error": self.error,
        }


@dataclass
class EvaluationMetrics:
    """Distribution of evaluations per run.

    Attributes:
        counts: Evaluations recorded per run
        latencies_ms: Run durations in milliseconds
    """

    counts: List[int] = field(default_factory=list)
    latencies_ms: List[float] = field(default_factory=list)

    def record(self, evaluations: int, latency_ms: float) -> None:
        self.counts.append(evaluations)
        self.latencies_ms.append(latency_ms)

    @property
    def runs(self) -> int:
        return len(self.counts)

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def mean(self) -> float:
        return statistics.mean(self.counts) if self.counts else 0.0

    @property
    def max(self) -> int:
        return max(self.counts) if self.counts else 0

    @property
    def mean_ms(self) -> float:
        return statistics.mean(self.latencies_ms) if self.latencies_ms else 0.0

    @property
    def p99_ms(self) -> float:
        """99th percentile run latency."""
        if not self.latencies_ms:
            return 0.0
        sorted_vals = sorted(self.latencies_ms)
        idx = int(len(sorted_vals) * 0.99)
        return sorted_vals[min(idx, len(sorted_vals) - 1)]

    def to_dict(self) -> Dict[str, Any]:
        """Export metrics as dictionary."""
        return {
            "runs": self.runs,
            "total_evaluations": self.total,
            "mean_evaluations": round(self.mean, 2),
            "max_evaluations": self.max,
            "mean_ms": round(self.mean_ms, 3),
            "p99_ms": round(self.p99_ms, 3),
        }
