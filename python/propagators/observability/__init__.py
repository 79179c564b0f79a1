# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Observability for propagator systems.

Key Components:
- MetricsCollector: Central metrics collection point, shared by systems
- CellMetrics: Per-cell write, change and contradiction counts
- RunMetrics / EvaluationMetrics: Evaluations and latency per run
- MetricsExporter: Export to logs, callbacks or Prometheus (optional)

Example:
    >>> from propagators.observability import MetricsCollector, LogExporter
    >>> collector = MetricsCollector()
    >>> system = System(collector=collector)
    >>> system.add_value("a", 1)
    >>> LogExporter(format="text").export(collector)
"""

from .collector import MetricsCollector
from .metrics import CellMetrics, EvaluationMetrics, RunMetrics, RunOutcome
from .exporter import (
    CallbackExporter,
    LogExporter,
    MetricsExporter,
    PrometheusExporter,
)

__all__ = [
    "MetricsCollector",
    "CellMetrics",
    "EvaluationMetrics",
    "RunMetrics",
    "RunOutcome",
    "MetricsExporter",
    "LogExporter",
    "CallbackExporter",
    "PrometheusExporter",
]
