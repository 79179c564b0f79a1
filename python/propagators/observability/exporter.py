# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0
"""Metrics exporters."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .collector import MetricsCollector
from .metrics import RunMetrics

logger = logging.getLogger(__name__)


class MetricsExporter(ABC):
    """Base class for metrics exporters."""

    @abstractmethod
    def export(self, collector: MetricsCollector) -> None:
        """Export metrics from the collector."""
        pass

    @abstractmethod
    def export_alert(self, alert_type: str, data: Dict[str, Any]) -> None:
        """Export an alert."""
        pass

    def attach(self, collector: MetricsCollector) -> MetricsExporter:
        """Forward the collector's alerts to this exporter."""
        collector.register_alert_callback(self.export_alert)
        return self


@dataclass
class LogExporter(MetricsExporter):
    """Export metrics to the logging system.

    Attributes:
        log_level: Logging level for metrics (default: INFO)
        alert_level: Logging level for alerts (default: WARNING)
        format: Output format ('json' or 'text')
    """

    log_level: int = logging.INFO
    alert_level: int = logging.WARNING
    format: str = "json"

    def export(self, collector: MetricsCollector) -> None:
        """Export metrics to logs."""
        summary = collector.get_summary()

        if self.format == "json":
            message = json.dumps(summary, indent=2)
        else:
            message = self._format_text(summary)

        logger.log(self.log_level, f"Propagator Metrics:\n{message}")

    def export_alert(self, alert_type: str, data: Dict[str, Any]) -> None:
        """Export an alert to logs."""
        if self.format == "json":
            message = json.dumps({"alert_type": alert_type, **data})
        else:
            message = f"{alert_type}: {data}"

        logger.log(self.alert_level, f"Propagator Alert: {message}")

    def _format_text(self, summary: Dict[str, Any]) -> str:
        """Format summary as human-readable text."""
        lines = []

        evaluations = summary.get("evaluations", {})
        lines.append("Runs:")
        lines.append(f"  Count: {evaluations.get('runs', 0)}")
        lines.append(f"  Evaluations: {evaluations.get('total_evaluations', 0)}")
        lines.append(
            f"  Mean/max per run: {evaluations.get('mean_evaluations', 0):.1f}"
            f"/{evaluations.get('max_evaluations', 0)}"
        )
        lines.append(f"  Mean latency: {evaluations.get('mean_ms', 0):.3f}ms")

        outcomes = summary.get("outcomes", {})
        if outcomes:
            lines.append(f"  Outcomes: {outcomes}")

        cells = summary.get("cells", {})
        if cells:
            lines.append("\nCells:")
            for name, metrics in cells.items():
                lines.append(
                    f"  {name}: writes={metrics.get('writes', 0)}, "
                    f"changes={metrics.get('changes', 0)}, "
                    f"contradictions={metrics.get('contradictions', 0)}"
                )

        return "\n".join(lines)


@dataclass
class CallbackExporter(MetricsExporter):
    """Forward collector output to plain callables.

    export() hands summary_callback the collector summary. Once attached,
    run_callback receives every RunMetrics as its run finishes and
    alert_callback receives contradiction and step-limit alerts. A failing
    callback is logged and never interrupts propagation.

    Attributes:
        summary_callback: Called with the collector summary dict
        run_callback: Called with each finished RunMetrics
        alert_callback: Called with (alert_type, data)
    """

    summary_callback: Optional[Callable[[Dict[str, Any]], None]] = None
    run_callback: Optional[Callable[[RunMetrics], None]] = None
    alert_callback: Optional[Callable[[str, Dict[str, Any]], None]] = None

    def attach(self, collector: MetricsCollector) -> MetricsExporter:
        """Subscribe to the collector's alerts and finished runs."""
        super().attach(collector)
        collector.register_run_callback(self.export_run)
        return self

    def export(self, collector: MetricsCollector) -> None:
        if self.summary_callback is not None:
            self._forward("summary", self.summary_callback, collector.get_summary())

    def export_run(self, run: RunMetrics) -> None:
        if self.run_callback is not None:
            self._forward("run", self.run_callback, run)

    def export_alert(self, alert_type: str, data: Dict[str, Any]) -> None:
        if self.alert_callback is not None:
            self._forward("alert", self.alert_callback, alert_type, data)

    @staticmethod
    def _forward(kind: str, callback: Callable[..., None], *args: Any) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.warning(f"Callback exporter {kind} callback error: {e}")


class PrometheusExporter(MetricsExporter):
    """Export propagation metrics to Prometheus.

    Every metric is a gauge set from the collector summary, so export()
    can be called repeatedly. Supports pull mode (serve ``registry``) and
    push mode (Pushgateway). Requires the ``prometheus_client`` package,
    installed with the ``prometheus`` extra.

    Attributes:
        namespace: Metric name prefix (default: "propagators")
        push_gateway: Optional Pushgateway URL for push mode
        job_name: Job name for Pushgateway (default: "propagators")
        per_cell: Also export write counts labelled by cell
    """

    def __init__(
        self,
        namespace: str = "propagators",
        push_gateway: Optional[str] = None,
        job_name: str = "propagators",
        per_cell: bool = False,
    ) -> None:
        try:
            import prometheus_client
        except ImportError:
            raise ImportError(
                "prometheus_client is required for PrometheusExporter. "
                "Install with: pip install prometheus-client"
            )

        self._pc = prometheus_client
        self.namespace = namespace
        self.push_gateway = push_gateway
        self.job_name = job_name
        self.per_cell = per_cell

        self._registry = prometheus_client.CollectorRegistry()
        self._build_metrics()

    def _build_metrics(self) -> None:
        pc = self._pc
        ns = self.namespace
        reg = self._registry

        self._runs = pc.Gauge(f"{ns}_runs", "Finished propagation runs", registry=reg)
        self._outcomes = pc.Gauge(
            f"{ns}_run_outcomes",
            "Finished propagation runs by outcome",
            ["outcome"],
            registry=reg,
        )
        self._evaluations = pc.Gauge(
            f"{ns}_evaluations", "Propagator evaluations", registry=reg
        )
        self._evaluations_mean = pc.Gauge(
            f"{ns}_evaluations_per_run_mean",
            "Mean propagator evaluations per run",
            registry=reg,
        )
        self._latency_mean = pc.Gauge(
            f"{ns}_run_latency_mean_ms",
            "Mean run latency in milliseconds",
            registry=reg,
        )
        self._latency_p99 = pc.Gauge(
            f"{ns}_run_latency_p99_ms",
            "P99 run latency in milliseconds",
            registry=reg,
        )
        self._contradictions = pc.Gauge(
            f"{ns}_contradictions", "Contradictory cell writes", registry=reg
        )
        self._cell_writes = pc.Gauge(
            f"{ns}_cell_writes", "Writes by cell", ["cell"], registry=reg
        )
        self._cell_contradictions = pc.Gauge(
            f"{ns}_cell_contradictions",
            "Contradictory writes by cell",
            ["cell"],
            registry=reg,
        )

    @property
    def registry(self):
        """The CollectorRegistry holding this exporter's metrics."""
        return self._registry

    def export(self, collector: MetricsCollector) -> None:
        summary = collector.get_summary()

        evaluations = summary.get("evaluations", {})
        self._runs.set(evaluations.get("runs", 0))
        self._evaluations.set(evaluations.get("total_evaluations", 0))
        self._evaluations_mean.set(evaluations.get("mean_evaluations", 0))
        self._latency_mean.set(evaluations.get("mean_ms", 0))
        self._latency_p99.set(evaluations.get("p99_ms", 0))

        for outcome, count in summary.get("outcomes", {}).items():
            self._outcomes.labels(outcome=outcome).set(count)

        self._contradictions.set(summary.get("contradictions", 0))

        if self.per_cell:
            for cell, metrics in summary.get("cells", {}).items():
                self._cell_writes.labels(cell=cell).set(metrics.get("writes", 0))
                self._cell_contradictions.labels(cell=cell).set(
                    metrics.get("contradictions", 0)
                )

        if self.push_gateway:
            try:
                self._pc.push_to_gateway(
                    self.push_gateway,
                    job=self.job_name,
                    registry=self._registry,
                )
            except Exception as e:
                logger.warning(f"Failed to push to Prometheus gateway: {e}")

    def export_alert(self, alert_type: str, data: Dict[str, Any]) -> None:
        # Alerts already show up in the outcome and contradiction gauges.
        logger.debug(f"Prometheus alert (not exported): {alert_type} {data}")
