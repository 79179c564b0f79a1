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
"""Propagators: cells, propagators and generic operators.

A propagator network is made of cells that accumulate partial
information and propagators that compute derived information from
them. Every write is merged into the cell's current content; if the
content changes, the propagators watching the cell run again, until the
whole network reaches a fixed point or two pieces of information
contradict each other.

Key Components:
    - core: Values, generic operators, merge and cells
    - propagation: Propagators, worklists and the System scheduler
    - relations: Generic arithmetic and multidirectional relations
    - observability: Metrics collection and export
    - api: Functional interface (create_system, add_value, get_value, ...)

Usage:
    >>> from propagators import create_system, celsius_fahrenheit
    >>> system = create_system()
    >>> celsius_fahrenheit(system, "c", "f")
    >>> system.add_value("f", 212).get_value("c")
    100
"""

# Use lazy imports so submodules can be imported and tested standalone
# Full imports are done on first access via __getattr__


def __getattr__(name: str):
    """Lazy import of module attributes."""
    # Functional API
    if name in (
        "add_value",
        "create_generic_operator",
        "create_system",
        "extend_operator",
        "get_value",
        "lift",
    ):
        from .api import (
            add_value,
            create_generic_operator,
            create_system,
            extend_operator,
            get_value,
            lift,
        )

        return locals()[name]

    # Values
    if name in ("NOTHING", "Nothing", "Contradiction", "is_nothing", "is_contradiction"):
        from .core.values import (
            NOTHING,
            Contradiction,
            Nothing,
            is_contradiction,
            is_nothing,
        )

        return locals()[name]

    # Errors
    if name in (
        "DispatchError",
        "InconsistencyError",
        "MalformedNetworkError",
        "PropagationLimitError",
        "PropagatorError",
    ):
        from .core.errors import (
            DispatchError,
            InconsistencyError,
            MalformedNetworkError,
            PropagationLimitError,
            PropagatorError,
        )

        return locals()[name]

    # Generic operators and merge
    if name == "GenericOperator":
        from .core.generic import GenericOperator

        return GenericOperator

    if name in ("default_merge", "install_set_merge", "make_merge_operator"):
        from .core.merge import default_merge, install_set_merge, make_merge_operator

        return locals()[name]

    # Configuration
    if name in ("DEFAULT_CONFIG", "SystemConfig", "WorklistKind"):
        from .config import DEFAULT_CONFIG, SystemConfig, WorklistKind

        return locals()[name]

    # Propagation
    if name in ("Propagator", "PropagationResult", "System", "SystemBuilder"):
        from .propagation import (
            PropagationResult,
            Propagator,
            System,
            SystemBuilder,
        )

        return locals()[name]

    # Relations
    if name in (
        "ArithmeticOperators",
        "bijection",
        "celsius_fahrenheit",
        "constant",
        "difference_relation",
        "install_set_arithmetic",
        "one_way",
        "product_relation",
        "quotient_relation",
        "sum_relation",
        "switch",
    ):
        from .relations import (
            ArithmeticOperators,
            bijection,
            celsius_fahrenheit,
            constant,
            difference_relation,
            install_set_arithmetic,
            one_way,
            product_relation,
            quotient_relation,
            sum_relation,
            switch,
        )

        return locals()[name]

    # Observability
    if name in (
        "CallbackExporter",
        "LogExporter",
        "MetricsCollector",
        "PrometheusExporter",
    ):
        from .observability import (
            CallbackExporter,
            LogExporter,
            MetricsCollector,
            PrometheusExporter,
        )

        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Functional API
    "create_system",
    "add_value",
    "get_value",
    "lift",
    "create_generic_operator",
    "extend_operator",
    # Values
    "NOTHING",
    "Nothing",
    "Contradiction",
    "is_nothing",
    "is_contradiction",
    # Errors
    "PropagatorError",
    "InconsistencyError",
    "DispatchError",
    "MalformedNetworkError",
    "PropagationLimitError",
    # Generic operators and merge
    "GenericOperator",
    "default_merge",
    "install_set_merge",
    "make_merge_operator",
    # Configuration
    "SystemConfig",
    "WorklistKind",
    "DEFAULT_CONFIG",
    # Propagation
    "Propagator",
    "PropagationResult",
    "System",
    "SystemBuilder",
    # Relations
    "ArithmeticOperators",
    "install_set_arithmetic",
    "constant",
    "one_way",
    "bijection",
    "sum_relation",
    "difference_relation",
    "product_relation",
    "quotient_relation",
    "celsius_fahrenheit",
    "switch",
    # Observability
    "MetricsCollector",
    "LogExporter",
    "CallbackExporter",
    "PrometheusExporter",
]

__version__ = "0.1.0"
