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
"""Pytest configuration for propagator tests.

Puts the ``python/`` directory on sys.path so the suite runs from a
source checkout as well as against an installed package, and provides
the systems most tests start from.
"""

import sys
from pathlib import Path

import pytest

# python/ holds the propagators package
python_dir = Path(__file__).parent.parent.parent
if str(python_dir) not in sys.path:
    sys.path.insert(0, str(python_dir))

from propagators.config import SystemConfig, WorklistKind  # noqa: E402
from propagators.core.values import NOTHING  # noqa: E402
from propagators.observability.collector import MetricsCollector  # noqa: E402
from propagators.propagation.system import System  # noqa: E402
from propagators.relations.relations import celsius_fahrenheit, one_way  # noqa: E402


def classify_temperature(celsius):
    """Mood for a Celsius reading; undetermined between 0 and 30."""
    if celsius > 30:
        return "hot"
    if celsius < 0:
        return "cold"
    return NOTHING


@pytest.fixture
def system():
    """An empty system with the default merge."""
    return System()


@pytest.fixture
def set_system():
    """An empty system with set merge and set arithmetic installed."""
    return System(config=SystemConfig(set_values=True))


@pytest.fixture
def priority_system():
    """An empty system evaluating propagators in priority order."""
    return System(config=SystemConfig(worklist=WorklistKind.PRIORITY))


@pytest.fixture
def collector():
    return MetricsCollector()


@pytest.fixture
def temperature_system():
    """Cells c and f linked by Celsius/Fahrenheit, mood derived from c."""
    system = System()
    celsius_fahrenheit(system, "c", "f")
    one_way(system, classify_temperature, "c", "mood")
    return system
