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
"""Relations: arithmetic operators and the relations built on them."""

from .arithmetic import (
    ArithmeticOperators,
    exact_divide,
    install_set_arithmetic,
    lift_over_sets,
    make_arithmetic_operators,
)
from .relations import (
    bijection,
    celsius_fahrenheit,
    constant,
    difference_relation,
    one_way,
    product_relation,
    quotient_relation,
    sum_relation,
    switch,
)

__all__ = [
    # Arithmetic
    "ArithmeticOperators",
    "exact_divide",
    "install_set_arithmetic",
    "lift_over_sets",
    "make_arithmetic_operators",
    # Relations
    "bijection",
    "celsius_fahrenheit",
    "constant",
    "difference_relation",
    "one_way",
    "product_relation",
    "quotient_relation",
    "sum_relation",
    "switch",
]
