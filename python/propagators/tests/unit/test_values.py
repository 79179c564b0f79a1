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
"""Tests for the value model and the error hierarchy."""

import pickle
from fractions import Fraction

import pytest

from propagators.core.errors import (
    DispatchError,
    InconsistencyError,
    MalformedNetworkError,
    PropagationLimitError,
    PropagatorError,
)
from propagators.core.values import (
    NOTHING,
    Contradiction,
    Nothing,
    as_frozenset,
    describe,
    is_anything,
    is_contradiction,
    is_nothing,
    is_set,
)


# =============================================================================
# NOTHING
# =============================================================================


class TestNothing:
    """Tests for the NOTHING singleton."""

    def test_singleton(self):
        """Nothing() always returns the same instance."""
        assert Nothing() is NOTHING
        assert Nothing() is Nothing()

    def test_falsy(self):
        assert not NOTHING

    def test_equality(self):
        """NOTHING equals only itself."""
        assert NOTHING == Nothing()
        assert NOTHING != 0
        assert NOTHING != None  # noqa: E711
        assert NOTHING != frozenset()

    def test_hashable(self):
        assert len({NOTHING, Nothing()}) == 1

    def test_repr(self):
        assert repr(NOTHING) == "NOTHING"

    def test_pickle_preserves_identity(self):
        assert pickle.loads(pickle.dumps(NOTHING)) is NOTHING


# =============================================================================
# Predicates
# =============================================================================


class TestPredicates:
    """Tests for value predicates."""

    def test_is_nothing(self):
        assert is_nothing(NOTHING)
        assert not is_nothing(0)
        assert not is_nothing(None)

    def test_is_contradiction(self):
        assert is_contradiction(Contradiction("x"))
        assert not is_contradiction("x")
        assert not is_contradiction(NOTHING)

    def test_is_set(self):
        assert is_set({1})
        assert is_set(frozenset())
        assert not is_set([1])
        assert not is_set(1)

    def test_is_anything(self):
        assert is_anything(None)
        assert is_anything(NOTHING)

    def test_as_frozenset(self):
        frozen = frozenset({1})
        assert as_frozenset(frozen) is frozen
        assert as_frozenset({1, 2}) == frozenset({1, 2})


class TestDescribe:
    """Tests for value rendering in messages."""

    def test_scalar_uses_repr(self):
        assert describe(100) == "100"
        assert describe("hot") == "'hot'"
        assert describe(Fraction(1, 3)) == "Fraction(1, 3)"

    def test_set_sorted(self):
        assert describe(frozenset({3, 1, 2})) == "{1, 2, 3}"

    def test_unsortable_set(self):
        """Mixed-type sets still render."""
        text = describe(frozenset({1, "a"}))
        assert text.startswith("{") and text.endswith("}")
        assert "1" in text and "'a'" in text


class TestContradiction:
    """Tests for Contradiction records."""

    def test_value_equality(self):
        assert Contradiction("a") == Contradiction("a")
        assert Contradiction("a") != Contradiction("b")

    def test_immutable(self):
        c = Contradiction("a")
        with pytest.raises(AttributeError):
            c.reason = "b"

    def test_str(self):
        assert str(Contradiction("100 and 38")) == "contradiction: 100 and 38"


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        for cls in (
            InconsistencyError,
            DispatchError,
            MalformedNetworkError,
            PropagationLimitError,
        ):
            assert issubclass(cls, PropagatorError)

    def test_inconsistency_attributes(self):
        value = Contradiction("100 and 38 are inconsistent")
        err = InconsistencyError("c", value.reason, value=value)
        assert err.cell == "c"
        assert err.reason == "100 and 38 are inconsistent"
        assert err.value is value
        assert "'c'" in str(err)

    def test_dispatch_error_is_type_error(self):
        err = DispatchError("plus", (1, "a"))
        assert isinstance(err, TypeError)
        assert err.operator == "plus"
        assert err.args_given == (1, "a")
        assert "no applicable handler" in str(err)

    def test_dispatch_error_custom_message(self):
        err = DispatchError("plus", (1,), "unsupported operand")
        assert "unsupported operand" in str(err)

    def test_malformed_network_is_value_error(self):
        assert issubclass(MalformedNetworkError, ValueError)

    def test_limit_error(self):
        err = PropagationLimitError(50)
        assert err.limit == 50
        assert "50" in str(err)
