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
"""Property-based tests for merge laws using Hypothesis.

Merge must behave like a meet: information only accumulates, and the
result does not depend on the order observations arrive in. For the set
extension that means:

    merge(a, b) ≅ merge(b, a)                       (commutativity)
    merge(merge(a, b), c) ≅ merge(a, merge(b, c))   (associativity)
    merge(a, a) ≅ a                                 (idempotence)
    merge(a, NOTHING) ≅ a                           (identity)

where ≅ compares the information carried: a one-member set equals its
member, and all contradictions are equal to each other.
"""

from hypothesis import given, settings, strategies as st

from propagators.core.merge import default_merge, make_set_merge_operator
from propagators.core.values import NOTHING, is_contradiction, is_set


CONTRADICTION = "contradiction"


def normalize(value):
    """Reduce a merge result to the information it carries."""
    if is_contradiction(value):
        return CONTRADICTION
    if is_set(value):
        frozen = frozenset(value)
        if len(frozen) == 1:
            return next(iter(frozen))
        return frozen
    return value


scalar = st.integers(min_value=0, max_value=5)
small_set = st.frozensets(scalar, min_size=1, max_size=4)
value = st.one_of(scalar, small_set)
value_or_nothing = st.one_of(st.just(NOTHING), scalar, small_set)

set_merge = make_set_merge_operator()


class TestDefaultMergeLaws:
    """Property tests for default_merge over scalars."""

    @given(a=scalar, b=scalar)
    def test_commutativity(self, a, b):
        assert normalize(default_merge(a, b)) == normalize(default_merge(b, a))

    @given(a=scalar, b=scalar, c=scalar)
    def test_associativity(self, a, b, c):
        left = default_merge(default_merge(a, b), c)
        right = default_merge(a, default_merge(b, c))
        assert normalize(left) == normalize(right)

    @given(a=value_or_nothing)
    def test_idempotence(self, a):
        assert default_merge(a, a) == a

    @given(a=value_or_nothing)
    def test_nothing_is_identity(self, a):
        assert default_merge(a, NOTHING) == a
        assert default_merge(NOTHING, a) == a

    @given(a=scalar, b=scalar)
    def test_contradiction_iff_unequal(self, a, b):
        assert is_contradiction(default_merge(a, b)) == (a != b)


class TestSetMergeLaws:
    """Property tests for the set refinement extension."""

    @given(a=value_or_nothing, b=value_or_nothing)
    @settings(max_examples=200)
    def test_commutativity(self, a, b):
        assert normalize(set_merge(a, b)) == normalize(set_merge(b, a))

    @given(a=value, b=value, c=value)
    @settings(max_examples=200)
    def test_associativity(self, a, b, c):
        left = set_merge(set_merge(a, b), c)
        right = set_merge(a, set_merge(b, c))
        assert normalize(left) == normalize(right)

    @given(a=value)
    def test_idempotence(self, a):
        assert normalize(set_merge(a, a)) == normalize(a)

    @given(a=value)
    def test_nothing_is_identity(self, a):
        assert normalize(set_merge(a, NOTHING)) == normalize(a)
        assert normalize(set_merge(NOTHING, a)) == normalize(a)
        assert set_merge(a, NOTHING) == set_merge(NOTHING, a)

    @given(a=small_set, b=small_set)
    def test_result_refines_both(self, a, b):
        """A consistent merge never admits a value either side ruled out."""
        result = set_merge(a, b)
        if is_contradiction(result):
            assert not (a & b)
        else:
            members = result if is_set(result) else frozenset({result})
            assert members <= a and members <= b

    @given(a=value, b=value)
    def test_never_returns_mutable_set(self, a, b):
        result = set_merge(a, b)
        assert not isinstance(result, set)
