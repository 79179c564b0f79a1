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
"""Merging observations of a cell.

Merge combines a cell's current content with a newly proposed increment.
Under the default merge, information only accumulates:

    merge(c, NOTHING)  = c
    merge(NOTHING, i)  = i
    merge(c, c)        = c
    merge(c, i)        = Contradiction   when c != i

Merge must be commutative and associative (up to the wording of a
contradiction's reason) so that the fixed point of a network does not
depend on the order in which propagators run.

Domain types refine the "different means contradiction" rule by
extending the merge operator. The set extension treats a set as "one of
these values" and intersects:

    {1, 2, 3} merge {2, 3, 4}  = {2, 3}
    {2, 3}    merge {2}        = 2
    {2, 3}    merge 3          = 3
    {2}       merge {1}        = Contradiction
"""

from __future__ import annotations

from typing import Any

from .generic import GenericOperator
from .values import (
    Contradiction,
    as_frozenset,
    describe,
    is_contradiction,
    is_nothing,
    is_set,
)

SET_MERGE_EXTENSION = "set_merge"


def default_merge(content: Any, increment: Any) -> Any:
    """Merge an increment into content, flagging unequal values.

    Args:
        content: Current content of the cell
        increment: Newly proposed value

    Returns:
        The merged value, or a Contradiction naming both values
    """
    if is_nothing(increment):
        return content
    if is_nothing(content):
        return increment
    if content == increment:
        return content
    return Contradiction(
        f"{describe(content)} and {describe(increment)} are inconsistent"
    )


def default_contradictory(value: Any) -> bool:
    """True iff value is a Contradiction record."""
    return is_contradiction(value)


def make_merge_operator() -> GenericOperator:
    """Create a fresh merge operator using default_merge as fallback."""
    return GenericOperator("merge", default_merge)


def make_contradiction_operator() -> GenericOperator:
    """Create a fresh contradiction predicate operator."""
    return GenericOperator("contradictory?", default_contradictory)


def _is_concrete_scalar(value: Any) -> bool:
    return not (is_set(value) or is_nothing(value) or is_contradiction(value))


def _collapse(values: frozenset) -> Any:
    """A one-member set is the same information as its member."""
    if len(values) == 1:
        return next(iter(values))
    return values


def merge_sets(content: Any, increment: Any) -> Any:
    """Intersect two set-valued observations."""
    common = as_frozenset(content) & as_frozenset(increment)
    if not common:
        return Contradiction(
            f"{describe(content)} and {describe(increment)} have no common member"
        )
    return _collapse(common)


def merge_set_with_value(content: Any, increment: Any) -> Any:
    """Refine a set to one of its members."""
    if increment in content:
        return increment
    return Contradiction(
        f"{describe(increment)} is not a member of {describe(content)}"
    )


def merge_value_with_set(content: Any, increment: Any) -> Any:
    """Keep a value that the proposed set allows."""
    if content in increment:
        return content
    return Contradiction(
        f"{describe(content)} is not a member of {describe(increment)}"
    )


def _merge_set_into_nothing(content: Any, increment: Any) -> Any:
    # Cells only ever hold frozensets.
    return _collapse(as_frozenset(increment))


def _merge_nothing_into_set(content: Any, increment: Any) -> Any:
    return _collapse(as_frozenset(content))


def install_set_merge(merge: GenericOperator) -> GenericOperator:
    """Extend a merge operator with set refinement.

    Installing twice on the same operator is a no-op.

    Args:
        merge: The merge operator to extend in place

    Returns:
        The same operator, for chaining
    """
    if not merge.mark_extension(SET_MERGE_EXTENSION):
        return merge
    merge.extend(_merge_nothing_into_set, is_set, is_nothing)
    merge.extend(_merge_set_into_nothing, is_nothing, is_set)
    merge.extend(merge_sets, is_set, is_set)
    merge.extend(merge_set_with_value, is_set, _is_concrete_scalar)
    merge.extend(merge_value_with_set, _is_concrete_scalar, is_set)
    return merge


def make_set_merge_operator() -> GenericOperator:
    """Create a merge operator that already understands sets."""
    return install_set_merge(make_merge_operator())

