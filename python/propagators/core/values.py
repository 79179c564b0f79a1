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
"""The domain of values a cell may hold.

A cell's content is one of three things:

    NOTHING            No information yet. Merging anything into NOTHING
                       yields that thing; merging NOTHING into anything is
                       a no-op.
    concrete value     Any ordinary Python object: ints, Fractions,
                       strings, frozensets of such, ...
    Contradiction      Two observations of one cell that cannot be
                       reconciled. Produced only by merge.

Concrete values are not wrapped; they are compared with ``==``. NOTHING
and Contradiction are the only values with special meaning to the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet


class Nothing:
    """The absence of information.

    This is a singleton class - use NOTHING instead of instantiating directly.
    """

    __slots__ = ()

    _instance: Nothing | None = None

    def __new__(cls) -> Nothing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Nothing)

    def __hash__(self) -> int:
        return hash("NOTHING")

    def __repr__(self) -> str:
        return "NOTHING"

    def __reduce__(self):
        return (Nothing, ())


NOTHING: Nothing = Nothing()


@dataclass(frozen=True, slots=True)
class Contradiction:
    """Result of merging two values that cannot both hold.

    Attributes:
        reason: Human-readable description naming the conflicting values
    """

    reason: str

    def __str__(self) -> str:
        return f"contradiction: {self.reason}"


def is_nothing(value: Any) -> bool:
    """True if value carries no information."""
    return value is NOTHING or isinstance(value, Nothing)


def is_contradiction(value: Any) -> bool:
    """True if value is a Contradiction record."""
    return isinstance(value, Contradiction)


def is_set(value: Any) -> bool:
    """True for set-valued content (``set`` or ``frozenset``)."""
    return isinstance(value, (set, frozenset))


def is_anything(value: Any) -> bool:
    """Predicate matching every argument."""
    return True


def as_frozenset(value: Any) -> FrozenSet[Any]:
    """Freeze a set value so it can be stored in a cell and hashed."""
    return value if isinstance(value, frozenset) else frozenset(value)


def describe(value: Any) -> str:
    """Render a value for contradiction messages.

    Sets are printed sorted when their members allow it so that messages
    are stable across runs.
    """
    if is_set(value):
        try:
            members = sorted(value)
        except TypeError:
            members = list(value)
        return "{" + ", ".join(repr(m) for m in members) + "}"
    return repr(value)
