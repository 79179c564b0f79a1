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
"""Generic operators with runtime predicate dispatch.

A generic operator is a callable whose behavior can be extended after it
has been handed out. Each extension registers a handler together with a
tuple of predicates, one per argument. On invocation the entries are
scanned newest first; the first entry whose predicates all accept the
actual arguments is applied. If none matches, the default handler runs.

Dispatch looks at runtime values, not static types, so a predicate may
test anything about an argument ("is a set", "is zero", "has exactly one
member").

The registry is shared and mutated in place. Anything holding a reference
to an operator - a propagator wired into a network, a merge function on a
System - sees later extensions immediately without being rebuilt.

Example:
    >>> plus = GenericOperator("plus", operator.add)
    >>> plus.extend(lambda a, b: a | b, is_set, is_set)
    >>> plus(1, 2)
    3
    >>> plus(frozenset({1}), frozenset({2}))
    frozenset({1, 2})
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, List, Optional, Set, Tuple

from .errors import DispatchError

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], Any]
Handler = Callable[..., Any]


@dataclass(frozen=True)
class DispatchEntry:
    """One registered (predicates, handler) pair.

    Attributes:
        predicates: One predicate per positional argument
        handler: Function applied when every predicate accepts its argument
    """

    predicates: Tuple[Predicate, ...]
    handler: Handler

    @property
    def arity(self) -> int:
        return len(self.predicates)

    def matches(self, args: Tuple[Any, ...]) -> bool:
        """Check arity and run each predicate against its argument."""
        if len(args) != len(self.predicates):
            return False
        return all(pred(arg) for pred, arg in zip(self.predicates, args))


class GenericOperator:
    """A named, extensible dispatch table.

    Operators compare and hash by identity: two operators with the same
    name are still different registries.

    Attributes:
        name: Name used in logs and error messages
        default: Handler applied when no entry matches (may be None)
    """

    def __init__(self, name: str, default: Optional[Handler] = None):
        """Initialize an operator with no entries.

        Args:
            name: Operator name
            default: Fallback handler, or None to fail when nothing matches
        """
        self.name = name
        self.default = default
        self._entries: List[DispatchEntry] = []
        self._extensions: Set[str] = set()
        self._lock = threading.Lock()

    def extend(self, handler: Handler, *predicates: Predicate) -> GenericOperator:
        """Register a handler tried before every existing entry.

        Args:
            handler: Function applied to the arguments on a match
            *predicates: One predicate per argument

        Returns:
            Self for chaining
        """
        if not callable(handler):
            raise TypeError(f"handler for {self.name!r} must be callable")
        entry = DispatchEntry(predicates=tuple(predicates), handler=handler)
        with self._lock:
            self._entries.insert(0, entry)
        logger.debug(
            f"Extended generic operator {self.name!r} "
            f"(arity {entry.arity}, {len(self._entries)} entries)"
        )
        return self

    def mark_extension(self, tag: str) -> bool:
        """Record that a named bundle of entries has been installed.

        Installers call this first and skip their extend() calls when it
        returns False, so installing the same bundle twice on a shared
        operator registers its entries once.

        Returns:
            True the first time a tag is marked, False afterwards
        """
        with self._lock:
            if tag in self._extensions:
                return False
            self._extensions.add(tag)
            return True

    @property
    def extensions(self) -> FrozenSet[str]:
        """Tags of the named bundles installed on this operator."""
        with self._lock:
            return frozenset(self._extensions)

    def handlers(self) -> List[DispatchEntry]:
        """Registered entries in precedence order (newest first)."""
        with self._lock:
            return list(self._entries)

    def dispatch(self, *args: Any) -> Optional[Handler]:
        """Return the handler that would be applied to args.

        Returns:
            The matching entry's handler, else the default (possibly None)
        """
        for entry in self.handlers():
            if entry.matches(args):
                return entry.handler
        return self.default

    def __call__(self, *args: Any) -> Any:
        for entry in self.handlers():
            if entry.matches(args):
                return entry.handler(*args)

        if self.default is None:
            raise DispatchError(self.name, args)
        try:
            return self.default(*args)
        except DispatchError:
            raise
        except TypeError as e:
            raise DispatchError(self.name, args, str(e)) from e

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"GenericOperator({self.name!r}, entries={len(self._entries)})"


def create_generic_operator(
    default: Optional[Handler] = None,
    name: Optional[str] = None,
) -> GenericOperator:
    """Create a generic operator falling back to ``default``.

    Args:
        default: Handler used when no extension matches
        name: Operator name (defaults to the default handler's name)

    Returns:
        A new, unextended GenericOperator
    """
    if name is None:
        name = getattr(default, "__name__", None) or "generic"
    return GenericOperator(name, default)


def extend_operator(
    operator: GenericOperator,
    handler: Handler,
    *predicates: Predicate,
) -> GenericOperator:
    """Extend ``operator`` in place with a predicate-guarded handler."""
    return operator.extend(handler, *predicates)


def invoke(operator: GenericOperator, *args: Any) -> Any:
    """Apply a generic operator to args."""
    return operator(*args)
