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
"""Worklists of dirty propagators.

The worklist holds propagators waiting to be re-evaluated. It supports:
- Deduplication (a propagator is pending at most once)
- FIFO or priority ordering (lower priority = evaluated first)
- Fixpoint detection (empty worklist = fixed point)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from heapq import heappop, heappush
from typing import Deque, Hashable, List, Optional, Set, Union


@dataclass(order=True)
class WorklistItem:
    """An item in the priority worklist.

    Attributes:
        priority: Lower values are processed first
        sequence: Insertion order for stable sorting
        item: The pending propagator
    """

    priority: int
    sequence: int
    item: Hashable = field(compare=False)


class PriorityWorklist:
    """Priority queue-based worklist.

    Items are processed in priority order (lower = first), FIFO among
    equal priorities. Each item appears at most once.

    Example:
        >>> worklist = PriorityWorklist()
        >>> worklist.add("late", priority=50)
        >>> worklist.add("early", priority=25)
        >>> worklist.pop()
        'early'
    """

    def __init__(self):
        """Initialize an empty worklist."""
        self._heap: List[WorklistItem] = []
        self._pending: Set[Hashable] = set()
        self._sequence = 0

    def add(self, item: Hashable, priority: int = 100) -> bool:
        """Add an item unless it is already pending.

        Returns:
            True if the item was added, False if already present
        """
        if item in self._pending:
            return False
        heappush(self._heap, WorklistItem(priority, self._sequence, item))
        self._sequence += 1
        self._pending.add(item)
        return True

    def pop(self) -> Optional[Hashable]:
        """Remove and return the highest-priority item, or None."""
        while self._heap:
            entry = heappop(self._heap)
            if entry.item in self._pending:
                self._pending.remove(entry.item)
                return entry.item
        return None

    def peek(self) -> Optional[Hashable]:
        """View the highest-priority item without removing it."""
        while self._heap:
            if self._heap[0].item in self._pending:
                return self._heap[0].item
            heappop(self._heap)
        return None

    def contains(self, item: Hashable) -> bool:
        return item in self._pending

    def clear(self) -> None:
        """Drop every pending item."""
        self._heap = []
        self._pending = set()

    def is_empty(self) -> bool:
        return len(self._pending) == 0

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return not self.is_empty()


class FIFOWorklist:
    """First-in-first-out worklist.

    Priorities are accepted for interface compatibility and ignored.

    Example:
        >>> worklist = FIFOWorklist()
        >>> worklist.add("first")
        >>> worklist.add("second")
        >>> worklist.pop()
        'first'
    """

    def __init__(self):
        """Initialize an empty worklist."""
        self._queue: Deque[Hashable] = deque()
        self._pending: Set[Hashable] = set()

    def add(self, item: Hashable, priority: int = 100) -> bool:
        """Add an item unless it is already pending."""
        if item in self._pending:
            return False
        self._queue.append(item)
        self._pending.add(item)
        return True

    def pop(self) -> Optional[Hashable]:
        """Remove and return the oldest item, or None."""
        while self._queue:
            item = self._queue.popleft()
            if item in self._pending:
                self._pending.remove(item)
                return item
        return None

    def contains(self, item: Hashable) -> bool:
        return item in self._pending

    def clear(self) -> None:
        self._queue.clear()
        self._pending = set()

    def is_empty(self) -> bool:
        return len(self._pending) == 0

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return not self.is_empty()


Worklist = Union[FIFOWorklist, PriorityWorklist]


class StepLimiter:
    """Counts propagator evaluations against an optional ceiling.

    Example:
        >>> limiter = StepLimiter(max_steps=100)
        >>> while limiter.increment():
        ...     pass  # do work
    """

    def __init__(self, max_steps: Optional[int] = 10_000):
        """Initialize the limiter.

        Args:
            max_steps: Maximum allowed steps, or None for no limit
        """
        self._max = max_steps
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def max_steps(self) -> Optional[int]:
        return self._max

    @property
    def remaining(self) -> Optional[int]:
        if self._max is None:
            return None
        return max(0, self._max - self._count)

    def increment(self) -> bool:
        """Count one step.

        Returns:
            True if still within the limit
        """
        self._count += 1
        return self._max is None or self._count <= self._max

    def is_exhausted(self) -> bool:
        return self._max is not None and self._count >= self._max

    def reset(self) -> None:
        self._count = 0
