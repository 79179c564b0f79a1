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
"""Tests for worklists and the step limiter."""

from propagators.propagation.worklist import (
    FIFOWorklist,
    PriorityWorklist,
    StepLimiter,
)


# =============================================================================
# PriorityWorklist Tests
# =============================================================================


class TestPriorityWorklist:
    """Tests for PriorityWorklist."""

    def test_empty_worklist(self):
        """Empty worklist is empty."""
        worklist = PriorityWorklist()
        assert worklist.is_empty()
        assert len(worklist) == 0
        assert not worklist
        assert worklist.pop() is None
        assert worklist.peek() is None

    def test_priority_ordering(self):
        """Lower priority values are popped first."""
        worklist = PriorityWorklist()
        worklist.add("low", priority=100)
        worklist.add("high", priority=25)
        worklist.add("medium", priority=50)

        assert worklist.pop() == "high"
        assert worklist.pop() == "medium"
        assert worklist.pop() == "low"

    def test_fifo_among_equal_priorities(self):
        worklist = PriorityWorklist()
        for item in ("a", "b", "c"):
            worklist.add(item, priority=10)
        assert [worklist.pop() for _ in range(3)] == ["a", "b", "c"]

    def test_deduplication(self):
        """Same item is not added twice."""
        worklist = PriorityWorklist()
        assert worklist.add("p", priority=50)
        assert not worklist.add("p", priority=25)
        assert len(worklist) == 1

    def test_readd_after_pop(self):
        worklist = PriorityWorklist()
        worklist.add("p")
        worklist.pop()
        assert worklist.add("p")

    def test_peek(self):
        """peek() shows next without removing."""
        worklist = PriorityWorklist()
        worklist.add("late", priority=50)
        worklist.add("early", priority=25)

        assert worklist.peek() == "early"
        assert len(worklist) == 2

    def test_clear(self):
        worklist = PriorityWorklist()
        worklist.add("a")
        worklist.add("b")
        worklist.clear()

        assert worklist.is_empty()
        assert not worklist.contains("a")


# =============================================================================
# FIFOWorklist Tests
# =============================================================================


class TestFIFOWorklist:
    """Tests for FIFOWorklist."""

    def test_fifo_order(self):
        """Items come out in insertion order regardless of priority."""
        worklist = FIFOWorklist()
        worklist.add("first", priority=100)
        worklist.add("second", priority=1)
        worklist.add("third")

        assert worklist.pop() == "first"
        assert worklist.pop() == "second"
        assert worklist.pop() == "third"
        assert worklist.pop() is None

    def test_deduplication(self):
        worklist = FIFOWorklist()
        assert worklist.add("p")
        assert not worklist.add("p")
        assert len(worklist) == 1

    def test_contains_and_clear(self):
        worklist = FIFOWorklist()
        worklist.add("p")
        assert worklist.contains("p")
        worklist.clear()
        assert not worklist.contains("p")
        assert worklist.is_empty()


# =============================================================================
# StepLimiter Tests
# =============================================================================


class TestStepLimiter:
    """Tests for StepLimiter."""

    def test_within_limit(self):
        limiter = StepLimiter(max_steps=3)
        assert limiter.increment()
        assert limiter.increment()
        assert limiter.increment()
        assert limiter.is_exhausted()
        assert not limiter.increment()

    def test_remaining(self):
        limiter = StepLimiter(max_steps=5)
        limiter.increment()
        assert limiter.count == 1
        assert limiter.remaining == 4

    def test_unbounded(self):
        limiter = StepLimiter(max_steps=None)
        for _ in range(100):
            assert limiter.increment()
        assert limiter.remaining is None
        assert not limiter.is_exhausted()

    def test_reset(self):
        limiter = StepLimiter(max_steps=1)
        limiter.increment()
        limiter.increment()
        limiter.reset()
        assert limiter.count == 0
        assert limiter.increment()
