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
"""Tests for checkpoints and system rollback."""

from propagators.config import SystemConfig
from propagators.core.checkpoint import CheckpointManager, SystemCheckpoint
from propagators.core.values import NOTHING
from propagators.propagation.propagator import lift
from propagators.propagation.system import System
from propagators.relations.relations import sum_relation


def make_checkpoint(revision, **values):
    return SystemCheckpoint(revision=revision, values=values)


# =============================================================================
# SystemCheckpoint Tests
# =============================================================================


class TestSystemCheckpoint:
    """Tests for SystemCheckpoint."""

    def test_value_of(self):
        checkpoint = make_checkpoint(3, a=1)
        assert checkpoint.value_of("a") == 1
        assert checkpoint.value_of("b") is None
        assert checkpoint.value_of("b", NOTHING) is NOTHING
        assert len(checkpoint) == 1
        assert checkpoint.propagators == ()


# =============================================================================
# CheckpointManager Tests
# =============================================================================


class TestCheckpointManager:
    """Tests for CheckpointManager."""

    def test_empty(self):
        manager = CheckpointManager()
        assert manager.checkpoint_count == 0
        assert manager.oldest_revision is None
        assert manager.newest_revision is None
        assert manager.rollback_to(0) is None

    def test_prunes_oldest(self):
        manager = CheckpointManager(max_checkpoints=3)
        for revision in range(5):
            manager.record(make_checkpoint(revision))

        assert manager.checkpoint_count == 3
        assert manager.oldest_revision == 2
        assert manager.newest_revision == 4

    def test_same_revision_replaces(self):
        manager = CheckpointManager()
        manager.record(make_checkpoint(1, a=1))
        manager.record(make_checkpoint(1, a=2))

        assert manager.checkpoint_count == 1
        assert manager.get_checkpoint_before(1).value_of("a") == 2

    def test_disabled(self):
        manager = CheckpointManager(max_checkpoints=0)
        manager.record(make_checkpoint(0))
        assert manager.checkpoint_count == 0

    def test_get_checkpoint_before(self):
        manager = CheckpointManager()
        manager.record(make_checkpoint(0))
        manager.record(make_checkpoint(2))
        manager.record(make_checkpoint(4))

        assert manager.get_checkpoint_before(3).revision == 2
        assert manager.get_checkpoint_before(4).revision == 4
        assert manager.get_checkpoint_before(-1) is None

    def test_rollback_drops_newer(self):
        manager = CheckpointManager()
        for revision in range(4):
            manager.record(make_checkpoint(revision))

        checkpoint = manager.rollback_to(1)
        assert checkpoint.revision == 1
        assert manager.newest_revision == 1
        assert manager.checkpoint_count == 2

    def test_clear(self):
        manager = CheckpointManager()
        manager.record(make_checkpoint(0))
        manager.clear()
        assert manager.checkpoint_count == 0


# =============================================================================
# System rollback Tests
# =============================================================================


class TestSystemRollback:
    """Tests for checkpoint() / restore() / rollback_to() on a System."""

    def test_checkpoint_and_restore(self, system):
        sum_relation(system, "a", "b", "c")
        system.add_value("a", 1)
        checkpoint = system.checkpoint()

        system.add_value("b", 2)
        assert system.get_value("c") == 3

        system.restore(checkpoint)
        assert system.get_value("a") == 1
        assert system.get_value("b") is NOTHING
        assert system.get_value("c") is NOTHING
        assert system.revision == checkpoint.revision

    def test_restore_keeps_wiring(self, system):
        sum_relation(system, "a", "b", "c")
        checkpoint = system.checkpoint()
        system.add_value("a", 1).add_value("b", 2)

        system.restore(checkpoint)
        system.add_value("a", 10).add_value("b", 20)
        assert system.get_value("c") == 30

    def test_restore_unwires_later_propagators(self, system):
        system.add_value("a", 1)
        checkpoint = system.checkpoint()
        lift(lambda x: x + 1, name="increment")(system, "a", "c")
        assert system.get_value("c") == 2

        system.restore(checkpoint)
        assert system.propagators == []
        assert system.propagators_for("a") == []
        assert system.get_value("c") is NOTHING

    def test_rollback_then_rewire_propagates(self, system):
        def increment(x):
            return x + 1

        system.add_value("a", 1)
        revision = system.revision
        lift(increment)(system, "a", "c")
        assert system.get_value("c") == 2

        assert system.rollback_to(revision)
        system.add_value("a", 1)
        assert system.get_value("c") is NOTHING

        lift(increment)(system, "a", "c")
        assert system.get_value("c") == 2

    def test_rollback_keeps_earlier_propagators(self, system):
        sum_relation(system, "a", "b", "c")
        revision = system.revision
        lift(lambda x: x * 10)(system, "c", "d")

        assert system.rollback_to(revision)
        system.add_value("a", 1).add_value("b", 2)
        assert system.get_value("c") == 3
        assert system.get_value("d") is NOTHING
        assert len(system.propagators) == 3

    def test_rollback_to_revision(self, system):
        sum_relation(system, "a", "b", "c")
        system.add_value("a", 1)
        revision = system.revision
        system.add_value("b", 2)

        assert system.rollback_to(revision)
        assert system.get_value("a") == 1
        assert system.get_value("c") is NOTHING

        system.add_value("b", 5)
        assert system.get_value("c") == 6

    def test_rollback_out_of_range(self):
        system = System(config=SystemConfig(checkpoint_history=2))
        for i in range(5):
            system.add_value(("x", i), i)

        assert not system.rollback_to(0)
        assert system.rollback_to(system.revision - 1)

    def test_revision_counts_settled_updates(self, system):
        assert system.revision == 0
        system.add_value("a", 1)
        system.add_value("a", 1)
        assert system.revision == 2
