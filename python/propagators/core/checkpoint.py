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
"""Snapshots of cell contents for rollback.

A System snapshots every cell value before each update. If the update
ends in an error the snapshot is restored, so an update either settles
completely or leaves the network exactly as it was.

The CheckpointManager additionally keeps a bounded history of settled
states, one per revision, so callers can step a network back to an
earlier revision (for example to retract an assumption that later turned
out to be inconsistent with new data).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class SystemCheckpoint:
    """Immutable copy of every cell value and the wiring at one revision.

    Values are stored by reference. Cell values are replaced on update,
    never mutated in place.

    Attributes:
        revision: System revision at checkpoint time
        values: Cell name -> value
        propagators: Propagators wired at checkpoint time, in wiring order
    """

    revision: int
    values: Dict[Hashable, Any] = field(default_factory=dict)
    propagators: Tuple[Any, ...] = ()

    def value_of(self, cell: Hashable, default: Any = None) -> Any:
        """Value a cell held at checkpoint time."""
        return self.values.get(cell, default)

    def __len__(self) -> int:
        return len(self.values)


class CheckpointManager:
    """Bounded history of system checkpoints.

    Attributes:
        max_checkpoints: Maximum number of checkpoints to retain
    """

    def __init__(self, max_checkpoints: int = 32):
        """Initialize checkpoint manager.

        Args:
            max_checkpoints: Maximum checkpoints to retain (0 disables history)
        """
        self.max_checkpoints = max_checkpoints
        self._checkpoints: List[SystemCheckpoint] = []

    @property
    def checkpoint_count(self) -> int:
        """Number of checkpoints currently stored."""
        return len(self._checkpoints)

    @property
    def oldest_revision(self) -> Optional[int]:
        """Oldest revision that can be rolled back to."""
        if not self._checkpoints:
            return None
        return self._checkpoints[0].revision

    @property
    def newest_revision(self) -> Optional[int]:
        """Most recent checkpoint revision."""
        if not self._checkpoints:
            return None
        return self._checkpoints[-1].revision

    def record(self, checkpoint: SystemCheckpoint) -> None:
        """Store a checkpoint, pruning the oldest beyond the limit."""
        if self.max_checkpoints <= 0:
            return
        if self._checkpoints and self._checkpoints[-1].revision == checkpoint.revision:
            self._checkpoints[-1] = checkpoint
        else:
            self._checkpoints.append(checkpoint)
        while len(self._checkpoints) > self.max_checkpoints:
            self._checkpoints.pop(0)

    def get_checkpoint_before(self, revision: int) -> Optional[SystemCheckpoint]:
        """Most recent checkpoint at or before the given revision."""
        result = None
        for checkpoint in self._checkpoints:
            if checkpoint.revision <= revision:
                result = checkpoint
            else:
                break
        return result

    def rollback_to(self, revision: int) -> Optional[SystemCheckpoint]:
        """Find the checkpoint for revision and drop everything newer.

        Returns:
            The checkpoint rolled back to, or None if it is out of range
        """
        checkpoint = self.get_checkpoint_before(revision)
        if checkpoint is None:
            return None
        self._checkpoints = [
            c for c in self._checkpoints if c.revision <= checkpoint.revision
        ]
        return checkpoint

    def clear(self) -> None:
        """Clear all checkpoints."""
        self._checkpoints.clear()
