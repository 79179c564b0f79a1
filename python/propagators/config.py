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
"""Configuration for propagator systems."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class WorklistKind(Enum):
    """Order in which dirty propagators are evaluated.

    FIFO: In the order they were scheduled.
    PRIORITY: Lowest Propagator.priority first, FIFO among equals.
    """

    FIFO = "fifo"
    PRIORITY = "priority"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, s: str) -> "WorklistKind":
        """Parse a worklist kind (case-insensitive)."""
        normalized = s.strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Unknown worklist kind: {s!r}")


@dataclass(frozen=True)
class SystemConfig:
    """Settings for one System.

    Attributes:
        max_steps: Propagator evaluations allowed in one update before
            PropagationLimitError is raised. None disables the ceiling.
        worklist: Scheduling order of dirty propagators.
        strict_cells: If True, propagators may only be wired to cells
            declared beforehand with System.declare_cell(); otherwise
            cells are created on first reference.
        set_values: Install set-aware merge and set arithmetic when the
            system is created.
        checkpoint_history: Settled revisions kept for rollback_to().

    Example:
        >>> config = SystemConfig(max_steps=500, worklist=WorklistKind.PRIORITY)
        >>> system = System(config=config)
    """

    max_steps: Optional[int] = 10_000
    worklist: WorklistKind = WorklistKind.FIFO
    strict_cells: bool = False
    set_values: bool = False
    checkpoint_history: int = 32

    def __post_init__(self) -> None:
        if self.max_steps is not None and self.max_steps <= 0:
            raise ValueError("max_steps must be positive or None")
        if self.checkpoint_history < 0:
            raise ValueError("checkpoint_history must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "max_steps": self.max_steps,
            "worklist": str(self.worklist),
            "strict_cells": self.strict_cells,
            "set_values": self.set_values,
            "checkpoint_history": self.checkpoint_history,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SystemConfig":
        """Create from dictionary."""
        worklist = d.get("worklist", WorklistKind.FIFO)
        if isinstance(worklist, str):
            worklist = WorklistKind.from_string(worklist)
        return cls(
            max_steps=d.get("max_steps", 10_000),
            worklist=worklist,
            strict_cells=d.get("strict_cells", False),
            set_values=d.get("set_values", False),
            checkpoint_history=d.get("checkpoint_history", 32),
        )


DEFAULT_CONFIG = SystemConfig()
