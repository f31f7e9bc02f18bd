# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Lightweight trajectory recorder for optimization runs.

Stores essential runtime data per completed epoch:
  - Epoch objective (sum of batch evaluations)
  - Iteration counter (processed terms) at epoch end
  - Timestamps for performance tracking

File: sepopt/analysis/trace.py
Date: December, 2025
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Trace:
    """Immutable objective trajectory container."""

    epochs: np.ndarray      # Epoch indices, 1-based [n_points]
    objectives: np.ndarray  # Epoch objectives [n_points]
    iterations: np.ndarray  # Processed terms at epoch end [n_points]
    timestamps: np.ndarray  # Cumulative runtime in seconds [n_points]

    @staticmethod
    def empty() -> "Trace":
        """Create empty trace."""
        return Trace(
            epochs=np.array([], dtype=int),
            objectives=np.array([]),
            iterations=np.array([], dtype=int),
            timestamps=np.array([]),
        )

    def append(
        self,
        epoch: int,
        objective: float,
        iteration: int,
        timestamp: float,
    ) -> "Trace":
        """Append new data point (functional update)."""
        return Trace(
            epochs=np.append(self.epochs, epoch),
            objectives=np.append(self.objectives, objective),
            iterations=np.append(self.iterations, iteration),
            timestamps=np.append(self.timestamps, timestamp),
        )

    def deltas(self) -> np.ndarray:
        """Absolute objective change between consecutive epochs."""
        return np.abs(np.diff(self.objectives))

    @property
    def n_points(self) -> int:
        """Number of recorded epochs."""
        return len(self.objectives)

    @property
    def total_time(self) -> float:
        """Total runtime."""
        return float(self.timestamps[-1]) if len(self.timestamps) > 0 else 0.0


__all__ = ["Trace"]
