# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Convergence control for the epoch loop.

Provides a simple state object to encapsulate tolerance-based stopping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class EpochConvergence:
    """
    Convergence controller on epoch-end objectives.

    Converges when |value_k - value_{k-1}| < tol between consecutive
    epochs. A non-positive tolerance disables the check.
    """

    tol: float

    last_value: float = field(default=float("inf"), init=False)

    @property
    def enabled(self) -> bool:
        """Check if tolerance stopping is active."""
        return self.tol > 0.0

    def update(self, value: float) -> Tuple[bool, float]:
        """
        Record a new epoch objective and check convergence.

        Args:
            value: Objective summed over the epoch

        Returns:
            (converged, delta): Whether tolerance criterion is met and current delta
        """
        delta = abs(value - self.last_value)
        self.last_value = value
        return self.enabled and delta < self.tol, delta


__all__ = ["EpochConvergence"]
