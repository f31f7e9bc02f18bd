# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Step size decay policies for the stochastic driver.

Implements:
  - NoDecay: Identity α_t = α
  - ScheduleDecay: Multiplicative schedule α_t = α · s(t)

Schedules follow the Optax convention (step -> scalar), so any
optax schedule built with init_value=1.0 can be used as a multiplier.

File: sepopt/optimizers/decay.py
Date: November, 2025
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import jax
import numpy as np
import optax

# Optax-compatible schedule: step -> scalar
Schedule = Callable[[int], float]


@dataclass(frozen=True)
class NoDecay:
    """Identity decay: returns the configured step size unchanged."""

    def initialize(self) -> None:
        pass

    def __call__(self, step_size: float, iterate: np.ndarray, gradient: jax.Array) -> float:
        return step_size


@dataclass
class ScheduleDecay:
    """
    Scheduled step size: α_t = α · schedule(t).

    `t` counts queries since the last initialize(), i.e. update steps
    taken in the current run (or across runs when the driver retains
    policy state).

    Attributes:
        schedule: Callable step -> multiplier
    """
    schedule: Schedule
    count: int = field(default=0, init=False)

    def initialize(self) -> None:
        self.count = 0

    def __call__(self, step_size: float, iterate: np.ndarray, gradient: jax.Array) -> float:
        scale = float(self.schedule(self.count))
        self.count += 1
        return step_size * scale


def cosine_decay(decay_steps: int, alpha: float = 0.0) -> ScheduleDecay:
    """
    Cosine annealing multiplier: s(t) = α + (1 - α) · [1 + cos(πt/T)] / 2.

    Args:
        decay_steps: Total steps T
        alpha: Final multiplier (default: 0)
    """
    return ScheduleDecay(
        optax.cosine_decay_schedule(init_value=1.0, decay_steps=decay_steps, alpha=alpha)
    )


def exponential_decay(
    transition_steps: int,
    decay_rate: float,
    staircase: bool = False,
) -> ScheduleDecay:
    """
    Exponential multiplier: s(t) = γ^(t/T).

    Args:
        transition_steps: Decay period T
        decay_rate: Decay factor γ
        staircase: Use floor(t/T) instead of t/T
    """
    return ScheduleDecay(
        optax.exponential_decay(
            init_value=1.0,
            transition_steps=transition_steps,
            decay_rate=decay_rate,
            staircase=staircase,
        )
    )


__all__ = ["Schedule", "NoDecay", "ScheduleDecay", "cosine_decay", "exponential_decay"]
