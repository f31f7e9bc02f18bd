# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Base protocols and state definitions for sepopt policies.

Defines the two capability sets the stochastic driver is generic over:
  - UpdatePolicy: gradient -> step (g -> Δx), owns per-parameter state
  - DecayPolicy: configured step size -> effective step size (α -> α_t)

The driver only talks to these protocols; concrete policies never
inspect the driver and the driver never inspects concrete policy types.

File: sepopt/optimizers/base.py
Date: November, 2025
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import flax.struct

if TYPE_CHECKING:
    import jax
    import numpy as np


# ============================================================================
# State Definitions
# ============================================================================

@flax.struct.dataclass
class UpdateState:
    """
    Base state for update policies.

    Subclasses extend with algorithm-specific fields (e.g., moments).
    Empty base enables stateless policies (e.g., vanilla SGD).
    """
    pass


# ============================================================================
# Policy Protocols
# ============================================================================

class UpdatePolicy(Protocol):
    """
    Computes the step Δx subtracted from the iterate: x <- x - Δx.

    Stateful: the policy owns its state and re-allocates it on
    initialize(). The driver decides when initialize() is called
    (reset policy), the policy decides what the state holds.
    """

    def initialize(self, shape: tuple[int, ...], dtype: Any = None) -> None:
        """
        Allocate zeroed per-parameter state for an iterate of `shape`.

        Args:
            shape: Iterate shape; all state arrays share it
            dtype: Iterate dtype (default: JAX default float)
        """
        ...

    def update(
        self,
        iterate: np.ndarray,
        gradient: jax.Array,
        step_size: float,
    ) -> jax.Array:
        """
        Advance the policy state and return the step.

        Args:
            iterate: Current iterate (read-only for the policy)
            gradient: Gradient estimate, shaped like the iterate
            step_size: Effective step size α_t from the decay policy

        Returns:
            step: Array shaped like the iterate

        Raises:
            ValueError: If the gradient shape does not match the state
        """
        ...


class DecayPolicy(Protocol):
    """
    Maps the configured step size to the effective one for the next step.

    Identity (NoDecay): α_t = α
    Scheduled: α_t = α · s(t)
    """

    def initialize(self) -> None:
        """Reset any counters or schedules."""
        ...

    def __call__(
        self,
        step_size: float,
        iterate: np.ndarray,
        gradient: jax.Array,
    ) -> float:
        """
        Compute the effective step size.

        Args:
            step_size: Configured step size α
            iterate: Current iterate (unused by simple policies)
            gradient: Current gradient (unused by simple policies)

        Returns:
            Effective step size α_t
        """
        ...


def check_shape(state_shape: tuple[int, ...], gradient_shape: tuple[int, ...]) -> None:
    """Raise if a gradient does not fit the retained policy state."""
    if tuple(state_shape) != tuple(gradient_shape):
        raise ValueError(
            f"Invalid configuration: policy state has shape {tuple(state_shape)} "
            f"but gradient has shape {tuple(gradient_shape)}. "
            "Enable reset_policy when optimizing iterates of a different shape."
        )


__all__ = [
    "UpdateState",
    "UpdatePolicy",
    "DecayPolicy",
    "check_shape",
]
