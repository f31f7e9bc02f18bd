# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Update policies: gradient -> step for the stochastic driver.

Implements three strategies:
  - VanillaUpdate: Plain SGD Δx = α·g
  - MomentumUpdate: Heavy-ball velocity Δx = -(μ·u - α·g)
  - PadamUpdate: Partially adaptive moments Δx = α·m / (v̂^p + ε)

Each policy keeps its state in a flax.struct pytree and advances it
through a jitted pure kernel, so hyperparameters stay plain mutable
attributes while the math stays functional.

File: sepopt/optimizers/update.py
Date: November, 2025
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import flax.struct
import jax
import jax.numpy as jnp
import numpy as np

from .base import UpdateState, check_shape


# ============================================================================
# Policy States
# ============================================================================

@flax.struct.dataclass
class MomentumState(UpdateState):
    """Heavy-ball velocity buffer."""
    velocity: jax.Array


@flax.struct.dataclass
class PadamState(UpdateState):
    """
    Padam moment buffers (AMSGrad-style running maximum included).

    Attributes:
        m: First moment estimate
        v: Second moment estimate
        v_hat: Element-wise running maximum of v
        iteration: Number of updates applied since initialization
    """
    m: jax.Array
    v: jax.Array
    v_hat: jax.Array
    iteration: Any = 0


# ============================================================================
# Kernels
# ============================================================================

@jax.jit
def momentum_step(
    state: MomentumState,
    gradient: jax.Array,
    step_size: float,
    momentum: float,
) -> tuple[jax.Array, MomentumState]:
    """
    One heavy-ball step.

    | u = mu * u - lr * g
    | step = -u
    """
    velocity = momentum * state.velocity - step_size * gradient
    return -velocity, MomentumState(velocity=velocity)


@jax.jit
def padam_step(
    state: PadamState,
    gradient: jax.Array,
    step_size: float,
    beta1: float,
    beta2: float,
    partial: float,
    epsilon: float,
) -> tuple[jax.Array, PadamState]:
    """
    One step of partially adaptive moment estimation.

    | m = beta1 * m + (1 - beta1) * g
    | v = beta2 * v + (1 - beta2) * g^2
    | v_hat = max(v_hat, v)
    | step = lr * m / (v_hat^p + eps)

    p = 0.5 recovers AMSGrad-style full adaptivity; p -> 0 approaches
    plain momentum. No clamping of p is applied.

    Args:
        state: Current moment buffers
        gradient: Gradient estimate (same shape as the buffers)
        step_size: Effective step size lr
        beta1: 1st moment decay rate
        beta2: 2nd moment decay rate
        partial: Partial adaptivity exponent p
        epsilon: Numerical floor added to the denominator

    Returns:
        step, new_state
    """
    m = beta1 * state.m + (1.0 - beta1) * gradient
    v = beta2 * state.v + (1.0 - beta2) * jnp.square(gradient)
    v_hat = jnp.maximum(state.v_hat, v)
    step = step_size * m / (jnp.power(v_hat, partial) + epsilon)
    return step, PadamState(m=m, v=v, v_hat=v_hat, iteration=state.iteration + 1)


# ============================================================================
# Policies
# ============================================================================

@dataclass
class VanillaUpdate:
    """Steepest descent: Δx = α·g (stateless)."""

    def initialize(self, shape: tuple[int, ...], dtype: Any = None) -> None:
        pass

    def update(self, iterate: np.ndarray, gradient: jax.Array, step_size: float) -> jax.Array:
        return step_size * jnp.asarray(gradient)


@dataclass
class MomentumUpdate:
    """
    Heavy-ball momentum.

    Attributes:
        momentum: Velocity decay μ ∈ [0, 1)
    """
    momentum: float = 0.5
    state: MomentumState | None = field(default=None, init=False, repr=False)

    def initialize(self, shape: tuple[int, ...], dtype: Any = None) -> None:
        self.state = MomentumState(velocity=jnp.zeros(shape, dtype))

    def update(self, iterate: np.ndarray, gradient: jax.Array, step_size: float) -> jax.Array:
        if self.state is None:
            self.initialize(jnp.shape(gradient), jnp.result_type(gradient))
        check_shape(self.state.velocity.shape, jnp.shape(gradient))
        step, self.state = momentum_step(self.state, gradient, step_size, self.momentum)
        return step


@dataclass
class PadamUpdate:
    """
    Partially adaptive momentum estimation (Chen & Gu, 2018).

    Interpolates between SGD with momentum and AMSGrad through the
    exponent `partial`. Hyperparameters may be changed between optimize
    calls; the moment buffers live in `state`.

    Attributes:
        epsilon: Numerical floor in the denominator
        beta1: Exponential decay rate for the first moment
        beta2: Exponential decay rate for the second moment
        partial: Partial adaptivity exponent, documented range (0, 0.5]
    """
    epsilon: float = 1e-8
    beta1: float = 0.9
    beta2: float = 0.999
    partial: float = 0.25
    state: PadamState | None = field(default=None, init=False, repr=False)

    def initialize(self, shape: tuple[int, ...], dtype: Any = None) -> None:
        """Zero all moment buffers for an iterate of `shape` and `dtype`."""
        self.state = PadamState(
            m=jnp.zeros(shape, dtype),
            v=jnp.zeros(shape, dtype),
            v_hat=jnp.zeros(shape, dtype),
            iteration=jnp.asarray(0),
        )

    def update(self, iterate: np.ndarray, gradient: jax.Array, step_size: float) -> jax.Array:
        """Advance the moments with `gradient` and return the Padam step."""
        if self.state is None:
            self.initialize(jnp.shape(gradient), jnp.result_type(gradient))
        check_shape(self.state.m.shape, jnp.shape(gradient))

        step, self.state = padam_step(
            self.state,
            gradient,
            step_size,
            self.beta1,
            self.beta2,
            self.partial,
            self.epsilon,
        )
        return step


__all__ = [
    "MomentumState",
    "PadamState",
    "momentum_step",
    "padam_step",
    "VanillaUpdate",
    "MomentumUpdate",
    "PadamUpdate",
]
