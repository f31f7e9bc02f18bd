# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Generalized Rosenbrock function as a separable objective.

f(x) = Σ_{i=0}^{n-2} 100 (x_{i+1} - x_i²)² + (1 - x_i)²

Non-convex, minimizer x* = (1, ..., 1), f(x*) = 0. Gradients come from
jax.grad of the batched evaluation.

File: sepopt/problems/rosenbrock.py
Date: December, 2025
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np


def _terms(x: jax.Array, idx: jax.Array) -> jax.Array:
    xi = x[idx]
    xn = x[idx + 1]
    return 100.0 * jnp.square(xn - jnp.square(xi)) + jnp.square(1.0 - xi)


_value = jax.jit(lambda x, idx: jnp.sum(_terms(x, idx)))
_grad = jax.jit(jax.grad(lambda x, idx: jnp.sum(_terms(x, idx))))


class GeneralizedRosenbrockFunction:
    """Chained Rosenbrock valley in `n` dimensions (n - 1 terms)."""

    def __init__(self, n: int):
        if n < 2:
            raise ValueError(f"n must be >= 2, got {n}")
        self.n = n

    @property
    def n_functions(self) -> int:
        return self.n - 1

    def initial_point(self) -> np.ndarray:
        """Classic start: (-1.2, 1, -1.2, 1, ...)."""
        return np.where(np.arange(self.n) % 2 == 0, -1.2, 1.0)

    def evaluate(self, coordinates: np.ndarray, indices: np.ndarray) -> float:
        return float(_value(jnp.asarray(coordinates), jnp.asarray(indices)))

    def gradient(self, coordinates: np.ndarray, indices: np.ndarray) -> jax.Array:
        return _grad(jnp.asarray(coordinates), jnp.asarray(indices))


__all__ = ["GeneralizedRosenbrockFunction"]
