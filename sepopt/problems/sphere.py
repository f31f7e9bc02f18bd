# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Sphere function: f(x) = Σ_i x_i², one separable term per coordinate.

Convex with unique minimizer x* = 0, f(x*) = 0.

File: sepopt/problems/sphere.py
Date: November, 2025
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np


@jax.jit
def _sphere_value(x: jax.Array, idx: jax.Array) -> jax.Array:
    return jnp.sum(jnp.square(x[idx]))


@jax.jit
def _sphere_grad(x: jax.Array, idx: jax.Array) -> jax.Array:
    """Only the visited coordinates receive gradient 2·x_i."""
    return jnp.zeros_like(x).at[idx].add(2.0 * x[idx])


class SphereFunction:
    """
    Separable sphere function in `n` dimensions.

    Term i depends on coordinate i only, so a batch touches exactly the
    coordinates it indexes.
    """

    def __init__(self, n: int):
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        self.n = n

    @property
    def n_functions(self) -> int:
        return self.n

    def initial_point(self) -> np.ndarray:
        """Alternating ±1 starting point, f = n."""
        return np.where(np.arange(self.n) % 2 == 0, 1.0, -1.0)

    def evaluate(self, coordinates: np.ndarray, indices: np.ndarray) -> float:
        return float(_sphere_value(jnp.asarray(coordinates), jnp.asarray(indices)))

    def gradient(self, coordinates: np.ndarray, indices: np.ndarray) -> jax.Array:
        return _sphere_grad(jnp.asarray(coordinates), jnp.asarray(indices))


__all__ = ["SphereFunction"]
