# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Least-squares linear regression as a separable objective.

Per-sample loss: f_i(w) = (a_i · w - y_i)²
Batched gradient: ∇ = 2 · A_Bᵀ (A_B w - y_B)

File: sepopt/problems/regression.py
Date: November, 2025
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np


@jax.jit
def _residual(w: jax.Array, a: jax.Array, y: jax.Array) -> jax.Array:
    return a @ w - y


class LinearRegressionFunction:
    """
    Empirical squared error of a linear model over `n_samples` rows.

    Args:
        features: Design matrix A [n_samples, n_features]
        targets: Responses y [n_samples]
    """

    def __init__(self, features: np.ndarray, targets: np.ndarray):
        features = np.asarray(features, dtype=float)
        targets = np.asarray(targets, dtype=float)
        if features.ndim != 2:
            raise ValueError(f"features must be 2-D, got shape {features.shape}")
        if targets.shape != (features.shape[0],):
            raise ValueError(
                f"targets shape {targets.shape} does not match "
                f"{features.shape[0]} samples"
            )
        self.features = jnp.asarray(features)
        self.targets = jnp.asarray(targets)

    @property
    def n_functions(self) -> int:
        return int(self.features.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.features.shape[1])

    def initial_point(self) -> np.ndarray:
        """Zero weights."""
        return np.zeros(self.n_features)

    def evaluate(self, coordinates: np.ndarray, indices: np.ndarray) -> float:
        idx = jnp.asarray(indices)
        r = _residual(jnp.asarray(coordinates), self.features[idx], self.targets[idx])
        return float(jnp.sum(jnp.square(r)))

    def gradient(self, coordinates: np.ndarray, indices: np.ndarray) -> jax.Array:
        idx = jnp.asarray(indices)
        a = self.features[idx]
        r = _residual(jnp.asarray(coordinates), a, self.targets[idx])
        return 2.0 * (a.T @ r)

    def solve(self) -> np.ndarray:
        """Closed-form least-squares solution (reference for tests)."""
        w, *_ = np.linalg.lstsq(np.asarray(self.features), np.asarray(self.targets), rcond=None)
        return w


__all__ = ["LinearRegressionFunction"]
