# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Objective-function contract consumed by the stochastic driver.

A separable function f(x) = Σ_i f_i(x) exposes its number of terms and
batched evaluation/gradient over an index subset. The driver owns the
visitation order and passes explicit index arrays.

File: sepopt/problems/base.py
Date: November, 2025
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import jax
    import numpy as np


@runtime_checkable
class SeparableFunction(Protocol):
    """
    Separable objective f(x) = Σ_i f_i(x), i ∈ [0, n_functions).

    Batched operations sum over the given term indices.
    """

    @property
    def n_functions(self) -> int:
        """Number of separable terms."""
        ...

    def evaluate(self, coordinates: np.ndarray, indices: np.ndarray) -> float:
        """
        Σ_{i ∈ indices} f_i(coordinates).

        Args:
            coordinates: Current iterate
            indices: 1-D integer array of term indices
        """
        ...

    def gradient(self, coordinates: np.ndarray, indices: np.ndarray) -> jax.Array:
        """
        Σ_{i ∈ indices} ∇f_i(coordinates), shaped like `coordinates`.

        Args:
            coordinates: Current iterate
            indices: 1-D integer array of term indices
        """
        ...


__all__ = ["SeparableFunction"]
