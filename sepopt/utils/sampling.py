# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Index ordering and batching for epoch-based stochastic optimization.

Provides:
  - Epoch order: identity or jax.random permutation of [0, n)
  - Batching: consecutive chunks of an order, last chunk may be short

File: sepopt/utils/sampling.py
Date: November, 2025
"""

from __future__ import annotations

from typing import Iterator

import jax
import numpy as np


def epoch_order(n: int, key: jax.Array | None = None) -> np.ndarray:
    """
    Visitation order for one epoch.

    Args:
        n: Number of separable terms
        key: PRNG key; None yields the identity order 0..n-1

    Returns:
        Host int64 array of length n
    """
    if key is None:
        return np.arange(n, dtype=np.int64)
    return np.asarray(jax.random.permutation(key, n), dtype=np.int64)


def iter_batches(order: np.ndarray, batch_size: int) -> Iterator[np.ndarray]:
    """
    Split an order into consecutive batches of `batch_size`.

    A batch size larger than the order yields one batch covering it.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    for start in range(0, len(order), batch_size):
        yield order[start:start + batch_size]


__all__ = ["epoch_order", "iter_batches"]
