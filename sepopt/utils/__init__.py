# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Utility functions for the sepopt framework.

Provides epoch ordering, batching and convergence control.

File: sepopt/utils/__init__.py
Date: November, 2025
"""

from .convergence import EpochConvergence
from .sampling import epoch_order, iter_batches

__all__ = [
    "EpochConvergence",
    "epoch_order",
    "iter_batches",
]
