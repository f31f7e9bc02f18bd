# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Pluggable policies for the stochastic optimization driver.

Provides the two capability sets the driver is generic over and their
implementations:
  - UpdatePolicy: VanillaUpdate, MomentumUpdate, PadamUpdate
  - DecayPolicy: NoDecay, ScheduleDecay (cosine / exponential factories)

Example:
    >>> from sepopt.driver import SGD
    >>> from sepopt.optimizers import PadamUpdate, cosine_decay
    >>>
    >>> opt = SGD(PadamUpdate(partial=0.125), cosine_decay(decay_steps=1000))

File: sepopt/optimizers/__init__.py
Date: November, 2025
"""

from .base import DecayPolicy, UpdatePolicy, UpdateState
from .decay import NoDecay, ScheduleDecay, cosine_decay, exponential_decay
from .update import (
    MomentumState,
    MomentumUpdate,
    PadamState,
    PadamUpdate,
    VanillaUpdate,
    momentum_step,
    padam_step,
)

__all__ = [
    # Base abstractions
    "DecayPolicy",
    "UpdatePolicy",
    "UpdateState",
    # Update policies
    "VanillaUpdate",
    "MomentumUpdate",
    "MomentumState",
    "PadamUpdate",
    "PadamState",
    "momentum_step",
    "padam_step",
    # Decay policies
    "NoDecay",
    "ScheduleDecay",
    "cosine_decay",
    "exponential_decay",
]
