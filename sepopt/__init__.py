# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
SEPOPT: stochastic optimization of separable objectives.

A generic SGD driver with pluggable update and decay policies, and the
Padam optimizer built on top of it.
"""

from .config import PadamConfig, SGDConfig
from .driver import SGD
from .padam import Padam

from . import analysis
from . import optimizers
from . import problems

__version__ = "0.1.0"

__all__ = [
    "SGD",
    "Padam",
    "SGDConfig",
    "PadamConfig",
]
