# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Separable objective functions.

The driver consumes any object satisfying SeparableFunction; the
concrete problems here serve as references for tests and examples.

File: sepopt/problems/__init__.py
Date: November, 2025
"""

from .base import SeparableFunction
from .regression import LinearRegressionFunction
from .rosenbrock import GeneralizedRosenbrockFunction
from .sphere import SphereFunction

__all__ = [
    "SeparableFunction",
    "SphereFunction",
    "LinearRegressionFunction",
    "GeneralizedRosenbrockFunction",
]
