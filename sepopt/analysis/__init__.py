# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Analysis module for sepopt optimization runs.

Provides runtime monitoring and trajectory recording:
  - Callbacks: Observer pattern for runtime tracking and early stopping
  - Trace: Per-epoch objective trajectory

File: sepopt/analysis/__init__.py
Date: December, 2025
"""

from .callbacks import (
    BaseCallback,
    CallbackList,
    ConsoleCallback,
    EarlyStopAtMinLoss,
    JsonCallback,
    StoreBestCoordinates,
    TimerStop,
)
from .trace import Trace

__all__ = [
    # Callback system
    "BaseCallback",
    "CallbackList",
    "ConsoleCallback",
    "JsonCallback",
    "EarlyStopAtMinLoss",
    "StoreBestCoordinates",
    "TimerStop",
    # Trajectory
    "Trace",
]
