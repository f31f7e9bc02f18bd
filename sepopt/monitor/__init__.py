# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Monitor module initialization and global logger management.

File: sepopt/monitor/__init__.py
Date: November, 2025
"""

from __future__ import annotations

from typing import Optional

from .logger import MonitorLogger

_LOGGER_INSTANCE: Optional[MonitorLogger] = None


def get_logger() -> MonitorLogger:
    """Get singleton MonitorLogger instance."""
    global _LOGGER_INSTANCE
    if _LOGGER_INSTANCE is None:
        _LOGGER_INSTANCE = MonitorLogger()
    return _LOGGER_INSTANCE


__all__ = ["MonitorLogger", "get_logger"]
