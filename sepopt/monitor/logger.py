# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Unified logging system for monitoring and progress tracking.

Provides colorized console output with ANSI code stripping for file logging.
Supports section headers, per-epoch progress, termination messages and
final summaries.

File: sepopt/monitor/logger.py
Date: November, 2025
"""

from __future__ import annotations

import re
from typing import TextIO


# ANSI escape sequence regex for clean file logging
_ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


class MonitorLogger:
    """Unified logger for stdout and optional file output with color support."""

    BLUE = "\033[94m"
    RESET = "\033[0m"

    def __init__(self, file: TextIO | None = None) -> None:
        """Initialize logger with optional file handle."""
        self._file = file

    def bind_file(self, file: TextIO | None) -> None:
        """Attach or replace file handle for persistent logging."""
        self._file = file

    def _write(self, msg: str) -> None:
        """
        Write message to stdout and file (with ANSI stripping).

        Color codes preserved for console, stripped for file logging.
        File writes are best-effort so a closed handle never aborts a run.
        """
        print(msg)

        if self._file is not None:
            try:
                clean_msg = _ANSI_ESCAPE_RE.sub("", msg)
                self._file.write(clean_msg + "\n")
                self._file.flush()
            except (OSError, ValueError):
                pass

    def _blue(self, text: str) -> str:
        """Wrap text in bright blue color for emphasis."""
        return f"{self.BLUE}{text}{self.RESET}"

    def info(self, msg: str) -> None:
        """Generic informational message."""
        self._write(msg)

    def header(self, title: str) -> None:
        """Print centered section header with border lines."""
        line = "=" * 60
        self._write(f"\n{line}")
        self._write(f"{title:^60}")
        self._write(line)

    def config_info(self, items: dict) -> None:
        """Print configuration key-value pairs."""
        for key, value in items.items():
            self._write(f"{key:20s}: {value}")

    def epoch_progress(self, epoch: int, iteration: int, objective: float, elapsed: float) -> None:
        """Print one progress row."""
        self._write(
            f"Epoch {epoch:6d} | Iter {iteration:10d} | "
            f"f = {objective:.10e} | Time = {elapsed:.2f}s"
        )

    def converged(self, epoch: int, delta: float, tol: float) -> None:
        """Print convergence message with epoch count and objective delta."""
        self._write(
            f"\n{self._blue('Converged')} at epoch {epoch} "
            f"(Δf = {delta:.2e} < tol = {tol:.2e})"
        )

    def max_iterations_reached(self, max_iterations: int) -> None:
        """Print message when the iteration budget is exhausted."""
        self._write(f"\nReached max iterations ({max_iterations})")

    def stopped_by_callback(self, iteration: int) -> None:
        """Print message when a callback requested termination."""
        self._write(f"\nTerminated by callback at iteration {iteration}")

    def final_summary(self, objective: float, n_epochs: int, total_time: float) -> None:
        """Print final summary with objective, epoch count, and total time."""
        line = "=" * 60
        self._write(f"\n{line}")
        self._write(f"Final: {self._blue(f'f = {objective:.10e}')}")
        self._write(f"Epochs: {n_epochs} | Time: {total_time:.2f}s")
        self._write(line + "\n")

    def warning(self, message: str) -> None:
        """Print warning message."""
        self._write(f"Warning: {message}")


__all__ = ["MonitorLogger"]
