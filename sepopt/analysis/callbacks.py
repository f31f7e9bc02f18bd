# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Observer pattern for runtime monitoring and cooperative termination.

Provides callback hooks at fixed points of the stochastic driver:
  - on_optimization_begin / on_optimization_end: run boundaries
  - on_evaluate / on_gradient: after each batch evaluation
  - on_step_taken: after each update of the iterate
  - on_epoch_end: after each full pass over the terms

Any hook may return a truthy value to request termination. The
driver finishes the current step and stops; this is a normal outcome.

Stock callbacks:
  - ConsoleCallback: Formatted epoch progress via the monitor logger
  - JsonCallback: Line-delimited JSON streaming
  - EarlyStopAtMinLoss: Patience-based stop on the epoch objective
  - StoreBestCoordinates: Keep the best iterate seen
  - TimerStop: Wall-clock budget

File: sepopt/analysis/callbacks.py
Date: December, 2025
"""

from __future__ import annotations

import json
import time
from abc import ABC
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

import numpy as np

from ..monitor import get_logger

if TYPE_CHECKING:
    import jax

    from ..driver import SGD
    from ..problems.base import SeparableFunction


class BaseCallback(ABC):
    """Abstract base for driver observers; every hook is a no-op."""

    def on_optimization_begin(
        self, optimizer: SGD, function: SeparableFunction, iterate: np.ndarray
    ) -> bool | None:
        """Invoked once before the first batch."""
        pass

    def on_evaluate(
        self,
        optimizer: SGD,
        function: SeparableFunction,
        iterate: np.ndarray,
        indices: np.ndarray,
        objective: float,
    ) -> bool | None:
        """Invoked after the objective of a batch was evaluated."""
        pass

    def on_gradient(
        self,
        optimizer: SGD,
        function: SeparableFunction,
        iterate: np.ndarray,
        indices: np.ndarray,
        gradient: jax.Array,
    ) -> bool | None:
        """Invoked after the gradient of a batch was computed."""
        pass

    def on_step_taken(
        self, optimizer: SGD, function: SeparableFunction, iterate: np.ndarray
    ) -> bool | None:
        """Invoked after the step was subtracted from the iterate."""
        pass

    def on_epoch_end(
        self,
        optimizer: SGD,
        function: SeparableFunction,
        iterate: np.ndarray,
        epoch: int,
        objective: float,
    ) -> bool | None:
        """Invoked after each complete pass over the terms."""
        pass

    def on_optimization_end(
        self,
        optimizer: SGD,
        function: SeparableFunction,
        iterate: np.ndarray,
        objective: float,
    ) -> None:
        """Invoked once with the final objective."""
        pass


class CallbackList:
    """
    Ordered callback aggregate.

    Every hook is dispatched to all callbacks in registration order
    (no short circuit); the aggregate stop signal is their logical OR.
    """

    def __init__(self, callbacks: Iterable[BaseCallback] = ()):
        self.callbacks = list(callbacks)

    def __len__(self) -> int:
        return len(self.callbacks)

    def _dispatch(self, hook: str, *args: Any) -> bool:
        signals = [getattr(cb, hook)(*args) for cb in self.callbacks]
        return any(bool(s) for s in signals)

    def on_optimization_begin(self, optimizer, function, iterate) -> bool:
        return self._dispatch("on_optimization_begin", optimizer, function, iterate)

    def on_evaluate(self, optimizer, function, iterate, indices, objective) -> bool:
        return self._dispatch("on_evaluate", optimizer, function, iterate, indices, objective)

    def on_gradient(self, optimizer, function, iterate, indices, gradient) -> bool:
        return self._dispatch("on_gradient", optimizer, function, iterate, indices, gradient)

    def on_step_taken(self, optimizer, function, iterate) -> bool:
        return self._dispatch("on_step_taken", optimizer, function, iterate)

    def on_epoch_end(self, optimizer, function, iterate, epoch, objective) -> bool:
        return self._dispatch("on_epoch_end", optimizer, function, iterate, epoch, objective)

    def on_optimization_end(self, optimizer, function, iterate, objective) -> None:
        self._dispatch("on_optimization_end", optimizer, function, iterate, objective)


class ConsoleCallback(BaseCallback):
    """Stdout progress rows with epoch objective."""

    def __init__(self, every: int = 1):
        """
        Args:
            every: Print interval in epochs
        """
        self.every = every
        self._start = 0.0

    def on_optimization_begin(self, optimizer, function, iterate) -> None:
        self._start = time.perf_counter()
        get_logger().header("Stochastic optimization")

    def on_epoch_end(self, optimizer, function, iterate, epoch, objective) -> None:
        if epoch % self.every != 0:
            return
        get_logger().epoch_progress(
            epoch, optimizer.iteration, objective, time.perf_counter() - self._start
        )

    def on_optimization_end(self, optimizer, function, iterate, objective) -> None:
        get_logger().final_summary(
            objective, optimizer.epoch, time.perf_counter() - self._start
        )


class JsonCallback(BaseCallback):
    """Stream epoch stats to line-delimited JSON file for post-analysis."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

    def on_epoch_end(self, optimizer, function, iterate, epoch, objective) -> None:
        """Append one record per epoch."""
        record = {
            "epoch": int(epoch),
            "iteration": int(optimizer.iteration),
            "objective": self._to_json(objective),
        }
        with self.path.open("a") as f:
            f.write(json.dumps(record) + "\n")

    @staticmethod
    def _to_json(obj: Any) -> Any:
        """Convert numpy/jax scalars and arrays to native Python types."""
        if isinstance(obj, (np.integer, np.floating)):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if hasattr(obj, "item"):
            return obj.item()
        return obj


class StoreBestCoordinates(BaseCallback):
    """Keep a copy of the iterate with the lowest epoch objective."""

    def __init__(self):
        self.best_objective = float("inf")
        self.best_coordinates: np.ndarray | None = None

    def on_epoch_end(self, optimizer, function, iterate, epoch, objective) -> None:
        if objective < self.best_objective:
            self.best_objective = float(objective)
            self.best_coordinates = np.array(iterate, copy=True)


class EarlyStopAtMinLoss(BaseCallback):
    """
    Stop when the epoch objective has not improved for `patience` epochs.

    With restore_best, the best iterate is written back in place at the
    end of the run.
    """

    def __init__(self, patience: int = 10, restore_best: bool = True):
        self.patience = patience
        self.restore_best = restore_best
        self.best_objective = float("inf")
        self.best_coordinates: np.ndarray | None = None
        self.wait = 0

    def on_optimization_begin(self, optimizer, function, iterate) -> None:
        self.best_objective = float("inf")
        self.best_coordinates = None
        self.wait = 0

    def on_epoch_end(self, optimizer, function, iterate, epoch, objective) -> bool:
        if objective < self.best_objective:
            self.best_objective = float(objective)
            self.best_coordinates = np.array(iterate, copy=True)
            self.wait = 0
            return False
        self.wait += 1
        return self.wait >= self.patience

    def on_optimization_end(self, optimizer, function, iterate, objective) -> None:
        if self.restore_best and self.best_coordinates is not None:
            iterate[...] = self.best_coordinates


class TimerStop(BaseCallback):
    """Cooperative wall-clock budget checked after every step."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self._start = 0.0

    def on_optimization_begin(self, optimizer, function, iterate) -> None:
        self._start = time.perf_counter()

    def on_step_taken(self, optimizer, function, iterate) -> bool:
        return time.perf_counter() - self._start >= self.seconds


__all__ = [
    "BaseCallback",
    "CallbackList",
    "ConsoleCallback",
    "JsonCallback",
    "StoreBestCoordinates",
    "EarlyStopAtMinLoss",
    "TimerStop",
]
