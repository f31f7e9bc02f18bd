# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Partially adaptive momentum estimation (Padam) optimizer.

Binds PadamUpdate and NoDecay to the generic SGD driver and forwards
optimize() and every hyperparameter. For details see:

    Chen, J. and Gu, Q., "Closing the Generalization Gap of Adaptive
    Gradient Methods in Training Deep Neural Networks",
    arXiv:1806.06763 (2018).

Example:
    >>> from sepopt import Padam
    >>> from sepopt.problems import SphereFunction
    >>>
    >>> f = SphereFunction(4)
    >>> x = f.initial_point()
    >>> opt = Padam(step_size=0.01, tolerance=-1.0, max_iterations=20000)
    >>> objective = opt.optimize(f, x)

File: sepopt/padam.py
Date: December, 2025
"""

from __future__ import annotations

import numpy as np

from .analysis.callbacks import BaseCallback
from .analysis.trace import Trace
from .config import PadamConfig, SGDConfig
from .driver import SGD
from .optimizers.decay import NoDecay
from .optimizers.update import PadamState, PadamUpdate
from .problems.base import SeparableFunction


class Padam:
    """
    Padam facade over SGD[PadamUpdate, NoDecay].

    The maximum number of iterations counts processed terms: one
    iteration equals one term, not one pass over the data.

    Args:
        step_size: Step size for each iteration
        batch_size: Number of terms per step
        beta1: Exponential decay rate for the first moment estimates
        beta2: Exponential decay rate for the second moment estimates
        partial: Partially adaptive exponent
        epsilon: Numerical floor in the denominator
        max_iterations: Maximum processed terms (0 means no limit)
        tolerance: Maximum absolute epoch-objective change to terminate
        shuffle: Visit terms in random order each epoch
        reset_policy: Reset moment state before every optimize call
        exact_objective: Compute the exact final objective (default:
            estimate from the last pass over the data)
        seed: Seed of the shuffling key
        verbose: Print progress through the monitor logger
        enable_x64: Run JAX kernels in double precision
    """

    def __init__(
        self,
        step_size: float = 0.001,
        batch_size: int = 32,
        beta1: float = 0.9,
        beta2: float = 0.999,
        partial: float = 0.25,
        epsilon: float = 1e-8,
        max_iterations: int = 100000,
        tolerance: float = 1e-5,
        shuffle: bool = True,
        reset_policy: bool = True,
        exact_objective: bool = False,
        seed: int = 0,
        verbose: bool = False,
        enable_x64: bool = True,
    ) -> None:
        config = SGDConfig(
            step_size=step_size,
            batch_size=batch_size,
            max_iterations=max_iterations,
            tolerance=tolerance,
            shuffle=shuffle,
            reset_policy=reset_policy,
            exact_objective=exact_objective,
            seed=seed,
            enable_x64=enable_x64,
            verbose=verbose,
        )
        self.optimizer = SGD(
            update_policy=PadamUpdate(epsilon, beta1, beta2, partial),
            decay_policy=NoDecay(),
            config=config,
        )

    @classmethod
    def from_config(cls, config: PadamConfig) -> "Padam":
        """Build from a PadamConfig (e.g. loaded from YAML)."""
        opt = cls(
            beta1=config.beta1,
            beta2=config.beta2,
            partial=config.partial,
            epsilon=config.epsilon,
        )
        opt.optimizer.config = config.driver_config()
        return opt

    @property
    def config(self) -> PadamConfig:
        """Snapshot of all hyperparameters."""
        policy = self.update_policy
        return PadamConfig(
            **self.optimizer.config.model_dump(),
            beta1=policy.beta1,
            beta2=policy.beta2,
            partial=policy.partial,
            epsilon=policy.epsilon,
        )

    def optimize(
        self,
        function: SeparableFunction,
        iterate: np.ndarray,
        *callbacks: BaseCallback,
    ) -> float:
        """
        Optimize `function` with Padam; `iterate` is modified in place.

        Returns:
            Objective value of the final point
        """
        return self.optimizer.optimize(function, iterate, *callbacks)

    # ------------------------------------------------------------------
    # Accessors (mutation legal between optimize calls only)
    # ------------------------------------------------------------------

    @property
    def update_policy(self) -> PadamUpdate:
        return self.optimizer.update_policy

    @property
    def state(self) -> PadamState | None:
        """Current moment buffers (None before the first call)."""
        return self.update_policy.state

    @property
    def trace(self) -> Trace:
        return self.optimizer.trace

    @property
    def step_size(self) -> float:
        return self.optimizer.config.step_size

    @step_size.setter
    def step_size(self, value: float) -> None:
        self.optimizer.config.step_size = value

    @property
    def batch_size(self) -> int:
        return self.optimizer.config.batch_size

    @batch_size.setter
    def batch_size(self, value: int) -> None:
        self.optimizer.config.batch_size = value

    @property
    def beta1(self) -> float:
        """Smoothing parameter of the first moment."""
        return self.update_policy.beta1

    @beta1.setter
    def beta1(self, value: float) -> None:
        self.update_policy.beta1 = value

    @property
    def beta2(self) -> float:
        """Second moment coefficient."""
        return self.update_policy.beta2

    @beta2.setter
    def beta2(self, value: float) -> None:
        self.update_policy.beta2 = value

    @property
    def partial(self) -> float:
        """Partial adaptivity exponent."""
        return self.update_policy.partial

    @partial.setter
    def partial(self, value: float) -> None:
        self.update_policy.partial = value

    @property
    def epsilon(self) -> float:
        return self.update_policy.epsilon

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        self.update_policy.epsilon = value

    @property
    def max_iterations(self) -> int:
        """Maximum processed terms (0 indicates no limit)."""
        return self.optimizer.config.max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int) -> None:
        self.optimizer.config.max_iterations = value

    @property
    def tolerance(self) -> float:
        return self.optimizer.config.tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        self.optimizer.config.tolerance = value

    @property
    def shuffle(self) -> bool:
        return self.optimizer.config.shuffle

    @shuffle.setter
    def shuffle(self, value: bool) -> None:
        self.optimizer.config.shuffle = value

    @property
    def reset_policy(self) -> bool:
        """Whether moment state is reset before every optimize call."""
        return self.optimizer.config.reset_policy

    @reset_policy.setter
    def reset_policy(self, value: bool) -> None:
        self.optimizer.config.reset_policy = value

    @property
    def exact_objective(self) -> bool:
        return self.optimizer.config.exact_objective

    @exact_objective.setter
    def exact_objective(self, value: bool) -> None:
        self.optimizer.config.exact_objective = value

    @property
    def seed(self) -> int:
        return self.optimizer.config.seed

    @seed.setter
    def seed(self, value: int) -> None:
        self.optimizer.config.seed = value

    @property
    def enable_x64(self) -> bool:
        return self.optimizer.config.enable_x64

    @enable_x64.setter
    def enable_x64(self, value: bool) -> None:
        self.optimizer.config.enable_x64 = value

    @property
    def verbose(self) -> bool:
        return self.optimizer.config.verbose

    @verbose.setter
    def verbose(self, value: bool) -> None:
        self.optimizer.config.verbose = value

    @property
    def report_interval(self) -> int:
        """Progress row every N epochs when verbose."""
        return self.optimizer.config.report_interval

    @report_interval.setter
    def report_interval(self, value: int) -> None:
        self.optimizer.config.report_interval = value


__all__ = ["Padam"]
