# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Stochastic optimization driver for separable objectives.

Minimizes f(x) = Σ_i f_i(x) by sweeping epochs over the terms in
batches and applying a pluggable update rule to a mutable iterate:

    x ← x - U(g_B, D(α))

where g_B is the gradient summed over batch B, D the decay policy and
U the update policy. The driver never inspects the concrete policies.

Loop workflow:
  1. Apply JAX precision, (re)initialize policy state and shuffling key
  2. Per epoch: visitation order (permutation or identity) → batches
  3. Per batch: evaluate, gradient, decay, update, apply, callbacks
  4. Per epoch end: record trace, test |f_k - f_{k-1}| < tol
  5. Finalize: exact objective pass or running estimate

Termination: convergence, iteration budget (processed terms), or a
callback stop signal. Budget 0 with tolerance <= 0 never terminates
unless a callback stops the run; this is left to the caller.

File: sepopt/driver.py
Date: December, 2025
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import jax
import jax.numpy as jnp
import numpy as np

from .analysis.callbacks import BaseCallback, CallbackList
from .analysis.trace import Trace
from .config import SGDConfig
from .monitor import get_logger
from .optimizers.base import DecayPolicy, UpdatePolicy
from .optimizers.decay import NoDecay
from .problems.base import SeparableFunction
from .utils.convergence import EpochConvergence
from .utils.sampling import epoch_order, iter_batches


def _apply_step(iterate: np.ndarray, step: jax.Array) -> None:
    """In-place x ← x - Δx with strict shape agreement (no broadcasting)."""
    step = np.asarray(step)
    if step.shape != iterate.shape:
        raise ValueError(
            f"Step shape {step.shape} does not match iterate shape {iterate.shape}"
        )
    iterate -= step.astype(iterate.dtype, copy=False)


@dataclass
class SGD:
    """
    Generic stochastic gradient driver.

    Owns the iteration counters, the shuffling key and the references to
    its policies. Policy state is re-initialized at the start of every
    optimize() call when `config.reset_policy` is set, otherwise only on
    the first call (warm start across calls).

    Attributes:
        update_policy: Gradient → step rule (e.g. PadamUpdate)
        decay_policy: Step size schedule (default: NoDecay)
        config: Driver parameters, mutable between calls
        iteration: Processed terms in the current/last call
        epoch: Completed epochs in the current/last call
    """

    update_policy: UpdatePolicy
    decay_policy: DecayPolicy = field(default_factory=NoDecay)
    config: SGDConfig = field(default_factory=SGDConfig)

    iteration: int = field(default=0, init=False)
    epoch: int = field(default=0, init=False)

    _key: jax.Array | None = field(default=None, init=False, repr=False)
    _initialized: bool = field(default=False, init=False, repr=False)
    _trace: Trace = field(default_factory=Trace.empty, init=False, repr=False)

    @property
    def trace(self) -> Trace:
        """Per-epoch trajectory of the current/last call."""
        return self._trace

    @property
    def is_initialized(self) -> bool:
        """Whether policy state has been allocated by a previous call."""
        return self._initialized

    def _initialize(self, iterate: np.ndarray) -> None:
        """Allocate policy state for `iterate` and re-seed the shuffling key."""
        self.update_policy.initialize(iterate.shape, iterate.dtype)
        self.decay_policy.initialize()
        self._key = jax.random.PRNGKey(self.config.seed)
        self._initialized = True

    def _next_order(self, n: int) -> np.ndarray:
        """Visitation order for the next epoch."""
        if not self.config.shuffle:
            return epoch_order(n)
        self._key, subkey = jax.random.split(self._key)
        return epoch_order(n, subkey)

    def _exact_objective(self, function: SeparableFunction, iterate: np.ndarray) -> float:
        """Full pass Σ_i f_i(x) in batch_size chunks."""
        n = function.n_functions
        return sum(
            float(function.evaluate(iterate, indices))
            for indices in iter_batches(epoch_order(n), self.config.batch_size)
        )

    def optimize(
        self,
        function: SeparableFunction,
        iterate: np.ndarray,
        *callbacks: BaseCallback,
    ) -> float:
        """
        Minimize `function` starting from `iterate`, updated in place.

        Args:
            function: Separable objective (n_functions, evaluate, gradient)
            iterate: Writable starting point; holds the result on return
            *callbacks: Observers invoked in order at every hook

        Returns:
            Exact objective if config.exact_objective, else the running
            estimate from the last epoch's batch evaluations

        Raises:
            TypeError: If iterate is not a numpy.ndarray
            ValueError: On gradient/step/state shape mismatch
        """
        if not isinstance(iterate, np.ndarray):
            raise TypeError(
                f"iterate must be a writable numpy.ndarray, got {type(iterate).__name__}"
            )
        n = function.n_functions
        if n < 1:
            raise ValueError(f"function must expose at least one term, got {n}")

        cfg = self.config
        logger = get_logger()
        cb = CallbackList(callbacks)

        cfg.apply()
        if iterate.dtype == np.float64 and not cfg.enable_x64:
            logger.warning(
                "float64 iterate with enable_x64=False; steps are computed in float32"
            )

        if cfg.reset_policy or not self._initialized:
            self._initialize(iterate)

        budget = cfg.max_iterations
        convergence = EpochConvergence(cfg.tolerance)
        self.iteration = 0
        self.epoch = 0
        self._trace = Trace.empty()
        start = time.perf_counter()

        if cfg.verbose:
            logger.header(f"SGD: {type(self.update_policy).__name__}")
            logger.config_info(cfg.model_dump())
            logger.info(f"Terms: {n} | Iterate: {iterate.shape} {iterate.dtype}")

        epoch_objective = 0.0
        epoch_progress = 0
        last_objective = 0.0
        converged = False
        delta = float("inf")

        terminate = cb.on_optimization_begin(self, function, iterate)

        while not terminate:
            for indices in iter_batches(self._next_order(n), cfg.batch_size):
                if budget > 0:
                    indices = indices[: budget - self.iteration]

                objective = float(function.evaluate(iterate, indices))
                gradient = function.gradient(iterate, indices)
                if jnp.shape(gradient) != iterate.shape:
                    raise ValueError(
                        f"Gradient shape {jnp.shape(gradient)} does not match "
                        f"iterate shape {iterate.shape}"
                    )
                epoch_objective += objective
                epoch_progress += len(indices)

                terminate |= cb.on_evaluate(self, function, iterate, indices, objective)
                terminate |= cb.on_gradient(self, function, iterate, indices, gradient)

                step_size = self.decay_policy(cfg.step_size, iterate, gradient)
                step = self.update_policy.update(iterate, gradient, step_size)
                _apply_step(iterate, step)

                terminate |= cb.on_step_taken(self, function, iterate)
                self.iteration += len(indices)

                if terminate or (budget > 0 and self.iteration >= budget):
                    break

            if epoch_progress == n:
                self.epoch += 1
                elapsed = time.perf_counter() - start
                self._trace = self._trace.append(
                    epoch=self.epoch,
                    objective=epoch_objective,
                    iteration=self.iteration,
                    timestamp=elapsed,
                )
                if cfg.verbose and self.epoch % cfg.report_interval == 0:
                    logger.epoch_progress(self.epoch, self.iteration, epoch_objective, elapsed)

                terminate |= cb.on_epoch_end(self, function, iterate, self.epoch, epoch_objective)
                converged, delta = convergence.update(epoch_objective)

                last_objective = epoch_objective
                epoch_objective = 0.0
                epoch_progress = 0
                if converged:
                    break

            if budget > 0 and self.iteration >= budget:
                break

        if cfg.exact_objective:
            objective = self._exact_objective(function, iterate)
        elif epoch_progress > 0 or self.epoch == 0:
            objective = epoch_objective
        else:
            objective = last_objective

        if cfg.verbose:
            if converged:
                logger.converged(self.epoch, delta, cfg.tolerance)
            elif terminate:
                logger.stopped_by_callback(self.iteration)
            else:
                logger.max_iterations_reached(budget)
            logger.final_summary(objective, self.epoch, time.perf_counter() - start)

        cb.on_optimization_end(self, function, iterate, objective)
        return objective


__all__ = ["SGD"]
