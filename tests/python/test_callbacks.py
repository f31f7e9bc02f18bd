# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Tests for callback dispatch and the stock callbacks.

Validates:
  - All callbacks are invoked in order; stop signal is the logical OR
  - Stop requests take effect after the current step
  - EarlyStopAtMinLoss, StoreBestCoordinates, TimerStop
  - ConsoleCallback and JsonCallback output

File: test_callbacks.py
Date: December, 2025
"""

from __future__ import annotations

import json

import numpy as np
import pytest
import jax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

from sepopt import SGD, SGDConfig
from sepopt.analysis import (
    BaseCallback,
    CallbackList,
    ConsoleCallback,
    EarlyStopAtMinLoss,
    JsonCallback,
    StoreBestCoordinates,
    TimerStop,
)
from sepopt.optimizers import PadamUpdate, VanillaUpdate
from sepopt.problems import SphereFunction


# ============================================================================
# Helper Classes
# ============================================================================

class Probe(BaseCallback):
    """Log hook names to a shared list and return a fixed signal."""

    def __init__(self, name, log, stop_on=None):
        self.name = name
        self.log = log
        self.stop_on = stop_on

    def _record(self, hook):
        self.log.append((self.name, hook))
        return hook == self.stop_on

    def on_optimization_begin(self, optimizer, function, iterate):
        return self._record("begin")

    def on_evaluate(self, optimizer, function, iterate, indices, objective):
        return self._record("evaluate")

    def on_gradient(self, optimizer, function, iterate, indices, gradient):
        return self._record("gradient")

    def on_step_taken(self, optimizer, function, iterate):
        return self._record("step")

    def on_optimization_end(self, optimizer, function, iterate, objective):
        self._record("end")


class Ramp:
    """
    One term with f(x) = x and constant gradient -1.

    With a vanilla unit step the iterate grows by one per epoch, so the
    epoch objective increases monotonically.
    """

    n_functions = 1

    def evaluate(self, coordinates, indices):
        return float(coordinates[0])

    def gradient(self, coordinates, indices):
        return -jnp.ones_like(jnp.asarray(coordinates))


def _padam(**overrides) -> SGD:
    cfg = dict(step_size=0.01, tolerance=-1.0, shuffle=False, batch_size=2, max_iterations=100)
    cfg.update(overrides)
    return SGD(PadamUpdate(), config=SGDConfig(**cfg))


# ============================================================================
# Dispatch
# ============================================================================

def test_all_callbacks_called_and_signals_ored():
    log = []
    first = Probe("a", log, stop_on="begin")
    second = Probe("b", log)
    f = SphereFunction(2)
    x = f.initial_point()

    result = _padam().optimize(f, x, first, second)

    assert log == [("a", "begin"), ("b", "begin"), ("a", "end"), ("b", "end")]
    np.testing.assert_array_equal(x, f.initial_point())
    assert result == 0.0


def test_callback_list_dispatch():
    log = []
    cbs = CallbackList([Probe("a", log), Probe("b", log, stop_on="step")])
    assert len(cbs) == 2
    assert cbs.on_step_taken(None, None, None) is True
    assert cbs.on_evaluate(None, None, None, None, 0.0) is False
    assert log == [("a", "step"), ("b", "step"), ("a", "evaluate"), ("b", "evaluate")]


def test_stop_on_step_halts_after_one_step():
    log = []
    f = SphereFunction(6)
    opt = _padam()
    opt.optimize(f, f.initial_point(), Probe("a", log, stop_on="step"))

    assert [hook for _, hook in log].count("step") == 1
    assert opt.iteration == 2


def test_stop_on_evaluate_still_completes_step():
    log = []
    f = SphereFunction(6)
    x = f.initial_point()
    opt = _padam()
    opt.optimize(f, x, Probe("a", log, stop_on="evaluate"))

    hooks = [hook for _, hook in log]
    assert hooks == ["begin", "evaluate", "gradient", "step", "end"]
    assert not np.array_equal(x, f.initial_point())
    assert opt.iteration == 2


def test_base_callback_is_noop():
    f = SphereFunction(2)
    opt = _padam(max_iterations=4)
    opt.optimize(f, f.initial_point(), BaseCallback())
    assert opt.iteration == 4


# ============================================================================
# Stock callbacks
# ============================================================================

def test_early_stop_restores_best_iterate():
    opt = SGD(
        VanillaUpdate(),
        config=SGDConfig(step_size=1.0, batch_size=1, tolerance=-1.0, max_iterations=0, shuffle=False),
    )
    x = np.zeros(1)
    early = EarlyStopAtMinLoss(patience=2)
    opt.optimize(Ramp(), x, early)

    # Epoch objectives 0, 1, 2: no improvement after epoch 1
    assert opt.epoch == 3
    assert early.best_objective == 0.0
    np.testing.assert_array_equal(x, [1.0])


def test_early_stop_without_restore():
    opt = SGD(
        VanillaUpdate(),
        config=SGDConfig(step_size=1.0, batch_size=1, tolerance=-1.0, max_iterations=0, shuffle=False),
    )
    x = np.zeros(1)
    opt.optimize(Ramp(), x, EarlyStopAtMinLoss(patience=2, restore_best=False))
    np.testing.assert_array_equal(x, [3.0])


def test_store_best_coordinates():
    f = SphereFunction(4)
    opt = _padam(batch_size=4, max_iterations=40)
    best = StoreBestCoordinates()
    x = f.initial_point()
    opt.optimize(f, x, best)

    assert best.best_objective == pytest.approx(float(np.min(opt.trace.objectives)))
    assert best.best_coordinates.shape == x.shape
    assert best.best_coordinates is not x


def test_timer_stop():
    f = SphereFunction(4)
    opt = _padam(max_iterations=0)
    opt.optimize(f, f.initial_point(), TimerStop(seconds=0.0))
    assert opt.iteration == 2


def test_json_callback_writes_epochs(tmp_path):
    path = tmp_path / "logs" / "run.jsonl"
    f = SphereFunction(4)
    opt = _padam(max_iterations=12)
    opt.optimize(f, f.initial_point(), JsonCallback(path))

    records = [json.loads(line) for line in path.read_text().splitlines()]
    assert [r["epoch"] for r in records] == [1, 2, 3]
    assert [r["iteration"] for r in records] == [4, 8, 12]
    assert all(isinstance(r["objective"], float) for r in records)


def test_console_callback_prints(capsys):
    f = SphereFunction(2)
    opt = _padam(max_iterations=4)
    opt.optimize(f, f.initial_point(), ConsoleCallback(every=1))

    out = capsys.readouterr().out
    assert "Stochastic optimization" in out
    assert out.count("Epoch ") == 2
    assert "Final:" in out
