# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Tests for logging, trace recording and sampling utilities.

File: test_monitor.py
Date: December, 2025
"""

from __future__ import annotations

import io

import numpy as np
import pytest
import jax

jax.config.update("jax_enable_x64", True)

from sepopt.analysis import Trace
from sepopt.monitor import MonitorLogger, get_logger
from sepopt.utils import EpochConvergence, epoch_order, iter_batches


# ============================================================================
# Logger
# ============================================================================

def test_logger_file_output_strips_ansi(capsys):
    buf = io.StringIO()
    logger = MonitorLogger(buf)
    logger.converged(epoch=3, delta=1e-7, tol=1e-5)
    logger.warning("slow")

    console = capsys.readouterr().out
    assert MonitorLogger.BLUE in console
    assert "\x1b[" not in buf.getvalue()
    assert "Converged at epoch 3" in buf.getvalue()
    assert "Warning: slow" in buf.getvalue()


def test_logger_survives_closed_file():
    buf = io.StringIO()
    logger = MonitorLogger()
    logger.bind_file(buf)
    buf.close()
    logger.info("after close")


def test_get_logger_is_singleton():
    assert get_logger() is get_logger()


# ============================================================================
# Trace
# ============================================================================

def test_trace_append_is_functional():
    empty = Trace.empty()
    one = empty.append(epoch=1, objective=4.0, iteration=8, timestamp=0.5)
    two = one.append(epoch=2, objective=1.0, iteration=16, timestamp=1.5)

    assert empty.n_points == 0 and empty.total_time == 0.0
    assert one.n_points == 1
    assert two.total_time == pytest.approx(1.5)
    np.testing.assert_allclose(two.deltas(), [3.0])


# ============================================================================
# Sampling / convergence
# ============================================================================

def test_iter_batches_last_batch_short():
    batches = [b.tolist() for b in iter_batches(np.arange(5), 2)]
    assert batches == [[0, 1], [2, 3], [4]]
    with pytest.raises(ValueError):
        list(iter_batches(np.arange(5), 0))


def test_epoch_order_permutation():
    order = epoch_order(10, jax.random.PRNGKey(0))
    assert order.dtype == np.int64
    assert sorted(order.tolist()) == list(range(10))
    np.testing.assert_array_equal(epoch_order(4), [0, 1, 2, 3])


def test_epoch_convergence():
    conv = EpochConvergence(tol=0.1)
    assert conv.update(1.0) == (False, float("inf"))
    converged, delta = conv.update(1.05)
    assert converged and delta == pytest.approx(0.05)

    disabled = EpochConvergence(tol=0.0)
    disabled.update(1.0)
    assert disabled.update(1.0)[0] is False
