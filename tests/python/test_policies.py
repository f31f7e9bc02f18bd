# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Tests for update and decay policies.

Validates:
  - Padam moment recursion against a NumPy reference
  - Lazy initialization and state shape checking
  - Vanilla and momentum steps
  - NoDecay identity and schedule-based decay (including optax factories)

File: test_policies.py
Date: December, 2025
"""

from __future__ import annotations

import numpy as np
import pytest
import jax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

from sepopt.optimizers import (
    MomentumUpdate,
    NoDecay,
    PadamUpdate,
    ScheduleDecay,
    VanillaUpdate,
    cosine_decay,
    exponential_decay,
)


# ============================================================================
# Helper Functions
# ============================================================================

def padam_reference(grads, step_size, beta1=0.9, beta2=0.999, partial=0.25, eps=1e-8):
    """Sequential NumPy Padam steps for a list of gradients."""
    m = np.zeros_like(grads[0])
    v = np.zeros_like(grads[0])
    v_hat = np.zeros_like(grads[0])
    steps = []
    for g in grads:
        m = beta1 * m + (1.0 - beta1) * g
        v = beta2 * v + (1.0 - beta2) * g * g
        v_hat = np.maximum(v_hat, v)
        steps.append(step_size * m / (v_hat ** partial + eps))
    return steps


# ============================================================================
# Padam
# ============================================================================

def test_padam_matches_reference():
    grads = [
        np.array([1.0, -2.0, 0.5]),
        np.array([0.1, 3.0, -0.5]),
        np.array([-1.0, 0.0, 0.25]),
    ]
    policy = PadamUpdate()
    policy.initialize((3,))
    iterate = np.zeros(3)

    expected = padam_reference(grads, step_size=0.1)
    for g, ref in zip(grads, expected):
        step = policy.update(iterate, jnp.asarray(g), 0.1)
        np.testing.assert_allclose(np.asarray(step), ref, rtol=1e-12, atol=1e-14)

    assert int(policy.state.iteration) == 3


def test_padam_running_max_keeps_largest_second_moment():
    policy = PadamUpdate(beta2=0.5)
    policy.initialize((1,))
    iterate = np.zeros(1)

    policy.update(iterate, jnp.array([4.0]), 0.1)
    peak = float(policy.state.v_hat[0])
    policy.update(iterate, jnp.array([0.0]), 0.1)

    assert float(policy.state.v[0]) < peak
    assert float(policy.state.v_hat[0]) == pytest.approx(peak)


def test_padam_hyperparameters_are_used():
    g = np.array([2.0, -1.0])
    policy = PadamUpdate(epsilon=1e-6, beta1=0.5, beta2=0.9, partial=0.5)
    policy.initialize((2,))
    step = policy.update(np.zeros(2), jnp.asarray(g), 0.2)

    ref = padam_reference([g], 0.2, beta1=0.5, beta2=0.9, partial=0.5, eps=1e-6)[0]
    np.testing.assert_allclose(np.asarray(step), ref, rtol=1e-12)


def test_padam_lazy_initialization():
    policy = PadamUpdate()
    assert policy.state is None
    step = policy.update(np.zeros(2), jnp.array([1.0, 1.0]), 0.01)
    assert step.shape == (2,)
    assert policy.state.m.shape == (2,)


def test_padam_shape_mismatch_raises():
    policy = PadamUpdate()
    policy.initialize((3,))
    with pytest.raises(ValueError, match="reset_policy"):
        policy.update(np.zeros(4), jnp.ones(4), 0.01)


def test_padam_initialize_resets_state():
    policy = PadamUpdate()
    policy.initialize((2,))
    policy.update(np.zeros(2), jnp.array([1.0, -1.0]), 0.1)
    policy.initialize((2,))

    np.testing.assert_array_equal(np.asarray(policy.state.m), 0.0)
    np.testing.assert_array_equal(np.asarray(policy.state.v_hat), 0.0)
    assert int(policy.state.iteration) == 0


# ============================================================================
# Vanilla / Momentum
# ============================================================================

def test_vanilla_step_is_scaled_gradient():
    step = VanillaUpdate().update(np.zeros(2), jnp.array([1.0, -3.0]), 0.5)
    np.testing.assert_allclose(np.asarray(step), [0.5, -1.5])


def test_momentum_accumulates_velocity():
    policy = MomentumUpdate(momentum=0.5)
    policy.initialize((1,))
    g = jnp.array([1.0])

    first = policy.update(np.zeros(1), g, 0.1)
    second = policy.update(np.zeros(1), g, 0.1)

    # u1 = -0.1, u2 = 0.5 * u1 - 0.1 = -0.15
    assert float(first[0]) == pytest.approx(0.1)
    assert float(second[0]) == pytest.approx(0.15)


# ============================================================================
# Decay
# ============================================================================

@pytest.mark.parametrize("alpha", [1e-3, 0.5, 2.0])
def test_no_decay_is_identity(alpha):
    decay = NoDecay()
    decay.initialize()
    for _ in range(3):
        assert decay(alpha, np.zeros(2), jnp.zeros(2)) == alpha


def test_schedule_decay_counts_queries():
    decay = ScheduleDecay(lambda t: 0.5 ** t)
    values = [decay(1.0, None, None) for _ in range(3)]
    assert values == pytest.approx([1.0, 0.5, 0.25])

    decay.initialize()
    assert decay(2.0, None, None) == pytest.approx(2.0)


def test_exponential_decay_factory():
    decay = exponential_decay(transition_steps=1, decay_rate=0.5)
    values = [decay(0.1, None, None) for _ in range(3)]
    assert values == pytest.approx([0.1, 0.05, 0.025])


def test_cosine_decay_factory():
    decay = cosine_decay(decay_steps=4)
    values = [decay(1.0, None, None) for _ in range(5)]
    assert values[0] == pytest.approx(1.0)
    assert values[2] == pytest.approx(0.5)
    assert values[4] == pytest.approx(0.0, abs=1e-12)


# ============================================================================
# State dtype
# ============================================================================

@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_state_follows_requested_dtype(dtype):
    padam = PadamUpdate()
    padam.initialize((3,), dtype)
    momentum = MomentumUpdate()
    momentum.initialize((3,), dtype)

    assert padam.state.m.dtype == dtype
    assert padam.state.v_hat.dtype == dtype
    assert momentum.state.velocity.dtype == dtype


def test_lazy_state_follows_gradient_dtype():
    policy = PadamUpdate()
    policy.update(np.zeros(2, np.float32), jnp.ones(2, jnp.float32), 0.01)
    assert policy.state.m.dtype == np.float32
