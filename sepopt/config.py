# Copyright 2025 The SEPOPT Authors - All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Unified configuration management using Pydantic.

Acts as the Single Source of Truth for optimizer hyperparameters:
  - SGDConfig: generic driver parameters (step size, batching, stopping)
  - PadamConfig: SGDConfig + partially adaptive moment parameters

Assignments are validated, so setters on the driver and facade reject
invalid values. Mutation is legal between optimize calls only.

File: sepopt/config.py
Date: November, 2025
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import jax
import yaml
from pydantic import BaseModel, ConfigDict, Field


class SGDConfig(BaseModel):
    """
    Generic stochastic driver parameters.

    Attributes:
        step_size: Configured step size α
        batch_size: Terms per gradient estimate (>= 1)
        max_iterations: Budget in processed terms (0 = unbounded)
        tolerance: Epoch-objective tolerance (<= 0 disables)
        shuffle: Random visitation order per epoch
        reset_policy: Re-initialize policy state on every optimize call
        exact_objective: Full evaluation pass at the end of the run
        seed: Seed of the shuffling key
        enable_x64: Double precision in JAX kernels (float64 iterates)
        verbose: Print progress through the monitor logger
        report_interval: Progress row every N epochs (verbose only)
    """
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    step_size: float = 1e-3
    batch_size: int = Field(default=32, ge=1)
    max_iterations: int = Field(default=100_000, ge=0)
    tolerance: float = 1e-5
    shuffle: bool = True
    reset_policy: bool = True
    exact_objective: bool = False
    seed: int = 0
    enable_x64: bool = True

    verbose: bool = False
    report_interval: int = Field(default=1, ge=1)

    def apply(self) -> None:
        """Apply global JAX configuration."""
        jax.config.update("jax_enable_x64", self.enable_x64)

    @classmethod
    def load(cls, path: Union[str, Path]):
        """Load from YAML file."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def save(self, path: Union[str, Path]) -> None:
        """Save to YAML file."""
        path = Path(path)
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)


class PadamConfig(SGDConfig):
    """
    Padam hyperparameters on top of the driver parameters.

    `partial` is meaningful in (0, 0.5]; values outside are not rejected.
    """
    beta1: float = 0.9
    beta2: float = 0.999
    partial: float = 0.25
    epsilon: float = 1e-8

    def with_overrides(self, **overrides) -> "PadamConfig":
        """Validated copy with non-None overrides applied (e.g. CLI flags)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return PadamConfig(**{**self.model_dump(), **updates})

    def driver_config(self) -> SGDConfig:
        """Project onto the generic driver parameters."""
        return SGDConfig(**self.model_dump(include=set(SGDConfig.model_fields)))


__all__ = ["SGDConfig", "PadamConfig"]
