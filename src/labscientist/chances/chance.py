"""
Sampling policies that decide, per call, whether trials execute.

The control always runs. A Chance only gates the trials, which lets a new
code path be ramped up on a fraction of real traffic.

Usage:
    >>> experiment.chance(PercentageChance(5))  # trials on ~5% of calls
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from labscientist.utils.reproducibility import create_rng

logger = logging.getLogger(__name__)


# =============================================================================
# Base Chance Interface
# =============================================================================


class Chance(ABC):
    """Decides whether the trials of an experiment run on a given call."""
    
    @abstractmethod
    def should_run(self) -> bool:
        """Return True when trials should execute for this call."""


class StandardChance(Chance):
    """Always run every trial. This is the default policy."""
    
    def should_run(self) -> bool:
        return True
    
    def __repr__(self) -> str:
        return "StandardChance()"


class PercentageChance(Chance):
    """
    Run trials with a fixed probability.
    
    Args:
        percentage: Probability in [0, 100] that trials run.
        rng: Generator to draw from. Takes precedence over seed.
        seed: Seed for a private generator. If neither rng nor seed is
              given, the generator is derived from global NumPy state
              (see labscientist.utils.set_seed).
    
    Notes:
        0 and 100 are exact: they never consume randomness.
    """
    
    def __init__(
        self,
        percentage: float,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        self._percentage = self._validate(percentage)
        self._rng = rng if rng is not None else create_rng(seed)
    
    @staticmethod
    def _validate(percentage: float) -> float:
        if isinstance(percentage, bool) or not isinstance(percentage, (int, float, np.number)):
            raise TypeError(f"percentage must be a number, got {type(percentage)}")
        if not 0.0 <= percentage <= 100.0:
            raise ValueError(f"percentage must be in [0, 100], got {percentage}")
        return float(percentage)
    
    @property
    def percentage(self) -> float:
        return self._percentage
    
    def set_percentage(self, percentage: float) -> "PercentageChance":
        """Change the ramp at runtime. Returns self."""
        self._percentage = self._validate(percentage)
        logger.debug(f"Chance percentage set to {self._percentage}")
        return self
    
    def should_run(self) -> bool:
        if self._percentage >= 100.0:
            return True
        if self._percentage <= 0.0:
            return False
        return bool(self._rng.random() * 100.0 < self._percentage)
    
    def __repr__(self) -> str:
        return f"PercentageChance(percentage={self._percentage})"


# =============================================================================
# Chance Factory
# =============================================================================


def create_chance(config) -> Chance:
    """
    Create a sampling policy from configuration.
    
    Args:
        config: ChanceConfig or dict with chance settings
    
    Returns:
        StandardChance for percentage 100 without a seed, otherwise
        PercentageChance.
    """
    from labscientist.config import ChanceConfig
    
    if isinstance(config, dict):
        config = ChanceConfig(**config)
    
    if config.percentage >= 100.0 and config.seed is None:
        return StandardChance()
    return PercentageChance(config.percentage, seed=config.seed)
