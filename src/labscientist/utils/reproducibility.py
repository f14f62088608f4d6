"""
Reproducibility utilities for sampled experiments.

Sampling decisions (PercentageChance) draw from NumPy generators. Seeding
the global state here makes which runs execute their trials reproducible:
- Python random module
- NumPy global random state
- Generators created via create_rng() without an explicit seed

Usage:
    >>> from labscientist.utils import set_seed
    >>> set_seed(42)  # Call once at process start
"""

import random
from dataclasses import dataclass
from typing import Optional, Dict, Any
import logging

import numpy as np

logger = logging.getLogger(__name__)


# =============================================================================
# Core Seed Management
# =============================================================================


def _validate_seed(seed: Any) -> None:
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise TypeError(f"seed must be an int, got {type(seed)}")
    if seed < 0:
        raise ValueError(f"seed must be non-negative, got {seed}")


def set_seed(seed: int = 42) -> None:
    """
    Set random seeds for the Python and NumPy global generators.
    
    Args:
        seed: Random seed (default: 42)
    
    Example:
        >>> set_seed(42)
        >>> chance = PercentageChance(10)  # draws from a generator derived from seed 42
    """
    _validate_seed(seed)
    
    random.seed(seed)
    np.random.seed(seed)
    
    logger.debug(f"Set seed={seed}")


def get_seed_state() -> Dict[str, Any]:
    """
    Get current state of the global random number generators.
    
    Returns:
        Dict with states for: python, numpy
    """
    return {
        'python': random.getstate(),
        'numpy': np.random.get_state(),
    }


def set_seed_state(state: Dict[str, Any]) -> None:
    """
    Restore the global random number generators to a saved state.
    
    Args:
        state: State dict from get_seed_state()
    """
    random.setstate(state['python'])
    np.random.set_state(state['numpy'])


def create_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a NumPy Generator for a sampling policy.
    
    With an explicit seed the generator is independent of global state.
    Without one, its seed is drawn from the global NumPy state, so a prior
    set_seed() call still makes the sequence deterministic.
    
    Args:
        seed: Optional seed for the generator.
    
    Returns:
        numpy.random.Generator
    """
    if seed is None:
        seed = int(np.random.randint(0, 2**31 - 1))
    else:
        _validate_seed(seed)
    return np.random.default_rng(seed)


# =============================================================================
# Seed Manager Context
# =============================================================================


@dataclass
class SeedManager:
    """
    Context manager for reproducible code blocks.
    
    Args:
        seed: Random seed to use within the context
        restore_state: If True, restore original RNG state after exiting
                      (useful for testing to avoid cross-test contamination)
    
    Example:
        >>> with SeedManager(42, restore_state=True):
        ...     report = experiment.report(2, 3)
    """
    
    seed: int
    restore_state: bool = False
    
    def __post_init__(self):
        self._saved_state: Optional[Dict[str, Any]] = None
    
    def __enter__(self) -> 'SeedManager':
        if self.restore_state:
            self._saved_state = get_seed_state()
        
        set_seed(self.seed)
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.restore_state and self._saved_state is not None:
            set_seed_state(self._saved_state)
        return None  # Don't suppress exceptions
