"""
Utility modules for labscientist.

Provides:
- reproducibility: Deterministic seed management for sampled experiments
- logging_setup: Console/file logging configuration
"""

from labscientist.utils.reproducibility import (
    set_seed,
    get_seed_state,
    set_seed_state,
    create_rng,
    SeedManager,
)
from labscientist.utils.logging_setup import setup_logging

__all__ = [
    "set_seed",
    "get_seed_state",
    "set_seed_state",
    "create_rng",
    "SeedManager",
    "setup_logging",
]
