"""
Configuration module for labscientist.

Provides type-safe, serializable configuration dataclasses for:
- Sampling policy (how often trials run)
- Matching policy (how trial outcomes are compared)
- Laboratory-wide settings (logging, seed, pre-registered experiments)
"""

from labscientist.config.schema import (
    # Configuration classes
    ChanceConfig,
    MatcherConfig,
    ExperimentConfig,
    LaboratoryConfig,
    # Enums
    MatcherType,
    # Functions
    load_config,
    save_config,
)

__all__ = [
    # Configuration classes
    "ChanceConfig",
    "MatcherConfig",
    "ExperimentConfig",
    "LaboratoryConfig",
    # Enums
    "MatcherType",
    # Functions
    "load_config",
    "save_config",
]
