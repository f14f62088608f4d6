"""
Configuration schema for labscientist.

Experiments can be configured in code through the builder API, or declared
up front in a YAML/JSON file and applied with Laboratory.from_config(). The
file only describes sampling and matching policy; callbacks are always
registered in code.

Usage:
    >>> config = LaboratoryConfig.from_yaml("configs/laboratory.yaml")
    >>> config.experiments[0].chance.percentage  # 10.0
    >>> lab = Laboratory.from_config(config)
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Optional, List, Any
import json

import yaml


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# Enums for configuration options
# =============================================================================


class MatcherType(str, Enum):
    """Equivalence strategy used to compare trial outcomes with the control."""
    
    STANDARD = "standard"
    """Values must be equal and neither side may raise."""
    
    TOLERANCE = "tolerance"
    """Numeric values and arrays compared with numpy.allclose."""
    
    EXCEPTION = "exception"
    """Like standard, but two errors of the same type and args also match."""


# =============================================================================
# Policy Configuration
# =============================================================================


@dataclass
class ChanceConfig:
    """
    Sampling policy: how often trials run alongside the control.
    
    The control always runs. A percentage of 100 runs every trial on every
    call; lower values ramp traffic to the trials gradually.
    """
    
    percentage: float = 100.0
    """Probability (0-100) that trials run for a given call."""
    
    seed: Optional[int] = None
    """Seed for the sampling generator. None derives it from global NumPy state."""
    
    def __post_init__(self) -> None:
        if not 0.0 <= self.percentage <= 100.0:
            raise ValueError(f"percentage must be in [0, 100], got {self.percentage}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")


@dataclass
class MatcherConfig:
    """Equivalence policy for comparing trial outcomes against the control."""
    
    matcher_type: MatcherType = MatcherType.STANDARD
    """Which matcher to build."""
    
    rtol: float = 1e-5
    """Relative tolerance (tolerance matcher only)."""
    
    atol: float = 1e-8
    """Absolute tolerance (tolerance matcher only)."""
    
    equal_nan: bool = False
    """Treat NaN == NaN (tolerance matcher only)."""
    
    def __post_init__(self) -> None:
        if self.rtol < 0:
            raise ValueError(f"rtol must be >= 0, got {self.rtol}")
        if self.atol < 0:
            raise ValueError(f"atol must be >= 0, got {self.atol}")


# =============================================================================
# Experiment Configuration
# =============================================================================


@dataclass
class ExperimentConfig:
    """Declarative policy for one named experiment."""
    
    name: str
    """Experiment name, unique within a laboratory."""
    
    description: str = ""
    """Free-form description."""
    
    chance: ChanceConfig = field(default_factory=ChanceConfig)
    """Sampling policy."""
    
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    """Equivalence policy."""
    
    tags: List[str] = field(default_factory=list)
    """Tags for grouping in reports and logs."""
    
    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("experiment name must be a non-empty string")


@dataclass
class LaboratoryConfig:
    """
    Complete laboratory configuration.
    
    Example YAML:
        log_level: INFO
        seed: 7
        experiments:
          - name: checkout-total
            chance: {percentage: 10}
            matcher: {matcher_type: tolerance, rtol: 1.0e-6}
    """
    
    experiments: List[ExperimentConfig] = field(default_factory=list)
    """Experiments to pre-register."""
    
    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR."""
    
    log_file: Optional[str] = None
    """Optional log file path."""
    
    seed: Optional[int] = None
    """Global seed applied by Laboratory.from_config (None = leave untouched)."""
    
    def __post_init__(self) -> None:
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {VALID_LOG_LEVELS}, got {self.log_level}"
            )
        names = [exp.name for exp in self.experiments]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate experiment names: {duplicates}")
    
    def get_experiment(self, name: str) -> Optional[ExperimentConfig]:
        """Return the config for an experiment name, or None."""
        for exp in self.experiments:
            if exp.name == name:
                return exp
        return None
    
    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        def _convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.value
            elif hasattr(obj, "__dataclass_fields__"):
                return {k: _convert(v) for k, v in asdict(obj).items()}
            elif isinstance(obj, list):
                return [_convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: _convert(v) for k, v in obj.items()}
            else:
                return obj
        return _convert(self)
    
    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
    
    def to_json(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
    
    @classmethod
    def from_dict(cls, data: dict) -> "LaboratoryConfig":
        """Create config from dictionary."""
        from dacite import from_dict, Config as DaciteConfig
        return from_dict(
            data_class=cls,
            data=data or {},
            config=DaciteConfig(cast=[Enum, Path, float]),
        )
    
    @classmethod
    def from_yaml(cls, path: str) -> "LaboratoryConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)
    
    @classmethod
    def from_json(cls, path: str) -> "LaboratoryConfig":
        """Load configuration from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)


# =============================================================================
# Convenience Functions
# =============================================================================


def load_config(path: str) -> LaboratoryConfig:
    """
    Load configuration from file (auto-detect format).
    
    Args:
        path: Path to configuration file (.yaml, .yml, or .json)
    
    Returns:
        LaboratoryConfig instance
    
    Raises:
        ValueError: If file format is not supported
    """
    path_lower = str(path).lower()
    if path_lower.endswith((".yaml", ".yml")):
        return LaboratoryConfig.from_yaml(path)
    elif path_lower.endswith(".json"):
        return LaboratoryConfig.from_json(path)
    else:
        raise ValueError(f"Unsupported config format: {path}. Use .yaml, .yml, or .json")


def save_config(config: LaboratoryConfig, path: str) -> None:
    """
    Save configuration to file (auto-detect format).
    
    Args:
        config: LaboratoryConfig instance
        path: Output path (.yaml, .yml, or .json)
    
    Raises:
        ValueError: If file format is not supported
    """
    path_lower = str(path).lower()
    if path_lower.endswith((".yaml", ".yml")):
        config.to_yaml(path)
    elif path_lower.endswith(".json"):
        config.to_json(path)
    else:
        raise ValueError(f"Unsupported config format: {path}. Use .yaml, .yml, or .json")
