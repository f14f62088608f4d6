"""
Matchers decide whether a trial's outcome is equivalent to the control's.

Every matcher receives both Observations in full, so it can look at values,
errors, or both. The standard rule only accepts two normal returns with
equal values; any error on either side is a mismatch.

Usage:
    >>> experiment.matcher(ToleranceMatcher(rtol=1e-6))
    >>> experiment.matcher(CallableMatcher(lambda a, b: a.id == b.id))
"""

import logging
from abc import ABC, abstractmethod
from numbers import Number
from typing import TYPE_CHECKING, Any, Callable, Optional

import numpy as np

if TYPE_CHECKING:
    from labscientist.experiments.observation import Observation

logger = logging.getLogger(__name__)


# =============================================================================
# Base Matcher Interface
# =============================================================================


class Matcher(ABC):
    """Equivalence policy between a control and a trial Observation."""
    
    @abstractmethod
    def match(self, control: "Observation", trial: "Observation") -> bool:
        """Return True when the trial is considered equivalent to the control."""


def _values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return bool(np.array_equal(a, b))
    try:
        result = a == b
        if isinstance(result, np.ndarray):
            return bool(result.all()) and np.shape(a) == np.shape(b)
        return bool(result)
    except Exception as e:
        # e.g. containers of arrays whose element comparison is ambiguous
        logger.debug(f"Equality comparison failed ({type(e).__name__}: {e}); treating as mismatch")
        return False


class StandardMatcher(Matcher):
    """
    Default rule: both returned normally and the values are equal.
    
    Equality is ``==``; NumPy arrays compare with numpy.array_equal.
    """
    
    def match(self, control: "Observation", trial: "Observation") -> bool:
        if control.failed or trial.failed:
            return False
        return _values_equal(control.value, trial.value)
    
    def __repr__(self) -> str:
        return "StandardMatcher()"


class ToleranceMatcher(Matcher):
    """
    Numeric equality within tolerance, via numpy.allclose.
    
    Values NumPy cannot hold in a numeric dtype (strings, Decimal, Fraction,
    ints wider than int64) fall back to the standard equality rule.
    
    Args:
        rtol: Relative tolerance.
        atol: Absolute tolerance.
        equal_nan: Whether NaN compares equal to NaN.
    """
    
    def __init__(self, rtol: float = 1e-5, atol: float = 1e-8, equal_nan: bool = False):
        if rtol < 0:
            raise ValueError(f"rtol must be >= 0, got {rtol}")
        if atol < 0:
            raise ValueError(f"atol must be >= 0, got {atol}")
        self.rtol = rtol
        self.atol = atol
        self.equal_nan = equal_nan
    
    @staticmethod
    def _is_numeric(value: Any) -> bool:
        # Decimal and Fraction are Numbers but land in object arrays
        if isinstance(value, bool):
            return False
        if not isinstance(value, (Number, np.number, np.ndarray, list, tuple)):
            return False
        if isinstance(value, (list, tuple)) and not value:
            return False
        try:
            dtype = np.asarray(value).dtype
        except (ValueError, TypeError, OverflowError):
            return False
        return bool(np.issubdtype(dtype, np.number))
    
    def match(self, control: "Observation", trial: "Observation") -> bool:
        if control.failed or trial.failed:
            return False
        a, b = control.value, trial.value
        if not (self._is_numeric(a) and self._is_numeric(b)):
            return _values_equal(a, b)
        if np.shape(a) != np.shape(b):
            return False
        return bool(np.allclose(a, b, rtol=self.rtol, atol=self.atol, equal_nan=self.equal_nan))
    
    def __repr__(self) -> str:
        return f"ToleranceMatcher(rtol={self.rtol}, atol={self.atol}, equal_nan={self.equal_nan})"


class ExceptionMatcher(Matcher):
    """
    Treats matching failures as equivalent.
    
    Both raised: match when the exception types and args are equal.
    Both returned: delegate to ``value_matcher`` (StandardMatcher by default).
    Otherwise: mismatch.
    """
    
    def __init__(self, value_matcher: Optional[Matcher] = None):
        self.value_matcher = value_matcher if value_matcher is not None else StandardMatcher()
    
    def match(self, control: "Observation", trial: "Observation") -> bool:
        if control.failed and trial.failed:
            return (
                type(control.error) is type(trial.error)
                and control.error.args == trial.error.args
            )
        if control.failed or trial.failed:
            return False
        return self.value_matcher.match(control, trial)
    
    def __repr__(self) -> str:
        return f"ExceptionMatcher(value_matcher={self.value_matcher!r})"


class CallableMatcher(Matcher):
    """
    Adapts a plain ``predicate(control_value, trial_value) -> bool``.
    
    The predicate only sees values; an error on either side is a mismatch.
    """
    
    def __init__(self, predicate: Callable[[Any, Any], bool]):
        if not callable(predicate):
            raise TypeError(f"predicate must be callable, got {type(predicate)}")
        self.predicate = predicate
    
    def match(self, control: "Observation", trial: "Observation") -> bool:
        if control.failed or trial.failed:
            return False
        return bool(self.predicate(control.value, trial.value))


# =============================================================================
# Matcher Factory
# =============================================================================


def create_matcher(config) -> Matcher:
    """
    Create a matcher from configuration.
    
    Args:
        config: MatcherConfig or dict with matcher settings
    
    Returns:
        Matcher instance
    
    Raises:
        ValueError: If matcher type is not recognized
    """
    from labscientist.config import MatcherConfig, MatcherType
    
    if isinstance(config, dict):
        config = MatcherConfig(**config)
    
    matcher_type = MatcherType(config.matcher_type)
    
    if matcher_type == MatcherType.STANDARD:
        return StandardMatcher()
    elif matcher_type == MatcherType.TOLERANCE:
        return ToleranceMatcher(rtol=config.rtol, atol=config.atol, equal_nan=config.equal_nan)
    elif matcher_type == MatcherType.EXCEPTION:
        return ExceptionMatcher()
    else:
        raise ValueError(f"Unknown matcher type: {matcher_type}")
