"""
Equivalence policies (Matcher) for comparing trial outcomes with the control.

- Matcher: interface with a single match(control, trial) operation
- StandardMatcher: equal values, no errors (default)
- ToleranceMatcher: numpy.allclose for numeric values and arrays
- ExceptionMatcher: also accepts identical failures
- CallableMatcher: wraps a plain value predicate
"""

from labscientist.matchers.matcher import (
    Matcher,
    StandardMatcher,
    ToleranceMatcher,
    ExceptionMatcher,
    CallableMatcher,
    create_matcher,
)

__all__ = [
    "Matcher",
    "StandardMatcher",
    "ToleranceMatcher",
    "ExceptionMatcher",
    "CallableMatcher",
    "create_matcher",
]
