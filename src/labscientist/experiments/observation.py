"""
Observation: the captured outcome of one callback invocation.

An Observation is a value-or-error result type. The callback either returned
(``error is None``; ``value`` may itself be None) or raised (``error`` holds
the original exception and ``value`` is None). Keeping the exception object
unwrapped lets the control's failure be inspected in a Report and then
re-raised to the caller with its original type and traceback.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Sequence


@dataclass(frozen=True, eq=False)
class Observation:
    """
    Outcome of a single control or trial execution.
    
    Attributes:
        name: Experiment name for the control, trial name for a trial.
        value: Return value (None when the callback raised).
        error: Captured exception (None when the callback returned).
        duration: Elapsed seconds, measured with a monotonic clock.
        started_at: Wall-clock start time (UTC).
        finished_at: Wall-clock end time (UTC).
    """
    
    name: str
    value: Any = None
    error: Optional[Exception] = None
    duration: float = 0.0
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    
    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError(
                f"Observation '{self.name}' cannot hold both a value and an error"
            )
        if self.error is not None and not isinstance(self.error, BaseException):
            raise TypeError(f"error must be an exception, got {type(self.error)}")
        if self.duration < 0:
            raise ValueError(f"duration must be >= 0, got {self.duration}")
    
    @classmethod
    def capture(
        cls,
        name: str,
        callback: Callable[..., Any],
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> "Observation":
        """
        Invoke a callback and record its outcome.
        
        Exceptions are captured. BaseExceptions that are not Exceptions
        (KeyboardInterrupt, SystemExit) propagate as they would from a
        direct call.
        """
        kwargs = dict(kwargs or {})
        started_at = datetime.now(timezone.utc)
        start = time.perf_counter()
        try:
            value = callback(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start
            return cls(
                name=name,
                error=e,
                duration=duration,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
            )
        duration = time.perf_counter() - start
        return cls(
            name=name,
            value=value,
            duration=duration,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
    
    @property
    def succeeded(self) -> bool:
        """True when the callback returned normally."""
        return self.error is None
    
    @property
    def failed(self) -> bool:
        """True when the callback raised."""
        return self.error is not None
    
    def unwrap(self) -> Any:
        """Return the value, or re-raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value
    
    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary. Values are rendered with repr()."""
        return {
            'name': self.name,
            'succeeded': self.succeeded,
            'value': None if self.failed else repr(self.value),
            'error_type': type(self.error).__name__ if self.failed else None,
            'error_message': str(self.error) if self.failed else None,
            'duration_seconds': self.duration,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
        }
    
    def describe(self) -> str:
        """Short one-line outcome, e.g. ``returned 5`` or ``raised ZeroDivisionError``."""
        if self.failed:
            return f"raised {type(self.error).__name__}: {self.error}"
        return f"returned {self.value!r}"
