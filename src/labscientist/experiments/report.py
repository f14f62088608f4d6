"""
Report: every outcome of one experiment run, and which trials mismatched.

A Report is built once per run()/report() call. The mismatch set is
computed eagerly at build time by applying the experiment's matcher to each
trial Observation against the control Observation; the Report is immutable
afterwards.

Usage:
    >>> report = experiment.report(2, 3)
    >>> report.control.value
    5
    >>> report.mismatches
    frozenset({'buggy'})
    >>> print(create_comparison_table(report))
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping

from labscientist.errors import UnknownTrialError
from labscientist.experiments.observation import Observation
from labscientist.matchers import Matcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Report:
    """
    Outcome of a single experiment execution.
    
    Attributes:
        experiment_name: Name of the experiment.
        control: Observation of the control.
        trials: Trial name -> Observation. Empty when the trials were not
                sampled in for this call.
        mismatches: Names of trials that did not match the control.
        created_at: When the report was assembled (UTC).
    """
    
    experiment_name: str
    control: Observation
    trials: Mapping[str, Observation] = field(default_factory=dict)
    mismatches: FrozenSet[str] = frozenset()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    def __post_init__(self) -> None:
        object.__setattr__(self, "trials", MappingProxyType(dict(self.trials)))
        object.__setattr__(self, "mismatches", frozenset(self.mismatches))
        unknown = self.mismatches - set(self.trials)
        if unknown:
            raise ValueError(f"mismatches reference unknown trials: {sorted(unknown)}")
    
    @classmethod
    def build(
        cls,
        experiment_name: str,
        control: Observation,
        trials: Mapping[str, Observation],
        matcher: Matcher,
    ) -> "Report":
        """
        Assemble a report, classifying every trial with ``matcher``.
        
        A matcher that raises while comparing a trial counts as a mismatch
        for that trial.
        """
        mismatches = set()
        for name, observation in trials.items():
            try:
                matched = matcher.match(control, observation)
            except Exception:
                logger.exception(
                    f"Matcher {matcher!r} failed on trial '{name}' of "
                    f"experiment '{experiment_name}'; counting as mismatch"
                )
                matched = False
            if not matched:
                mismatches.add(name)
        return cls(
            experiment_name=experiment_name,
            control=control,
            trials=trials,
            mismatches=frozenset(mismatches),
        )
    
    @property
    def matched(self) -> List[str]:
        """Trial names that matched the control, in execution order."""
        return [name for name in self.trials if name not in self.mismatches]
    
    @property
    def has_mismatches(self) -> bool:
        return bool(self.mismatches)
    
    def get_trial(self, name: str) -> Observation:
        """
        Observation for a trial.
        
        Raises:
            UnknownTrialError: If the trial did not run in this report.
        """
        try:
            return self.trials[name]
        except KeyError:
            raise UnknownTrialError(name, self.experiment_name) from None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            'experiment_name': self.experiment_name,
            'created_at': self.created_at.isoformat(),
            'control': self.control.to_dict(),
            'trials': {name: obs.to_dict() for name, obs in self.trials.items()},
            'mismatches': sorted(self.mismatches),
        }
    
    def summary(self) -> str:
        """Multi-line human-readable summary."""
        lines = [
            f"Experiment: {self.experiment_name}",
            f"  control: {self.control.describe()} ({self.control.duration * 1000:.3f} ms)",
        ]
        if not self.trials:
            lines.append("  trials: not run")
        for name, obs in self.trials.items():
            status = "MISMATCH" if name in self.mismatches else "match"
            lines.append(
                f"  {name}: {obs.describe()} ({obs.duration * 1000:.3f} ms) [{status}]"
            )
        return "\n".join(lines)


# =============================================================================
# Comparison Utilities
# =============================================================================


def create_comparison_table(report: Report) -> str:
    """
    Create a markdown comparison table of the control and every trial.
    
    Example:
        >>> print(create_comparison_table(report))
        
        | Name       | Role    | Outcome            | Duration Ms | Match |
        |------------|---------|--------------------|-------------|-------|
        | addition   | control | returned 5         | 0.0021      | -     |
        | buggy      | trial   | returned -1        | 0.0013      | no    |
    """
    rows = [{
        'name': report.control.name,
        'role': 'control',
        'outcome': report.control.describe(),
        'duration_ms': report.control.duration * 1000,
        'match': '-',
    }]
    for name, obs in report.trials.items():
        rows.append({
            'name': name,
            'role': 'trial',
            'outcome': obs.describe(),
            'duration_ms': obs.duration * 1000,
            'match': 'no' if name in report.mismatches else 'yes',
        })
    
    keys = ['name', 'role', 'outcome', 'duration_ms', 'match']
    headers = [k.replace('_', ' ').title() for k in keys]
    col_widths = [max(len(h), 5) for h in headers]
    
    def _fmt(value: Any) -> str:
        if isinstance(value, float):
            return f"{value:.4f}"
        return str(value)
    
    for row in rows:
        for i, key in enumerate(keys):
            col_widths[i] = max(col_widths[i], len(_fmt(row[key])))
    
    lines = []
    lines.append("| " + " | ".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)) + " |")
    lines.append("|-" + "-|-".join("-" * w for w in col_widths) + "-|")
    for row in rows:
        values = [_fmt(row[key]) for key in keys]
        lines.append("| " + " | ".join(v.ljust(col_widths[i]) for i, v in enumerate(values)) + " |")
    
    return "\n".join(lines)
