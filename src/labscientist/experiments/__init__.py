"""
Parallel experiments: run a trusted control and candidate trials side by side.

- Experiment: control, named trials, matcher and chance; run()/report()
- Laboratory: registry of named experiments and the execution protocol
- Trial: a named candidate behaviour
- Observation: captured value-or-error outcome with timing
- Report: all observations of one call plus the mismatched trial names

Usage:
    >>> from labscientist.experiments import Laboratory
    >>> lab = Laboratory()
    >>> exp = lab.experiment("addition").control(lambda a, b: a + b)
    >>> exp.trial("buggy", lambda a, b: a - b)
    >>> exp.run(2, 3)
    5
    >>> exp.report(2, 3).mismatches
    frozenset({'buggy'})
"""

from labscientist.experiments.observation import Observation
from labscientist.experiments.trial import Trial, bind_arguments
from labscientist.experiments.report import Report, create_comparison_table
from labscientist.experiments.experiment import Experiment
from labscientist.experiments.laboratory import Laboratory

__all__ = [
    # Core
    "Experiment",
    "Laboratory",
    "Trial",
    # Results
    "Observation",
    "Report",
    # Utilities
    "bind_arguments",
    "create_comparison_table",
]
