"""
Journals receive every Report a laboratory produces.

A journal is the publish side of an experiment: forward reports to logs,
metrics or anything else. The core keeps no history of its own.

Usage:
    >>> lab = Laboratory(journals=[LoggingJournal()])
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from labscientist.experiments.experiment import Experiment
    from labscientist.experiments.report import Report

logger = logging.getLogger(__name__)


class Journal(ABC):
    """Sink for experiment reports."""
    
    @abstractmethod
    def report(self, experiment: "Experiment", report: "Report") -> None:
        """Publish one report."""


class StandardJournal(Journal):
    """Keeps the most recent experiment and report only."""
    
    def __init__(self):
        self.experiment: Optional["Experiment"] = None
        self.last_report: Optional["Report"] = None
    
    def report(self, experiment: "Experiment", report: "Report") -> None:
        self.experiment = experiment
        self.last_report = report
    
    def get_experiment(self) -> Optional["Experiment"]:
        return self.experiment
    
    def get_report(self) -> Optional["Report"]:
        return self.last_report


class LoggingJournal(Journal):
    """
    Logs a one-line summary per report.
    
    Clean runs are logged at ``level``; mismatches and control errors are
    logged at WARNING.
    
    Args:
        logger: Logger to write to (defaults to this module's logger).
        level: Level for clean runs.
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.level = level
    
    def report(self, experiment: "Experiment", report: "Report") -> None:
        control = report.control
        message = f"Experiment '{report.experiment_name}'"
        tags = experiment.tags
        if tags:
            message += f" [{', '.join(tags)}]"
        message += f": control {control.describe()} in {control.duration * 1000:.3f} ms"
        
        if report.trials:
            message += f"; {len(report.trials)} trial(s), {len(report.mismatches)} mismatch(es)"
        else:
            message += "; trials not sampled"
        
        if report.mismatches:
            details = ", ".join(
                f"{name} {report.trials[name].describe()}" for name in sorted(report.mismatches)
            )
            self.logger.warning(f"{message}: {details}")
        elif control.failed:
            self.logger.warning(message)
        else:
            self.logger.log(self.level, message)
