"""
Error taxonomy for labscientist.

Only misconfiguration is raised by the library itself. Errors raised by
control or trial callbacks are never wrapped: the original exception is
captured into an Observation and, for the control, re-raised by ``run()``.
"""

from typing import Optional


class ScientistError(Exception):
    """Base class for all errors raised by labscientist."""


class MissingControlError(ScientistError):
    """An experiment was run before a control callback was registered."""

    def __init__(self, experiment_name: str):
        self.experiment_name = experiment_name
        super().__init__(
            f"Experiment '{experiment_name}' has no control. "
            f"Register one with experiment.control(callback) before running."
        )


class UnknownTrialError(ScientistError, LookupError):
    """A trial name was looked up that is not registered."""

    def __init__(self, trial_name: str, experiment_name: Optional[str] = None):
        self.trial_name = trial_name
        self.experiment_name = experiment_name
        where = f" in experiment '{experiment_name}'" if experiment_name else ""
        super().__init__(f"Unknown trial '{trial_name}'{where}")


class UnknownExperimentError(ScientistError, LookupError):
    """A laboratory was asked to dispatch to an experiment it never registered."""

    def __init__(self, experiment_name: str):
        self.experiment_name = experiment_name
        super().__init__(f"Unknown experiment '{experiment_name}'")
