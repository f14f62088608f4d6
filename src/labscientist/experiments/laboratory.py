"""
Laboratory: registry of named experiments and the run protocol.

Protocol for one call:
1. Fail fast with MissingControlError if no control is registered.
2. Capture the control Observation. The control always runs.
3. If the experiment's chance says so, capture every trial in
   registration order. A failing trial never stops the others or the
   control path.
4. Build a Report, classifying each trial with the experiment's matcher.
5. Publish the Report to every journal.

run_experiment() then unwraps the control Observation (value, or the
original exception re-raised); get_report() returns the Report.

Usage:
    >>> lab = Laboratory(journals=[LoggingJournal()])
    >>> lab.experiment("addition").control(lambda a, b: a + b)
    >>> lab.run("addition", 2, 3)
    5
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from labscientist.errors import MissingControlError, UnknownExperimentError
from labscientist.experiments.experiment import Experiment
from labscientist.experiments.observation import Observation
from labscientist.experiments.report import Report
from labscientist.experiments.trial import bind_arguments
from labscientist.journals import Journal

logger = logging.getLogger(__name__)


class Laboratory:
    """
    Owns named experiments and executes them.
    
    Args:
        journals: Journals that receive every Report produced here.
    
    Example:
        >>> lab = Laboratory()
        >>> exp = lab.experiment("checkout-total")
        >>> exp is lab.experiment("checkout-total")
        True
    """
    
    def __init__(self, journals: Optional[Iterable[Journal]] = None):
        self._experiments: Dict[str, Experiment] = {}
        self._lock = threading.Lock()
        self._journals: List[Journal] = []
        self.set_journals(journals or [])
    
    @classmethod
    def from_config(
        cls,
        config,
        journals: Optional[Iterable[Journal]] = None,
        configure_logging: bool = False,
    ) -> "Laboratory":
        """
        Create a laboratory with experiments pre-registered from config.
        
        Applies the global seed if one is set. Callbacks still have to be
        registered in code.
        
        Args:
            config: LaboratoryConfig, or a path to a YAML/JSON config file.
            journals: Journals to attach.
            configure_logging: Also apply the config's log_level and log_file
                               to the root logger.
        """
        from labscientist.config import LaboratoryConfig, load_config
        from labscientist.utils import set_seed, setup_logging
        
        if not isinstance(config, LaboratoryConfig):
            config = load_config(str(config))
        
        if configure_logging:
            setup_logging(config.log_level, config.log_file)
        
        if config.seed is not None:
            set_seed(config.seed)
        
        lab = cls(journals=journals)
        for exp_config in config.experiments:
            lab.experiment(exp_config.name).apply_config(exp_config)
        
        logger.info(f"Laboratory configured with {len(config.experiments)} experiment(s)")
        return lab
    
    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------
    
    def experiment(self, name: str) -> Experiment:
        """
        Get the experiment registered under ``name``, creating it on first access.
        
        Repeated calls return the same instance, so configuration accumulates.
        """
        with self._lock:
            experiment = self._experiments.get(name)
            if experiment is None:
                experiment = Experiment(name, self)
                self._experiments[name] = experiment
                logger.info(f"Registered experiment: {name}")
            return experiment
    
    def has_experiment(self, name: str) -> bool:
        return name in self._experiments
    
    def list_names(self) -> List[str]:
        """Names of all registered experiments, in registration order."""
        with self._lock:
            return list(self._experiments)
    
    def __contains__(self, name: object) -> bool:
        return name in self._experiments
    
    def __len__(self) -> int:
        return len(self._experiments)
    
    def _lookup(self, name: str) -> Experiment:
        with self._lock:
            experiment = self._experiments.get(name)
        if experiment is None:
            raise UnknownExperimentError(name)
        return experiment
    
    # -------------------------------------------------------------------------
    # Journals
    # -------------------------------------------------------------------------
    
    def add_journal(self, journal: Journal) -> "Laboratory":
        if not isinstance(journal, Journal):
            raise TypeError(f"journal must be a Journal, got {type(journal)}")
        self._journals.append(journal)
        return self
    
    def set_journals(self, journals: Iterable[Journal]) -> "Laboratory":
        journals = list(journals)
        for journal in journals:
            if not isinstance(journal, Journal):
                raise TypeError(f"journal must be a Journal, got {type(journal)}")
        self._journals = journals
        return self
    
    def get_journals(self) -> List[Journal]:
        return list(self._journals)
    
    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------
    
    def run_experiment(self, experiment: Experiment, *args: Any, **kwargs: Any) -> Any:
        """
        Execute an experiment and return the control's value.
        
        Raises:
            MissingControlError: If the experiment has no control.
            Exception: Whatever the control raised, unchanged.
        """
        report = self._execute(experiment, args, kwargs)
        return report.control.unwrap()
    
    def get_report(self, experiment: Experiment, *args: Any, **kwargs: Any) -> Report:
        """
        Execute an experiment and return its Report.
        
        Raises:
            MissingControlError: If the experiment has no control.
        """
        return self._execute(experiment, args, kwargs)
    
    def run(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Dispatch run() to a registered experiment by name."""
        return self.run_experiment(self._lookup(name), *args, **kwargs)
    
    def report(self, name: str, *args: Any, **kwargs: Any) -> Report:
        """Dispatch report() to a registered experiment by name."""
        return self.get_report(self._lookup(name), *args, **kwargs)
    
    def _execute(self, experiment: Experiment, args: tuple, kwargs: dict) -> Report:
        control = experiment.get_control()
        if control is None:
            raise MissingControlError(experiment.name)
        
        call_args, call_kwargs = bind_arguments(
            experiment.get_control_context(),
            experiment.get_control_arguments(),
            args,
            kwargs,
        )
        control_observation = Observation.capture(experiment.name, control, call_args, call_kwargs)
        
        trial_observations: Dict[str, Observation] = {}
        if experiment.should_run():
            for name, trial in experiment.get_trials().items():
                trial_args, trial_kwargs = trial.bind(args, kwargs)
                observation = Observation.capture(name, trial.callback, trial_args, trial_kwargs)
                if observation.failed:
                    logger.debug(
                        f"Experiment '{experiment.name}': trial '{name}' raised "
                        f"{type(observation.error).__name__}: {observation.error}"
                    )
                trial_observations[name] = observation
        else:
            logger.debug(f"Experiment '{experiment.name}': trials not sampled for this call")
        
        report = Report.build(
            experiment.name,
            control_observation,
            trial_observations,
            experiment.get_matcher(),
        )
        self._publish(experiment, report)
        return report
    
    def _publish(self, experiment: Experiment, report: Report) -> None:
        for journal in self._journals:
            try:
                journal.report(experiment, report)
            except Exception:
                logger.exception(
                    f"Journal {type(journal).__name__} failed to record "
                    f"experiment '{experiment.name}'"
                )
    
    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    
    def summary(self) -> str:
        """Generate laboratory summary."""
        names = self.list_names()
        lines = [
            "Laboratory",
            f"Total experiments: {len(names)}",
            f"Journals: {', '.join(type(j).__name__ for j in self._journals) or 'none'}",
        ]
        for name in names:
            experiment = self._experiments[name]
            trials = ", ".join(experiment.get_trials()) or "none"
            control = "set" if experiment.has_control() else "MISSING"
            line = f"  {name}: control {control}; trials: {trials}"
            if experiment.tags:
                line += f"; tags: {', '.join(experiment.tags)}"
            lines.append(line)
            if experiment.description:
                lines.append(f"    {experiment.description}")
        return "\n".join(lines)
