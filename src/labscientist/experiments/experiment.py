"""
Experiment: the aggregate root of a parallel experiment.

An experiment lets a new implementation (a trial) run against real inputs
next to the existing one (the control) without changing what callers see.
The control's outcome is always returned; trial outcomes are only observed,
compared and reported.

Usage:
    >>> lab = Laboratory()
    >>> experiment = (
    ...     lab.experiment("checkout-total")
    ...     .control(legacy_total)
    ...     .trial("vectorized", vectorized_total)
    ... )
    >>> total = experiment.run(cart)           # same as legacy_total(cart)
    >>> report = experiment.report(cart)       # full Report instead
"""

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from labscientist.chances import Chance, StandardChance, create_chance
from labscientist.errors import UnknownTrialError
from labscientist.matchers import Matcher, StandardMatcher, create_matcher
from labscientist.experiments.trial import Trial

if TYPE_CHECKING:
    from labscientist.config import ExperimentConfig
    from labscientist.experiments.laboratory import Laboratory
    from labscientist.experiments.report import Report

logger = logging.getLogger(__name__)


class Experiment:
    """
    A named control plus zero or more named trials.
    
    Configuration methods return ``self`` so they can be chained. The
    arguments of a particular call are never stored on the experiment;
    they are passed straight through to the laboratory, so one experiment
    can be run from several threads at once.
    
    Args:
        name: Experiment name (the control Observation carries this name).
        laboratory: Laboratory that executes the experiment. A private one
                    is created when omitted.
    """
    
    def __init__(self, name: str, laboratory: Optional["Laboratory"] = None):
        if not isinstance(name, str) or not name:
            raise ValueError(f"experiment name must be a non-empty string, got {name!r}")
        
        if laboratory is None:
            from labscientist.experiments.laboratory import Laboratory
            laboratory = Laboratory()
        
        self._name = name
        self._laboratory = laboratory
        self._control: Optional[Callable[..., Any]] = None
        self._control_context: Any = None
        self._control_arguments: Tuple[Any, ...] = ()
        self._trials: Dict[str, Trial] = {}
        self._matcher: Matcher = StandardMatcher()
        self._chance: Chance = StandardChance()
        self._description = ""
        self._tags: Tuple[str, ...] = ()
    
    @classmethod
    def from_config(
        cls,
        config: "ExperimentConfig",
        laboratory: Optional["Laboratory"] = None,
    ) -> "Experiment":
        """Create an experiment with the policy, description and tags a config describes."""
        experiment = cls(config.name, laboratory)
        experiment.apply_config(config)
        return experiment
    
    def apply_config(self, config: "ExperimentConfig") -> "Experiment":
        """Replace chance, matcher, description and tags with those in ``config``."""
        self._chance = create_chance(config.chance)
        self._matcher = create_matcher(config.matcher)
        return self.annotate(config.description, config.tags)
    
    def annotate(
        self,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> "Experiment":
        """
        Set the description and/or tags shown in summaries and journal logs.
        
        Arguments left as None keep their current value.
        """
        if description is not None:
            self._description = description
        if tags is not None:
            self._tags = tuple(tags)
        return self
    
    @property
    def description(self) -> str:
        return self._description
    
    @property
    def tags(self) -> Tuple[str, ...]:
        return self._tags
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def laboratory(self) -> "Laboratory":
        return self._laboratory
    
    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------
    
    def control(
        self,
        callback: Callable[..., Any],
        context: Any = None,
        arguments: Sequence[Any] = (),
    ) -> "Experiment":
        """
        Register the control (trusted) behaviour, replacing any previous one.
        
        Args:
            callback: The existing implementation.
            context: Optional receiver passed as the first argument.
            arguments: Fixed positional arguments. When empty, the arguments
                       given to run()/report() are used.
        """
        if not callable(callback):
            raise TypeError(f"control must be callable, got {type(callback)}")
        self._control = callback
        self._control_context = context
        self._control_arguments = tuple(arguments or ())
        return self
    
    def has_control(self) -> bool:
        return self._control is not None
    
    def get_control(self) -> Optional[Callable[..., Any]]:
        return self._control
    
    def get_control_context(self) -> Any:
        return self._control_context
    
    def get_control_arguments(self) -> Tuple[Any, ...]:
        return self._control_arguments
    
    # -------------------------------------------------------------------------
    # Trials
    # -------------------------------------------------------------------------
    
    def trial(
        self,
        name: str,
        callback: Callable[..., Any],
        context: Any = None,
        arguments: Sequence[Any] = (),
    ) -> "Experiment":
        """
        Register a trial. A trial with the same name is silently replaced.
        """
        if name in self._trials:
            logger.debug(f"Experiment '{self._name}': replacing trial '{name}'")
        self._trials[name] = Trial(name, callback, context, tuple(arguments or ()))
        return self
    
    def get_trial(self, name: str) -> Callable[..., Any]:
        """
        Fetch a trial callback by name.
        
        Raises:
            UnknownTrialError: If no trial is registered under ``name``.
        """
        try:
            return self._trials[name].callback
        except KeyError:
            raise UnknownTrialError(name, self._name) from None
    
    def get_trials(self) -> Mapping[str, Trial]:
        """Read-only view of the registered trials, in registration order."""
        return MappingProxyType(self._trials)
    
    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------
    
    def matcher(self, matcher: Matcher) -> "Experiment":
        """Set the equivalence policy used to detect mismatches."""
        if not isinstance(matcher, Matcher):
            raise TypeError(f"matcher must be a Matcher, got {type(matcher)}")
        self._matcher = matcher
        return self
    
    def get_matcher(self) -> Matcher:
        return self._matcher
    
    def chance(self, chance: Chance) -> "Experiment":
        """Set the sampling policy that gates trial execution."""
        if not isinstance(chance, Chance):
            raise TypeError(f"chance must be a Chance, got {type(chance)}")
        self._chance = chance
        return self
    
    def get_chance(self) -> Chance:
        return self._chance
    
    def should_run(self) -> bool:
        """Whether trials run on this call, according to the chance policy."""
        return self._chance.should_run()
    
    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------
    
    def run(self, *args: Any, **kwargs: Any) -> Any:
        """
        Run the experiment and return exactly what the control returns.
        
        If the control raises, the same exception is raised here. Trial
        outcomes never affect the result.
        """
        return self._laboratory.run_experiment(self, *args, **kwargs)
    
    def report(self, *args: Any, **kwargs: Any) -> "Report":
        """Run the experiment and return the full Report. Never re-raises callback errors."""
        return self._laboratory.get_report(self, *args, **kwargs)
    
    def __repr__(self) -> str:
        return (
            f"Experiment(name={self._name!r}, trials={list(self._trials)}, "
            f"matcher={self._matcher!r}, chance={self._chance!r})"
        )
