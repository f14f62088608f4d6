"""
labscientist: parallel experiments for safely replacing production code.

A control (the existing implementation) and one or more trials (candidate
replacements) run on the same inputs. The caller always gets the control's
result; trial outcomes are timed, compared with a pluggable matcher and
published as a Report.

Quick Start:
    >>> from labscientist import Laboratory, LoggingJournal, PercentageChance
    >>> 
    >>> lab = Laboratory(journals=[LoggingJournal()])
    >>> total = (
    ...     lab.experiment("checkout-total")
    ...     .control(legacy_total)
    ...     .trial("vectorized", vectorized_total)
    ...     .chance(PercentageChance(10))
    ... )
    >>> total.run(cart)            # legacy_total(cart), trials on ~10% of calls
    >>> total.report(cart).mismatches
"""

__version__ = "0.1.0"

# Errors
from labscientist.errors import (
    ScientistError,
    MissingControlError,
    UnknownTrialError,
    UnknownExperimentError,
)

# Configuration
from labscientist.config import (
    ChanceConfig,
    MatcherConfig,
    ExperimentConfig,
    LaboratoryConfig,
    MatcherType,
    load_config,
    save_config,
)

# Policies
from labscientist.chances import Chance, StandardChance, PercentageChance, create_chance
from labscientist.matchers import (
    Matcher,
    StandardMatcher,
    ToleranceMatcher,
    ExceptionMatcher,
    CallableMatcher,
    create_matcher,
)

# Journals
from labscientist.journals import Journal, StandardJournal, LoggingJournal

# Experiments
from labscientist.experiments import (
    Experiment,
    Laboratory,
    Trial,
    Observation,
    Report,
    create_comparison_table,
)

# Utilities
from labscientist.utils import set_seed, SeedManager, setup_logging

__all__ = [
    # Version
    "__version__",
    # Errors
    "ScientistError",
    "MissingControlError",
    "UnknownTrialError",
    "UnknownExperimentError",
    # Configuration
    "ChanceConfig",
    "MatcherConfig",
    "ExperimentConfig",
    "LaboratoryConfig",
    "MatcherType",
    "load_config",
    "save_config",
    # Policies
    "Chance",
    "StandardChance",
    "PercentageChance",
    "create_chance",
    "Matcher",
    "StandardMatcher",
    "ToleranceMatcher",
    "ExceptionMatcher",
    "CallableMatcher",
    "create_matcher",
    # Journals
    "Journal",
    "StandardJournal",
    "LoggingJournal",
    # Experiments
    "Experiment",
    "Laboratory",
    "Trial",
    "Observation",
    "Report",
    "create_comparison_table",
    # Utilities
    "set_seed",
    "SeedManager",
    "setup_logging",
]
