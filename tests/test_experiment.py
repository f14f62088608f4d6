"""
Tests for the Experiment aggregate root.

Covers the builder API, trial lookup, strategy replacement and the
delegation of run()/report() to the laboratory.
"""

from unittest.mock import MagicMock

import pytest

from labscientist.chances import PercentageChance, StandardChance
from labscientist.config import ChanceConfig, ExperimentConfig, MatcherConfig, MatcherType
from labscientist.errors import MissingControlError, UnknownTrialError
from labscientist.experiments import Experiment, Laboratory, Trial
from labscientist.matchers import StandardMatcher, ToleranceMatcher


def add(a, b):
    return a + b


def subtract(a, b):
    return a - b


@pytest.fixture
def experiment():
    """Experiment with a control and one trial."""
    return Experiment("addition").control(add).trial("buggy", subtract)


class TestExperimentInit:
    """Test construction defaults."""
    
    def test_name(self):
        assert Experiment("x").name == "x"
    
    def test_defaults(self):
        exp = Experiment("x")
        
        assert isinstance(exp.get_matcher(), StandardMatcher)
        assert isinstance(exp.get_chance(), StandardChance)
        assert exp.get_control() is None
        assert not exp.has_control()
        assert len(exp.get_trials()) == 0
    
    def test_direct_construction_gets_private_laboratory(self):
        exp = Experiment("x")
        
        assert isinstance(exp.laboratory, Laboratory)
        assert "x" not in exp.laboratory
    
    def test_laboratory_kept(self):
        lab = Laboratory()
        assert Experiment("x", lab).laboratory is lab
    
    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_name_rejected(self, name):
        with pytest.raises(ValueError, match="experiment name"):
            Experiment(name)


class TestControl:
    """Test control registration."""
    
    def test_control_returns_self(self):
        exp = Experiment("x")
        assert exp.control(add) is exp
    
    def test_control_stored(self):
        context = object()
        exp = Experiment("x").control(add, context, [1, 2])
        
        assert exp.get_control() is add
        assert exp.get_control_context() is context
        assert exp.get_control_arguments() == (1, 2)
    
    def test_control_overwritten(self):
        exp = Experiment("x").control(add).control(subtract)
        assert exp.get_control() is subtract
    
    def test_non_callable_rejected(self):
        with pytest.raises(TypeError, match="control must be callable"):
            Experiment("x").control("add")


class TestTrials:
    """Test trial registration and lookup."""
    
    def test_trial_returns_self(self):
        exp = Experiment("x")
        assert exp.trial("t", add) is exp
    
    def test_get_trial(self, experiment):
        assert experiment.get_trial("buggy") is subtract
    
    def test_get_unknown_trial(self, experiment):
        with pytest.raises(UnknownTrialError) as exc_info:
            experiment.get_trial("missing")
        
        assert exc_info.value.trial_name == "missing"
        assert exc_info.value.experiment_name == "addition"
        assert isinstance(exc_info.value, LookupError)
    
    def test_duplicate_name_overwrites(self, experiment):
        """Last registration for a name wins."""
        experiment.trial("buggy", add)
        
        assert experiment.get_trial("buggy") is add
        assert list(experiment.get_trials()) == ["buggy"]
    
    def test_registration_order_preserved(self):
        exp = Experiment("x").trial("b", add).trial("a", add).trial("c", add)
        assert list(exp.get_trials()) == ["b", "a", "c"]
    
    def test_get_trials_is_read_only(self, experiment):
        trials = experiment.get_trials()
        
        assert isinstance(trials["buggy"], Trial)
        with pytest.raises(TypeError):
            trials["new"] = Trial("new", add)
    
    def test_trial_context_and_arguments(self):
        exp = Experiment("x").trial("t", add, context=None, arguments=[4, 5])
        trial = exp.get_trials()["t"]
        
        assert trial.arguments == (4, 5)
        assert trial.context is None


class TestStrategies:
    """Test matcher/chance replacement."""
    
    def test_matcher(self, experiment):
        matcher = ToleranceMatcher()
        
        assert experiment.matcher(matcher) is experiment
        assert experiment.get_matcher() is matcher
    
    def test_matcher_type_checked(self, experiment):
        with pytest.raises(TypeError, match="matcher must be a Matcher"):
            experiment.matcher(lambda a, b: True)
    
    def test_chance(self, experiment):
        chance = PercentageChance(0, seed=0)
        
        assert experiment.chance(chance) is experiment
        assert experiment.get_chance() is chance
        assert experiment.should_run() is False
    
    def test_chance_type_checked(self, experiment):
        with pytest.raises(TypeError, match="chance must be a Chance"):
            experiment.chance(True)
    
    def test_should_run_delegates(self, experiment):
        chance = MagicMock(spec=PercentageChance)
        chance.should_run.return_value = True
        experiment.chance(chance)
        
        assert experiment.should_run() is True
        chance.should_run.assert_called_once_with()
    
    def test_from_config(self):
        config = ExperimentConfig(
            name="configured",
            description="vectorized rewrite",
            tags=["checkout"],
            chance=ChanceConfig(percentage=50, seed=1),
            matcher=MatcherConfig(matcher_type=MatcherType.TOLERANCE),
        )
        exp = Experiment.from_config(config)
        
        assert exp.name == "configured"
        assert isinstance(exp.get_chance(), PercentageChance)
        assert isinstance(exp.get_matcher(), ToleranceMatcher)
        assert exp.description == "vectorized rewrite"
        assert exp.tags == ("checkout",)
    
    def test_annotate(self):
        exp = Experiment("x")
        
        assert exp.description == ""
        assert exp.tags == ()
        assert exp.annotate("first", ["a"]) is exp
        exp.annotate(tags=["b", "c"])
        
        assert exp.description == "first"
        assert exp.tags == ("b", "c")


class TestExecution:
    """Test run()/report() delegation."""
    
    def test_run_returns_control_value(self, experiment):
        assert experiment.run(2, 3) == 5
    
    def test_report_returns_report(self, experiment):
        report = experiment.report(2, 3)
        
        assert report.experiment_name == "addition"
        assert report.control.value == 5
        assert report.trials["buggy"].value == -1
    
    def test_run_delegates_to_laboratory(self):
        lab = MagicMock(spec=Laboratory)
        lab.run_experiment.return_value = "result"
        exp = Experiment("x", lab).control(add)
        
        assert exp.run(1, b=2) == "result"
        lab.run_experiment.assert_called_once_with(exp, 1, b=2)
    
    def test_report_delegates_to_laboratory(self):
        lab = MagicMock(spec=Laboratory)
        exp = Experiment("x", lab).control(add)
        
        exp.report(1, 2)
        lab.get_report.assert_called_once_with(exp, 1, 2)
    
    def test_run_params_not_stored(self, experiment):
        """Per-call arguments are passed through, never kept on the experiment."""
        experiment.run(2, 3)
        
        assert not hasattr(experiment, "params")
        assert not hasattr(experiment, "_params")
    
    def test_missing_control(self):
        with pytest.raises(MissingControlError, match="has no control"):
            Experiment("x").trial("t", add).run(1, 2)
    
    def test_keyword_arguments(self):
        exp = Experiment("kw").control(lambda a, scale=1: a * scale)
        assert exp.run(3, scale=4) == 12
