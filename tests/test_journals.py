"""
Tests for report sinks.
"""

import logging

import pytest

from labscientist.chances import PercentageChance
from labscientist.experiments import Experiment, Laboratory, Observation, Report
from labscientist.journals import Journal, StandardJournal, LoggingJournal
from labscientist.matchers import StandardMatcher


def build_report(trials):
    control = Observation(name="addition", value=5)
    return Report.build("addition", control, trials, StandardMatcher())


class TestStandardJournal:
    """Test latest-report journal."""
    
    def test_initially_empty(self):
        journal = StandardJournal()
        
        assert journal.get_experiment() is None
        assert journal.get_report() is None
    
    def test_keeps_latest_only(self):
        journal = StandardJournal()
        exp = Experiment("addition")
        first = build_report({})
        second = build_report({"t": Observation(name="t", value=5)})
        
        journal.report(exp, first)
        journal.report(exp, second)
        
        assert journal.get_experiment() is exp
        assert journal.get_report() is second
    
    def test_is_a_journal(self):
        assert isinstance(StandardJournal(), Journal)
    
    def test_abstract_base(self):
        with pytest.raises(TypeError):
            Journal()


class TestLoggingJournal:
    """Test logging of report summaries."""
    
    @pytest.fixture
    def journal_logger(self):
        return logging.getLogger("labscientist.tests.journal")
    
    def test_clean_run_logged_at_info(self, caplog, journal_logger):
        journal = LoggingJournal(journal_logger)
        report = build_report({"same": Observation(name="same", value=5)})
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            journal.report(Experiment("addition"), report)
        
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert "1 trial(s), 0 mismatch(es)" in caplog.records[0].getMessage()
    
    def test_mismatch_logged_at_warning(self, caplog, journal_logger):
        journal = LoggingJournal(journal_logger)
        report = build_report({"buggy": Observation(name="buggy", value=-1)})
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            journal.report(Experiment("addition"), report)
        
        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert "buggy returned -1" in record.getMessage()
    
    def test_unsampled_run(self, caplog, journal_logger):
        journal = LoggingJournal(journal_logger, level=logging.DEBUG)
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            journal.report(Experiment("addition"), build_report({}))
        
        assert caplog.records[0].levelno == logging.DEBUG
        assert "trials not sampled" in caplog.records[0].getMessage()
    
    def test_control_error_logged_at_warning(self, caplog, journal_logger):
        journal = LoggingJournal(journal_logger)
        control = Observation(name="addition", error=ZeroDivisionError("division by zero"))
        trial = Observation(name="t", error=ZeroDivisionError("division by zero"))
        
        class AlwaysMatch(StandardMatcher):
            def match(self, c, t):
                return True
        
        report = Report.build("addition", control, {"t": trial}, AlwaysMatch())
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            journal.report(Experiment("addition"), report)
        
        assert caplog.records[0].levelno == logging.WARNING
        assert "raised ZeroDivisionError" in caplog.records[0].getMessage()
    
    def test_default_logger(self):
        assert LoggingJournal().logger.name == "labscientist.journals.journal"
    
    def test_control_error_without_trials_logged_at_warning(self, caplog, journal_logger):
        """A failing control is a warning even when trials were not sampled."""
        lab = Laboratory(journals=[LoggingJournal(journal_logger)])
        exp = (
            lab.experiment("division")
            .control(lambda: 1 / 0)
            .trial("t", lambda: 0)
            .chance(PercentageChance(0))
        )
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            report = exp.report()
        
        assert len(report.trials) == 0
        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "raised ZeroDivisionError" in record.getMessage()
        assert "trials not sampled" in record.getMessage()
    
    def test_tags_included_in_message(self, caplog, journal_logger):
        journal = LoggingJournal(journal_logger)
        exp = Experiment("addition").annotate(tags=["checkout", "numeric"])
        
        with caplog.at_level(logging.DEBUG, logger=journal_logger.name):
            journal.report(exp, build_report({}))
        
        assert "Experiment 'addition' [checkout, numeric]:" in caplog.records[0].getMessage()
