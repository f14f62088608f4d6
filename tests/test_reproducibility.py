"""
Tests for seed management and logging setup utilities.
"""

import logging
import random

import numpy as np
import pytest

from labscientist.utils import (
    set_seed,
    get_seed_state,
    set_seed_state,
    create_rng,
    SeedManager,
    setup_logging,
)


class TestSetSeed:
    """Test global seeding."""
    
    def test_python_and_numpy_seeded(self):
        set_seed(5)
        a = (random.random(), np.random.rand())
        set_seed(5)
        b = (random.random(), np.random.rand())
        
        assert a == b
    
    def test_invalid_type(self):
        with pytest.raises(TypeError, match="seed must be an int"):
            set_seed(1.5)
        with pytest.raises(TypeError):
            set_seed(True)
    
    def test_negative(self):
        with pytest.raises(ValueError, match="seed must be non-negative"):
            set_seed(-3)
    
    def test_state_roundtrip(self):
        state = get_seed_state()
        expected = np.random.rand()
        set_seed_state(state)
        
        assert np.random.rand() == expected


class TestCreateRng:
    """Test generator creation."""
    
    def test_explicit_seed(self):
        assert create_rng(11).random() == create_rng(11).random()
    
    def test_derived_from_global_state(self):
        set_seed(3)
        a = create_rng().random()
        set_seed(3)
        b = create_rng().random()
        
        assert a == b
    
    def test_invalid_seed(self):
        with pytest.raises(ValueError):
            create_rng(-1)


class TestSeedManager:
    """Test the seed context manager."""
    
    def test_restore_state(self):
        set_seed(1)
        before = get_seed_state()
        
        with SeedManager(99, restore_state=True):
            np.random.rand()
        
        after = get_seed_state()
        assert np.array_equal(before["numpy"][1], after["numpy"][1])
    
    def test_does_not_suppress_exceptions(self):
        with pytest.raises(RuntimeError):
            with SeedManager(1):
                raise RuntimeError("inside")


class TestSetupLogging:
    """Test logging configuration."""
    
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        handlers = list(logging.root.handlers)
        level = logging.root.level
        yield
        for handler in list(logging.root.handlers):
            if handler not in handlers:
                logging.root.removeHandler(handler)
                handler.close()
        logging.root.setLevel(level)
    
    def test_console_handler_added(self):
        before = len(logging.root.handlers)
        setup_logging("WARNING")
        
        assert len(logging.root.handlers) == before + 1
        assert logging.root.handlers[-1].level == logging.WARNING
    
    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "lab.log"
        setup_logging("INFO", log_file)
        logging.getLogger("labscientist.test").debug("written to file")
        
        for handler in logging.root.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()
    
    def test_repeated_setup_replaces_handlers(self, tmp_path):
        before = len(logging.root.handlers)
        setup_logging("INFO", tmp_path / "a.log")
        setup_logging("WARNING", tmp_path / "b.log")
        
        assert len(logging.root.handlers) == before + 2
        levels = sorted(h.level for h in logging.root.handlers[before:])
        assert levels == [logging.DEBUG, logging.WARNING]
    
    def test_foreign_handlers_kept(self):
        foreign = logging.NullHandler()
        logging.root.addHandler(foreign)
        setup_logging("INFO")
        setup_logging("INFO")
        
        assert foreign in logging.root.handlers
    
    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("LOUD")
