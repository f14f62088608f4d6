"""Logging configuration for applications embedding labscientist."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'

# Marks handlers installed here so a repeated call replaces them
_HANDLER_MARK = "_labscientist_handler"


def _remove_installed_handlers() -> None:
    for handler in list(logging.root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logging.root.removeHandler(handler)
            handler.close()


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging to console and, optionally, a file.
    
    Calling it again replaces the handlers installed by the previous call.
    
    Args:
        log_level: Console level: DEBUG, INFO, WARNING, ERROR.
        log_file: If given, everything (DEBUG and up) is also written here.
    
    Raises:
        ValueError: If log_level is not a valid logging level name.
    """
    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")
    
    _remove_installed_handlers()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, '%H:%M:%S'))
    setattr(console_handler, _HANDLER_MARK, True)
    
    logging.root.setLevel(level)
    logging.root.addHandler(console_handler)
    
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        setattr(file_handler, _HANDLER_MARK, True)
        
        logging.root.setLevel(logging.DEBUG)
        logging.root.addHandler(file_handler)
        
        logging.info(f"Logging to {log_path}")
