"""
Report sinks (Journal).

- Journal: interface receiving each (experiment, report) pair
- StandardJournal: remembers the latest report
- LoggingJournal: logs a summary, mismatches at WARNING
"""

from labscientist.journals.journal import (
    Journal,
    StandardJournal,
    LoggingJournal,
)

__all__ = [
    "Journal",
    "StandardJournal",
    "LoggingJournal",
]
