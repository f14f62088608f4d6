"""
Sampling policies (Chance) for gating trial execution.

- Chance: interface with a single should_run() query
- StandardChance: always run trials (default)
- PercentageChance: run trials on a configurable share of calls
"""

from labscientist.chances.chance import (
    Chance,
    StandardChance,
    PercentageChance,
    create_chance,
)

__all__ = [
    "Chance",
    "StandardChance",
    "PercentageChance",
    "create_chance",
]
