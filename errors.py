"""
errors.py — Engine Error Kinds
================================
Shared by the producers, the engine and the web layer, so it lives at
the top level where every package can import it without cycles.

    SortEngineError
      ├── ProducerInitError   – creating a producer over bad input failed
      ├── StepAdvanceError    – pulling the next step raised
      └── ConfigOutOfRange    – unknown algorithm / distribution name

Numeric config (element count, speed) is never an error: the session
clamps it silently.
"""

from typing import Optional


class SortEngineError(Exception):
    """Base class for everything the simulation engine raises."""


class _RunFault(SortEngineError):
    def __init__(self, message: str, algorithm: Optional[str] = None):
        super().__init__(message)
        self.message   = message
        self.algorithm = algorithm


class ProducerInitError(_RunFault):
    """A step producer could not be created over the given array."""


class StepAdvanceError(_RunFault):
    """A step producer raised while advancing."""


class ConfigOutOfRange(SortEngineError, ValueError):
    """A configuration value names something outside the fixed set."""


__all__ = [
    "SortEngineError",
    "ProducerInitError",
    "StepAdvanceError",
    "ConfigOutOfRange",
]
