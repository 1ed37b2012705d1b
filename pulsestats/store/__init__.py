"""
Store module

The health-store contract, single-shot completion bridging and an in-memory
store implementation.
"""

from .base import Completion, HealthStoreProtocol
from .completion import SingleShotCompletion, await_completion
from .memory import InMemoryHealthStore

__all__ = [
    "Completion",
    "HealthStoreProtocol",
    "SingleShotCompletion",
    "await_completion",
    "InMemoryHealthStore",
]
