"""
Plan Data Source Package

Provides the abstract interface the engine reads from and an in-memory
implementation over a persisted life-plan snapshot.
"""

from lifeplan.storage.interface import PlanDataSource
from lifeplan.storage.memory import InMemoryPlanSource

__all__ = [
    "InMemoryPlanSource",
    "PlanDataSource",
]
