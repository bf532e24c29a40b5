"""
Abstract Plan Data Source

DESIGN DECISION: The engine never reads storage directly. Whatever holds
the life plan (browser storage, a file, a database) implements this
interface and hands the engine full snapshots plus one transaction
query per plan year.

Transaction records are returned raw (persisted camelCase dicts) or as
already-parsed variants. Parsing happens in the ledger so that a single
malformed record is reported instead of failing the whole query.
"""

from abc import ABC, abstractmethod
from typing import Any

from lifeplan.models.plan import (
    Account,
    AssetInfo,
    Category,
    Event,
    FamilyMember,
    PlanSettings,
)


class PlanDataSource(ABC):
    """
    Abstract interface for life-plan snapshots.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get_plan_settings(self) -> PlanSettings:
        """
        Get the plan's settings.

        Raises:
            DataSourceError: If the settings cannot be read
        """
        pass

    @abstractmethod
    def get_accounts(self) -> list[Account]:
        """Get all accounts."""
        pass

    @abstractmethod
    def get_assets(self) -> list[AssetInfo]:
        """Get all asset infos."""
        pass

    @abstractmethod
    def get_categories(self) -> list[Category]:
        """Get all categories."""
        pass

    @abstractmethod
    def get_events(self) -> list[Event]:
        """Get all events."""
        pass

    @abstractmethod
    def get_family_members(self) -> list[FamilyMember]:
        """Get all family members."""
        pass

    @abstractmethod
    def get_transactions(self, year: int) -> list[Any]:
        """
        Get the transaction records of one plan year.

        Args:
            year: Plan year

        Returns:
            Raw records or parsed variants; empty when the year has none

        Raises:
            DataSourceError: If the year's records cannot be read
        """
        pass
