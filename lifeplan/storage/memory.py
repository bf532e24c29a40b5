"""
In-Memory Plan Data Source

Serves a persisted life-plan snapshot held in memory. The snapshot uses the
persisted camelCase shape:

    {
        "settings": {"planStartYear": 2025, "planEndYear": 2060,
                     "fireSettings": {"targetAmount": 50000000, "isEnabled": true}},
        "accounts": [...],
        "assetInfo": [...],
        "categories": [...],
        "events": [...],
        "familyMembers": [...],
        "yearlyData": [{"year": 2025, "transactions": [...]}, ...]
    }

Entity snapshots are parsed eagerly; a bad entity is a DataSourceError.
Transaction records are handed through untouched.
"""

import copy
from typing import Any

from pydantic import BaseModel, ValidationError

from lifeplan.errors import DataSourceError
from lifeplan.models.plan import (
    Account,
    AssetInfo,
    Category,
    Event,
    FamilyMember,
    PlanSettings,
)
from lifeplan.storage.interface import PlanDataSource


def _parse_rows(model: type[BaseModel], rows: Any, section: str) -> list:
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise DataSourceError(f"{section}: expected a list")
    parsed = []
    for index, row in enumerate(rows):
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            raise DataSourceError(f"{section}[{index}]: {e.error_count()} invalid fields") from e
    return parsed


class InMemoryPlanSource(PlanDataSource):
    """
    Plan data source over a snapshot dict.

    The snapshot is deep-copied on construction, so later changes by the
    caller do not leak into a projection.
    """

    def __init__(self, snapshot: dict[str, Any]):
        if not isinstance(snapshot, dict):
            raise DataSourceError("snapshot: expected an object")
        self._snapshot = copy.deepcopy(snapshot)

        self._accounts = _parse_rows(Account, self._snapshot.get("accounts"), "accounts")
        self._assets = _parse_rows(AssetInfo, self._snapshot.get("assetInfo"), "assetInfo")
        self._categories = _parse_rows(Category, self._snapshot.get("categories"), "categories")
        self._events = _parse_rows(Event, self._snapshot.get("events"), "events")
        self._members = _parse_rows(
            FamilyMember, self._snapshot.get("familyMembers"), "familyMembers"
        )

        self._transactions_by_year: dict[int, list[Any]] = {}
        for index, year_data in enumerate(self._snapshot.get("yearlyData") or []):
            if not isinstance(year_data, dict) or "year" not in year_data:
                raise DataSourceError(f"yearlyData[{index}]: missing year")
            try:
                year = int(year_data["year"])
            except (TypeError, ValueError) as e:
                raise DataSourceError(f"yearlyData[{index}]: invalid year") from e
            self._transactions_by_year.setdefault(year, []).extend(
                year_data.get("transactions") or []
            )

    def get_plan_settings(self) -> PlanSettings:
        raw = self._snapshot.get("settings")
        if raw is None:
            raise DataSourceError("settings: missing")
        try:
            return PlanSettings.model_validate(raw)
        except ValidationError as e:
            raise DataSourceError(f"settings: {e.error_count()} invalid fields") from e

    def get_accounts(self) -> list[Account]:
        return list(self._accounts)

    def get_assets(self) -> list[AssetInfo]:
        return list(self._assets)

    def get_categories(self) -> list[Category]:
        return list(self._categories)

    def get_events(self) -> list[Event]:
        return list(self._events)

    def get_family_members(self) -> list[FamilyMember]:
        return list(self._members)

    def get_transactions(self, year: int) -> list[Any]:
        return copy.deepcopy(self._transactions_by_year.get(year, []))
