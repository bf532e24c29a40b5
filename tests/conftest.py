"""
Shared fixtures for the Life Plan engine tests.

The sample snapshot covers 2025-2027 and is small enough to check by hand:

    acc-main  100000 +300000 -60000 -1000 +60   = 339060 (2025)
                     +1500 -20000 -10000        = 310560 (2026, 2027)
    acc-sec   0      +10000                     = 10000  (2026, 2027)
    fund      buy 10 @ 1000 (2025), sell 10 @ 1500 (2026) -> gain 500

2027 holds one malformed expense (no toAccountId).
"""

from decimal import Decimal

import pytest

from lifeplan.config import EngineSettings
from lifeplan.models import (
    Account,
    AssetInfo,
    BuyTransaction,
    DividendTransaction,
    ExpenseTransaction,
    IncomeTransaction,
    PlanSettings,
    SellTransaction,
    TransferTransaction,
)
from lifeplan.storage import InMemoryPlanSource


@pytest.fixture
def plan():
    return PlanSettings(plan_start_year=2025, plan_end_year=2027)


@pytest.fixture
def engine_settings():
    return EngineSettings(current_year=2025)


@pytest.fixture
def account():
    return Account(id="acc", name="Main", initial_balance=Decimal("100000"))


@pytest.fixture
def fund():
    return AssetInfo(
        id="fund",
        name="Index Fund",
        symbol="IDX",
        price_history=[{"year": 2025, "price": 100}, {"year": 2026, "price": 150}],
        dividend_history=[{"year": 2025, "dividend_per_share": 2}],
    )


def expense(txn_id="t-exp", amount=5000, frequency=12, year=2025, **kwargs):
    return ExpenseTransaction(
        id=txn_id, amount=amount, frequency=frequency, year=year,
        to_account_id=kwargs.pop("to_account_id", "acc"), **kwargs,
    )


def income(txn_id="t-inc", amount=300000, frequency=1, year=2025, **kwargs):
    return IncomeTransaction(
        id=txn_id, amount=amount, frequency=frequency, year=year,
        to_account_id=kwargs.pop("to_account_id", "acc"), **kwargs,
    )


def transfer(txn_id="t-move", amount=10000, year=2025, from_id="acc", to_id="acc-sec", **kwargs):
    return TransferTransaction(
        id=txn_id, amount=amount, year=year,
        from_account_id=from_id, to_account_id=to_id, **kwargs,
    )


def buy(txn_id="t-buy", amount=1000, quantity=10, year=2025, asset_id="fund", **kwargs):
    return BuyTransaction(
        id=txn_id, amount=amount, quantity=quantity, year=year,
        from_account_id=kwargs.pop("from_account_id", "acc"),
        holding_asset_id=asset_id, **kwargs,
    )


def sell(txn_id="t-sell", amount=1500, quantity=10, year=2026, asset_id="fund", **kwargs):
    return SellTransaction(
        id=txn_id, amount=amount, quantity=quantity, year=year,
        to_account_id=kwargs.pop("to_account_id", "acc"),
        holding_asset_id=asset_id, **kwargs,
    )


def dividend(txn_id="t-div", amount=60, year=2025, asset_id="fund", **kwargs):
    return DividendTransaction(
        id=txn_id, amount=amount, year=year,
        to_account_id=kwargs.pop("to_account_id", "acc"),
        holding_asset_id=asset_id, **kwargs,
    )


@pytest.fixture
def sample_snapshot():
    return {
        "settings": {
            "planStartYear": 2025,
            "planEndYear": 2027,
            "fireSettings": {"targetAmount": 340000, "isEnabled": True},
        },
        "accounts": [
            {"id": "acc-main", "name": "Main Bank", "initialBalance": 100000},
            {"id": "acc-sec", "name": "Savings", "initialBalance": 0},
        ],
        "assetInfo": [
            {
                "id": "fund",
                "name": "Index Fund",
                "symbol": "IDX",
                "priceHistory": [
                    {"year": 2025, "price": 100},
                    {"year": 2026, "price": 150},
                ],
                "dividendHistory": [{"year": 2025, "dividendPerShare": 2}],
            },
        ],
        "categories": [
            {"id": "cat-food", "name": "Food", "type": "expense", "color": "#ff0000"},
            {"id": "cat-salary", "name": "Salary", "type": "income", "color": "#00ff00"},
        ],
        "events": [
            {
                "id": "evt-trip",
                "name": "Family Trip",
                "year": 2026,
                "transactionIds": ["t-trip"],
                "color": "#0000ff",
            },
        ],
        "familyMembers": [
            {"id": "m1", "name": "Alex", "currentAge": 40},
        ],
        "yearlyData": [
            {
                "year": 2025,
                "transactions": [
                    {"id": "t-salary", "type": "income", "amount": 300000, "frequency": 1,
                     "year": 2025, "month": 4, "categoryId": "cat-salary",
                     "toAccountId": "acc-main"},
                    {"id": "t-food", "type": "expense", "amount": 5000, "frequency": 12,
                     "year": 2025, "month": 1, "categoryId": "cat-food",
                     "toAccountId": "acc-main"},
                    {"id": "t-buy", "type": "investment", "transactionSubtype": "buy",
                     "amount": 1000, "frequency": 1, "year": 2025, "month": 5,
                     "fromAccountId": "acc-main", "holdingAssetId": "fund", "quantity": 10},
                    {"id": "t-div", "type": "investment", "transactionSubtype": "dividend",
                     "amount": 60, "frequency": 1, "year": 2025, "month": 12,
                     "toAccountId": "acc-main", "holdingAssetId": "fund"},
                ],
            },
            {
                "year": 2026,
                "transactions": [
                    {"id": "t-sell", "type": "investment", "transactionSubtype": "sell",
                     "amount": 1500, "frequency": 1, "year": 2026, "month": 6,
                     "toAccountId": "acc-main", "holdingAssetId": "fund", "quantity": 10},
                    {"id": "t-trip", "type": "expense", "amount": 20000, "frequency": 1,
                     "year": 2026, "month": 8, "toAccountId": "acc-main"},
                    {"id": "t-move", "type": "transfer", "amount": 10000, "frequency": 1,
                     "year": 2026, "month": 9, "fromAccountId": "acc-main",
                     "toAccountId": "acc-sec"},
                ],
            },
            {
                "year": 2027,
                "transactions": [
                    {"id": "t-bad", "type": "expense", "amount": 100, "year": 2027},
                ],
            },
        ],
    }


@pytest.fixture
def source(sample_snapshot):
    return InMemoryPlanSource(sample_snapshot)
