"""
Dividend Accumulator

Sums dividend transactions per plan year, keyed by the receiving account
or by the paying asset. Holding quantity is never touched here.
"""

from decimal import Decimal
from typing import Iterable, Literal

from lifeplan.engine.ledger import YearFeed, year_transactions
from lifeplan.models.plan import AssetInfo, DividendTransaction, PlanSettings
from lifeplan.models.projection import ZERO, DividendSeries, DividendYearPoint


OwnerKind = Literal["account", "asset"]


def _owned_by(transaction: DividendTransaction, owner_kind: OwnerKind, owner_id: str) -> bool:
    if owner_kind == "account":
        return transaction.to_account_id == owner_id
    return transaction.holding_asset_id == owner_id


def accumulate_dividends(
    owner_id: str,
    feed: YearFeed,
    plan: PlanSettings,
    owner_kind: OwnerKind = "account",
) -> DividendSeries:
    """
    Dividend income per plan year for one account or asset.

    Each dividend contributes abs(amount) * frequency to its own year.
    """
    series: list[DividendYearPoint] = []
    total = ZERO

    for year in plan.years:
        year_amount = ZERO
        for transaction in year_transactions(feed, year, plan):
            if isinstance(transaction, DividendTransaction) and _owned_by(
                transaction, owner_kind, owner_id
            ):
                year_amount += transaction.yearly_amount
        total += year_amount
        series.append(DividendYearPoint(year=year, dividend_amount=year_amount))

    return DividendSeries(
        owner_kind=owner_kind,
        owner_id=owner_id,
        series=tuple(series),
        total=total,
    )


def accumulate_all(
    owner_ids: Iterable[str],
    feed: YearFeed,
    plan: PlanSettings,
    owner_kind: OwnerKind = "account",
) -> list[DividendSeries]:
    return [accumulate_dividends(owner_id, feed, plan, owner_kind) for owner_id in owner_ids]


def dividend_yield(asset: AssetInfo, year: int) -> Decimal:
    """
    Dividend per share as a percentage of that year's price.

    0 when either figure is missing for the year or the price is zero.
    """
    price = asset.price_for(year)
    dividend = asset.dividend_per_share_for(year)
    if price is None or dividend is None or price == 0:
        return ZERO
    return dividend / price * 100
