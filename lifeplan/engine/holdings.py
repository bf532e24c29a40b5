"""
Holding Tracker

Replays an asset's buy/sell transactions as a left fold over a sorted list.
Each step returns a new HoldingState; nothing is mutated in place.

Valuation for a plan year is year-end quantity times the price recorded
for exactly that year. A missing price values the holding at zero and,
when something is actually held, raises a price_gap diagnostic.
Selling more than is held clamps quantity at zero and raises an
over_sell diagnostic.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from lifeplan.engine.classifier import classify_for_holding
from lifeplan.engine.ledger import YearFeed, year_transactions
from lifeplan.models.diagnostic import Diagnostic, DiagnosticBuilder
from lifeplan.models.plan import (
    AssetInfo,
    BuyTransaction,
    PlanSettings,
    SellTransaction,
    Transaction,
)
from lifeplan.models.projection import (
    ZERO,
    HoldingPoint,
    HoldingProjection,
    HoldingState,
)


HoldingTransaction = Union[BuyTransaction, SellTransaction]


def apply_transaction(
    state: HoldingState,
    transaction: HoldingTransaction,
) -> tuple[HoldingState, Optional[Diagnostic]]:
    """
    One step of the fold.

    Returns the next state and an over_sell diagnostic when the sell
    quantity exceeds what is held.
    """
    classification = classify_for_holding(transaction, state.asset_id)
    if not classification.applies_to:
        return state, None

    if isinstance(transaction, BuyTransaction):
        return state.model_copy(update={
            "quantity": state.quantity + classification.signed_quantity,
            "total_purchase_amount": state.total_purchase_amount + transaction.yearly_amount,
            "bought_quantity": state.bought_quantity + transaction.quantity,
        }), None

    diagnostic = None
    remaining = state.quantity + classification.signed_quantity
    if remaining < 0:
        diagnostic = DiagnosticBuilder.over_sell(
            asset_id=state.asset_id,
            transaction_id=transaction.id,
            year=transaction.year,
            requested_quantity=str(transaction.quantity),
            held_quantity=str(state.quantity),
        )
        remaining = ZERO

    return state.model_copy(update={
        "quantity": remaining,
        "total_sell_amount": state.total_sell_amount + transaction.yearly_amount,
        "sold_quantity": state.sold_quantity + transaction.quantity,
    }), diagnostic


def holding_transactions(
    transactions: Iterable[Transaction],
    asset_id: str,
) -> list[HoldingTransaction]:
    """
    Buys and sells of one asset in (year, month) order.

    sorted() is stable, so ties keep feed order.
    """
    selected = [
        t for t in transactions
        if isinstance(t, (BuyTransaction, SellTransaction)) and t.holding_asset_id == asset_id
    ]
    return sorted(selected, key=lambda t: (t.year, t.month))


def realized_gain_rate(realized_gain: Decimal, total_purchase_amount: Decimal) -> Decimal:
    """realized_gain / total_purchase_amount, 0 when nothing was bought."""
    if total_purchase_amount == 0:
        return ZERO
    return realized_gain / total_purchase_amount


def track_holding(
    asset: AssetInfo,
    feed: YearFeed,
    plan: PlanSettings,
) -> HoldingProjection:
    """
    Track one asset across the plan range.

    Args:
        asset: The asset, with its sparse price history.
        feed: Ledger or year mapping of all plan transactions.
        plan: A validated plan.
    """
    state = HoldingState(asset_id=asset.id)
    states: list[HoldingState] = []
    series: list[HoldingPoint] = []
    diagnostics: list[Diagnostic] = []

    for year in plan.years:
        for transaction in holding_transactions(year_transactions(feed, year, plan), asset.id):
            state, diagnostic = apply_transaction(state, transaction)
            states.append(state)
            if diagnostic is not None:
                diagnostics.append(diagnostic)

        price = asset.price_for(year)
        if price is None:
            valuation = ZERO
            if state.quantity > 0:
                diagnostics.append(
                    DiagnosticBuilder.price_gap(asset.id, year, str(state.quantity))
                )
        else:
            valuation = state.quantity * price

        series.append(HoldingPoint(
            year=year,
            quantity=state.quantity,
            price=price,
            valuation=valuation,
        ))

    average_price = (
        state.total_purchase_amount / state.bought_quantity
        if state.bought_quantity > 0
        else ZERO
    )

    return HoldingProjection(
        asset_id=asset.id,
        series=tuple(series),
        states=tuple(states),
        final_quantity=state.quantity,
        total_purchase_amount=state.total_purchase_amount,
        total_sell_amount=state.total_sell_amount,
        bought_quantity=state.bought_quantity,
        sold_quantity=state.sold_quantity,
        realized_gain=state.realized_gain,
        realized_gain_rate=realized_gain_rate(state.realized_gain, state.total_purchase_amount),
        average_purchase_price=average_price,
        diagnostics=tuple(diagnostics),
    )


def track_holdings(
    assets: Iterable[AssetInfo],
    feed: YearFeed,
    plan: PlanSettings,
) -> list[HoldingProjection]:
    return [track_holding(asset, feed, plan) for asset in assets]
