"""
Transaction Classifier

Maps a transaction variant and a perspective (an account or an asset) to
its signed effect. Every other engine component goes through here, so the
sign rules live in exactly one place:

    expense              to_account    -yearly
    income               to_account    +yearly
    transfer             from_account  -yearly
    transfer             to_account    +yearly
    investment/buy       from_account  -yearly cash, +quantity holding
    investment/sell      to_account    +yearly cash, -quantity holding
    investment/dividend  to_account    +yearly cash, quantity untouched

yearly = abs(amount) * frequency.
"""

from typing import Literal

from lifeplan.models.plan import (
    BuyTransaction,
    DividendTransaction,
    ExpenseTransaction,
    IncomeTransaction,
    SellTransaction,
    Transaction,
    TransferTransaction,
)
from lifeplan.models.projection import NOT_APPLICABLE, ZERO, Classification


Perspective = Literal["account", "asset"]


def classify_for_account(transaction: Transaction, account_id: str) -> Classification:
    """Cash effect of a transaction on one account."""
    yearly = transaction.yearly_amount

    if isinstance(transaction, (ExpenseTransaction, IncomeTransaction)):
        if transaction.to_account_id != account_id:
            return NOT_APPLICABLE
        sign = -1 if isinstance(transaction, ExpenseTransaction) else 1
        return Classification(applies_to=True, signed_yearly_amount=sign * yearly)

    if isinstance(transaction, TransferTransaction):
        delta = ZERO
        applies = False
        if transaction.from_account_id == account_id:
            delta -= yearly
            applies = True
        if transaction.to_account_id == account_id:
            delta += yearly
            applies = True
        if not applies:
            return NOT_APPLICABLE
        return Classification(applies_to=True, signed_yearly_amount=delta)

    if isinstance(transaction, BuyTransaction):
        if transaction.from_account_id != account_id:
            return NOT_APPLICABLE
        return Classification(applies_to=True, signed_yearly_amount=-yearly)

    if isinstance(transaction, (SellTransaction, DividendTransaction)):
        if transaction.to_account_id != account_id:
            return NOT_APPLICABLE
        return Classification(applies_to=True, signed_yearly_amount=yearly)

    raise TypeError(f"Unknown transaction variant: {type(transaction).__name__}")


def classify_for_holding(transaction: Transaction, asset_id: str) -> Classification:
    """
    Quantity effect of a transaction on one asset's holding.

    Dividends never change quantity, so they do not apply to a holding;
    the dividend accumulator picks them up separately.
    """
    if isinstance(transaction, BuyTransaction):
        if transaction.holding_asset_id != asset_id:
            return NOT_APPLICABLE
        return Classification(
            applies_to=True,
            signed_yearly_amount=transaction.yearly_amount,
            signed_quantity=transaction.quantity,
        )

    if isinstance(transaction, SellTransaction):
        if transaction.holding_asset_id != asset_id:
            return NOT_APPLICABLE
        return Classification(
            applies_to=True,
            signed_yearly_amount=-transaction.yearly_amount,
            signed_quantity=-transaction.quantity,
        )

    if isinstance(
        transaction,
        (ExpenseTransaction, IncomeTransaction, TransferTransaction, DividendTransaction),
    ):
        return NOT_APPLICABLE

    raise TypeError(f"Unknown transaction variant: {type(transaction).__name__}")


def classify(
    transaction: Transaction,
    entity_id: str,
    perspective: Perspective = "account",
) -> Classification:
    """
    Classify a transaction against an account (default) or an asset.
    """
    if perspective == "account":
        return classify_for_account(transaction, entity_id)
    if perspective == "asset":
        return classify_for_holding(transaction, entity_id)
    raise ValueError(f"Unknown perspective: {perspective}")
