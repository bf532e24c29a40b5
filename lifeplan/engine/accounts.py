"""
Account Projector

Turns an account's initial balance and the plan's transaction feed into a
cumulative, year-by-year running balance.
"""

from decimal import Decimal
from typing import Iterable

from lifeplan.engine.classifier import classify_for_account
from lifeplan.engine.ledger import YearFeed, year_transactions
from lifeplan.models.plan import Account, PlanSettings, Transaction
from lifeplan.models.projection import ZERO, AccountProjection, BalancePoint


def net_account_flow(transactions: Iterable[Transaction], account_id: str) -> Decimal:
    """Sum of the signed yearly amounts that apply to one account."""
    total = ZERO
    for transaction in transactions:
        classification = classify_for_account(transaction, account_id)
        if classification.applies_to:
            total += classification.signed_yearly_amount
    return total


def project_account(
    account: Account,
    feed: YearFeed,
    plan: PlanSettings,
) -> AccountProjection:
    """
    Project one account across the plan range.

    Balance at year N includes every year <= N. A year with no feed
    contributes nothing; the series always has one point per plan year.
    """
    running_balance = account.initial_balance
    series: list[BalancePoint] = []

    for year in plan.years:
        running_balance += net_account_flow(year_transactions(feed, year, plan), account.id)
        series.append(BalancePoint(year=year, balance=running_balance))

    return AccountProjection(
        account_id=account.id,
        initial_balance=account.initial_balance,
        series=tuple(series),
        final_balance=running_balance,
    )


def project_accounts(
    accounts: Iterable[Account],
    feed: YearFeed,
    plan: PlanSettings,
) -> list[AccountProjection]:
    return [project_account(account, feed, plan) for account in accounts]
