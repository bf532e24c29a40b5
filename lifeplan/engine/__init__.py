"""Projection engine package."""

from lifeplan.engine.accounts import net_account_flow, project_account, project_accounts
from lifeplan.engine.classifier import classify, classify_for_account, classify_for_holding
from lifeplan.engine.dividends import accumulate_all, accumulate_dividends, dividend_yield
from lifeplan.engine.goal import age_for_year, build_net_worth_series, detect_goal
from lifeplan.engine.holdings import (
    apply_transaction,
    holding_transactions,
    realized_gain_rate,
    track_holding,
    track_holdings,
)
from lifeplan.engine.ledger import (
    TransactionLedger,
    build_ledger,
    ledger_from_transactions,
    year_transactions,
)

__all__ = [
    "TransactionLedger",
    "accumulate_all",
    "accumulate_dividends",
    "age_for_year",
    "apply_transaction",
    "build_ledger",
    "build_net_worth_series",
    "classify",
    "classify_for_account",
    "classify_for_holding",
    "detect_goal",
    "dividend_yield",
    "holding_transactions",
    "ledger_from_transactions",
    "net_account_flow",
    "project_account",
    "project_accounts",
    "realized_gain_rate",
    "track_holding",
    "track_holdings",
    "year_transactions",
]
