"""
Projection Result Models

Everything the engine hands back to presentation code. All results are
frozen and freshly built on every call; identical inputs give identical
(model_dump_json-equal) outputs.
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from lifeplan.models.diagnostic import Diagnostic


RESULT_CONFIG = ConfigDict(frozen=True)

ZERO = Decimal("0")


# =============================================================================
# CLASSIFICATION
# =============================================================================

class Classification(BaseModel):
    """
    Effect of one transaction on one account or holding.

    For an account: signed_yearly_amount is the cash delta.
    For a holding: signed_quantity is the quantity delta and
    signed_yearly_amount is the money moved into (+) or out of (-) it.
    """
    model_config = RESULT_CONFIG

    applies_to: bool
    signed_yearly_amount: Decimal = ZERO
    signed_quantity: Decimal = ZERO


NOT_APPLICABLE = Classification(applies_to=False)


# =============================================================================
# ACCOUNTS
# =============================================================================

class BalancePoint(BaseModel):
    model_config = RESULT_CONFIG

    year: int
    balance: Decimal


class AccountProjection(BaseModel):
    """Year-indexed running balance of one account."""
    model_config = RESULT_CONFIG

    account_id: str
    initial_balance: Decimal
    series: tuple[BalancePoint, ...]
    final_balance: Decimal

    def balance_at(self, year: int) -> Optional[Decimal]:
        for point in self.series:
            if point.year == year:
                return point.balance
        return None


# =============================================================================
# HOLDINGS
# =============================================================================

class HoldingState(BaseModel):
    """
    One step of the holding fold.

    Never mutated: applying a transaction returns a new state.
    """
    model_config = RESULT_CONFIG

    asset_id: str
    quantity: Decimal = ZERO
    total_purchase_amount: Decimal = ZERO
    total_sell_amount: Decimal = ZERO
    bought_quantity: Decimal = ZERO
    sold_quantity: Decimal = ZERO

    @property
    def realized_gain(self) -> Decimal:
        return self.total_sell_amount - self.total_purchase_amount


class HoldingPoint(BaseModel):
    model_config = RESULT_CONFIG

    year: int
    quantity: Decimal
    price: Optional[Decimal] = None
    valuation: Decimal


class HoldingProjection(BaseModel):
    """Year-indexed quantity/valuation of one asset plus realized-gain totals."""
    model_config = RESULT_CONFIG

    asset_id: str
    series: tuple[HoldingPoint, ...]
    states: tuple[HoldingState, ...] = Field(
        default=(),
        description="Intermediate fold states, one per applied transaction"
    )
    final_quantity: Decimal
    total_purchase_amount: Decimal
    total_sell_amount: Decimal
    bought_quantity: Decimal
    sold_quantity: Decimal
    realized_gain: Decimal
    realized_gain_rate: Decimal
    average_purchase_price: Decimal
    diagnostics: tuple[Diagnostic, ...] = ()

    def valuation_at(self, year: int) -> Decimal:
        for point in self.series:
            if point.year == year:
                return point.valuation
        return ZERO


# =============================================================================
# DIVIDENDS
# =============================================================================

class DividendYearPoint(BaseModel):
    model_config = RESULT_CONFIG

    year: int
    dividend_amount: Decimal


class DividendSeries(BaseModel):
    model_config = RESULT_CONFIG

    owner_kind: Literal["account", "asset"]
    owner_id: str
    series: tuple[DividendYearPoint, ...]
    total: Decimal


# =============================================================================
# GOAL
# =============================================================================

class NetWorthPoint(BaseModel):
    model_config = RESULT_CONFIG

    year: int
    age: Optional[int] = None
    cash_balance: Decimal = ZERO
    holding_valuation: Decimal = ZERO
    total_asset_value: Decimal


class GoalResult(BaseModel):
    """First crossing of the FIRE target, or achieved=False."""
    model_config = RESULT_CONFIG

    achieved: bool
    target_amount: Decimal
    achieved_year: Optional[int] = None
    achieved_age: Optional[int] = None


# =============================================================================
# REPORTS
# =============================================================================

class ReportRow(BaseModel):
    model_config = RESULT_CONFIG

    key: str
    label: str
    color: str
    total: Decimal
    percentage: Decimal


class RankedItem(BaseModel):
    model_config = RESULT_CONFIG

    key: str
    name: str
    amount: Decimal


class InvestmentSummary(BaseModel):
    model_config = RESULT_CONFIG

    buy_total: Decimal = ZERO
    sell_total: Decimal = ZERO
    dividend_total: Decimal = ZERO
    buy_count: int = 0
    sell_count: int = 0
    dividend_count: int = 0

    @property
    def net_amount(self) -> Decimal:
        """Sell proceeds plus dividends minus purchases."""
        return self.sell_total + self.dividend_total - self.buy_total


class TypeSummary(BaseModel):
    model_config = RESULT_CONFIG

    transaction_type: str
    total: Decimal
    monthly_average: Decimal
    count: int


class DashboardSummary(BaseModel):
    """Plan-wide rankings shown on the dashboard."""
    model_config = RESULT_CONFIG

    expense_categories: tuple[RankedItem, ...] = ()
    income_categories: tuple[RankedItem, ...] = ()
    accounts: tuple[RankedItem, ...] = ()
    assets: tuple[RankedItem, ...] = ()
    events: tuple[RankedItem, ...] = ()
    investments: InvestmentSummary = Field(default_factory=InvestmentSummary)


# =============================================================================
# WHOLE PLAN
# =============================================================================

class PlanProjection(BaseModel):
    """Everything one ProjectionFlow.run produces."""
    model_config = RESULT_CONFIG

    plan_start_year: int
    plan_end_year: int
    accounts: tuple[AccountProjection, ...]
    holdings: tuple[HoldingProjection, ...]
    account_dividends: tuple[DividendSeries, ...]
    asset_dividends: tuple[DividendSeries, ...]
    net_worth: tuple[NetWorthPoint, ...]
    goal: Optional[GoalResult] = None
    diagnostics: tuple[Diagnostic, ...] = ()

    def account(self, account_id: str) -> Optional[AccountProjection]:
        return next((a for a in self.accounts if a.account_id == account_id), None)

    def holding(self, asset_id: str) -> Optional[HoldingProjection]:
        return next((h for h in self.holdings if h.asset_id == asset_id), None)
