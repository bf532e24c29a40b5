"""
Goal Detector (FIRE)

Finds the first plan year whose total asset value reaches the target.
First crossing wins: a later dip below target does not un-achieve it.
"""

from decimal import Decimal
from typing import Optional, Sequence

from lifeplan.models.plan import FamilyMember, PlanSettings
from lifeplan.models.projection import (
    ZERO,
    AccountProjection,
    GoalResult,
    HoldingProjection,
    NetWorthPoint,
)


def age_for_year(
    plan_year: int,
    current_year: int,
    default_age: int,
    member: Optional[FamilyMember] = None,
) -> int:
    """
    Age reported against a plan year.

    selected member's age + (plan_year - current_year); default_age stands
    in for the current-year age when no member is selected or the member
    has no age data.
    """
    if member is not None:
        age = member.age_in(plan_year, current_year)
        if age is not None:
            return age
    return default_age + (plan_year - current_year)


def build_net_worth_series(
    accounts: Sequence[AccountProjection],
    holdings: Sequence[HoldingProjection],
    plan: PlanSettings,
    current_year: int,
    default_age: int,
    member: Optional[FamilyMember] = None,
) -> list[NetWorthPoint]:
    """Combine account balances and holding valuations per plan year."""
    series: list[NetWorthPoint] = []
    for year in plan.years:
        cash = sum((a.balance_at(year) or ZERO for a in accounts), ZERO)
        valuation = sum((h.valuation_at(year) for h in holdings), ZERO)
        series.append(NetWorthPoint(
            year=year,
            age=age_for_year(year, current_year, default_age, member),
            cash_balance=cash,
            holding_valuation=valuation,
            total_asset_value=cash + valuation,
        ))
    return series


def detect_goal(
    net_worth: Sequence[NetWorthPoint],
    target_amount: Decimal,
) -> GoalResult:
    """
    Return the first point with total_asset_value >= target_amount.

    net_worth must be in chronological order.
    """
    for point in net_worth:
        if point.total_asset_value >= target_amount:
            return GoalResult(
                achieved=True,
                target_amount=target_amount,
                achieved_year=point.year,
                achieved_age=point.age,
            )
    return GoalResult(achieved=False, target_amount=target_amount)
