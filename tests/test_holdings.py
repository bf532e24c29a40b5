"""
Tests for the holding tracker, dividend accumulator and goal detector.
"""

from decimal import Decimal

from lifeplan.engine import (
    accumulate_all,
    accumulate_dividends,
    age_for_year,
    apply_transaction,
    build_net_worth_series,
    detect_goal,
    dividend_yield,
    holding_transactions,
    project_accounts,
    realized_gain_rate,
    track_holding,
)
from lifeplan.models import (
    Account,
    AssetInfo,
    DiagnosticType,
    FamilyMember,
    HoldingState,
    NetWorthPoint,
    PlanSettings,
)

from conftest import buy, dividend, expense, income, sell


class TestHoldingFold:
    """Tests for single fold steps."""

    def test_buy_step_returns_new_state(self):
        """Test a buy adds quantity and purchase amount without mutating."""
        start = HoldingState(asset_id="fund")
        state, diagnostic = apply_transaction(start, buy(amount=1000, quantity=10))

        assert diagnostic is None
        assert state.quantity == Decimal("10")
        assert state.total_purchase_amount == Decimal("1000")
        assert start.quantity == 0

    def test_over_sell_clamps_and_warns(self):
        """Test selling more than held floors quantity at zero."""
        state = HoldingState(asset_id="fund", quantity=Decimal("5"))
        state, diagnostic = apply_transaction(state, sell(quantity=8, amount=800))

        assert state.quantity == 0
        assert state.sold_quantity == Decimal("8")
        assert state.total_sell_amount == Decimal("800")
        assert diagnostic.diagnostic_type == DiagnosticType.OVER_SELL
        assert diagnostic.details["requested_quantity"] == "8"
        assert diagnostic.details["held_quantity"] == "5"

    def test_other_asset_ignored(self):
        """Test a transaction on a different asset leaves the state alone."""
        state = HoldingState(asset_id="fund")
        new_state, diagnostic = apply_transaction(state, buy(asset_id="other"))
        assert new_state is state
        assert diagnostic is None

    def test_order_by_year_then_month(self):
        """Test (year, month) ordering with ties kept in feed order."""
        txns = [
            buy(txn_id="b2", year=2026, month=1),
            buy(txn_id="b1", year=2025, month=6),
            sell(txn_id="s1", year=2025, month=3),
            buy(txn_id="b3", year=2025, month=6),
        ]
        assert [t.id for t in holding_transactions(txns, "fund")] == ["s1", "b1", "b3", "b2"]

    def test_gain_rate_without_purchases(self):
        """Test realized gain rate is 0, not a division error."""
        assert realized_gain_rate(Decimal("500"), Decimal("0")) == 0


class TestHoldingTracker:
    """Tests for tracking one asset across the plan."""

    def test_buy_then_sell_scenario(self, plan, fund):
        """Test buy 10 for 1000, sell 10 for 1500 -> gain 500, quantity 0."""
        feed = {2025: [buy(amount=1000, quantity=10)], 2026: [sell(amount=1500, quantity=10)]}
        holding = track_holding(fund, feed, plan)

        assert holding.realized_gain == Decimal("500")
        assert holding.realized_gain_rate == Decimal("0.5")
        assert holding.series[1].quantity == 0
        assert holding.final_quantity == 0
        assert holding.total_purchase_amount == Decimal("1000")
        assert holding.total_sell_amount == Decimal("1500")
        assert holding.sold_quantity == Decimal("10")
        assert holding.average_purchase_price == Decimal("100")

    def test_valuation_uses_exact_year_price(self, plan, fund):
        """Test year-end quantity times that year's price."""
        holding = track_holding(fund, {2025: [buy(quantity=10)]}, plan)
        assert holding.valuation_at(2025) == Decimal("1000")
        assert holding.valuation_at(2026) == Decimal("1500")

    def test_price_gap_values_at_zero(self, plan, fund):
        """Test a missing price values the holding at zero and is reported."""
        holding = track_holding(fund, {2025: [buy(quantity=10)]}, plan)
        point = holding.series[2]

        assert point.year == 2027
        assert point.price is None
        assert point.quantity == Decimal("10")
        assert point.valuation == 0
        gaps = [d for d in holding.diagnostics if d.diagnostic_type == DiagnosticType.PRICE_GAP]
        assert [d.year for d in gaps] == [2027]

    def test_no_price_gap_when_nothing_held(self, plan, fund):
        """Test an empty holding without a price is not a gap."""
        holding = track_holding(fund, {}, plan)
        assert holding.diagnostics == ()

    def test_dividend_leaves_quantity_untouched(self, plan, fund):
        """Test a dividend has no effect on the holding."""
        feed = {2025: [buy(quantity=10), dividend(amount=60)]}
        holding = track_holding(fund, feed, plan)
        assert holding.series[0].quantity == Decimal("10")
        assert holding.realized_gain == Decimal("-1000")

    def test_intermediate_states(self, plan, fund):
        """Test one fold state per applied transaction."""
        feed = {2025: [buy(quantity=10), sell(quantity=4, amount=600, year=2025, month=2)]}
        holding = track_holding(fund, feed, plan)
        assert [s.quantity for s in holding.states] == [Decimal("10"), Decimal("6")]

    def test_realized_gain_independent_of_prices(self, plan, fund):
        """Test realized gain does not change with price data."""
        feed = {2025: [buy(amount=1000, quantity=10)], 2026: [sell(amount=700, quantity=5)]}
        unpriced = AssetInfo(id="fund", name="Index Fund")
        priced = track_holding(fund, feed, plan)
        bare = track_holding(unpriced, feed, plan)

        assert priced.realized_gain == bare.realized_gain == Decimal("-300")
        assert priced.realized_gain == priced.total_sell_amount - priced.total_purchase_amount

    def test_idempotent(self, plan, fund):
        """Test two identical calls give byte-identical output."""
        feed = {2025: [buy(quantity=10)], 2026: [sell(quantity=12)]}
        assert (
            track_holding(fund, feed, plan).model_dump_json()
            == track_holding(fund, feed, plan).model_dump_json()
        )


class TestDividends:
    """Tests for the dividend accumulator."""

    def test_dividend_scenario(self, plan):
        """Test a 60 dividend contributes 60 to its year."""
        series = accumulate_dividends("acc", {2025: [dividend(amount=60)]}, plan)
        assert series.series[0].dividend_amount == Decimal("60")
        assert series.series[1].dividend_amount == 0
        assert series.total == Decimal("60")

    def test_frequency_applies(self, plan):
        """Test quarterly dividends are multiplied by frequency."""
        series = accumulate_dividends("acc", {2025: [dividend(amount=15, frequency=4)]}, plan)
        assert series.total == Decimal("60")

    def test_keyed_by_asset(self, plan):
        """Test the asset-level view keys on holdingAssetId."""
        feed = {2025: [dividend(amount=60, asset_id="fund"), dividend(amount=40, asset_id="bond")]}
        series = accumulate_dividends("fund", feed, plan, owner_kind="asset")
        assert series.owner_kind == "asset"
        assert series.total == Decimal("60")

    def test_ignores_other_transactions(self, plan):
        """Test only dividends are summed."""
        feed = {2025: [income(amount=500), sell(year=2025), dividend(amount=10)]}
        assert accumulate_dividends("acc", feed, plan).total == Decimal("10")

    def test_accumulate_all(self, plan):
        """Test one series per owner."""
        feed = {2025: [dividend(amount=5, to_account_id="a"), dividend(amount=7, to_account_id="b")]}
        result = accumulate_all(["a", "b", "c"], feed, plan)
        assert [s.total for s in result] == [Decimal("5"), Decimal("7"), Decimal("0")]

    def test_dividend_yield(self, fund):
        """Test yield = dividend per share / price * 100."""
        assert dividend_yield(fund, 2025) == Decimal("2")
        assert dividend_yield(fund, 2026) == 0


class TestGoalDetector:
    """Tests for net worth and FIRE detection."""

    def test_age_from_selected_member(self):
        """Test age tracks the selected member."""
        member = FamilyMember(id="m1", name="Alex", current_age=32)
        assert age_for_year(2045, current_year=2025, default_age=30, member=member) == 52

    def test_age_default_when_no_member(self):
        """Test the configured default age is used without a member."""
        assert age_for_year(2045, current_year=2025, default_age=30) == 50

    def test_fire_scenario(self):
        """Test target 50000000 first crossed in 2045 at age 52."""
        plan = PlanSettings(plan_start_year=2025, plan_end_year=2060)
        account = Account(id="acc", name="Main", initial_balance=0)
        feed = {
            year: [income(txn_id=f"salary-{year}", amount=200000, frequency=12, year=year)]
            for year in plan.years
        }
        accounts = project_accounts([account], feed, plan)
        member = FamilyMember(id="m1", name="Alex", current_age=32)

        net_worth = build_net_worth_series(
            accounts, [], plan, current_year=2025, default_age=30, member=member,
        )
        goal = detect_goal(net_worth, Decimal("50000000"))

        assert goal.achieved is True
        assert goal.achieved_year == 2045
        assert goal.achieved_age == 52

    def test_first_crossing_wins(self):
        """Test a later dip does not un-achieve the goal."""
        net_worth = [
            NetWorthPoint(year=2025, age=30, total_asset_value=Decimal("90")),
            NetWorthPoint(year=2026, age=31, total_asset_value=Decimal("100")),
            NetWorthPoint(year=2027, age=32, total_asset_value=Decimal("50")),
            NetWorthPoint(year=2028, age=33, total_asset_value=Decimal("120")),
        ]
        goal = detect_goal(net_worth, Decimal("100"))
        assert goal.achieved_year == 2026
        assert goal.achieved_age == 31

    def test_not_achieved(self):
        """Test the unachieved result."""
        net_worth = [NetWorthPoint(year=2025, total_asset_value=Decimal("10"))]
        goal = detect_goal(net_worth, Decimal("100"))
        assert goal.achieved is False
        assert goal.achieved_year is None

    def test_monotonic_in_target(self):
        """Test a higher target is never achieved earlier."""
        values = [5, 40, 20, 60, 55, 100, 80]
        net_worth = [
            NetWorthPoint(year=2025 + i, total_asset_value=Decimal(v))
            for i, v in enumerate(values)
        ]
        previous_year = None
        for target in range(0, 120, 5):
            goal = detect_goal(net_worth, Decimal(target))
            if previous_year is None:
                previous_year = goal.achieved_year
                continue
            if goal.achieved_year is not None:
                assert previous_year is not None
                assert goal.achieved_year >= previous_year
            previous_year = goal.achieved_year

    def test_net_worth_combines_cash_and_holdings(self, plan, fund):
        """Test total = account balances + holding valuations."""
        account = Account(id="acc", name="Main", initial_balance=Decimal("100000"))
        feed = {2025: [buy(amount=1000, quantity=10), expense(amount=1000, frequency=1)]}
        accounts = project_accounts([account], feed, plan)
        holdings = [track_holding(fund, feed, plan)]

        net_worth = build_net_worth_series(accounts, holdings, plan, current_year=2025, default_age=30)

        first = net_worth[0]
        assert first.cash_balance == Decimal("98000")
        assert first.holding_valuation == Decimal("1000")
        assert first.total_asset_value == Decimal("99000")
        assert first.age == 30
        assert net_worth[2].holding_valuation == 0
