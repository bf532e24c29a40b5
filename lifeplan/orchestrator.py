"""
Main Orchestrator for the Life Plan engine

This module ties together all the components and defines the
end-to-end flows for:
1. Projection (settings -> ledger -> accounts, holdings, dividends -> goal)
2. Reports (ledger + projection -> ranked rollups)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Settings are validated before any projection runs
- Settings reach engine functions as parameters, never as lookups
- Every tolerated condition is recorded and logged

Each run recomputes the full plan range from scratch. Callers embedding
this in a reactive UI debounce their own invocations.
"""

from datetime import date
from typing import Optional

from lifeplan.config import EngineSettings, get_settings
from lifeplan.diagnostics import DiagnosticsRecorder
from lifeplan.engine import (
    TransactionLedger,
    accumulate_all,
    build_ledger,
    build_net_worth_series,
    detect_goal,
    project_accounts,
    track_holdings,
)
from lifeplan.errors import InvalidPlanRange, ProjectionError
from lifeplan.models.plan import FamilyMember, PlanSettings
from lifeplan.models.projection import (
    DashboardSummary,
    PlanProjection,
    ReportRow,
    TypeSummary,
)
from lifeplan.reports.aggregator import GroupBy, ReportAggregator, TransactionType
from lifeplan.storage import PlanDataSource
from lifeplan.validation import PlanValidator


class ProjectionFlow:
    """
    Orchestrates one full projection of a life plan.

    Flow:
    1. Validate settings (InvalidPlanRange stops here)
    2. Build the ledger (one query per plan year)
    3. Project accounts, track holdings, accumulate dividends
    4. Combine into a net-worth series
    5. Detect the FIRE goal when enabled
    """

    def __init__(
        self,
        source: PlanDataSource,
        validator: Optional[PlanValidator] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._source = source
        self._validator = validator or PlanValidator()
        self._settings = settings or get_settings()

    def load_plan(self, recorder: Optional[DiagnosticsRecorder] = None) -> PlanSettings:
        """
        Read and validate the plan settings.

        Raises:
            InvalidPlanRange: If the plan range is empty or inverted
        """
        try:
            return self._validator.validate_settings(self._source.get_plan_settings())
        except InvalidPlanRange as e:
            if recorder:
                recorder.log_run_failed("invalid_plan_range", str(e))
            raise

    def load_ledger(self, plan: PlanSettings) -> TransactionLedger:
        return build_ledger(self._source.get_transactions, plan)

    def _resolve_member(self, member_id: Optional[str]) -> Optional[FamilyMember]:
        if member_id is None:
            return None
        for member in self._source.get_family_members():
            if member.id == member_id:
                return member
        raise ProjectionError(f"Unknown family member: {member_id}")

    def _current_year(self, current_year: Optional[int]) -> int:
        if current_year is not None:
            return current_year
        if self._settings.current_year is not None:
            return self._settings.current_year
        return date.today().year

    def run(
        self,
        selected_member_id: Optional[str] = None,
        current_year: Optional[int] = None,
        run_id: Optional[str] = None,
    ) -> PlanProjection:
        """
        Project the whole plan.

        Args:
            selected_member_id: Family member whose age labels the series.
                                None uses the configured default age.
            current_year: Calendar year for age arithmetic (defaults to
                          settings.current_year, then today).
            run_id: Correlates the log lines of this run.

        Returns:
            The full PlanProjection
        """
        recorder = DiagnosticsRecorder(run_id=run_id, log_level=self._settings.log_level)
        plan = self.load_plan(recorder)
        ledger = self.load_ledger(plan)
        return self._project(plan, ledger, recorder, selected_member_id, current_year)

    def project(
        self,
        plan: PlanSettings,
        ledger: TransactionLedger,
        selected_member_id: Optional[str] = None,
        current_year: Optional[int] = None,
        run_id: Optional[str] = None,
    ) -> PlanProjection:
        """Project an already validated plan over an already built ledger."""
        recorder = DiagnosticsRecorder(run_id=run_id, log_level=self._settings.log_level)
        return self._project(plan, ledger, recorder, selected_member_id, current_year)

    def _project(
        self,
        plan: PlanSettings,
        ledger: TransactionLedger,
        recorder: DiagnosticsRecorder,
        selected_member_id: Optional[str],
        current_year: Optional[int],
    ) -> PlanProjection:
        try:
            member = self._resolve_member(selected_member_id)
        except ProjectionError as e:
            recorder.log_run_failed("unknown_member", str(e))
            raise

        accounts = self._source.get_accounts()
        assets = self._source.get_assets()

        recorder.log_run_started(
            plan_start_year=plan.plan_start_year,
            plan_end_year=plan.plan_end_year,
            account_count=len(accounts),
            asset_count=len(assets),
        )
        recorder.record_all(ledger.diagnostics)

        account_projections = project_accounts(accounts, ledger, plan)
        holding_projections = track_holdings(assets, ledger, plan)
        for holding in holding_projections:
            recorder.record_all(holding.diagnostics)

        account_dividends = accumulate_all([a.id for a in accounts], ledger, plan, "account")
        asset_dividends = accumulate_all([a.id for a in assets], ledger, plan, "asset")

        net_worth = build_net_worth_series(
            account_projections,
            holding_projections,
            plan,
            current_year=self._current_year(current_year),
            default_age=self._settings.default_member_age,
            member=member,
        )

        goal = None
        if plan.fire_enabled:
            goal = detect_goal(net_worth, plan.fire_target_amount)

        recorder.log_run_finished(
            transaction_count=len(ledger),
            goal_year=goal.achieved_year if goal else None,
        )

        return PlanProjection(
            plan_start_year=plan.plan_start_year,
            plan_end_year=plan.plan_end_year,
            accounts=tuple(account_projections),
            holdings=tuple(holding_projections),
            account_dividends=tuple(account_dividends),
            asset_dividends=tuple(asset_dividends),
            net_worth=tuple(net_worth),
            goal=goal,
            diagnostics=recorder.diagnostics,
        )


class ReportFlow:
    """
    Orchestrates report rollups over a plan.

    Reports read the same ledger the projection reads, so category and
    event totals always agree with the balances.
    """

    def __init__(
        self,
        source: PlanDataSource,
        validator: Optional[PlanValidator] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._source = source
        self._settings = settings or get_settings()
        self._projection_flow = ProjectionFlow(source, validator, self._settings)
        self._aggregator = ReportAggregator(self._settings)

    def year_breakdown(
        self,
        year: int,
        group_by: GroupBy = "category",
        transaction_type: Optional[TransactionType] = None,
        top_n: Optional[int] = None,
    ) -> list[ReportRow]:
        """Breakdown of one plan year's transactions."""
        plan = self._projection_flow.load_plan()
        ledger = self._projection_flow.load_ledger(plan)
        return self._aggregator.aggregate(
            ledger.transactions_for(year),
            group_by,
            categories=self._source.get_categories(),
            events=self._source.get_events(),
            top_n=top_n,
            transaction_type=transaction_type,
        )

    def year_type_summary(
        self,
        year: int,
        transaction_type: TransactionType,
    ) -> TypeSummary:
        """Yearly total and monthly average of one transaction type."""
        plan = self._projection_flow.load_plan()
        ledger = self._projection_flow.load_ledger(plan)
        return self._aggregator.summarize_type(ledger.transactions_for(year), transaction_type)

    def dashboard(
        self,
        projection: Optional[PlanProjection] = None,
    ) -> DashboardSummary:
        """
        Dashboard rankings over the whole plan range.

        Args:
            projection: A projection of the same source, if already computed.
        """
        plan = self._projection_flow.load_plan()
        ledger = self._projection_flow.load_ledger(plan)
        if projection is None:
            projection = self._projection_flow.project(plan, ledger)
        transactions = list(ledger.all_transactions())

        category_totals = self._aggregator.category_totals_by_type(
            transactions, self._source.get_categories()
        )

        return DashboardSummary(
            expense_categories=tuple(category_totals["expense"]),
            income_categories=tuple(category_totals["income"]),
            accounts=tuple(self._aggregator.rank_accounts(
                projection.accounts, self._source.get_accounts()
            )),
            assets=tuple(self._aggregator.rank_assets(
                projection.holdings, self._source.get_assets()
            )),
            events=tuple(self._aggregator.event_costs(
                transactions, self._source.get_events()
            )),
            investments=self._aggregator.summarize_investments(transactions),
        )


def create_flows(
    source: PlanDataSource,
    settings: Optional[EngineSettings] = None,
) -> tuple[ProjectionFlow, ReportFlow]:
    """
    Factory function to create both flows over one data source.

    Returns:
        (projection_flow, report_flow)
    """
    settings = settings or get_settings()
    validator = PlanValidator()
    return (
        ProjectionFlow(source, validator, settings),
        ReportFlow(source, validator, settings),
    )
