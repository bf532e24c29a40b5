"""
Report Aggregation Engine

DESIGN DECISION: Reports only roll up what the engine already computed or
what the transaction feed actually contains. Presentation code formats the
rows; it never recomputes them.

GUARANTEES:
- Totals reconcile: unmatched group keys land in an "other" bucket
  instead of being dropped
- Percentages are shares of the full total, 0 when that total is 0
- Rows are ranked by total, largest first; ties keep first-seen order
"""

from decimal import Decimal
from typing import Container, Iterable, Literal, Mapping, Optional, Sequence

from lifeplan.config import EngineSettings, get_settings
from lifeplan.models.plan import (
    Account,
    AssetInfo,
    BuyTransaction,
    Category,
    DividendTransaction,
    Event,
    ExpenseTransaction,
    SellTransaction,
    Transaction,
)
from lifeplan.models.projection import (
    ZERO,
    AccountProjection,
    HoldingProjection,
    InvestmentSummary,
    RankedItem,
    ReportRow,
    TypeSummary,
)


GroupBy = Literal["category", "event"]
TransactionType = Literal["expense", "income", "transfer", "investment"]

OTHER_KEY = "other"


class ReportAggregationError(Exception):
    """Error during report aggregation."""
    pass


def _event_key(
    transaction: Transaction,
    known_events: Container[str],
    linked: Mapping[str, str],
) -> Optional[str]:
    """eventId when it names a known event, else the event listing the transaction."""
    if transaction.event_id in known_events:
        return transaction.event_id
    return linked.get(transaction.id)


class ReportAggregator:
    """
    Groups transactions and projections into ranked rollups for display.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings or get_settings()

    def aggregate(
        self,
        transactions: Iterable[Transaction],
        group_by: GroupBy,
        categories: Sequence[Category] = (),
        events: Sequence[Event] = (),
        top_n: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[ReportRow]:
        """
        Roll up yearly amounts by category or event.

        Args:
            transactions: Transactions to roll up
            group_by: "category" or "event"
            categories: Known categories (labels and colors)
            events: Known events (labels, colors and linked transaction ids)
            top_n: Keep only the largest rows; percentages still use the full total
            transaction_type: Only roll up this transaction type

        Returns:
            Rows sorted by total, descending
        """
        if group_by == "category":
            labels = {c.id: (c.name, c.color) for c in categories}
        elif group_by == "event":
            labels = {e.id: (e.name, e.color) for e in events}
        else:
            raise ReportAggregationError(f"Unknown group_by: {group_by}")

        event_by_transaction = {
            txn_id: event.id for event in events for txn_id in event.transaction_ids
        }

        totals: dict[str, Decimal] = {}
        for transaction in transactions:
            if transaction_type and transaction.type != transaction_type:
                continue

            if group_by == "category":
                key = transaction.category_id
            else:
                key = _event_key(transaction, labels, event_by_transaction)

            if key not in labels:
                key = OTHER_KEY

            totals[key] = totals.get(key, ZERO) + transaction.yearly_amount

        grand_total = sum(totals.values(), ZERO)

        rows = []
        for key, total in totals.items():
            if key == OTHER_KEY:
                label = self._settings.other_bucket_label
                color = self._settings.other_bucket_color
            else:
                label, color = labels[key]
            rows.append(ReportRow(
                key=key,
                label=label,
                color=color,
                total=total,
                percentage=self._percentage(total, grand_total),
            ))

        rows.sort(key=lambda row: row.total, reverse=True)
        if top_n is not None:
            rows = rows[:top_n]
        return rows

    def category_breakdown(
        self,
        transactions: Iterable[Transaction],
        categories: Sequence[Category],
        transaction_type: Optional[TransactionType] = None,
    ) -> list[ReportRow]:
        """Category breakdown truncated to the configured report size."""
        return self.aggregate(
            transactions,
            "category",
            categories=categories,
            top_n=self._settings.report_top_n,
            transaction_type=transaction_type,
        )

    def category_totals_by_type(
        self,
        transactions: Iterable[Transaction],
        categories: Sequence[Category],
        top_n: Optional[int] = None,
    ) -> dict[str, list[RankedItem]]:
        """
        Top expense and income categories.

        Only transactions whose category is known and typed are counted.
        Expense amounts are reported negative.
        """
        if top_n is None:
            top_n = self._settings.dashboard_top_n
        by_id = {c.id: c for c in categories}
        totals: dict[str, Decimal] = {}

        for transaction in transactions:
            category = by_id.get(transaction.category_id)
            if category is None or category.type is None:
                continue
            totals[category.id] = totals.get(category.id, ZERO) + transaction.yearly_amount

        result: dict[str, list[RankedItem]] = {"expense": [], "income": []}
        for category_type in ("expense", "income"):
            ranked = sorted(
                (
                    (cid, total) for cid, total in totals.items()
                    if by_id[cid].type == category_type
                ),
                key=lambda item: item[1],
                reverse=True,
            )[:top_n]
            sign = -1 if category_type == "expense" else 1
            result[category_type] = [
                RankedItem(key=cid, name=by_id[cid].name, amount=sign * total)
                for cid, total in ranked
            ]
        return result

    def event_costs(
        self,
        transactions: Iterable[Transaction],
        events: Sequence[Event],
        top_n: Optional[int] = None,
    ) -> list[RankedItem]:
        """
        Expense cost of each event, largest first.

        Only expenses count; events with no cost are left out.
        """
        if top_n is None:
            top_n = self._settings.dashboard_top_n
        costs: dict[str, Decimal] = {event.id: ZERO for event in events}
        linked = {
            txn_id: event.id for event in events for txn_id in event.transaction_ids
        }

        for transaction in transactions:
            if not isinstance(transaction, ExpenseTransaction):
                continue
            event_id = _event_key(transaction, costs, linked)
            if event_id in costs:
                costs[event_id] += transaction.yearly_amount

        names = {event.id: event.name for event in events}
        items = [
            RankedItem(key=event_id, name=names[event_id], amount=cost)
            for event_id, cost in costs.items()
            if cost > 0
        ]
        items.sort(key=lambda item: item.amount, reverse=True)
        return items[:top_n]

    def rank_accounts(
        self,
        projections: Sequence[AccountProjection],
        accounts: Sequence[Account],
        top_n: Optional[int] = None,
    ) -> list[RankedItem]:
        """Accounts by final projected balance, largest first."""
        if top_n is None:
            top_n = self._settings.dashboard_top_n
        names = {account.id: account.name for account in accounts}
        items = [
            RankedItem(
                key=p.account_id,
                name=names.get(p.account_id, p.account_id),
                amount=p.final_balance,
            )
            for p in projections
        ]
        items.sort(key=lambda item: item.amount, reverse=True)
        return items[:top_n]

    def rank_assets(
        self,
        holdings: Sequence[HoldingProjection],
        assets: Sequence[AssetInfo],
        top_n: Optional[int] = None,
    ) -> list[RankedItem]:
        """Assets by realized gain, largest first."""
        if top_n is None:
            top_n = self._settings.dashboard_top_n
        names = {asset.id: asset.name for asset in assets}
        items = [
            RankedItem(
                key=h.asset_id,
                name=names.get(h.asset_id, h.asset_id),
                amount=h.realized_gain,
            )
            for h in holdings
        ]
        items.sort(key=lambda item: item.amount, reverse=True)
        return items[:top_n]

    @staticmethod
    def summarize_investments(transactions: Iterable[Transaction]) -> InvestmentSummary:
        """Buy, sell and dividend totals and counts."""
        totals = {"buy": ZERO, "sell": ZERO, "dividend": ZERO}
        counts = {"buy": 0, "sell": 0, "dividend": 0}

        for transaction in transactions:
            if isinstance(transaction, BuyTransaction):
                subtype = "buy"
            elif isinstance(transaction, SellTransaction):
                subtype = "sell"
            elif isinstance(transaction, DividendTransaction):
                subtype = "dividend"
            else:
                continue
            totals[subtype] += transaction.yearly_amount
            counts[subtype] += 1

        return InvestmentSummary(
            buy_total=totals["buy"],
            sell_total=totals["sell"],
            dividend_total=totals["dividend"],
            buy_count=counts["buy"],
            sell_count=counts["sell"],
            dividend_count=counts["dividend"],
        )

    @staticmethod
    def summarize_type(
        transactions: Iterable[Transaction],
        transaction_type: TransactionType,
    ) -> TypeSummary:
        """Yearly total of one transaction type and its monthly average."""
        matching = [t for t in transactions if t.type == transaction_type]
        total = sum((t.yearly_amount for t in matching), ZERO)
        return TypeSummary(
            transaction_type=transaction_type,
            total=total,
            monthly_average=total / 12,
            count=len(matching),
        )

    @staticmethod
    def _percentage(total: Decimal, grand_total: Decimal) -> Decimal:
        if grand_total == 0:
            return ZERO
        return total / grand_total * 100
