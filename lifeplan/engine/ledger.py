"""
Transaction Ledger

Normalises the per-year transaction feed into typed variants before any
projection runs.

GUARANTEES:
- One query per plan year
- A malformed record is dropped and reported, never counted
- A year whose feed fails, for any reason, is treated as empty and reported
- A record is counted once, under its own year
- A record dated outside the plan range is dropped silently
"""

from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from lifeplan.models.diagnostic import Diagnostic, DiagnosticBuilder
from lifeplan.models.plan import PlanSettings, Transaction, parse_transaction


TransactionFetcher = Callable[[int], Iterable[Any]]


class TransactionLedger(BaseModel):
    """Typed transactions of a plan, keyed by year."""
    model_config = ConfigDict(frozen=True)

    by_year: dict[int, tuple[Transaction, ...]]
    diagnostics: tuple[Diagnostic, ...] = ()

    def transactions_for(self, year: int) -> tuple[Transaction, ...]:
        return self.by_year.get(year, ())

    def all_transactions(self) -> Iterator[Transaction]:
        """All transactions in year order, feed order within a year."""
        for year in sorted(self.by_year):
            yield from self.by_year[year]

    def __len__(self) -> int:
        return sum(len(txns) for txns in self.by_year.values())


def _record_id(raw: Any) -> Optional[str]:
    if isinstance(raw, dict) and raw.get("id") is not None:
        return str(raw["id"])
    return None


def _error_summary(error: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "record",
            "type": err["type"],
            "message": err["msg"],
        }
        for err in error.errors()
    ]


def build_ledger(fetch: TransactionFetcher, plan: PlanSettings) -> TransactionLedger:
    """
    Query the feed for every plan year and file the parsed records.

    Each record is filed under its own year. A record returned for a
    different plan year is reported as misfiled; it is re-filed unless the
    feed also returned the same id for its own year.

    Args:
        fetch: Returns the raw (or already typed) records for one year.
        plan: A validated plan; its range bounds the queries.
    """
    fetched: list[tuple[int, Transaction]] = []
    diagnostics: list[Diagnostic] = []

    for year in plan.years:
        try:
            records = list(fetch(year) or ())
        except Exception as e:
            diagnostics.append(
                DiagnosticBuilder.feed_unavailable(year, f"{type(e).__name__}: {e}")
            )
            continue

        for raw in records:
            try:
                transaction = parse_transaction(raw)
            except ValidationError as e:
                diagnostics.append(
                    DiagnosticBuilder.malformed_record(_record_id(raw), year, _error_summary(e))
                )
                continue

            if not plan.contains(transaction.year):
                continue
            fetched.append((year, transaction))

    filed_ids = {t.id for fetched_year, t in fetched if t.year == fetched_year}
    by_year: dict[int, list[Transaction]] = {year: [] for year in plan.years}

    for fetched_year, transaction in fetched:
        if transaction.year != fetched_year:
            refiled = transaction.id not in filed_ids
            diagnostics.append(DiagnosticBuilder.misfiled_record(
                transaction.id, fetched_year, transaction.year, refiled
            ))
            if not refiled:
                continue
            filed_ids.add(transaction.id)
        by_year[transaction.year].append(transaction)

    return TransactionLedger(
        by_year={year: tuple(txns) for year, txns in by_year.items()},
        diagnostics=tuple(diagnostics),
    )


def ledger_from_transactions(
    transactions: Iterable[Any],
    plan: PlanSettings,
) -> TransactionLedger:
    """
    Build a ledger from a flat list, filing each record under its own year.
    """
    grouped: dict[int, list[Any]] = {year: [] for year in plan.years}
    orphans: list[Any] = []
    for raw in transactions:
        year = raw.get("year") if isinstance(raw, dict) else getattr(raw, "year", None)
        try:
            year = int(year)
        except (TypeError, ValueError):
            orphans.append(raw)
            continue
        if year in grouped:
            grouped[year].append(raw)

    # Records with no usable year still get parsed so they are reported.
    if orphans:
        grouped[plan.plan_start_year] = orphans + grouped[plan.plan_start_year]

    return build_ledger(lambda year: grouped[year], plan)


YearFeed = Union[TransactionLedger, Mapping[int, Sequence[Transaction]]]


def year_transactions(
    feed: YearFeed,
    year: int,
    plan: PlanSettings,
) -> tuple[Transaction, ...]:
    """
    Transactions of one plan year from a ledger or a plain year mapping.

    A missing year is empty. Records dated outside the plan are dropped.
    """
    if isinstance(feed, TransactionLedger):
        transactions = feed.transactions_for(year)
    else:
        transactions = feed.get(year) or ()
    return tuple(t for t in transactions if plan.contains(t.year))
