"""
Data Models Package

This package contains all Pydantic models used by the Life Plan engine.
All data flowing into and out of the engine conforms to these schemas.
"""

from lifeplan.models.plan import (
    Account,
    AssetInfo,
    BuyTransaction,
    Category,
    DividendPoint,
    DividendTransaction,
    Event,
    ExpenseTransaction,
    FamilyMember,
    IncomeTransaction,
    InvestmentTransaction,
    PlanSettings,
    PricePoint,
    SellTransaction,
    Transaction,
    TransferTransaction,
    parse_transaction,
    transaction_to_record,
    ValidationIssue,
    ValidationResult,
)
from lifeplan.models.diagnostic import (
    Diagnostic,
    DiagnosticBuilder,
    DiagnosticSeverity,
    DiagnosticType,
)
from lifeplan.models.projection import (
    AccountProjection,
    BalancePoint,
    Classification,
    DashboardSummary,
    DividendSeries,
    DividendYearPoint,
    GoalResult,
    HoldingPoint,
    HoldingProjection,
    HoldingState,
    InvestmentSummary,
    NetWorthPoint,
    PlanProjection,
    RankedItem,
    ReportRow,
    TypeSummary,
)

__all__ = [
    # Plan records
    "Account",
    "AssetInfo",
    "BuyTransaction",
    "Category",
    "DividendPoint",
    "DividendTransaction",
    "Event",
    "ExpenseTransaction",
    "FamilyMember",
    "IncomeTransaction",
    "InvestmentTransaction",
    "PlanSettings",
    "PricePoint",
    "SellTransaction",
    "Transaction",
    "TransferTransaction",
    "parse_transaction",
    "transaction_to_record",
    "ValidationIssue",
    "ValidationResult",
    # Diagnostics
    "Diagnostic",
    "DiagnosticBuilder",
    "DiagnosticSeverity",
    "DiagnosticType",
    # Projection results
    "AccountProjection",
    "BalancePoint",
    "Classification",
    "DashboardSummary",
    "DividendSeries",
    "DividendYearPoint",
    "GoalResult",
    "HoldingPoint",
    "HoldingProjection",
    "HoldingState",
    "InvestmentSummary",
    "NetWorthPoint",
    "PlanProjection",
    "RankedItem",
    "ReportRow",
    "TypeSummary",
]
