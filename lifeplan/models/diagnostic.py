"""
Diagnostic Models for the Life Plan engine

Conditions the engine tolerates but must not hide:
1. Malformed transaction records (excluded, not counted)
2. Transaction feeds that could not be read for a year
3. Held assets with no price entry for a year (valued at zero)
4. Sells larger than the held quantity (clamped at zero)
5. Records returned for a plan year other than their own

DESIGN DECISION: Diagnostics carry no timestamps or random ids.
They are part of projection results, and results must be identical
for identical inputs.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticType(str, Enum):
    """Kinds of tolerated conditions."""
    MALFORMED_RECORD = "malformed_record"
    FEED_UNAVAILABLE = "feed_unavailable"
    PRICE_GAP = "price_gap"
    OVER_SELL = "over_sell"
    MISFILED_RECORD = "misfiled_record"


class DiagnosticSeverity(str, Enum):
    """Severity level for diagnostics."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """
    A single tolerated condition found during a projection.
    """
    model_config = ConfigDict(frozen=True)

    diagnostic_type: DiagnosticType = Field(
        ...,
        description="Kind of condition"
    )
    severity: DiagnosticSeverity = Field(
        default=DiagnosticSeverity.WARNING,
        description="Diagnostic severity"
    )

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'asset', 'feed')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this diagnostic relates to"
    )
    year: Optional[int] = Field(
        default=None,
        description="Plan year the condition was found in"
    )

    message: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional condition-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "diagnostic_type": self.diagnostic_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "year": self.year,
            "message": self.message,
            "details": self.details,
        }


class DiagnosticBuilder:
    """
    Helper class to build diagnostics with common patterns.

    Usage:
        diagnostic = DiagnosticBuilder.price_gap(asset_id, year, quantity)
        diagnostic = DiagnosticBuilder.over_sell(asset_id, txn_id, year, "10", "4")
    """

    @staticmethod
    def malformed_record(
        record_id: Optional[str],
        year: int,
        errors: list[dict],
    ) -> Diagnostic:
        return Diagnostic(
            diagnostic_type=DiagnosticType.MALFORMED_RECORD,
            entity_type="transaction",
            entity_id=record_id,
            year=year,
            message=(
                f"Transaction {record_id or '<no id>'} in {year} is malformed "
                f"and was excluded ({len(errors)} issues)"
            ),
            details={"errors": errors},
        )

    @staticmethod
    def feed_unavailable(
        year: int,
        error_message: str,
    ) -> Diagnostic:
        return Diagnostic(
            diagnostic_type=DiagnosticType.FEED_UNAVAILABLE,
            severity=DiagnosticSeverity.ERROR,
            entity_type="feed",
            year=year,
            message=f"Transactions for {year} could not be read; year treated as empty",
            details={"error_message": error_message},
        )

    @staticmethod
    def price_gap(
        asset_id: str,
        year: int,
        quantity: str,
    ) -> Diagnostic:
        return Diagnostic(
            diagnostic_type=DiagnosticType.PRICE_GAP,
            entity_type="asset",
            entity_id=asset_id,
            year=year,
            message=f"No price for asset {asset_id} in {year}; held quantity valued at zero",
            details={"quantity": quantity},
        )

    @staticmethod
    def over_sell(
        asset_id: str,
        transaction_id: str,
        year: int,
        requested_quantity: str,
        held_quantity: str,
    ) -> Diagnostic:
        return Diagnostic(
            diagnostic_type=DiagnosticType.OVER_SELL,
            entity_type="asset",
            entity_id=asset_id,
            year=year,
            message=(
                f"Sell {transaction_id} of {requested_quantity} exceeds held "
                f"{held_quantity} for asset {asset_id}; quantity clamped at zero"
            ),
            details={
                "transaction_id": transaction_id,
                "requested_quantity": requested_quantity,
                "held_quantity": held_quantity,
            },
        )

    @staticmethod
    def misfiled_record(
        record_id: str,
        fetched_year: int,
        record_year: int,
        refiled: bool,
    ) -> Diagnostic:
        action = f"filed under {record_year}" if refiled else "dropped as a duplicate"
        return Diagnostic(
            diagnostic_type=DiagnosticType.MISFILED_RECORD,
            entity_type="transaction",
            entity_id=record_id,
            year=fetched_year,
            message=(
                f"Transaction {record_id} dated {record_year} was returned "
                f"for {fetched_year}; {action}"
            ),
            details={"record_year": record_year, "refiled": refiled},
        )
