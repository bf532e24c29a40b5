"""
Core Data Models for the Life Plan engine

These models define the records supplied by the (external) storage layer.
They are designed to:
1. Be immutable for the duration of a projection run
2. Read and write the persisted camelCase field names unchanged
3. Make every transaction shape explicit

DESIGN DECISION: A transaction is a tagged variant keyed on (type, subtype).
Each variant declares exactly the ids it needs, so a record that is missing
one fails to parse instead of being silently skipped by a chain of
optional-field checks.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_validator,
)
from pydantic.alias_generators import to_camel


RECORD_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    str_strip_whitespace=True,
    extra="ignore",
)

DEFAULT_COLOR = "#6c757d"


# =============================================================================
# PLAN SETTINGS
# =============================================================================

class PlanSettings(BaseModel):
    """
    Year range and FIRE target of a life plan.

    The range invariant (start < end) is enforced by PlanValidator at the
    settings boundary, not here, so that callers get an InvalidPlanRange
    rather than a generic schema error.
    """
    model_config = RECORD_CONFIG

    plan_start_year: int
    plan_end_year: int
    fire_target_amount: Decimal = Field(default=Decimal("0"), ge=0)
    fire_enabled: bool = False
    currency: str = "JPY"

    @model_validator(mode='before')
    @classmethod
    def flatten_fire_settings(cls, data: Any) -> Any:
        """Accept the persisted nested form fireSettings: {targetAmount, isEnabled}."""
        if isinstance(data, dict) and isinstance(data.get("fireSettings"), dict):
            fire = data["fireSettings"]
            data = {k: v for k, v in data.items() if k != "fireSettings"}
            data.setdefault("fireTargetAmount", fire.get("targetAmount", 0) or 0)
            data.setdefault("fireEnabled", bool(fire.get("isEnabled", False)))
        return data

    @property
    def years(self) -> range:
        """Plan years, inclusive of both ends."""
        return range(self.plan_start_year, self.plan_end_year + 1)

    def contains(self, year: int) -> bool:
        return self.plan_start_year <= year <= self.plan_end_year


# =============================================================================
# ENTITIES
# =============================================================================

class Account(BaseModel):
    """A cash account. Balance is signed, in the plan's single currency."""
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    initial_balance: Decimal = Decimal("0")
    memo: Optional[str] = None


class PricePoint(BaseModel):
    model_config = RECORD_CONFIG

    year: int
    price: Decimal = Field(..., ge=0)


class DividendPoint(BaseModel):
    model_config = RECORD_CONFIG

    year: int
    dividend_per_share: Decimal = Field(..., ge=0)


class AssetInfo(BaseModel):
    """
    An investable asset.

    price_history is sparse: not every plan year has an entry.
    """
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    symbol: str = ""
    price_history: tuple[PricePoint, ...] = ()
    dividend_history: tuple[DividendPoint, ...] = ()

    def price_for(self, year: int) -> Optional[Decimal]:
        """Exact-year price lookup. No carry-forward."""
        for point in self.price_history:
            if point.year == year:
                return point.price
        return None

    def dividend_per_share_for(self, year: int) -> Optional[Decimal]:
        """Exact-year dividend-per-share lookup."""
        for point in self.dividend_history:
            if point.year == year:
                return point.dividend_per_share
        return None


class FamilyMember(BaseModel):
    """A household member whose age labels the net-worth series."""
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    current_age: Optional[int] = Field(default=None, ge=0, le=150)
    birth_date: Optional[date] = None

    def age_in(self, plan_year: int, current_year: int) -> Optional[int]:
        """
        Age of this member in a plan year.

        current_age wins when stored; otherwise the birth year is used.
        """
        if self.current_age is not None:
            return self.current_age + (plan_year - current_year)
        if self.birth_date is not None:
            return plan_year - self.birth_date.year
        return None


class Category(BaseModel):
    """Grouping key for reports."""
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    type: Optional[Literal["expense", "income"]] = None
    color: str = DEFAULT_COLOR


class Event(BaseModel):
    """A life event, grouping a set of transactions for reports."""
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    year: Optional[int] = None
    transaction_ids: tuple[str, ...] = ()
    color: str = DEFAULT_COLOR


# =============================================================================
# TRANSACTIONS - tagged variants
# =============================================================================

class TransactionBase(BaseModel):
    """
    Fields shared by every transaction variant.

    amount is the per-occurrence magnitude. Its sign is ignored: direction
    comes from the variant and the account role.
    """
    model_config = RECORD_CONFIG

    id: str = Field(..., min_length=1)
    amount: Decimal
    frequency: int = Field(default=1, ge=1)
    year: int
    month: int = Field(default=1, ge=1, le=12)
    category_id: Optional[str] = None
    event_id: Optional[str] = None

    @property
    def yearly_amount(self) -> Decimal:
        """abs(amount) * frequency, never negative."""
        return abs(self.amount) * self.frequency


class ExpenseTransaction(TransactionBase):
    type: Literal["expense"] = "expense"
    to_account_id: str = Field(..., min_length=1)


class IncomeTransaction(TransactionBase):
    type: Literal["income"] = "income"
    to_account_id: str = Field(..., min_length=1)


class TransferTransaction(TransactionBase):
    type: Literal["transfer"] = "transfer"
    from_account_id: str = Field(..., min_length=1)
    to_account_id: str = Field(..., min_length=1)


class BuyTransaction(TransactionBase):
    type: Literal["investment"] = "investment"
    transaction_subtype: Literal["buy"] = "buy"
    from_account_id: str = Field(..., min_length=1)
    holding_asset_id: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0)


class SellTransaction(TransactionBase):
    type: Literal["investment"] = "investment"
    transaction_subtype: Literal["sell"] = "sell"
    to_account_id: str = Field(..., min_length=1)
    holding_asset_id: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0)


class DividendTransaction(TransactionBase):
    type: Literal["investment"] = "investment"
    transaction_subtype: Literal["dividend"] = "dividend"
    to_account_id: str = Field(..., min_length=1)
    holding_asset_id: Optional[str] = None


InvestmentTransaction = Union[BuyTransaction, SellTransaction, DividendTransaction]


def _transaction_tag(value: Any) -> Optional[str]:
    """Map a raw record or a variant instance to its union tag."""
    if isinstance(value, dict):
        kind = value.get("type")
        subtype = value.get("transactionSubtype", value.get("transaction_subtype"))
    else:
        kind = getattr(value, "type", None)
        subtype = getattr(value, "transaction_subtype", None)

    if kind == "investment":
        return f"investment:{subtype}" if subtype else None
    return kind


Transaction = Annotated[
    Union[
        Annotated[ExpenseTransaction, Tag("expense")],
        Annotated[IncomeTransaction, Tag("income")],
        Annotated[TransferTransaction, Tag("transfer")],
        Annotated[BuyTransaction, Tag("investment:buy")],
        Annotated[SellTransaction, Tag("investment:sell")],
        Annotated[DividendTransaction, Tag("investment:dividend")],
    ],
    Discriminator(_transaction_tag),
]

TRANSACTION_TYPES = (
    ExpenseTransaction,
    IncomeTransaction,
    TransferTransaction,
    BuyTransaction,
    SellTransaction,
    DividendTransaction,
)

_transaction_adapter: TypeAdapter = TypeAdapter(Transaction)


def parse_transaction(raw: Any) -> Transaction:
    """
    Parse a persisted record (camelCase dict) into its transaction variant.

    Raises pydantic.ValidationError when the record does not fit any variant,
    e.g. an expense without toAccountId.
    """
    if isinstance(raw, TRANSACTION_TYPES):
        return raw
    return _transaction_adapter.validate_python(raw)


def transaction_to_record(transaction: Transaction) -> dict:
    """Serialize a variant back to the persisted camelCase shape."""
    return transaction.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage transaction validation.

    Stage 1: Schema validation (variant, required ids, types)
    Stage 2: Semantic validation (plan range, zero amounts)
    """

    record_id: Optional[str] = Field(
        default=None,
        description="ID of the record being validated"
    )
    schema_valid: bool
    semantic_valid: bool
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
