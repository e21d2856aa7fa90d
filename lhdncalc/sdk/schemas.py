"""Pydantic schemas for user-entered tax records.

These models are the parse/validate boundary in front of the tax engine.
Raw values from the CLI, JSON record files or MCP tool calls are turned
into typed records with sen-precise Decimal amounts. Schemas use
extra='forbid' so typos in record files cause clear errors rather than
silent ignoring.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .money import ZERO, InvalidInputError, parse_amount

ModelT = TypeVar("ModelT", bound=BaseModel)


def _money(value: Any) -> Decimal:
    return parse_amount(value)


def _positive_money(value: Any) -> Decimal:
    return parse_amount(value, allow_zero=False)


def _optional_money(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    return parse_amount(value)


Money = Annotated[Decimal, BeforeValidator(_money)]
PositiveMoney = Annotated[Decimal, BeforeValidator(_positive_money)]
OptionalMoney = Annotated[Decimal, BeforeValidator(_optional_money)]

Frequency = Literal["monthly", "quarterly", "yearly", "one_time"]
FREQUENCIES = ("monthly", "quarterly", "yearly", "one_time")


# =============================================================================
# Relief deductions
# =============================================================================


class DeductionRecord(BaseModel):
    """A single relief claim entered by the user.

    The for_* attribution flags are informational only; annual limits are
    applied per category regardless of who the expense was for.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Optional[str] = None
    category: str = Field(..., min_length=1, description="LHDN relief category code")
    amount: PositiveMoney = Field(..., description="Claimed amount in RM")
    year: int = Field(..., ge=2000, le=2100, description="Year of assessment")
    month: Optional[int] = Field(default=None, ge=1, le=12, description="Month incurred")
    description: Optional[str] = None
    for_self: bool = True
    for_spouse: bool = False
    for_child: bool = False
    for_parent: bool = False

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("category must not be blank")
        return value


# =============================================================================
# Monthly PCB (Potongan Cukai Bulanan) records
# =============================================================================


class PcbRecord(BaseModel):
    """Monthly payslip figures and the PCB withheld for that month."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    gross_salary: OptionalMoney = ZERO
    bonus: OptionalMoney = ZERO
    allowances: OptionalMoney = ZERO
    commission: OptionalMoney = ZERO
    epf_employee: OptionalMoney = ZERO
    socso: OptionalMoney = ZERO
    eis: OptionalMoney = ZERO
    zakat: OptionalMoney = ZERO
    pcb_amount: Money = Field(..., description="PCB withheld this month")
    notes: Optional[str] = None

    @property
    def total_income(self) -> Decimal:
        """Salary, bonus, allowances and commission for the month."""
        return self.gross_salary + self.bonus + self.allowances + self.commission


# =============================================================================
# Recurring commitments
# =============================================================================


class CurrentPayment(BaseModel):
    """Payment status of a commitment for the current period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_paid: bool = False


class Commitment(BaseModel):
    """A recurring (or one-off) payment obligation such as a loan or bill."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Optional[str] = None
    name: str = ""
    commitment_type: str = "other"
    amount: Money
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = True
    current_payment: Optional[CurrentPayment] = None

    @property
    def is_current_paid(self) -> bool:
        return bool(self.current_payment and self.current_payment.is_paid)


# =============================================================================
# Parsing helpers
# =============================================================================


def _format_validation_errors(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "root"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_record(model: Type[ModelT], data: Any) -> ModelT:
    """Validate raw data into a record model.

    Args:
        model: Target schema class (DeductionRecord, PcbRecord, Commitment)
        data: Dict of raw values, or an instance of the model

    Returns:
        Validated model instance

    Raises:
        InvalidInputError: If validation fails
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid {model.__name__}: {_format_validation_errors(e)}") from e


def parse_records(model: Type[ModelT], items: Any) -> list[ModelT]:
    """Validate a sequence of raw records; see parse_record()."""
    return [parse_record(model, item) for item in items or []]
