"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to the progressive tax schedule and the LHDN relief categories for a year
of assessment.
"""

from decimal import Decimal
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from ..money import to_decimal

ReliefType = Literal["relief", "deduction", "rebate"]
RELIEF_TYPES = ("relief", "deduction", "rebate")


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return to_decimal(value, "tax rule value")


RuleDecimal = Annotated[Decimal, BeforeValidator(_decimal)]


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[RuleDecimal] = Field(default=None, description="Upper bound (None if 'over' bracket)")
    over: Optional[RuleDecimal] = Field(default=None, description="Lower bound for top bracket")
    rate: RuleDecimal = Field(..., ge=0, le=1, description="Marginal rate as decimal")

    @model_validator(mode="after")
    def check_bound(self) -> "TaxBracket":
        if (self.up_to is None) == (self.over is None):
            raise ValueError("bracket needs exactly one of 'up_to' or 'over'")
        return self


class ReliefCategory(BaseModel):
    """LHDN relief, deduction or rebate category.

    annual_limit of None means the category is uncapped (e.g. zakat,
    professional membership).
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(..., min_length=1)
    name: str
    name_ms: Optional[str] = None
    annual_limit: Optional[RuleDecimal] = Field(default=None, ge=0)
    relief_type: ReliefType = "relief"
    applicable_to: Literal["individual", "spouse", "child", "parent", "all"] = "individual"
    requires_receipt: bool = False
    sort_order: int = 0

    @property
    def is_capped(self) -> bool:
        return self.annual_limit is not None


class TaxRules(BaseModel):
    """Complete tax rules for a year of assessment."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: int
    currency: str = "MYR"
    tax_brackets: list[TaxBracket] = Field(..., min_length=1)
    relief_categories: list[ReliefCategory] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_schedule(self) -> "TaxRules":
        """Brackets must ascend and end with a single 'over' bracket."""
        *lower_brackets, top = self.tax_brackets
        if top.over is None:
            raise ValueError("last tax bracket must be an 'over' bracket")

        previous = Decimal("0")
        for bracket in lower_brackets:
            if bracket.up_to is None:
                raise ValueError("only the last tax bracket may use 'over'")
            if bracket.up_to <= previous:
                raise ValueError(f"tax brackets must ascend: {bracket.up_to} <= {previous}")
            previous = bracket.up_to

        if top.over != previous:
            raise ValueError(f"top bracket 'over' ({top.over}) must equal last 'up_to' ({previous})")

        codes = [c.code for c in self.relief_categories]
        duplicates = sorted({c for c in codes if codes.count(c) > 1})
        if duplicates:
            raise ValueError(f"duplicate relief category codes: {', '.join(duplicates)}")

        return self

    def get_category(self, code: str) -> Optional[ReliefCategory]:
        """Look up a relief category by code (case-insensitive)."""
        code = code.strip().upper()
        for category in self.relief_categories:
            if category.code == code:
                return category
        return None

    def categories_by_type(self, relief_type: ReliefType) -> list[ReliefCategory]:
        return [c for c in self.relief_categories if c.relief_type == relief_type]
