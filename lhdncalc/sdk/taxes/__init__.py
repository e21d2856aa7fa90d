"""taxes - Malaysian personal income tax computation.

Scope:
- Year-of-assessment rules (bracket schedule, relief categories)
- Relief aggregation against annual limits
- Progressive tax on chargeable income
- Refund / owed resolution against PCB withheld

Constraints:
- Pure calculation - no records access, receives data and returns results
- Year-specific rules loaded from tax_rules/{year}.yaml

Usage:
    from lhdncalc.sdk.taxes import calculate_tax, load_tax_rules

    rules = load_tax_rules(2024)
    calc = calculate_tax(2024, gross_income="84000", deductions=[...],
                         pcb_records=[...], rules=rules)
"""

# Rules schemas and loading
from .schemas import TaxBracket, ReliefCategory, TaxRules, RELIEF_TYPES
from .rules import (
    TaxRulesError,
    get_available_years,
    load_tax_rules,
    load_tax_rules_file,
    clear_rules_cache,
)

# Computation
from .brackets import BracketSlice, TaxComputation, compute_tax
from .reliefs import (
    CategoryBreakdown,
    aggregate,
    sort_for_display,
    summarize_by_type,
    unknown_categories,
)
from .resolution import Resolution, resolve
from .calculator import TaxCalculation, TaxProjection, calculate_tax

__all__ = [
    # Rules
    "TaxBracket",
    "ReliefCategory",
    "TaxRules",
    "RELIEF_TYPES",
    "TaxRulesError",
    "get_available_years",
    "load_tax_rules",
    "load_tax_rules_file",
    "clear_rules_cache",
    # Brackets
    "BracketSlice",
    "TaxComputation",
    "compute_tax",
    # Reliefs
    "CategoryBreakdown",
    "aggregate",
    "sort_for_display",
    "summarize_by_type",
    "unknown_categories",
    # Resolution
    "Resolution",
    "resolve",
    # Full calculation
    "TaxCalculation",
    "TaxProjection",
    "calculate_tax",
]
