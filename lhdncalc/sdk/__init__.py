"""LHDN Calc SDK - Core functionality for Malaysian tax calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    ProfileNotFoundError,
    # XDG paths
    get_data_path,
)

from .money import (
    InvalidInputError,
    parse_amount,
    format_rm,
)

from .schemas import (
    DeductionRecord,
    PcbRecord,
    Commitment,
    CurrentPayment,
    FREQUENCIES,
    parse_record,
)

from .taxes import (
    TaxRules,
    TaxRulesError,
    load_tax_rules,
    calculate_tax,
    TaxCalculation,
)

from .pcb import PcbSummary, summarize_pcb
from .income import resolve_gross_income
from .commitments import CommitmentPaymentProjection, project as project_commitment

from . import records

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "ProfileNotFoundError",
    "get_data_path",
    # Input boundary
    "InvalidInputError",
    "parse_amount",
    "format_rm",
    "DeductionRecord",
    "PcbRecord",
    "Commitment",
    "CurrentPayment",
    "FREQUENCIES",
    "parse_record",
    # Tax
    "TaxRules",
    "TaxRulesError",
    "load_tax_rules",
    "calculate_tax",
    "TaxCalculation",
    "PcbSummary",
    "summarize_pcb",
    "resolve_gross_income",
    # Commitments
    "CommitmentPaymentProjection",
    "project_commitment",
    # Records
    "records",
]
