"""Tax rules loading.

Each year of assessment has its own YAML file (tax_rules/YYYY.yaml) holding
the progressive bracket schedule and the LHDN relief categories in force
that year. Rules are configuration, not code: a new YA is supported by
adding a file, never by touching the calculation.
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config import get_setting
from .schemas import TaxRules

logger = logging.getLogger(__name__)


class TaxRulesError(Exception):
    """Raised when tax rules are missing or malformed."""
    pass


def get_rules_dir() -> Path:
    """Get the tax rules directory.

    Uses settings.json "rules_dir" if set, else the rules bundled with
    the package.
    """
    custom = get_setting("rules_dir")
    if custom:
        return Path(custom).expanduser()
    return Path(__file__).parent.parent.parent / "tax_rules"  # taxes -> sdk -> lhdncalc


def get_available_years(rules_dir: Path = None) -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = rules_dir or get_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


@lru_cache(maxsize=None)
def _load_rules_file(path: Path) -> TaxRules:
    logger.debug(f"loading tax rules from {path}")
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TaxRulesError(f"Tax rules file is not valid YAML: {path}\n{e}") from e

    if not isinstance(raw, dict):
        raise TaxRulesError(f"Tax rules file must contain a mapping: {path}")

    try:
        return TaxRules.model_validate(raw)
    except ValidationError as e:
        raise TaxRulesError(f"Tax rules file is invalid: {path}\n{e}") from e


def load_tax_rules_file(path: Path) -> TaxRules:
    """Load and validate a single tax rules file.

    Raises:
        TaxRulesError: If the file is missing, unreadable or invalid
    """
    path = Path(path).resolve()
    if not path.exists():
        raise TaxRulesError(f"Tax rules file not found: {path}")
    return _load_rules_file(path)


def load_tax_rules(year: int | str) -> TaxRules:
    """Load tax rules for a year of assessment.

    If the year has no rules file, falls back to the most recent earlier
    year (schedules are usually carried forward) and logs a warning.

    Raises:
        TaxRulesError: If no file exists for the year or any earlier year
    """
    target_year = int(year)
    rules_dir = get_rules_dir()
    available_years = get_available_years(rules_dir)

    candidate_years = [y for y in available_years if y <= target_year]
    if not candidate_years:
        raise TaxRulesError(
            f"No tax rules for YA {target_year} in {rules_dir} "
            f"(available: {', '.join(str(y) for y in sorted(available_years)) or 'none'})"
        )

    rules_year = candidate_years[0]
    if rules_year != target_year:
        logger.warning(f"No tax rules for YA {target_year}, using YA {rules_year} rules")

    return load_tax_rules_file(rules_dir / f"{rules_year}.yaml")


def clear_rules_cache() -> None:
    """Drop cached rules so edited files are re-read."""
    _load_rules_file.cache_clear()
