"""
Damage magnitude decoding

Storm Data records damage as a mantissa (PROPDMG / CROPDMG) plus a
one-character exponent code (PROPDMGEXP / CROPDMGEXP). This module turns
the pair into a single US dollar amount.

Codes missing from the table decode to None so callers can count them
instead of folding them into the totals unnoticed.
"""
import logging
from typing import Dict, Optional

from pyspark.sql import Column
from pyspark.sql import functions as F

logger = logging.getLogger(__name__)


# Keys are matched after upper-casing, which leaves digits and symbols as-is
EXPONENT_MULTIPLIERS: Dict[str, float] = {
    "": 1.0,
    "+": 1.0,
    "-": 1.0,
    "?": 1.0,
    "0": 1.0,
    "1": 1e1,
    "2": 1e2,
    "3": 1e3,
    "4": 1e4,
    "5": 1e5,
    "6": 1e6,
    "7": 1e7,
    "8": 1e8,
    "H": 1e2,
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}


def _normalize_code(exponent_code: Optional[str]) -> str:
    """Missing codes count as empty; letters are case-insensitive"""
    return (exponent_code or "").upper()


def exponent_multiplier(exponent_code: Optional[str]) -> Optional[float]:
    """Look up the power-of-ten multiplier for an exponent code"""
    return EXPONENT_MULTIPLIERS.get(_normalize_code(exponent_code))


def is_mapped_code(exponent_code: Optional[str]) -> bool:
    return _normalize_code(exponent_code) in EXPONENT_MULTIPLIERS


def decode_magnitude(
    mantissa: Optional[float],
    exponent_code: Optional[str]
) -> Optional[float]:
    """
    Decode a (mantissa, exponent code) pair into US dollars

    Args:
        mantissa: Non-negative damage magnitude (None treated as 0)
        exponent_code: Symbolic exponent code (None treated as "")

    Returns:
        mantissa * multiplier, or None if the code is unmapped
    """
    multiplier = exponent_multiplier(exponent_code)
    if multiplier is None:
        return None

    return float(mantissa or 0) * multiplier


def exponent_multiplier_column(exponent_col: str) -> Column:
    """
    Spark column resolving an exponent code column to its multiplier

    Yields null for unmapped codes, mirroring exponent_multiplier().
    """
    code = F.upper(F.coalesce(F.col(exponent_col), F.lit("")))

    expr = None
    for key, multiplier in EXPONENT_MULTIPLIERS.items():
        if expr is None:
            expr = F.when(code == key, F.lit(multiplier))
        else:
            expr = expr.when(code == key, F.lit(multiplier))

    # No otherwise(): unmapped codes stay null
    return expr


def decoded_damage_column(mantissa_col: str, exponent_col: str) -> Column:
    """
    Spark column decoding a mantissa/exponent column pair into US dollars

    Null when the exponent code is unmapped.
    """
    mantissa = F.coalesce(F.col(mantissa_col), F.lit(0.0))
    return mantissa * exponent_multiplier_column(exponent_col)
