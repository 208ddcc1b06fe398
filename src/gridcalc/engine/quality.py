"""
Data quality transforms for single cell values.

These are the cleanup actions offered from the toolbar's Data menu. Unlike
formula functions they take a value rather than a cell reference, and the
store writes the result back as a literal.
"""

from __future__ import annotations

import re

import pandas as pd

from gridcalc.engine.evaluator import ERROR_TOKEN
from gridcalc.engine.expression import format_fixed, is_number
from gridcalc.engine.functions import proper


INVALID_DATE_TOKEN = "#INVALID_DATE!"

DATA_QUALITY_FUNCTIONS = (
    "TRIM",
    "UPPER",
    "LOWER",
    "PROPER",
    "LEN",
    "REPLACE_SPACES",
    "CURRENCY_USD",
    "PERCENTAGE",
)


def apply_data_quality_function(func: str, value: str) -> str:
    """Apply a named cleanup transform to a value.

    Args:
        func: Transform name, case-insensitive. Unknown names leave the value
            unchanged.
        value: Cell display value

    Returns:
        The transformed value. CURRENCY_USD and PERCENTAGE return
        ``#ERROR!`` for non-numeric input.
    """
    name = func.upper()

    if name == "TRIM":
        return value.strip()
    if name == "UPPER":
        return value.upper()
    if name == "LOWER":
        return value.lower()
    if name == "PROPER":
        return proper(value)
    if name == "LEN":
        return str(len(value))
    if name == "REPLACE_SPACES":
        return re.sub(r"\s+", "_", value)
    if name == "CURRENCY_USD":
        if not is_number(value):
            return ERROR_TOKEN
        return f"${format_fixed(value, 2)}"
    if name == "PERCENTAGE":
        if not is_number(value):
            return ERROR_TOKEN
        return f"{format_fixed(float(value) * 100, 1)}%"
    return value


def format_date(date_string: str, fmt: str) -> str:
    """Reformat a date string.

    Args:
        date_string: Any date text pandas can parse (ISO, ``Jan 5 2024`` ...)
        fmt: ``SHORT`` (1/5/2024), ``LONG`` (January 5, 2024) or ``ISO``
            (2024-01-05). Other values fall back to ISO.

    Returns:
        The formatted date, or ``#INVALID_DATE!`` if it cannot be parsed
    """
    try:
        ts = pd.to_datetime(date_string)
    except (ValueError, TypeError, OverflowError):
        return INVALID_DATE_TOKEN
    if pd.isna(ts):
        return INVALID_DATE_TOKEN

    style = fmt.upper()
    if style == "SHORT":
        return f"{ts.month}/{ts.day}/{ts.year}"
    if style == "LONG":
        return f"{ts.strftime('%B')} {ts.day}, {ts.year}"
    return ts.strftime("%Y-%m-%d")
