"""
Built-in spreadsheet functions.

Each function receives the formula text (leading '=' already stripped) and
the cell map, and returns the display string. Argument extraction is
regex-based and shallow:

- SUM / AVERAGE / MAX / MIN / COUNT: the first ``(REF:REF)`` token in the
  text is the range
- CONCATENATE: arguments split on every comma, no nesting awareness
- IF: three segments captured by a single regex, so values containing
  commas are not supported
- UPPER / LOWER / TRIM / PROPER / LEN: the first ``(REF)`` token names the
  source cell

Malformed arguments raise FormulaError; the evaluator turns that into the
``#ERROR!`` token.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping

import pandas as pd

from gridcalc.engine.expression import (
    evaluate_expression,
    format_fixed,
    format_number,
    is_number,
    is_truthy,
    quote_text,
)
from gridcalc.exceptions import FormulaError
from gridcalc.spreadsheet.model import Range

REFERENCE_RE = re.compile(r"[A-Z]+[0-9]+")
_FULL_REFERENCE_RE = re.compile(r"^[A-Z]+[0-9]+$")
_RANGE_RE = re.compile(r"\(([A-Z]+[0-9]+):([A-Z]+[0-9]+)\)")
_SINGLE_REF_RE = re.compile(r"\(([A-Z]+[0-9]+)\)")
_CONCATENATE_RE = re.compile(r"CONCATENATE\((.*)\)")
_IF_RE = re.compile(r"IF\((.*),(.*),(.*)\)")

# A cell map holds Cell objects; bare display strings are accepted as well
Cells = Mapping[str, Any]
FunctionImpl = Callable[[str, Cells], str]


def cell_value(cells: Cells, cell_id: str) -> str:
    """Return the display value of a cell, or ``""`` if it is absent."""
    cell = cells.get(cell_id)
    if cell is None:
        return ""
    return str(getattr(cell, "value", cell))


def resolve_argument(param: str, cells: Cells) -> str:
    """Resolve a function argument to text.

    A cell reference yields that cell's value, a double-quoted literal yields
    its contents, and anything else is returned as written.
    """
    param = param.strip()
    if _FULL_REFERENCE_RE.match(param):
        return cell_value(cells, param)
    if param.startswith('"') and param.endswith('"'):
        return param[1:-1]
    return param


def substitute_references(expression: str, cells: Cells) -> str:
    """Replace every cell reference with its value as a literal.

    Numeric values are substituted bare, negative ones in parentheses so
    that ``A1^2`` with A1 = -3 is 9. Anything else becomes a quoted string.
    Empty and missing cells read as ``0``.
    """
    def _replace(m: re.Match[str]) -> str:
        value = cell_value(cells, m.group(0)) or "0"
        if not is_number(value):
            return quote_text(value)
        value = value.strip()
        return f"({value})" if value.startswith("-") else value

    return REFERENCE_RE.sub(_replace, expression)


def _expand_range(expression: str) -> List[str]:
    match = _RANGE_RE.search(expression)
    if not match:
        return []
    return list(Range.from_a1(f"{match.group(1)}:{match.group(2)}").identifiers())


def _range_numbers(expression: str, cells: Cells) -> pd.Series:
    """Coerce the range's values to numbers; non-numeric cells become NaN.

    A value counts as numeric exactly when ``is_number`` accepts it.
    """
    cell_ids = _expand_range(expression)
    if not cell_ids:
        raise FormulaError(f"No cell range in {expression!r}")
    raw = pd.Series([cell_value(cells, cid).strip() for cid in cell_ids], dtype=object)
    return pd.to_numeric(raw.where(raw.map(is_number)), errors="coerce")


def sum_range(expression: str, cells: Cells) -> str:
    """SUM(A1:B3): non-numeric and empty cells count as 0."""
    return format_number(_range_numbers(expression, cells).sum())


def average_range(expression: str, cells: Cells) -> str:
    """AVERAGE(A1:B3): mean of numeric cells, two decimals, ``0`` if none."""
    numbers = _range_numbers(expression, cells).dropna()
    if numbers.empty:
        return "0"
    return format_fixed(numbers.mean(), 2)


def max_range(expression: str, cells: Cells) -> str:
    numbers = _range_numbers(expression, cells).dropna()
    if numbers.empty:
        return "0"
    return format_number(numbers.max())


def min_range(expression: str, cells: Cells) -> str:
    numbers = _range_numbers(expression, cells).dropna()
    if numbers.empty:
        return "0"
    return format_number(numbers.min())


def count_range(expression: str, cells: Cells) -> str:
    """COUNT(A1:B3): number of cells holding a number."""
    return str(int(_range_numbers(expression, cells).count()))


def concatenate(expression: str, cells: Cells) -> str:
    match = _CONCATENATE_RE.search(expression)
    if not match:
        raise FormulaError(f"Malformed CONCATENATE: {expression!r}")
    return "".join(resolve_argument(part, cells) for part in match.group(1).split(","))


def if_function(expression: str, cells: Cells) -> str:
    """IF(condition,trueValue,falseValue).

    The condition is evaluated as a general expression after reference
    substitution; the chosen branch is resolved like a CONCATENATE argument.
    """
    match = _IF_RE.search(expression)
    if not match:
        raise FormulaError(f"Malformed IF: {expression!r}")

    condition, true_value, false_value = (part.strip() for part in match.groups())
    result = evaluate_expression(substitute_references(condition, cells))
    return resolve_argument(true_value if is_truthy(result) else false_value, cells)


def proper(text: str) -> str:
    """Capitalize the first letter of each space-separated word."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


_TEXT_TRANSFORMS: Dict[str, Callable[[str], str]] = {
    "UPPER": str.upper,
    "LOWER": str.lower,
    "TRIM": str.strip,
    "PROPER": proper,
    "LEN": lambda text: str(len(text)),
}


def _text_function(name: str) -> FunctionImpl:
    transform = _TEXT_TRANSFORMS[name]

    def apply(expression: str, cells: Cells) -> str:
        match = _SINGLE_REF_RE.search(expression)
        if not match:
            raise FormulaError(f"{name} needs a single cell reference: {expression!r}")
        return transform(cell_value(cells, match.group(1)))

    apply.__name__ = name.lower()
    return apply


# Checked in this order; the first matching prefix wins
BUILTIN_FUNCTIONS: List[tuple[str, FunctionImpl]] = [
    ("SUM", sum_range),
    ("AVERAGE", average_range),
    ("MAX", max_range),
    ("MIN", min_range),
    ("COUNT", count_range),
    ("CONCATENATE", concatenate),
    ("IF", if_function),
    ("UPPER", _text_function("UPPER")),
    ("LOWER", _text_function("LOWER")),
    ("TRIM", _text_function("TRIM")),
    ("PROPER", _text_function("PROPER")),
    ("LEN", _text_function("LEN")),
]
