"""
General expression evaluation backed by formualizer.

Once every cell reference in a formula has been replaced by a literal, the
remaining text is an ordinary spreadsheet expression: arithmetic with
operator precedence, comparisons, string literals and math functions such as
ROUND or SQRT. The expression is translated to Excel syntax (see
``gridcalc.engine.syntax``), installed in a one-cell scratch workbook of the
formualizer engine and evaluated there.

The helpers at the bottom convert between engine values and the display
strings stored in cells.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

import formualizer as fz

from gridcalc.engine.syntax import to_engine_formula
from gridcalc.exceptions import FormulaError

_SCRATCH_SHEET = "Scratch"

_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")

_ENGINE_ERROR_RE = re.compile(
    r"^#(?:NULL!|DIV/0!|VALUE!|REF!|NAME\?|NUM!|N/A|SPILL!|CALC!|ERROR!)$"
)

# Wide enough to quantize any finite float to a few decimals
_FIXED_CONTEXT = Context(prec=400)


def evaluate_expression(expression: str) -> Any:
    """Evaluate a reference-free expression.

    Args:
        expression: Expression text without the leading '=', e.g. ``2*(3+4)``
            or ``"big"=="big"``. ``-2^2`` is ``-4``, ``^`` groups right to
            left, and ``a%b`` is the remainder of a divided by b.

    Returns:
        The engine's value as a plain Python scalar (float, bool or str)

    Raises:
        FormulaError: If the expression does not parse or evaluates to an
            engine error value
    """
    if not expression.strip():
        raise FormulaError("Empty expression")

    formula = to_engine_formula(expression)
    try:
        wb = fz.Workbook()
        wb.add_sheet(_SCRATCH_SHEET)
        wb.set_formula(_SCRATCH_SHEET, 1, 1, formula)
        value = wb.evaluate_cell(_SCRATCH_SHEET, 1, 1)
    except Exception as e:
        raise FormulaError(f"Cannot evaluate {formula!r}: {e}") from e
    return _normalize(value, formula)


def _normalize(value: Any, formula: str) -> Any:
    """Normalise a value returned by formualizer.

    * ``None`` → ``""``
    * Error dicts and error strings → FormulaError
    * 1x1 arrays → their only element
    """
    if isinstance(value, list):
        if len(value) == 1 and isinstance(value[0], list) and len(value[0]) == 1:
            return _normalize(value[0][0], formula)
        raise FormulaError(f"{formula!r} produced an array")
    if value is None:
        return ""
    if isinstance(value, dict):
        raise FormulaError(f"{formula!r} evaluated to {value.get('kind', value)}")
    if isinstance(value, float) and math.isnan(value):
        raise FormulaError(f"{formula!r} evaluated to NaN")
    if isinstance(value, str) and _ENGINE_ERROR_RE.match(value):
        raise FormulaError(f"{formula!r} evaluated to {value}")
    return value


def is_number(text: str) -> bool:
    """Check whether a display string reads as a decimal number.

    This is the single test for "numeric" used by range functions, reference
    substitution and the data quality helpers. ``Infinity`` and ``NaN`` are
    text.
    """
    return bool(_NUMBER_RE.match(text))


def quote_text(text: str) -> str:
    """Render text as a spreadsheet string literal."""
    escaped = text.replace('"', '""')
    return f'"{escaped}"'


def format_number(value: Any) -> str:
    """Render a number the way the sheet displays it.

    Integral values drop the fractional part (``8`` rather than ``8.0``) and
    keep only the significant digits of the shortest round-tripping form, so
    ``1.2345678901234567e+19`` shows as ``12345678901234567000``. Other
    values use that shortest form directly.
    """
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(Decimal(repr(number))))
    return repr(number)


def format_fixed(value: Any, places: int) -> str:
    """Render a number with exactly ``places`` decimals.

    Halves round away from zero, judged on the exact binary value:
    ``0.125`` becomes ``0.13`` while ``1.005`` (stored just below) becomes
    ``1.00``.
    """
    number = float(value)
    if not math.isfinite(number):
        return format_number(number)
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT))


def format_value(value: Any) -> str:
    """Render an engine value as a cell display string."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def is_truthy(value: Any) -> bool:
    """Truthiness of an engine value: TRUE, non-zero numbers, non-empty text."""
    return bool(value)
