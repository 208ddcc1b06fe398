"""
Formula evaluation entry point.

``evaluate()`` turns a cell's raw input into its display value. Evaluation
happens once, when the cell is written, against the cells as they are at
that moment. Nothing is recomputed later when referenced cells change, and
there is no dependency graph or cycle detection: a formula reads whatever
value its references hold at write time.
"""

from __future__ import annotations

import logging

from gridcalc.engine.expression import evaluate_expression, format_value
from gridcalc.engine.functions import BUILTIN_FUNCTIONS, Cells, substitute_references

logger = logging.getLogger(__name__)

ERROR_TOKEN = "#ERROR!"


def evaluate(formula: str, cells: Cells) -> str:
    """Compute the display value of a cell's raw input.

    Args:
        formula: Raw cell input. Text not starting with '=' is a literal and
            is returned unchanged.
        cells: Mapping of cell identifier to Cell (or to a display string)

    Returns:
        The computed display string, or ``#ERROR!`` if the formula cannot be
        parsed or evaluated. Evaluation failures are never raised.
    """
    if not formula.startswith("="):
        return formula

    expression = formula[1:].strip()
    try:
        return _evaluate_expression_text(expression, cells)
    except Exception as e:
        logger.debug("Formula %r evaluated to %s: %s", formula, ERROR_TOKEN, e)
        return ERROR_TOKEN


def _evaluate_expression_text(expression: str, cells: Cells) -> str:
    for name, impl in BUILTIN_FUNCTIONS:
        if expression.startswith(f"{name}("):
            return impl(expression, cells)

    return format_value(evaluate_expression(substitute_references(expression, cells)))
