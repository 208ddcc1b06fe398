"""
Formula engine for gridcalc.

``evaluate()`` computes a cell's display value from its raw input. Built-in
functions live in ``gridcalc.engine.functions``; anything else is handed to
the formualizer expression engine after cell references are substituted.
"""

from gridcalc.engine.evaluator import ERROR_TOKEN, evaluate
from gridcalc.engine.expression import evaluate_expression, format_number
from gridcalc.engine.functions import BUILTIN_FUNCTIONS
from gridcalc.engine.quality import apply_data_quality_function, format_date

__all__ = [
    "ERROR_TOKEN",
    "evaluate",
    "evaluate_expression",
    "format_number",
    "BUILTIN_FUNCTIONS",
    "apply_data_quality_function",
    "format_date",
]
