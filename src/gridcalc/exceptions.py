"""
Exception classes for gridcalc.

These exceptions are used throughout the gridcalc package to signal caller
contract violations and evaluation failures. Formula failures never leave the
evaluator as exceptions: they are converted to the ``#ERROR!`` display token.
"""


class MalformedIdentifier(ValueError):
    """Raised when a cell identifier does not match ``[A-Z]+[0-9]+``.

    Cell identifiers are produced by the addressing helpers, so a malformed
    one is a caller bug rather than user input. Examples:
        - Lowercase or mixed identifiers such as ``"a1"``
        - Missing row number (``"AB"``) or column label (``"12"``)
        - Row number zero (``"A0"``)
    """
    pass


class FormulaError(Exception):
    """Raised when a formula cannot be parsed or evaluated.

    This error is internal to the formula engine. The public ``evaluate()``
    entry point catches it (and any other evaluation failure) and returns the
    ``#ERROR!`` token instead. Common causes include:
        - Malformed range or function syntax
        - Engine error values such as ``#DIV/0!`` or ``#VALUE!``
        - Expressions the expression engine cannot parse
    """
    pass


class SnapshotFormatError(ValueError):
    """Raised when a persisted sheet snapshot cannot be loaded.

    Examples:
        - Malformed JSON
        - Unsupported serialization version
        - Fields of the wrong type (e.g. ``cells`` is not an object)
    """
    pass
