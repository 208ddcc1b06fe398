"""
Expression syntax translation.

Formula text follows ordinary math precedence: unary minus binds looser than
``^``, ``^`` is right-associative, and ``%`` between two operands is the
modulo operator. The formualizer engine reads Excel syntax, where ``-2^2``
is 4 and ``%`` only means percent. ``to_engine_formula()`` parses the
expression and re-emits it fully parenthesized in Excel syntax, so the
engine never applies its own precedence rules.

Grammar, lowest precedence first::

    comparison     := concatenation (("=" | "==" | "!=" | "<>" | "<" | ">" | "<=" | ">=") concatenation)*
    concatenation  := additive ("&" additive)*
    additive       := multiplicative (("+" | "-") multiplicative)*
    multiplicative := unary (("*" | "/" | "%") unary)*
    unary          := ("-" | "+") unary | power
    power          := postfix ("^" unary)?
    postfix        := primary "%"*
    primary        := NUMBER | STRING | IDENTIFIER | IDENTIFIER "(" args ")" | "(" comparison ")"
"""

from __future__ import annotations

import re
from enum import Enum, auto
from typing import List, NamedTuple, Optional

from gridcalc.exceptions import FormulaError


class TokenType(Enum):
    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()


class Token(NamedTuple):
    type: TokenType
    value: str
    start: int


# Order matters: strings and numbers before identifiers, two-character
# operators before their one-character prefixes
_PATTERNS = [
    (TokenType.STRING, re.compile(r'"(?:""|[^"])*"')),
    (TokenType.NUMBER, re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")),
    (TokenType.IDENTIFIER, re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")),
    (TokenType.LPAREN, re.compile(r"\(")),
    (TokenType.RPAREN, re.compile(r"\)")),
    (TokenType.COMMA, re.compile(r",")),
    (TokenType.OPERATOR, re.compile(r"==|!=|<>|<=|>=|[-+*/^%&=<>]")),
]
_WHITESPACE_RE = re.compile(r"\s+")

_OPERAND_START = (TokenType.NUMBER, TokenType.STRING, TokenType.IDENTIFIER, TokenType.LPAREN)

# Source comparison operator -> Excel spelling
_COMPARISONS = {
    "=": "=",
    "==": "=",
    "!=": "<>",
    "<>": "<>",
    "<": "<",
    ">": ">",
    "<=": "<=",
    ">=": ">=",
}


def tokenize(expression: str) -> List[Token]:
    """Split expression text into tokens, dropping whitespace.

    Raises:
        FormulaError: On a character no token pattern accepts
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(expression):
        space = _WHITESPACE_RE.match(expression, pos)
        if space:
            pos = space.end()
            continue
        for token_type, pattern in _PATTERNS:
            match = pattern.match(expression, pos)
            if match:
                tokens.append(Token(token_type, match.group(0), pos))
                pos = match.end()
                break
        else:
            raise FormulaError(f"Unexpected character {expression[pos]!r} at {pos}")
    return tokens


def to_engine_formula(expression: str) -> str:
    """Translate an expression into an Excel formula for the engine.

    Args:
        expression: Reference-free expression without the leading '='

    Returns:
        Formula text starting with '=', with every operation parenthesized

    Raises:
        FormulaError: If the expression does not parse

    Example:
        >>> to_engine_formula("-2^2")
        '=(-(2^2))'
        >>> to_engine_formula("10%3")
        '=MOD(10,3)'
    """
    translator = _Translator(tokenize(expression))
    text = translator.comparison()
    leftover = translator.peek()
    if leftover is not None:
        raise FormulaError(f"Unexpected {leftover.value!r} at {leftover.start}")
    return f"={text}"


class _Translator:
    """Recursive-descent parser that emits engine syntax as it goes."""

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise FormulaError("Unexpected end of expression")
        self.pos += 1
        return token

    def _accept(self, *operators: str) -> Optional[str]:
        token = self.peek()
        if token is not None and token.type is TokenType.OPERATOR and token.value in operators:
            self.pos += 1
            return token.value
        return None

    def _expect(self, token_type: TokenType) -> None:
        token = self._advance()
        if token.type is not token_type:
            raise FormulaError(f"Unexpected {token.value!r} at {token.start}")

    def comparison(self) -> str:
        left = self.concatenation()
        while True:
            op = self._accept(*_COMPARISONS)
            if op is None:
                return left
            left = f"({left}{_COMPARISONS[op]}{self.concatenation()})"

    def concatenation(self) -> str:
        left = self.additive()
        while self._accept("&"):
            left = f"({left}&{self.additive()})"
        return left

    def additive(self) -> str:
        left = self.multiplicative()
        while True:
            op = self._accept("+", "-")
            if op is None:
                return left
            left = f"({left}{op}{self.multiplicative()})"

    def multiplicative(self) -> str:
        left = self.unary()
        while True:
            op = self._accept("*", "/", "%")
            if op is None:
                return left
            right = self.unary()
            left = f"MOD({left},{right})" if op == "%" else f"({left}{op}{right})"

    def unary(self) -> str:
        op = self._accept("-", "+")
        if op == "-":
            return f"(-{self.unary()})"
        if op == "+":
            return self.unary()
        return self.power()

    def power(self) -> str:
        base = self.postfix()
        if self._accept("^"):
            return f"({base}^{self.unary()})"
        return base

    def postfix(self) -> str:
        value = self.primary()
        while self._is_percent_sign():
            self.pos += 1
            value = f"({value}/100)"
        return value

    def _is_percent_sign(self) -> bool:
        """A '%' not followed by an operand is a percent sign, not modulo."""
        token = self.peek()
        if token is None or token.type is not TokenType.OPERATOR or token.value != "%":
            return False
        following = self.peek(1)
        return following is None or following.type not in _OPERAND_START

    def primary(self) -> str:
        token = self._advance()
        if token.type in (TokenType.NUMBER, TokenType.STRING):
            return token.value
        if token.type is TokenType.IDENTIFIER:
            following = self.peek()
            if following is not None and following.type is TokenType.LPAREN:
                self.pos += 1
                return f"{token.value.upper()}({','.join(self._arguments())})"
            return token.value.upper()
        if token.type is TokenType.LPAREN:
            inner = self.comparison()
            self._expect(TokenType.RPAREN)
            return f"({inner})"
        raise FormulaError(f"Unexpected {token.value!r} at {token.start}")

    def _arguments(self) -> List[str]:
        following = self.peek()
        if following is not None and following.type is TokenType.RPAREN:
            self.pos += 1
            return []
        args = [self.comparison()]
        while True:
            token = self._advance()
            if token.type is TokenType.RPAREN:
                return args
            if token.type is not TokenType.COMMA:
                raise FormulaError(f"Unexpected {token.value!r} at {token.start}")
            args.append(self.comparison())
