"""Tokenizer for calculator input.

A line of input is turned into a flat list of :class:`Token` objects. The
tokenizer knows nothing about grammar or precedence; it only recognizes
numbers, identifiers, the ``let`` keyword, operators, brackets and the
equals sign.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from .errors import LexError

WORD_BITS = 16
WORD_MAX = (1 << WORD_BITS) - 1


class TokenType(Enum):
    IDENT = 'IDENT'
    NUM = 'NUM'
    OPER = 'OPER'
    LPAREN = '('
    RPAREN = ')'
    KEYWORD = 'KEYWORD'
    EQUALS = '='


class Operator(Enum):
    """Operators understood by the calculator, keyed by their source symbol."""
    BIT_NEG = '!'
    BIT_AND = '&'
    BIT_OR = '|'
    BIT_XOR = '^'
    SHIFT_LEFT = '<<'
    SHIFT_RIGHT = '>>'
    PLUS = '+'
    MINUS = '-'
    TIMES = '*'
    DIVIDE = '/'

    @property
    def is_unary(self) -> bool:
        return self is Operator.BIT_NEG

    def __str__(self) -> str:
        return self.value


class Keyword(Enum):
    LET = 'let'

    def __str__(self) -> str:
        return self.value


KEYWORDS = {kw.value: kw for kw in Keyword}

SINGLE_CHAR_OPS = {
    '+': Operator.PLUS,
    '-': Operator.MINUS,
    '*': Operator.TIMES,
    '/': Operator.DIVIDE,
    '&': Operator.BIT_AND,
    '|': Operator.BIT_OR,
    '^': Operator.BIT_XOR,
    '!': Operator.BIT_NEG,
}

DOUBLED_OPS = {
    '<': Operator.SHIFT_LEFT,
    '>': Operator.SHIFT_RIGHT,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any = None
    # Position is informational only so that rebuilt streams compare equal.
    column: int = field(default=0, compare=False)

    def __str__(self) -> str:
        if self.type in (TokenType.LPAREN, TokenType.RPAREN, TokenType.EQUALS):
            return self.type.value
        return str(self.value)

    def __repr__(self) -> str:
        if self.value is None:
            return f"{self.type.name}"
        return f"{self.type.name}({self.value!s})"


def tokenize(source: str) -> List[Token]:
    """Convert a line of input into a list of tokens.

    Raises :class:`LexError` on any character that cannot start a token, on
    a number that runs straight into letters, on numbers that do not fit in
    16 unsigned bits, and on a lone ``<`` or ``>``.
    """
    tokens: List[Token] = []
    i = 0
    length = len(source)

    while i < length:
        c = source[i]
        col = i + 1
        # Skip whitespace
        if c.isspace():
            i += 1
            continue
        # Numbers
        if c.isdigit():
            start = i
            while i < length and source[i].isdigit():
                i += 1
            text = source[start:i]
            if i < length and source[i].isalpha():
                raise LexError(f"expected digit while lexing number but found {source[i]!r} at column {i + 1}")
            try:
                value = int(text)
            except ValueError:
                raise LexError(f"cannot read {text!r} as a number at column {col}")
            if value > WORD_MAX:
                raise LexError(f"number {text} at column {col} does not fit in {WORD_BITS} bits")
            tokens.append(Token(TokenType.NUM, value, col))
            continue
        # Identifiers or keywords
        if c.isalpha():
            start = i
            while i < length and source[i].isalnum():
                i += 1
            text = source[start:i]
            if text in KEYWORDS:
                tokens.append(Token(TokenType.KEYWORD, KEYWORDS[text], col))
            else:
                tokens.append(Token(TokenType.IDENT, text, col))
            continue
        if c in SINGLE_CHAR_OPS:
            tokens.append(Token(TokenType.OPER, SINGLE_CHAR_OPS[c], col))
            i += 1
            continue
        # '<<' and '>>' are the only operators spelled with two characters
        if c in DOUBLED_OPS:
            if i + 1 < length and source[i + 1] == c:
                tokens.append(Token(TokenType.OPER, DOUBLED_OPS[c], col))
                i += 2
                continue
            raise LexError(f"error while lexing {c!r} at column {col} (did you mean '{c}{c}'?)")
        if c == '(':
            tokens.append(Token(TokenType.LPAREN, None, col))
            i += 1
            continue
        if c == ')':
            tokens.append(Token(TokenType.RPAREN, None, col))
            i += 1
            continue
        if c == '=':
            tokens.append(Token(TokenType.EQUALS, None, col))
            i += 1
            continue
        raise LexError(f"unexpected character {c!r} at column {col}")
    return tokens


def untokenize(tokens: List[Token]) -> str:
    """Rebuild source text from tokens, one space between each."""
    return ' '.join(str(tok) for tok in tokens)
