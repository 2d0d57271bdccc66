"""Grammar-driven front end for calculator input.

This module parses a line with a Lark LALR parser instead of the
hand-written tokenizer and shunting yard in :mod:`bitcalc.parser`. The
grammar encodes the same precedence table as nested rules, one level per
precedence rank, and the transformer below builds exactly the same
:class:`~bitcalc.ast.Program` trees, so either front end can feed the
evaluator.

Lark failures are reported with the calculator's own error types:
characters that cannot start a terminal become :class:`LexError`, anything
else the parser rejects becomes :class:`ParseError`.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, VisitError

from .ast import Assign, BinaryOp, Const, Expression, Node, Program, UnaryOp, Var
from .errors import CalcError, LexError, ParseError
from .lexer import WORD_BITS, WORD_MAX, Operator


CALC_GRAMMAR = r"""
    ?start: assign
          | expression

    assign: "let" NAME "=" expression

    // Expressions with precedence, loosest first
    ?expression: bit_or
    ?bit_or: bit_xor (OR_OP bit_xor)*
    ?bit_xor: bit_and (XOR_OP bit_and)*
    ?bit_and: shift (AND_OP shift)*
    ?shift: term (SHIFT_OP term)*
    ?term: factor (ADD_OP factor)*
    ?factor: unary (MUL_OP unary)*
    ?unary: NEG_OP unary -> negate
          | atom
    ?atom: NUMBER -> number
         | NAME -> variable
         | "(" expression ")"

    OR_OP: "|"
    XOR_OP: "^"
    AND_OP: "&"
    SHIFT_OP: "<<" | ">>"
    ADD_OP: "+" | "-"
    MUL_OP: "*" | "/"
    NEG_OP: "!"

    // A number may not run straight into letters
    NUMBER: /\d+(?!\w)/
    NAME: /[^\W\d_][^\W_]*/

    %import common.WS
    %ignore WS
"""


CALC_PARSER = Lark(
    CALC_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def assign(self, items):
        name = str(items[0])
        return Assign(name=name, expr=items[1])

    def binary_expr(self, items) -> Node:
        # items pattern: expr ( op expr )*, folded left to right
        left = items[0]
        i = 1
        while i < len(items):
            op = Operator(str(items[i]))
            right = items[i + 1]
            left = BinaryOp(op=op, left=left, right=right)
            i += 2
        return left

    def bit_or(self, items):
        return self.binary_expr(items)

    def bit_xor(self, items):
        return self.binary_expr(items)

    def bit_and(self, items):
        return self.binary_expr(items)

    def shift(self, items):
        return self.binary_expr(items)

    def term(self, items):
        return self.binary_expr(items)

    def factor(self, items):
        return self.binary_expr(items)

    def negate(self, items):
        return UnaryOp(op=Operator(str(items[0])), operand=items[1])

    def number(self, items):
        token = items[0]
        value = int(token.value)
        if value > WORD_MAX:
            raise LexError(f"number {token.value} at column {token.column} does not fit in {WORD_BITS} bits")
        return Const(value)

    def variable(self, items):
        return Var(str(items[0]))


def parse_with_grammar(source: str) -> Program:
    """Parse a line of input into a Program AST using the Lark grammar."""
    try:
        tree = CALC_PARSER.parse(source)
    except UnexpectedCharacters as e:
        raise LexError(f"unexpected character {e.char!r} at column {e.column}") from e
    except UnexpectedInput as e:
        raise ParseError(_describe(e)) from e
    try:
        result = ASTTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, CalcError):
            raise e.orig_exc from None
        if isinstance(e.orig_exc, RecursionError):
            raise ParseError("expression nested too deeply") from None
        raise
    except RecursionError:
        raise ParseError("expression nested too deeply") from None
    if isinstance(result, Program):
        return result
    return Expression(result)


def _describe(e: UnexpectedInput) -> str:
    token = getattr(e, 'token', None)
    if token is None or token.type in ('$END', '<EOF>'):
        return "unexpected end of input"
    expected: List[str] = sorted(getattr(e, 'expected', None) or [])
    message = f"unexpected token {token.value!r} at column {token.column}"
    if expected:
        message += f", expected one of {', '.join(expected)}"
    return message
