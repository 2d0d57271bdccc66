"""Parser for calculator input.

Parsing happens in two steps over the token list produced by
:func:`bitcalc.lexer.tokenize`:

1. **Reordering**: the infix part of the line is rewritten into prefix
   (operator-first) order with the shunting yard algorithm. Precedence and
   associativity are resolved here and all brackets are dropped, so
   ``(2 + 3) * 4`` becomes ``* + 2 3 4``.

2. **Tree building**: the prefix stream is read front to back by a small
   recursive-descent :class:`Parser`. Every operator is followed by exactly
   as many operand subtrees as its arity, so no lookahead is needed.

The ``let NAME =`` prefix of an assignment is consumed by the parser before
the rest of the line is reordered.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ast import Assign, BinaryOp, Const, Expression, Node, Program, UnaryOp, Var
from .errors import ParseError
from .lexer import Keyword, Operator, Token, TokenType, tokenize

# Higher binds tighter. The order of precedence is based on C.
PRECEDENCE: Dict[Operator, int] = {
    Operator.BIT_OR: 8,
    Operator.BIT_XOR: 10,
    Operator.BIT_AND: 12,
    Operator.SHIFT_LEFT: 15,
    Operator.SHIFT_RIGHT: 15,
    Operator.PLUS: 20,
    Operator.MINUS: 20,
    Operator.TIMES: 30,
    Operator.DIVIDE: 30,
    Operator.BIT_NEG: 40,
}

_RPAREN = Token(TokenType.RPAREN)


def reorder(tokens: List[Token]) -> List[Token]:
    """Rewrite an infix token stream into prefix order.

    The stream is scanned from the end so that operators come out ahead of
    their operands once the output is reversed. The whole expression is
    treated as if it were wrapped in brackets: the operator stack starts
    with a closing bracket and one more opening bracket is processed after
    the main loop.

    Scanning right to left, an operator already on the stack is emitted
    only when it binds strictly tighter than the incoming one. Operators of
    equal precedence therefore stay stacked and the leftmost one ends up at
    the root, which keeps ``8 - 3 - 2`` grouped as ``(8 - 3) - 2``.

    Returns a new list without any bracket tokens.
    """
    output: List[Token] = []
    stack: List[Token] = [_RPAREN]

    for token in reversed(tokens):
        if token.type == TokenType.KEYWORD:
            raise ParseError(f"keyword '{token.value}' found while parsing expression")
        if token.type == TokenType.EQUALS:
            raise ParseError("equals sign '=' found while parsing expression")
        if token.type in (TokenType.IDENT, TokenType.NUM):
            output.append(token)
        elif token.type == TokenType.RPAREN:
            stack.append(token)
        elif token.type == TokenType.LPAREN:
            _pop_to_bracket(stack, output)
        elif token.type == TokenType.OPER:
            incoming = PRECEDENCE[token.value]
            while stack:
                top = stack[-1]
                if top.type != TokenType.OPER or PRECEDENCE[top.value] <= incoming:
                    break
                output.append(stack.pop())
            stack.append(token)
        else:
            raise ParseError(f"unexpected token {token!r} while reordering expression")

    # Pretend there is one more opening bracket at the start of the line.
    _pop_to_bracket(stack, output)
    if stack:
        raise ParseError("mismatched brackets, unmatched ')'")

    output.reverse()
    return output


def _pop_to_bracket(stack: List[Token], output: List[Token]) -> None:
    while True:
        if not stack:
            raise ParseError("mismatched brackets, unmatched '('")
        top = stack.pop()
        if top.type == TokenType.RPAREN:
            return
        output.append(top)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = list(tokens)
        self.pos = 0
        # Prefix form of the expression part, available after parse()
        self.prefix: List[Token] = []

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def done(self) -> bool:
        return self.pos >= len(self.tokens)

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError("expected token but found nothing")
        self.pos += 1
        return token

    def shunting_yard(self) -> None:
        """Reorder the tokens after the cursor into prefix form."""
        self.prefix = reorder(self.tokens[self.pos:])
        self.tokens = self.tokens[:self.pos] + self.prefix

    def parse(self) -> Program:
        """Parse a program, which is either a single assignment or an expression."""
        try:
            return self.parse_program()
        except RecursionError:
            raise ParseError("expression nested too deeply") from None

    def parse_program(self) -> Program:
        token = self.peek()
        if token is None:
            raise ParseError("expected token but found nothing")
        prog: Program
        if token.type == TokenType.KEYWORD and token.value == Keyword.LET:
            self.next()
            name = self.parse_ident()
            token = self.peek()
            if token is None or token.type != TokenType.EQUALS:
                raise ParseError("expected '=' while parsing assignment")
            self.next()
            self.shunting_yard()
            prog = Assign(name, self.parse_expr())
        else:
            self.shunting_yard()
            prog = Expression(self.parse_expr())

        if not self.done():
            raise ParseError(f"extra token {self.peek()!r} found after program {prog}")
        return prog

    def parse_ident(self) -> str:
        token = self.next()
        if token.type != TokenType.IDENT:
            raise ParseError(f"wanted identifier but found {token!r}")
        return token.value

    def parse_expr(self) -> Node:
        """Build one subtree from the prefix stream at the cursor."""
        token = self.next()
        if token.type == TokenType.IDENT:
            return Var(token.value)
        if token.type == TokenType.NUM:
            return Const(token.value)
        if token.type == TokenType.OPER:
            op: Operator = token.value
            if op.is_unary:
                return UnaryOp(op, self.parse_expr())
            left = self.parse_expr()
            right = self.parse_expr()
            return BinaryOp(op, left, right)
        if token.type in (TokenType.LPAREN, TokenType.RPAREN):
            raise ParseError("found a bracket while building the expression tree; "
                             "brackets should have been removed by reordering")
        raise ParseError(f"illegal token {token!r} in expression")


def parse(tokens: List[Token]) -> Program:
    """Parse a token list into a Program AST."""
    return Parser(tokens).parse()


def parse_source(source: str) -> Program:
    """Tokenize and parse a line of input."""
    return parse(tokenize(source))
