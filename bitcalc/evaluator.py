"""Evaluator for calculator programs.

Trees are walked recursively against a :class:`Context`. All values are
16-bit unsigned integers. Results that would leave that range (overflow on
``+`` and ``*``, underflow on ``-``, division by zero, shifting by 16 or
more) raise :class:`EvalError` instead of wrapping around.
"""

from __future__ import annotations

from typing import Optional, TextIO

from .ast import Assign, BinaryOp, Const, Expression, Node, Program, UnaryOp, Var
from .context import Context
from .errors import EvalError
from .lexer import WORD_BITS, WORD_MAX, Operator


class Evaluator:
    """Walks program trees and keeps the optional debug log."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def run(self, context: Context, program: Program) -> int:
        if not isinstance(program, (Assign, Expression)):
            raise EvalError(f"cannot evaluate {type(program).__name__}")
        try:
            value = self.evaluate(program.expr, context)
        except RecursionError:
            raise EvalError("expression nested too deeply") from None
        if isinstance(program, Assign):
            context.insert(program.name, value)
            if self.debug_level >= 2:
                self.debug(f"bind {program.name} = {value}")
        return value

    def evaluate(self, node: Node, context: Context) -> int:
        if isinstance(node, Const):
            return node.value
        if isinstance(node, Var):
            return context.lookup(node.name)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, context)
            if node.op == Operator.BIT_NEG:
                return ~operand & WORD_MAX
            raise EvalError(f"unsupported unary operator {node.op}")
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, context)
            right = self.evaluate(node.right, context)
            return self.apply_binary_op(node.op, left, right)
        raise EvalError(f"cannot evaluate node {node!r}")

    def apply_binary_op(self, op: Operator, a: int, b: int) -> int:
        if op == Operator.BIT_AND:
            return a & b
        if op == Operator.BIT_OR:
            return a | b
        if op == Operator.BIT_XOR:
            return a ^ b
        if op in (Operator.SHIFT_LEFT, Operator.SHIFT_RIGHT):
            if b >= WORD_BITS:
                raise EvalError(f"shift by {b} overflows a {WORD_BITS}-bit value")
            if op == Operator.SHIFT_LEFT:
                # Bits shifted past the top are dropped
                return (a << b) & WORD_MAX
            return a >> b
        if op == Operator.PLUS:
            return self.check_range(a + b, f"{a} + {b}")
        if op == Operator.MINUS:
            return self.check_range(a - b, f"{a} - {b}")
        if op == Operator.TIMES:
            return self.check_range(a * b, f"{a} * {b}")
        if op == Operator.DIVIDE:
            if b == 0:
                raise EvalError('division by zero')
            return a // b
        raise EvalError(f"unknown operator {op}")

    @staticmethod
    def check_range(value: int, text: str) -> int:
        if value < 0:
            raise EvalError(f"arithmetic underflow in {text}")
        if value > WORD_MAX:
            raise EvalError(f"arithmetic overflow in {text}")
        return value


def evaluate(context: Context, program: Program) -> int:
    """Evaluate a program, binding the result in ``context`` for assignments."""
    return Evaluator().run(context, program)
