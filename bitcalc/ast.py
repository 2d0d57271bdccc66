"""Abstract Syntax Tree (AST) definitions for calculator programs.

An input line parses to a :class:`Program`, which is either a bare
:class:`Expression` or an :class:`Assign` to a single variable. Expression
trees are strict owning trees made of constants, variables, unary and
binary operator nodes.

``str()`` of any node gives its S-expression form, e.g. ``(+ 1 (! x))``,
which is what the parser and the debug log use to show trees.
"""

from __future__ import annotations

from dataclasses import dataclass

from .lexer import Operator


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Const(Node):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class Var(Node):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class BinaryOp(Node):
    op: Operator
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"({self.op} {self.left} {self.right})"


@dataclass
class UnaryOp(Node):
    op: Operator
    operand: Node

    def __str__(self) -> str:
        return f"({self.op} {self.operand})"


@dataclass
class Program(Node):
    """Base class for the two kinds of input line."""
    pass


@dataclass
class Expression(Program):
    expr: Node

    def __str__(self) -> str:
        return str(self.expr)


@dataclass
class Assign(Program):
    name: str
    expr: Node

    def __str__(self) -> str:
        return f"(let {self.name} {self.expr})"
