"""JSON serialization/deserialization for calculator ASTs.

This module converts between the AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Operators are stored by
their source symbol, so ``1 << x`` serializes as::

    {"type": "Expression",
     "expr": {"type": "BinaryOp", "op": "<<",
              "left": {"type": "Const", "value": 1},
              "right": {"type": "Var", "name": "x"}}}
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import Assign, BinaryOp, Const, Expression, Node, UnaryOp, Var
from .lexer import WORD_MAX, Operator


def ast_to_obj(node: Node) -> Dict[str, Any]:
    if isinstance(node, Expression):
        return {"type": "Expression", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Const):
        return {"type": "Const", "value": node.value}
    if isinstance(node, Var):
        return {"type": "Var", "name": node.name}
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "op": node.op.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op.value, "operand": ast_to_obj(node.operand)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Node:
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Expression":
        return Expression(expr=ast_from_obj(obj["expr"]))
    if t == "Assign":
        return Assign(name=str(obj["name"]), expr=ast_from_obj(obj["expr"]))
    if t == "Const":
        value = obj["value"]
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= WORD_MAX:
            raise ValueError(f"constant {value!r} is not a 16-bit unsigned integer")
        return Const(value=value)
    if t == "Var":
        return Var(name=str(obj["name"]))
    if t == "BinaryOp":
        op = Operator(obj["op"])
        if op.is_unary:
            raise ValueError(f"operator {op} cannot be used as a binary operator")
        return BinaryOp(op=op, left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        op = Operator(obj["op"])
        if not op.is_unary:
            raise ValueError(f"operator {op} cannot be used as a unary operator")
        return UnaryOp(op=op, operand=ast_from_obj(obj["operand"]))

    raise ValueError(f"Unknown AST node type: {t}")
