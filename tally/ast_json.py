"""JSON serialization/deserialization for the Tally AST.

This module converts between Tally AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes a dict
tagged with its class name under `"type"`.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Assignment,
    BinaryOp,
    BooleanLiteral,
    Call,
    Identifier,
    If,
    NumberLiteral,
    Sequence,
    UnaryOp,
    While,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, NumberLiteral):
        return {"type": "NumberLiteral", "value": node.value}
    if isinstance(node, BooleanLiteral):
        return {"type": "BooleanLiteral", "value": node.value}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, Assignment):
        return {"type": "Assignment", "target": node.target, "value": ast_to_obj(node.value)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, Sequence):
        return {"type": "Sequence", "statements": [ast_to_obj(s) for s in node.statements]}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "NumberLiteral":
        return NumberLiteral(value=float(obj["value"]))
    if t == "BooleanLiteral":
        if not isinstance(obj["value"], bool):
            raise ValueError(f"BooleanLiteral value must be a JSON boolean, got {obj['value']!r}")
        return BooleanLiteral(value=obj["value"])
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "Assignment":
        return Assignment(target=obj["target"], value=ast_from_obj(obj["value"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "Call":
        return Call(name=obj["name"], args=tuple(ast_from_obj(a) for a in obj["args"]))
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "Sequence":
        return Sequence(statements=tuple(ast_from_obj(s) for s in obj["statements"]))

    raise ValueError(f"Unknown AST node type: {t}")
