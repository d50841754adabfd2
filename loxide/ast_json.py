"""JSON serialization/deserialization for loxide ASTs.

This module converts between AST dataclasses and plain dict/list
structures suitable for JSON encoding. Every node becomes an object with a
`"type"` key naming its class; runtime values are encoded the same way
and operators as their source symbol, so a file looks like:

    {"type": "Binary", "operator": "+",
     "left": {"type": "Literal", "value": {"type": "Number", "value": 1.0}},
     "right": ...}

`ast_from_obj(ast_to_obj(program)) == program` for every parsed program.
Malformed input raises `ParseError`.
"""

from __future__ import annotations

import math
from typing import Any, Dict

from .ast import (
    Program, VariableAssignment, StatementDeclaration, Block,
    Print, If, ExpressionStatement, Binary, Grouping, Literal, Unary,
)
from .errors import ParseError
from .types import Boolean, Identifier, Nil, Number, Operator, String


def _number_to_obj(value: float) -> Any:
    # JSON has no NaN or infinity
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    return value


def value_to_obj(value: Any) -> Dict[str, Any]:
    if isinstance(value, Boolean):
        return {"type": "Boolean", "value": value.value}
    if isinstance(value, String):
        return {"type": "String", "value": value.value}
    if isinstance(value, Number):
        return {"type": "Number", "value": _number_to_obj(value.value)}
    if isinstance(value, Identifier):
        return {"type": "Identifier", "name": value.name}
    if isinstance(value, Nil):
        return {"type": "Nil"}
    raise TypeError(f"Unsupported value for serialization: {type(value).__name__}")


def value_from_obj(obj: Dict[str, Any]) -> Any:
    if not isinstance(obj, dict):
        raise ParseError(f"Invalid value object: {obj!r}")
    t = obj.get("type")
    try:
        if t == "Boolean":
            return Boolean(bool(obj["value"]))
        if t == "String":
            if not isinstance(obj["value"], str):
                raise ParseError(f"String value must be text, got {obj['value']!r}")
            return String(obj["value"])
        if t == "Number":
            return Number(float(obj["value"]))
        if t == "Identifier":
            return Identifier(str(obj["name"]))
        if t == "Nil":
            return Nil()
    except KeyError as e:
        raise ParseError(f"{t} value is missing field {e.args[0]!r}")
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid {t} value: {e}")
    raise ParseError(f"Unknown value type: {t}")


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, Program):
        return {"type": "Program", "declarations": [ast_to_obj(d) for d in node.declarations]}
    if isinstance(node, VariableAssignment):
        return {"type": "VariableAssignment", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, StatementDeclaration):
        return {"type": "StatementDeclaration", "statement": ast_to_obj(node.statement)}
    if isinstance(node, Block):
        return {"type": "Block", "declarations": [ast_to_obj(d) for d in node.declarations]}
    if isinstance(node, Print):
        return {"type": "Print", "expression": ast_to_obj(node.expression)}
    if isinstance(node, If):
        return {"type": "If", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, ExpressionStatement):
        return {"type": "ExpressionStatement", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "operator": node.operator.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": node.operator.value, "right": ast_to_obj(node.right)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _operator(symbol: Any) -> Operator:
    try:
        return Operator(symbol)
    except ValueError:
        raise ParseError(f"Unknown operator: {symbol!r}")


def ast_from_obj(obj: Any) -> Any:
    if not isinstance(obj, dict):
        raise ParseError("Invalid AST object")
    t = obj.get("type")
    try:
        if t == "Program":
            return Program([ast_from_obj(d) for d in obj["declarations"]])
        if t == "VariableAssignment":
            return VariableAssignment(obj["name"], ast_from_obj(obj["value"]))
        if t == "StatementDeclaration":
            return StatementDeclaration(ast_from_obj(obj["statement"]))
        if t == "Block":
            return Block([ast_from_obj(d) for d in obj["declarations"]])
        if t == "Print":
            return Print(ast_from_obj(obj["expression"]))
        if t == "If":
            return If(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]))
        if t == "ExpressionStatement":
            return ExpressionStatement(ast_from_obj(obj["expression"]))
        if t == "Binary":
            return Binary(ast_from_obj(obj["left"]), _operator(obj["operator"]), ast_from_obj(obj["right"]))
        if t == "Unary":
            return Unary(_operator(obj["operator"]), ast_from_obj(obj["right"]))
        if t == "Grouping":
            return Grouping(ast_from_obj(obj["expression"]))
        if t == "Literal":
            return Literal(value_from_obj(obj["value"]))
    except KeyError as e:
        raise ParseError(f"AST node {t} is missing field {e.args[0]!r}")
    except TypeError as e:
        raise ParseError(f"Malformed AST node {t}: {e}")

    raise ParseError(f"Unknown AST node type: {t}")
