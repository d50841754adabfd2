"""Abstract Syntax Tree (AST) definitions for loxide.

A parsed source text is a `Program`: an ordered list of declarations.
Declarations are variable assignments, blocks, or statements; statements
are `print`, `if` and bare expression statements; expressions are binary,
unary, grouping and literal nodes. Every node owns its children, so the
tree has no sharing and no cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .types import LiteralValue, Operator


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass
class Expression(Node):
    pass


@dataclass
class Binary(Expression):
    left: Expression
    operator: Operator
    right: Expression


@dataclass
class Grouping(Expression):
    expression: Expression


@dataclass
class Literal(Expression):
    value: LiteralValue  # Identifier values are resolved at evaluation time


@dataclass
class Unary(Expression):
    operator: Operator
    right: Expression


# Statements

@dataclass
class Statement(Node):
    pass


@dataclass
class Print(Statement):
    expression: Expression


@dataclass
class If(Statement):
    condition: Expression
    body: 'Declaration'


@dataclass
class ExpressionStatement(Statement):
    expression: Expression


# Declarations

@dataclass
class Declaration(Node):
    pass


@dataclass
class VariableAssignment(Declaration):
    name: str
    value: Expression


@dataclass
class StatementDeclaration(Declaration):
    statement: Statement


@dataclass
class Block(Declaration):
    declarations: List[Declaration]


@dataclass
class Program(Node):
    declarations: List[Declaration] = field(default_factory=list)
