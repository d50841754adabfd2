"""Tree-walking interpreter for loxide.

The interpreter executes a `Program` declaration by declaration against a
single flat `Environment`. Blocks do not open a new scope; every
assignment, however deeply nested, writes to the same mapping. Expressions
are evaluated post-order, left operand first, and identifiers are resolved
at the moment they are evaluated, so a reassignment between two uses is
visible to the second one.

`print` writes the display form of a value; a bare expression statement
writes its debug form, which is what a REPL shows as feedback.
"""

from __future__ import annotations

from typing import Optional

from .ast import (
    Program, Declaration, VariableAssignment, StatementDeclaration, Block,
    Statement, Print, If, ExpressionStatement,
    Expression, Binary, Grouping, Literal, Unary,
)
from .environment import Environment
from .errors import EvalError
from .parser import parse
from .scanner import scan
from .types import (
    BINARY_OPERATORS, UNARY_OPERATORS, Identifier, LiteralValue,
    apply_binary, apply_unary, is_truthy, to_string,
)


class Interpreter:
    """Core interpreter that executes loxide ASTs."""
    def __init__(self, environment: Optional[Environment] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt'):
        self.environment = environment if environment is not None else Environment.seeded()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Public API
    def run(self, program: Program):
        """Execute every declaration of `program` in order.

        May be called repeatedly; the environment carries over between
        calls. The first error aborts the run and propagates.
        """
        for declaration in program.declarations:
            self.execute(declaration)

    def execute(self, node: Declaration):
        if self.debug_level >= 1:
            self.debug(f"execute {type(node).__name__}")
        if isinstance(node, VariableAssignment):
            value = self.evaluate(node.value)
            self.environment.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {value!r}")
            return
        if isinstance(node, Block):
            # same environment as the enclosing code: blocks do not scope
            for declaration in node.declarations:
                self.execute(declaration)
            return
        if isinstance(node, StatementDeclaration):
            self.execute_statement(node.statement)
            return
        raise EvalError(f"execute: unexpected node type {type(node).__name__}")

    def execute_statement(self, node: Statement):
        if isinstance(node, Print):
            print(to_string(self.evaluate(node.expression)))
            return
        if isinstance(node, ExpressionStatement):
            print(repr(self.evaluate(node.expression)))
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond!r} -> {truthy}")
            if truthy:
                self.execute(node.body)
            return
        raise EvalError(f"execute: unexpected statement type {type(node).__name__}")

    def evaluate(self, node: Expression) -> LiteralValue:
        if isinstance(node, Literal):
            if isinstance(node.value, Identifier):
                return self.environment.resolve(node.value.name)
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Unary):
            if node.operator not in UNARY_OPERATORS:
                raise EvalError(f"Invalid unary operator {node.operator.value}")
            return apply_unary(node.operator, self.evaluate(node.right))
        if isinstance(node, Binary):
            if node.operator not in BINARY_OPERATORS:
                raise EvalError(f"Invalid binary operator {node.operator.value}")
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return apply_binary(node.operator, left, right)
        raise EvalError(f"evaluate: unexpected node type {type(node).__name__}")


def run_program(source: str, environment: Optional[Environment] = None, debug_level: int = 0) -> Interpreter:
    """Scan, parse and run a source text; return the interpreter for inspection."""
    program = parse(scan(source))
    interpreter = Interpreter(environment, debug_level=debug_level)
    with interpreter:
        interpreter.run(program)
    return interpreter
