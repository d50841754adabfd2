"""Grammar-driven parser for loxide, built on Lark.

The language grammar is written out here in Lark's EBNF and compiled into
an LALR(1) table. Lark's own lexer is never used: the tokens produced by
`loxide.scanner` are fed one at a time into Lark's interactive parser, so
both parsers see exactly the same token stream. The resulting parse tree is
folded into the same AST nodes `loxide.parser` builds, which lets the two
implementations be checked against each other.

Punctuation and statement keywords are declared with a leading underscore
so Lark filters them out of the tree; operators and literals stay in.
"""

from __future__ import annotations

from typing import Dict, List

from lark import Lark, Transformer, UnexpectedInput
from lark import Token as LarkToken

from .ast import (
    Program, VariableAssignment, StatementDeclaration, Block,
    Print, If, ExpressionStatement, Binary, Grouping, Literal, Unary,
)
from .errors import ParseError
from .parser import unquote
from .scanner import Token, TokenType
from .types import Boolean, Identifier, Nil, Number, Operator, String


LOXIDE_GRAMMAR = r"""
    start: declaration*

    ?declaration: block
                | assignment
                | statement

    block: _LEFT_BRACE declaration* _RIGHT_BRACE
    assignment: IDENTIFIER _EQUAL expression _SEMICOLON

    ?statement: print_stmt
              | if_stmt
              | expr_stmt

    print_stmt: _PRINT expression _SEMICOLON
    if_stmt: _IF expression declaration
    expr_stmt: expression _SEMICOLON

    // Expressions with precedence
    ?expression: equality
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS | PLUS) unary -> unary_op
          | primary
    ?primary: FALSE -> false
            | TRUE -> true
            | NIL -> nil
            | NUMBER -> number
            | STRING -> string
            | IDENTIFIER -> variable
            | _LEFT_PAREN expression _RIGHT_PAREN -> grouping

    // Tokens
    _LEFT_PAREN: "("
    _RIGHT_PAREN: ")"
    _LEFT_BRACE: "{"
    _RIGHT_BRACE: "}"
    _SEMICOLON: ";"
    _EQUAL: "="
    _PRINT: "print"
    _IF: "if"

    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER_EQUAL: ">="
    GREATER: ">"
    LESS_EQUAL: "<="
    LESS: "<"
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    BANG: "!"

    FALSE: "false"
    TRUE: "true"
    NIL: "nil"
    NUMBER: /\d+(\.\d+)?/
    STRING: /"[^"]*"/
    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
"""


LOXIDE_PARSER = Lark(
    LOXIDE_GRAMMAR,
    parser='lalr',
    lexer='basic',
    maybe_placeholders=False,
)


# Terminal names whose spelling differs from the TokenType name. Token types
# the grammar does not mention keep their own name and are rejected by the
# parse table as unexpected tokens.
TERMINAL_NAMES: Dict[TokenType, str] = {
    TokenType.LEFT_PAREN: '_LEFT_PAREN',
    TokenType.RIGHT_PAREN: '_RIGHT_PAREN',
    TokenType.LEFT_BRACE: '_LEFT_BRACE',
    TokenType.RIGHT_BRACE: '_RIGHT_BRACE',
    TokenType.SEMICOLON: '_SEMICOLON',
    TokenType.EQUAL: '_EQUAL',
    TokenType.PRINT: '_PRINT',
    TokenType.IF: '_IF',
}


def to_lark_token(token: Token) -> LarkToken:
    name = TERMINAL_NAMES.get(token.type, token.type.name)
    return LarkToken(name, token.lexeme, line=token.line)


class ASTTransformer(Transformer):
    """Transforms the Lark parse tree into loxide AST nodes."""

    def start(self, items):
        return Program(list(items))

    def block(self, items):
        return Block(list(items))

    def assignment(self, items):
        name, value = items
        return VariableAssignment(str(name), value)

    def print_stmt(self, items):
        return StatementDeclaration(Print(items[0]))

    def if_stmt(self, items):
        condition, body = items
        return StatementDeclaration(If(condition, body))

    def expr_stmt(self, items):
        return StatementDeclaration(ExpressionStatement(items[0]))

    # items pattern: operand (operator operand)*, folded to the left
    def binary(self, items):
        left = items[0]
        for i in range(1, len(items), 2):
            left = Binary(left, Operator(str(items[i])), items[i + 1])
        return left

    equality = comparison = term = factor = binary

    def unary_op(self, items):
        operator, right = items
        return Unary(Operator(str(operator)), right)

    def grouping(self, items):
        return Grouping(items[0])

    def false(self, items):
        return Literal(Boolean(False))

    def true(self, items):
        return Literal(Boolean(True))

    def nil(self, items):
        return Literal(Nil())

    def number(self, items):
        return Literal(Number(float(items[0])))

    def string(self, items):
        return Literal(String(unquote(str(items[0]))))

    def variable(self, items):
        return Literal(Identifier(str(items[0])))


def parse_with_grammar(tokens: List[Token]) -> Program:
    """Parse scanner tokens with the Lark grammar.

    Produces the same Program as `loxide.parser.parse` for every valid
    token list. Lark's parse failures are re-raised as `ParseError`.
    """
    if not tokens:
        return Program()
    interactive = LOXIDE_PARSER.parse_interactive()
    last = None
    try:
        for token in tokens:
            last = to_lark_token(token)
            interactive.feed_token(last)
        tree = interactive.feed_eof(last)
    except UnexpectedInput as e:
        token = getattr(e, 'token', None)
        if token is not None and token.type == '$END':
            raise ParseError('unexpected end of input', line=last.line) from e
        if token is not None:
            raise ParseError(f"unexpected token {token.type} '{token}' on line {token.line}", line=token.line) from e
        raise ParseError(str(e)) from e
    return ASTTransformer().transform(tree)
