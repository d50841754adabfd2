"""Recursive-descent parser for loxide.

The parser walks the token list strictly left to right with one token of
lookahead, plus a second token when a declaration starts with an
identifier (an identifier followed by `=` is an assignment, anything else
is an expression statement). Each precedence level of the expression
grammar is one method, looping to fold operators to the left:

    expression := equality
    equality   := comparison (('!=' | '==') comparison)*
    comparison := term (('>' | '>=' | '<' | '<=') term)*
    term       := factor (('-' | '+') factor)*
    factor     := unary (('/' | '*') unary)*
    unary      := ('!' | '-' | '+') unary | primary
    primary    := 'false' | 'true' | 'nil' | NUMBER | STRING | IDENTIFIER
                | '(' expression ')'

The first mismatch raises `ParseError`; there is no error recovery.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from .ast import (
    Program, Declaration, VariableAssignment, StatementDeclaration, Block,
    Statement, Print, If, ExpressionStatement,
    Expression, Binary, Grouping, Literal, Unary,
)
from .errors import ParseError
from .scanner import Token, TokenType, scan
from .types import Boolean, Identifier, Nil, Number, Operator, String


OPERATORS: Dict[TokenType, Operator] = {
    TokenType.BANG_EQUAL: Operator.NOT_EQUAL,
    TokenType.EQUAL_EQUAL: Operator.EQUAL,
    TokenType.GREATER: Operator.GREATER,
    TokenType.GREATER_EQUAL: Operator.GREATER_EQUAL,
    TokenType.LESS: Operator.LESS,
    TokenType.LESS_EQUAL: Operator.LESS_EQUAL,
    TokenType.MINUS: Operator.MINUS,
    TokenType.PLUS: Operator.PLUS,
    TokenType.SLASH: Operator.SLASH,
    TokenType.STAR: Operator.STAR,
    TokenType.BANG: Operator.BANG,
}

EQUALITY_TOKENS = [TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL]
COMPARISON_TOKENS = [TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL]
TERM_TOKENS = [TokenType.MINUS, TokenType.PLUS]
FACTOR_TOKENS = [TokenType.SLASH, TokenType.STAR]
UNARY_TOKENS = [TokenType.BANG, TokenType.MINUS, TokenType.PLUS]


def unquote(lexeme: str) -> str:
    """Strip exactly one delimiter character from each end of a string lexeme."""
    return lexeme[1:-1]


def describe(token: Token) -> str:
    return f"{token.type.name} '{token.lexeme}' on line {token.line}"


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        if self.pos + offset < len(self.tokens):
            return self.tokens[self.pos + offset]
        return None

    def is_at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def match(self, expected: Union[TokenType, List[TokenType]]) -> bool:
        token = self.peek()
        if token is None:
            return False
        if isinstance(expected, list):
            return token.type in expected
        return token.type is expected

    def consume(self, expected: TokenType, what: str) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError(f"unexpected end of input, expected {what}")
        if token.type is not expected:
            raise ParseError(f"expected {what}, got {describe(token)}", line=token.line)
        return self.advance()

    def parse(self) -> Program:
        program = Program()
        while not self.is_at_end():
            program.declarations.append(self.parse_declaration())
        return program

    # Declarations and statements

    def parse_declaration(self) -> Declaration:
        if self.match(TokenType.LEFT_BRACE):
            return self.parse_block()
        if self.match(TokenType.IDENTIFIER):
            following = self.peek(1)
            if following is not None and following.type is TokenType.EQUAL:
                return self.parse_variable_assignment()
        return StatementDeclaration(self.parse_statement())

    def parse_block(self) -> Block:
        self.consume(TokenType.LEFT_BRACE, "'{'")
        declarations: List[Declaration] = []
        while not self.match(TokenType.RIGHT_BRACE):
            if self.is_at_end():
                raise ParseError("unexpected end of input, expected '}' after block")
            declarations.append(self.parse_declaration())
        self.advance()
        return Block(declarations)

    def parse_variable_assignment(self) -> VariableAssignment:
        name = self.consume(TokenType.IDENTIFIER, 'variable name')
        self.consume(TokenType.EQUAL, "'='")
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "';' after assignment")
        return VariableAssignment(name.lexeme, value)

    def parse_statement(self) -> Statement:
        if self.match(TokenType.PRINT):
            self.advance()
            expression = self.parse_expression()
            self.consume(TokenType.SEMICOLON, "';' after value")
            return Print(expression)
        if self.match(TokenType.IF):
            self.advance()
            condition = self.parse_expression()
            if self.is_at_end():
                raise ParseError('unexpected end of input, expected declaration after if condition')
            return If(condition, self.parse_declaration())
        expression = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "';' after expression")
        return ExpressionStatement(expression)

    # Expressions

    def parse_expression(self) -> Expression:
        return self.parse_equality()

    def parse_binary(self, operators: List[TokenType], operand) -> Expression:
        expr = operand()
        while self.match(operators):
            operator = OPERATORS[self.advance().type]
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def parse_equality(self) -> Expression:
        return self.parse_binary(EQUALITY_TOKENS, self.parse_comparison)

    def parse_comparison(self) -> Expression:
        return self.parse_binary(COMPARISON_TOKENS, self.parse_term)

    def parse_term(self) -> Expression:
        return self.parse_binary(TERM_TOKENS, self.parse_factor)

    def parse_factor(self) -> Expression:
        return self.parse_binary(FACTOR_TOKENS, self.parse_unary)

    def parse_unary(self) -> Expression:
        if self.match(UNARY_TOKENS):
            operator = OPERATORS[self.advance().type]
            return Unary(operator, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        token = self.peek()
        if token is None:
            raise ParseError('unexpected end of input, expected expression')
        if token.type is TokenType.FALSE:
            self.advance()
            return Literal(Boolean(False))
        if token.type is TokenType.TRUE:
            self.advance()
            return Literal(Boolean(True))
        if token.type is TokenType.NIL:
            self.advance()
            return Literal(Nil())
        if token.type is TokenType.NUMBER:
            self.advance()
            return Literal(Number(token.literal))
        if token.type is TokenType.STRING:
            self.advance()
            return Literal(String(unquote(token.lexeme)))
        if token.type is TokenType.IDENTIFIER:
            self.advance()
            return Literal(Identifier(token.lexeme))
        if token.type is TokenType.LEFT_PAREN:
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "')' after expression")
            return Grouping(expr)
        raise ParseError(f"unexpected token {describe(token)}, expected expression", line=token.line)


def parse(tokens: List[Token]) -> Program:
    """Parse a complete token list into a Program."""
    return Parser(tokens).parse()


def parse_program(source: str) -> Program:
    """Scan and parse loxide source code into a Program."""
    return parse(scan(source))


def parse_expression(source: str) -> Expression:
    """Parse source holding exactly one expression and nothing else."""
    parser = Parser(scan(source))
    expr = parser.parse_expression()
    if not parser.is_at_end():
        raise ParseError(f"unexpected token {describe(parser.peek())} after expression", line=parser.peek().line)
    return expr
