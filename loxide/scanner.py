"""Lexical analysis for loxide.

`scan` turns source text into a flat list of `Token` objects in a single
left-to-right pass. Whitespace and `//` comments are dropped, one character
of lookahead resolves the two-character operators, and identifiers are
checked against the fixed keyword table. The first error aborts the whole
scan; no partial token list is ever returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import LexError
from .types import format_number, to_f32


class TokenType(Enum):
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()
    SEMICOLON = auto()

    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()

    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()

    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()


KEYWORDS: Dict[str, TokenType] = {
    'and': TokenType.AND,
    'class': TokenType.CLASS,
    'else': TokenType.ELSE,
    'false': TokenType.FALSE,
    'for': TokenType.FOR,
    'fun': TokenType.FUN,
    'if': TokenType.IF,
    'nil': TokenType.NIL,
    'or': TokenType.OR,
    'print': TokenType.PRINT,
    'return': TokenType.RETURN,
    'super': TokenType.SUPER,
    'this': TokenType.THIS,
    'true': TokenType.TRUE,
    'var': TokenType.VAR,
    'while': TokenType.WHILE,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    '*': TokenType.STAR,
    ';': TokenType.SEMICOLON,
}

# first character -> (type without '=', type with '=')
EQUAL_SUFFIX_TOKENS: Dict[str, tuple] = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any = None
    line: int = field(default=1, compare=False)

    def __repr__(self) -> str:
        if self.type is TokenType.NUMBER:
            return f"Number({format_number(self.literal, debug=True)})"
        if self.type in (TokenType.STRING, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.lexeme})"
        return self.type.name


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'


def is_alpha_numeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    """Single pass scanner over one source text."""

    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        return self.tokens

    def scan_token(self):
        c = self.advance()
        if c in ' \r\t':
            return
        if c == '\n':
            self.line += 1
            return
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
            return
        if c in EQUAL_SUFFIX_TOKENS:
            plain, with_equal = EQUAL_SUFFIX_TOKENS[c]
            self.add_token(with_equal if self.match('=') else plain)
            return
        if c == '/':
            if self.match('/'):
                while self.peek() is not None and self.peek() != '\n':
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
            return
        if c == '"':
            self.string()
            return
        if is_digit(c):
            self.number()
            return
        if is_alpha(c):
            self.identifier()
            return
        raise LexError(f"Unexpected character ({c}) on line {self.line}", line=self.line)

    def string(self):
        start_line = self.line
        while True:
            c = self.peek()
            if c is None:
                raise LexError('Unterminated string', line=start_line)
            self.advance()
            if c == '"':
                break
            if c == '\n':
                self.line += 1
        self.add_token(TokenType.STRING)

    def number(self):
        while self.peek() is not None and is_digit(self.peek()):
            self.advance()
        # a '.' only belongs to the number when a digit follows it
        if self.peek() == '.' and self.peek_next() is not None and is_digit(self.peek_next()):
            self.advance()
            while self.peek() is not None and is_digit(self.peek()):
                self.advance()
        lexeme = self.source[self.start:self.current]
        self.add_token(TokenType.NUMBER, to_f32(float(lexeme)))

    def identifier(self):
        while self.peek() is not None and is_alpha_numeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, token_type: TokenType, literal: Any = None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.line))

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.peek() != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> Optional[str]:
        if self.is_at_end():
            return None
        return self.source[self.current]

    def peek_next(self) -> Optional[str]:
        if self.current + 1 >= len(self.source):
            return None
        return self.source[self.current + 1]


def scan(source: str) -> List[Token]:
    """Scan source text into tokens, raising `LexError` on the first problem."""
    return Scanner(source).scan_tokens()
