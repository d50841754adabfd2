from typing import Optional


class LoxideError(Exception):
    """Base exception for failures while scanning, parsing or evaluating."""
    kind = 'Error'

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(f"{self.kind}: {message}")
        self.message = message
        self.line = line


class LexError(LoxideError):
    """Raised when the scanner meets an unterminated string or a stray character."""
    kind = 'LexError'


class ParseError(LoxideError):
    """Raised when the token stream does not match the grammar."""
    kind = 'ParseError'


class EvalError(LoxideError):
    """Raised when an operator is applied to values it does not support."""
    kind = 'EvalError'
