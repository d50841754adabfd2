# loxide language package
# This package provides a scanner, parser and tree-walking interpreter for the loxide language.
__version__ = '0.1.0'

from .errors import LoxideError, LexError, ParseError, EvalError
from .scanner import scan
from .parser import parse, parse_program
from .interpreter import run_program, Interpreter
from .environment import Environment

__all__ = [
    'scan',
    'parse',
    'parse_program',
    'run_program',
    'Interpreter',
    'Environment',
    'LoxideError',
    'LexError',
    'ParseError',
    'EvalError',
]
