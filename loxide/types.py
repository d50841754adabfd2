"""Runtime value model for loxide.

Every value the interpreter produces is one of five variants: `Boolean`,
`String`, `Number`, `Identifier` or `Nil`. `Identifier` only ever appears
inside a `Literal` node before the interpreter resolves it against the
environment, so seeing one here is an internal consistency error.

Numbers are single precision. Python floats are doubles, so every number
that enters the model goes through `to_f32` to keep results identical to a
binary32 implementation (`0.1 + 0.2` and friends round the same way).

This module also owns the operator table: `apply_binary` and `apply_unary`
implement arithmetic, concatenation, repetition, equality and ordering for
every combination of variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union
import math
import struct

from .errors import EvalError


class Operator(Enum):
    NOT_EQUAL = '!='
    EQUAL = '=='
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='
    MINUS = '-'
    PLUS = '+'
    SLASH = '/'
    STAR = '*'
    BANG = '!'

    def __repr__(self) -> str:
        return f"Operator.{self.name}"


UNARY_OPERATORS = frozenset({Operator.BANG, Operator.MINUS, Operator.PLUS})
BINARY_OPERATORS = frozenset(op for op in Operator if op is not Operator.BANG)


def to_f32(value: float) -> float:
    """Round a Python float to the nearest binary32 value.

    Values beyond the binary32 range overflow to infinity with the sign of
    the input, matching how a float conversion behaves in hardware.
    """
    try:
        return struct.unpack('f', struct.pack('f', value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __repr__(self) -> str:
        return f"Boolean({'true' if self.value else 'false'})"


@dataclass(frozen=True)
class String:
    value: str

    def __repr__(self) -> str:
        escaped = ''.join(_escape_char(c) for c in self.value)
        return f'String("{escaped}")'


_ESCAPES = {'\\': '\\\\', '"': '\\"', '\n': '\\n', '\t': '\\t', '\r': '\\r', '\0': '\\0'}


def _escape_char(c: str) -> str:
    if c in _ESCAPES:
        return _ESCAPES[c]
    if ord(c) < 0x20 or ord(c) == 0x7f:
        return f"\\u{{{ord(c):x}}}"
    return c


@dataclass(frozen=True)
class Number:
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', to_f32(float(self.value)))

    def __repr__(self) -> str:
        return f"Number({format_number(self.value, debug=True)})"


@dataclass(frozen=True)
class Identifier:
    name: str

    def __repr__(self) -> str:
        return f'Identifier("{self.name}")'


@dataclass(frozen=True)
class Nil:
    def __repr__(self) -> str:
        return 'Nil'


LiteralValue = Union[Boolean, String, Number, Identifier, Nil]

# Variant rank for the cross-type total order. It follows declaration order
# and carries no meaning beyond making every pair of values comparable.
_RANK = {Boolean: 0, String: 1, Number: 2, Identifier: 3, Nil: 4}


def type_name(value: LiteralValue) -> str:
    """Return the loxide type name of a runtime value."""
    return type(value).__name__


def _shortest_digits(value: float):
    """Shortest decimal digits that round-trip through binary32.

    Returns `(digits, exponent)` where the value equals `d.ddd * 10**exponent`.
    `value` must be positive and finite.
    """
    for precision in range(1, 10):
        text = '%.*e' % (precision - 1, value)
        if to_f32(float(text)) == value:
            break
    mantissa, exponent = text.split('e')
    digits = mantissa.replace('.', '').rstrip('0') or '0'
    return digits, int(exponent)


def _positional(digits: str, exponent: int) -> str:
    if exponent >= len(digits) - 1:
        return digits + '0' * (exponent - len(digits) + 1)
    if exponent >= 0:
        return digits[:exponent + 1] + '.' + digits[exponent + 1:]
    return '0.' + '0' * (-exponent - 1) + digits


def format_number(value: float, debug: bool = False) -> str:
    """Format a binary32 number.

    The display form never uses an exponent and drops a trailing `.0`
    (`5`, `0.1`, `100000000000000000000`). The debug form keeps `.0` on
    integral values and switches to exponent notation for magnitudes
    below 1e-4 or from 1e16 up (`5.0`, `1e20`, `1.5e-7`).
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    sign = '-' if math.copysign(1.0, value) < 0 else ''
    magnitude = abs(value)
    if magnitude == 0:
        return sign + ('0.0' if debug else '0')
    digits, exponent = _shortest_digits(magnitude)
    if debug and (exponent < -4 or exponent >= 16):
        mantissa = digits[0] + ('.' + digits[1:] if len(digits) > 1 else '')
        return f"{sign}{mantissa}e{exponent}"
    text = _positional(digits, exponent)
    if debug and '.' not in text:
        text += '.0'
    return sign + text


def to_string(value: LiteralValue) -> str:
    """Convert a value to the human readable form written by `print`."""
    if isinstance(value, Boolean):
        return 'true' if value.value else 'false'
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, String):
        return value.value
    if isinstance(value, Nil):
        return 'nil'
    raise EvalError(f"unresolved identifier {value.name} has no string form")


def _check_resolved(*values: LiteralValue):
    for value in values:
        if isinstance(value, Identifier):
            raise EvalError(f"identifier {value.name} was not resolved before use")


def is_truthy(value: LiteralValue) -> bool:
    """Map a value to a bool for conditionals.

    Booleans are themselves, strings are true when non-empty, numbers when
    non-zero, and nil is always false.
    """
    _check_resolved(value)
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, String):
        return value.value != ''
    if isinstance(value, Number):
        return value.value != 0.0
    return False


def values_equal(a: LiteralValue, b: LiteralValue) -> bool:
    """Structural equality. NaN is never equal to anything, itself included."""
    _check_resolved(a, b)
    if type(a) is not type(b):
        return False
    if isinstance(a, Nil):
        return True
    return a.value == b.value


def _ordered(op: Operator, a: LiteralValue, b: LiteralValue) -> bool:
    _check_resolved(a, b)
    if type(a) is type(b):
        if isinstance(a, Nil):
            left = right = 0
        else:
            left, right = a.value, b.value
    else:
        left, right = _RANK[type(a)], _RANK[type(b)]
    if op is Operator.GREATER:
        return left > right
    if op is Operator.GREATER_EQUAL:
        return left >= right
    if op is Operator.LESS:
        return left < right
    # LESS_EQUAL is defined as the negation of GREATER
    return not left > right


def _repeat(text: str, count: float) -> String:
    if math.isnan(count) or count <= 0:
        return String('')
    if math.isinf(count):
        raise EvalError('cannot repeat a string an infinite number of times')
    return String(text * math.floor(count))


def _add(a: LiteralValue, b: LiteralValue) -> LiteralValue:
    if isinstance(a, Number) and isinstance(b, Number):
        return Number(a.value + b.value)
    if isinstance(a, String) and isinstance(b, (String, Number, Boolean, Nil)):
        return String(a.value + to_string(b))
    if isinstance(a, (Boolean, Nil)) and isinstance(b, String):
        return String(to_string(a) + b.value)
    raise EvalError(f"cannot add {type_name(a)} and {type_name(b)}")


def _multiply(a: LiteralValue, b: LiteralValue) -> LiteralValue:
    if isinstance(a, Number) and isinstance(b, Number):
        return Number(a.value * b.value)
    if isinstance(a, String) and isinstance(b, Number):
        return _repeat(a.value, b.value)
    if isinstance(a, Number) and isinstance(b, String):
        return _repeat(b.value, a.value)
    raise EvalError(f"cannot multiply {type_name(a)} and {type_name(b)}")


def _divide(a: LiteralValue, b: LiteralValue) -> LiteralValue:
    if isinstance(a, Number) and isinstance(b, Number):
        if b.value == 0:
            if a.value == 0 or math.isnan(a.value):
                return Number(math.nan)
            # sign of a zero divisor matters: 1 / -0 is -inf
            return Number(math.copysign(math.inf, a.value) * math.copysign(1.0, b.value))
        return Number(a.value / b.value)
    raise EvalError(f"cannot divide {type_name(a)} by {type_name(b)}")


def apply_binary(op: Operator, a: LiteralValue, b: LiteralValue) -> LiteralValue:
    """Apply a binary operator to two evaluated operands."""
    _check_resolved(a, b)
    if op is Operator.PLUS:
        return _add(a, b)
    if op is Operator.MINUS:
        if isinstance(a, Number) and isinstance(b, Number):
            return Number(a.value - b.value)
        raise EvalError(f"cannot subtract {type_name(b)} from {type_name(a)}")
    if op is Operator.STAR:
        return _multiply(a, b)
    if op is Operator.SLASH:
        return _divide(a, b)
    if op is Operator.EQUAL:
        return Boolean(values_equal(a, b))
    if op is Operator.NOT_EQUAL:
        return Boolean(not values_equal(a, b))
    if op in (Operator.GREATER, Operator.GREATER_EQUAL, Operator.LESS, Operator.LESS_EQUAL):
        return Boolean(_ordered(op, a, b))
    raise EvalError(f"Invalid binary operator {op.value}")


def apply_unary(op: Operator, operand: LiteralValue) -> LiteralValue:
    """Apply a prefix operator to an evaluated operand."""
    _check_resolved(operand)
    if op is Operator.MINUS:
        if isinstance(operand, Number):
            return Number(-operand.value)
        raise EvalError(f"{type_name(operand)} values cannot be negated")
    if op is Operator.PLUS:
        return operand
    if op is Operator.BANG:
        return Boolean(not is_truthy(operand))
    raise EvalError(f"Invalid unary operator {op.value}")
