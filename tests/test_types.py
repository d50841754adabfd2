import math

import pytest

from loxide.errors import EvalError
from loxide.types import (
    Boolean, Identifier, Nil, Number, Operator, String,
    apply_binary, apply_unary, format_number, is_truthy, to_f32, to_string, values_equal,
)


def test_number_is_rounded_to_single_precision():
    assert Number(0.1).value == to_f32(0.1)
    assert Number(0.1).value != 0.1


def test_to_f32_overflows_to_infinity():
    assert to_f32(1e39) == math.inf
    assert to_f32(-1e39) == -math.inf


@pytest.mark.parametrize('value, display, debug', [
    (5.0, '5', '5.0'),
    (1.5, '1.5', '1.5'),
    (0.1, '0.1', '0.1'),
    (-7.0, '-7', '-7.0'),
    (0.0, '0', '0.0'),
    (-0.0, '-0', '-0.0'),
    (123.456, '123.456', '123.456'),
    (1e20, '100000000000000000000', '1e20'),
    (0.00001, '0.00001', '1e-5'),
    (math.inf, 'inf', 'inf'),
    (-math.inf, '-inf', '-inf'),
    (math.nan, 'NaN', 'NaN'),
])
def test_number_formatting(value, display, debug):
    number = Number(value)
    assert format_number(number.value) == display
    assert format_number(number.value, debug=True) == debug


def test_display_forms():
    assert to_string(Boolean(True)) == 'true'
    assert to_string(Boolean(False)) == 'false'
    assert to_string(String('plain "text"')) == 'plain "text"'
    assert to_string(Number(42)) == '42'
    assert to_string(Nil()) == 'nil'


def test_debug_forms():
    assert repr(Boolean(True)) == 'Boolean(true)'
    assert repr(String('Hello ')) == 'String("Hello ")'
    assert repr(Number(1.5)) == 'Number(1.5)'
    assert repr(Nil()) == 'Nil'
    assert repr(Identifier('x')) == 'Identifier("x")'
    assert repr(String('a\tb\r\0\x01')) == 'String("a\\tb\\r\\0\\u{1}")'


def test_add():
    assert apply_binary(Operator.PLUS, Number(1), Number(2)) == Number(3)
    assert apply_binary(Operator.PLUS, String('a'), String('b')) == String('ab')
    assert apply_binary(Operator.PLUS, String('n'), Number(1.5)) == String('n1.5')
    assert apply_binary(Operator.PLUS, String('b'), Boolean(False)) == String('bfalse')
    assert apply_binary(Operator.PLUS, String('x'), Nil()) == String('xnil')
    assert apply_binary(Operator.PLUS, Boolean(True), String('!')) == String('true!')
    assert apply_binary(Operator.PLUS, Nil(), String('?')) == String('nil?')


@pytest.mark.parametrize('lhs, rhs', [
    (Number(1), String('a')),
    (Number(1), Boolean(True)),
    (Boolean(True), Boolean(True)),
    (Nil(), Nil()),
    (Nil(), Number(1)),
])
def test_add_rejects(lhs, rhs):
    with pytest.raises(EvalError) as excinfo:
        apply_binary(Operator.PLUS, lhs, rhs)
    assert 'cannot add' in excinfo.value.message


def test_subtract_keeps_operand_order():
    assert apply_binary(Operator.MINUS, Number(10), Number(4)) == Number(6)


@pytest.mark.parametrize('lhs, rhs', [
    (String('a'), String('b')),
    (Number(1), String('b')),
    (Boolean(True), Number(1)),
    (Nil(), Number(1)),
])
def test_subtract_rejects(lhs, rhs):
    with pytest.raises(EvalError):
        apply_binary(Operator.MINUS, lhs, rhs)


def test_multiply():
    assert apply_binary(Operator.STAR, Number(3), Number(4)) == Number(12)
    assert apply_binary(Operator.STAR, String('Hello '), Number(3)) == String('Hello Hello Hello ')
    assert apply_binary(Operator.STAR, Number(3), String('Hello ')) == String('Hello Hello Hello ')
    assert apply_binary(Operator.STAR, String('Hello '), Number(3.9)) == String('Hello Hello Hello ')


@pytest.mark.parametrize('count', [0, -3, -0.5, math.nan])
def test_multiply_string_by_non_positive_count_is_empty(count):
    assert apply_binary(Operator.STAR, String('Hello '), Number(count)) == String('')


def test_multiply_rejects():
    with pytest.raises(EvalError):
        apply_binary(Operator.STAR, String('a'), String('b'))
    with pytest.raises(EvalError):
        apply_binary(Operator.STAR, Boolean(True), Number(2))
    with pytest.raises(EvalError):
        apply_binary(Operator.STAR, String('a'), Number(math.inf))


def test_divide():
    assert apply_binary(Operator.SLASH, Number(1), Number(4)) == Number(0.25)
    assert apply_binary(Operator.SLASH, Number(1), Number(0)) == Number(math.inf)
    assert apply_binary(Operator.SLASH, Number(-1), Number(0)) == Number(-math.inf)
    assert apply_binary(Operator.SLASH, Number(1), Number(-0.0)) == Number(-math.inf)
    assert math.isnan(apply_binary(Operator.SLASH, Number(0), Number(0)).value)
    with pytest.raises(EvalError):
        apply_binary(Operator.SLASH, String('a'), Number(1))


def test_arithmetic_overflow_becomes_infinity():
    big = Number(3e38)
    assert apply_binary(Operator.STAR, big, Number(10)) == Number(math.inf)


def test_equality():
    assert apply_binary(Operator.EQUAL, Number(1), Number(1)) == Boolean(True)
    assert apply_binary(Operator.NOT_EQUAL, Number(1), Number(1)) == Boolean(False)
    assert apply_binary(Operator.EQUAL, Number(1), Boolean(True)) == Boolean(False)
    assert apply_binary(Operator.EQUAL, String('a'), String('a')) == Boolean(True)
    assert apply_binary(Operator.EQUAL, Nil(), Nil()) == Boolean(True)
    assert apply_binary(Operator.EQUAL, Nil(), Boolean(False)) == Boolean(False)


def test_nan_is_not_equal_to_itself():
    nan = Number(math.nan)
    assert not values_equal(nan, nan)
    assert apply_binary(Operator.NOT_EQUAL, nan, nan) == Boolean(True)


def test_same_type_ordering():
    assert apply_binary(Operator.GREATER, Number(1), Number(2)) == Boolean(False)
    assert apply_binary(Operator.LESS, Number(1), Number(2)) == Boolean(True)
    assert apply_binary(Operator.GREATER_EQUAL, Number(2), Number(2)) == Boolean(True)
    assert apply_binary(Operator.LESS_EQUAL, Number(2), Number(2)) == Boolean(True)
    assert apply_binary(Operator.LESS_EQUAL, Number(3), Number(2)) == Boolean(False)
    assert apply_binary(Operator.LESS, String('abc'), String('abd')) == Boolean(True)
    assert apply_binary(Operator.LESS, Boolean(False), Boolean(True)) == Boolean(True)


def test_less_equal_is_negation_of_greater():
    for a, b in [(1, 2), (2, 1), (2, 2)]:
        greater = apply_binary(Operator.GREATER, Number(a), Number(b)).value
        assert apply_binary(Operator.LESS_EQUAL, Number(a), Number(b)).value is (not greater)


def test_cross_type_ordering_follows_variant_order():
    # Boolean < String < Number < Nil
    assert apply_binary(Operator.LESS, Boolean(True), String('')) == Boolean(True)
    assert apply_binary(Operator.LESS, String('z'), Number(0)) == Boolean(True)
    assert apply_binary(Operator.GREATER, Nil(), Number(1e30)) == Boolean(True)


def test_invalid_binary_operator():
    with pytest.raises(EvalError) as excinfo:
        apply_binary(Operator.BANG, Number(1), Number(2))
    assert excinfo.value.message == 'Invalid binary operator !'


def test_unary_minus():
    assert apply_unary(Operator.MINUS, Number(3)) == Number(-3)
    for operand in (Boolean(True), String('a'), Nil()):
        with pytest.raises(EvalError):
            apply_unary(Operator.MINUS, operand)


def test_unary_plus_is_identity():
    for operand in (Boolean(True), String('a'), Number(2), Nil()):
        assert apply_unary(Operator.PLUS, operand) == operand


def test_unary_bang():
    assert apply_unary(Operator.BANG, Boolean(True)) == Boolean(False)
    assert apply_unary(Operator.BANG, Boolean(False)) == Boolean(True)
    assert apply_unary(Operator.BANG, String('')) == Boolean(True)
    assert apply_unary(Operator.BANG, String('x')) == Boolean(False)
    assert apply_unary(Operator.BANG, Number(0)) == Boolean(True)
    assert apply_unary(Operator.BANG, Number(0.5)) == Boolean(False)
    assert apply_unary(Operator.BANG, Nil()) == Boolean(True)


@pytest.mark.parametrize('operator', [Operator.STAR, Operator.SLASH, Operator.EQUAL, Operator.LESS])
def test_invalid_unary_operator(operator):
    with pytest.raises(EvalError):
        apply_unary(operator, Number(1))


def test_truthiness():
    assert is_truthy(Boolean(True))
    assert not is_truthy(Boolean(False))
    assert is_truthy(String('x'))
    assert not is_truthy(String(''))
    assert is_truthy(Number(-1))
    assert not is_truthy(Number(0))
    assert not is_truthy(Nil())


def test_unresolved_identifier_is_an_error():
    with pytest.raises(EvalError):
        is_truthy(Identifier('x'))
    with pytest.raises(EvalError):
        apply_binary(Operator.EQUAL, Identifier('x'), Number(1))
    with pytest.raises(EvalError):
        apply_unary(Operator.BANG, Identifier('x'))
