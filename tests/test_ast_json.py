import json
import math

import pytest

from loxide.ast import Binary, Literal, Unary
from loxide.ast_json import ast_from_obj, ast_to_obj, value_from_obj, value_to_obj
from loxide.errors import ParseError
from loxide.parser import parse_program
from loxide.types import Boolean, Identifier, Nil, Number, Operator, String


def test_program_survives_json():
    program = parse_program(
        'x = 1.5; { print x * 2; } if x >= 1 print "big"; !nil == -x; (true);'
    )
    text = json.dumps(ast_to_obj(program))
    assert ast_from_obj(json.loads(text)) == program


def test_binary_layout():
    obj = ast_to_obj(Binary(Literal(Number(1)), Operator.PLUS, Literal(Identifier('y'))))
    assert obj == {
        'type': 'Binary',
        'operator': '+',
        'left': {'type': 'Literal', 'value': {'type': 'Number', 'value': 1.0}},
        'right': {'type': 'Literal', 'value': {'type': 'Identifier', 'name': 'y'}},
    }


def test_values():
    for value in (Boolean(True), String('s'), Number(0.25), Identifier('n'), Nil()):
        assert value_from_obj(value_to_obj(value)) == value


def test_non_finite_numbers_are_stored_as_strings():
    obj = value_to_obj(Number(math.inf))
    assert obj == {'type': 'Number', 'value': 'inf'}
    assert value_from_obj(obj) == Number(math.inf)
    assert math.isnan(value_from_obj(value_to_obj(Number(math.nan))).value)


def test_unknown_node_type():
    with pytest.raises(ParseError):
        ast_from_obj({'type': 'While', 'condition': None})


def test_unknown_value_type():
    with pytest.raises(ParseError):
        ast_from_obj({'type': 'Literal', 'value': {'type': 'Function'}})


def test_unknown_operator():
    obj = ast_to_obj(Unary(Operator.MINUS, Literal(Number(1))))
    obj['operator'] = '%'
    with pytest.raises(ParseError):
        ast_from_obj(obj)


def test_missing_field():
    with pytest.raises(ParseError) as excinfo:
        ast_from_obj({'type': 'Print'})
    assert 'expression' in excinfo.value.message


def test_not_an_object():
    with pytest.raises(ParseError):
        ast_from_obj(['Program'])


@pytest.mark.parametrize('value', ['oops', None, 3, ['Number']])
def test_literal_value_that_is_not_an_object(value):
    with pytest.raises(ParseError):
        ast_from_obj({'type': 'Literal', 'value': value})


@pytest.mark.parametrize('value', [
    {'type': 'Number', 'value': 'abc'},
    {'type': 'Number', 'value': None},
    {'type': 'Number'},
    {'type': 'String', 'value': 5},
    {'type': 'Identifier'},
])
def test_malformed_value(value):
    with pytest.raises(ParseError):
        value_from_obj(value)


def test_declarations_that_are_not_a_list():
    with pytest.raises(ParseError):
        ast_from_obj({'type': 'Program', 'declarations': 5})
