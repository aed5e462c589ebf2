import json

import pytest

from tally.ast import BooleanLiteral, Identifier, NumberLiteral, Sequence
from tally.ast_json import ast_from_obj, ast_to_obj
from tally.parser import parse_program


def test_round_trip_through_json_text():
    program = parse_program(
        'x = 1; while (x < 5) { x = x * 2 }; if (!(x == 8)) y = -x; else y = max(x, 3); y')
    text = json.dumps(ast_to_obj(program))
    assert ast_from_obj(json.loads(text)) == program


def test_object_shape():
    obj = ast_to_obj(Sequence((Identifier('x'), NumberLiteral(2.0))))
    assert obj == {
        "type": "Sequence",
        "statements": [
            {"type": "Identifier", "name": "x"},
            {"type": "NumberLiteral", "value": 2.0},
        ],
    }


def test_if_without_else_serializes_none():
    obj = ast_to_obj(parse_program('if (true) 1').statements[0])
    assert obj["else_branch"] is None


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "ForLoop"})


def test_unsupported_object():
    with pytest.raises(TypeError):
        ast_to_obj(object())
    with pytest.raises(TypeError):
        ast_from_obj([1, 2])


@pytest.mark.parametrize('value', ['false', 0, None])
def test_boolean_literal_requires_json_boolean(value):
    with pytest.raises(ValueError):
        ast_from_obj({"type": "BooleanLiteral", "value": value})


def test_boolean_literal_from_json():
    obj = json.loads('{"type": "BooleanLiteral", "value": false}')
    assert ast_from_obj(obj) == BooleanLiteral(False)
