import pytest

from tally.ast import (
    Assignment, BinaryOp, BooleanLiteral, Call, Identifier, If,
    NumberLiteral, Sequence, UnaryOp, While,
)
from tally.errors import MalformedNumber, UnexpectedToken
from tally.lexer import Lexer
from tally.parser import Parser, parse_program


def parse_one(source):
    program = parse_program(source)
    assert len(program.statements) == 1
    return program.statements[0]


def test_assignment_and_identifier():
    program = parse_program('x = 5; x;')
    assert program == Sequence((
        Assignment('x', NumberLiteral(5.0)),
        Identifier('x'),
    ))


def test_trailing_semicolon_is_optional():
    assert parse_program('x = 5; x') == parse_program('x = 5; x;')


def test_empty_program():
    assert parse_program('') == Sequence(())
    assert parse_program('  \n ') == Sequence(())


def test_multiplication_binds_tighter_than_addition():
    assert parse_one('1 + 2 * 3') == BinaryOp(
        '+', NumberLiteral(1.0), BinaryOp('*', NumberLiteral(2.0), NumberLiteral(3.0)))


def test_binary_operators_are_left_associative():
    assert parse_one('8 - 4 - 2') == BinaryOp(
        '-', BinaryOp('-', NumberLiteral(8.0), NumberLiteral(4.0)), NumberLiteral(2.0))
    assert parse_one('8 / 4 / 2') == BinaryOp(
        '/', BinaryOp('/', NumberLiteral(8.0), NumberLiteral(4.0)), NumberLiteral(2.0))


def test_precedence_ladder():
    # || < && < equality < relational < additive
    tree = parse_one('a || b && c == d < e + f')
    assert tree == BinaryOp('||', Identifier('a'), BinaryOp(
        '&&', Identifier('b'), BinaryOp(
            '==', Identifier('c'), BinaryOp(
                '<', Identifier('d'), BinaryOp('+', Identifier('e'), Identifier('f'))))))


def test_parentheses_override_precedence():
    assert parse_one('(1 + 2) * 3') == BinaryOp(
        '*', BinaryOp('+', NumberLiteral(1.0), NumberLiteral(2.0)), NumberLiteral(3.0))


def test_nested_unary_operators():
    assert parse_one('!!true') == UnaryOp('!', UnaryOp('!', BooleanLiteral(True)))
    assert parse_one('--x') == UnaryOp('-', UnaryOp('-', Identifier('x')))
    assert parse_one('-2 * 3') == BinaryOp('*', UnaryOp('-', NumberLiteral(2.0)), NumberLiteral(3.0))


def test_calls():
    assert parse_one('max(5, 10) + 2 * 3') == BinaryOp(
        '+',
        Call('max', (NumberLiteral(5.0), NumberLiteral(10.0))),
        BinaryOp('*', NumberLiteral(2.0), NumberLiteral(3.0)),
    )
    assert parse_one('f()') == Call('f', ())
    assert parse_one('min(a + 1, max(b, c))') == Call('min', (
        BinaryOp('+', Identifier('a'), NumberLiteral(1.0)),
        Call('max', (Identifier('b'), Identifier('c'))),
    ))


def test_equality_is_not_assignment():
    assert parse_one('x == 1') == BinaryOp('==', Identifier('x'), NumberLiteral(1.0))


def test_assignment_value_is_full_expression():
    assert parse_one('flag = a > 1 || b') == Assignment('flag', BinaryOp(
        '||', BinaryOp('>', Identifier('a'), NumberLiteral(1.0)), Identifier('b')))


def test_while_statement():
    program = parse_program('x = 5; while (x < 10) x = x + 1; x;')
    assert program.statements[1] == While(
        BinaryOp('<', Identifier('x'), NumberLiteral(10.0)),
        Assignment('x', BinaryOp('+', Identifier('x'), NumberLiteral(1.0))),
    )
    assert program.statements[2] == Identifier('x')


def test_if_else_absorbs_semicolon_before_else():
    program = parse_program('x = 3; if (x > 3) x = x + 2; else x = 0; x;')
    assert len(program.statements) == 3
    assert program.statements[1] == If(
        BinaryOp('>', Identifier('x'), NumberLiteral(3.0)),
        Assignment('x', BinaryOp('+', Identifier('x'), NumberLiteral(2.0))),
        Assignment('x', NumberLiteral(0.0)),
    )


def test_if_without_else():
    program = parse_program('if (true) x = 1; y')
    assert program.statements == (
        If(BooleanLiteral(True), Assignment('x', NumberLiteral(1.0))),
        Identifier('y'),
    )


def test_else_binds_to_nearest_if():
    tree = parse_one('if (a) if (b) x = 1; else x = 2')
    assert tree == If(
        Identifier('a'),
        If(Identifier('b'), Assignment('x', NumberLiteral(1.0)), Assignment('x', NumberLiteral(2.0))),
    )


def test_block_bodies():
    tree = parse_one('while (i < 3) { i = i + 1; total = total + i; }')
    assert tree.body == Sequence((
        Assignment('i', BinaryOp('+', Identifier('i'), NumberLiteral(1.0))),
        Assignment('total', BinaryOp('+', Identifier('total'), Identifier('i'))),
    ))
    assert parse_one('{}') == Sequence(())


def test_parser_accepts_a_lexer():
    assert Parser(Lexer('x = 1')).parse_program() == parse_program('x = 1')


def test_parsing_is_deterministic():
    source = 'x = 1; while (x < 4) { if (x == 2) y = x; x = x + 1 }; y'
    assert parse_program(source) == parse_program(source)


def test_missing_expression_after_assignment():
    with pytest.raises(UnexpectedToken) as info:
        parse_program('x = ;')
    err = info.value
    assert err.kind == 'UnexpectedToken'
    assert err.expected == 'expression'
    assert "';'" in err.found
    assert err.position.offset == 4


@pytest.mark.parametrize('source', [
    'x = 5 y',
    '(1 + 2',
    'if x > 1 x = 2',
    'while (true x = 1',
    'max(1, 2',
    'x;;',
    'else x = 1',
    '1 +',
    '{ x = 1',
    '5 = x',
])
def test_syntax_errors(source):
    with pytest.raises(UnexpectedToken):
        parse_program(source)


def test_unexpected_end_of_input_is_reported():
    with pytest.raises(UnexpectedToken) as info:
        parse_program('x = (1 + 2')
    assert info.value.found == 'end of input'
    assert info.value.expected == "')'"


def test_lex_errors_surface_through_the_parser():
    with pytest.raises(MalformedNumber):
        parse_program('x = 1.2.3')


def test_unknown_engine():
    with pytest.raises(ValueError):
        parse_program('1', engine='yacc')
