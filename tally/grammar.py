"""Grammar-driven parser for the Tally language.

This module describes the same language as `tally.parser` with a Lark
LALR grammar, and turns the resulting parse tree into the AST defined in
`tally.ast` with a `Transformer`. For every valid program both front ends
produce equal trees, which makes this one useful for cross-checking the
hand-written parser.

Two details of the language need care in an LALR grammar:

1. A `;` directly before `else` belongs to the `if` statement. The `_ELSE`
   terminal therefore swallows an optional leading `;` and has a higher
   priority than both `;` and identifiers.
2. `else` binds to the nearest `if`. Lark resolves the resulting
   shift/reduce conflict as a shift, which gives exactly that.

Lark errors are translated into the Tally error taxonomy so callers never
see a Lark exception.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken as LarkUnexpectedToken

from .ast import (
    Assignment, BinaryOp, BooleanLiteral, Call, Identifier, If,
    Node, NumberLiteral, Sequence, UnaryOp, While,
)
from .errors import MalformedNumber, SourcePosition, UnexpectedCharacter, UnexpectedToken


TALLY_GRAMMAR = r"""
    ?start: program

    program: [statement (";" statement)* ";"?]

    // Statements
    ?statement: if_stmt
              | while_stmt
              | block
              | assignment
              | or_expr

    block: "{" [statement (";" statement)* ";"?] "}"
    if_stmt: "if" "(" or_expr ")" statement [_ELSE statement]
    while_stmt: "while" "(" or_expr ")" statement
    assignment: IDENT "=" or_expr

    // Expressions with precedence
    ?or_expr: and_expr (OR and_expr)*
    ?and_expr: equality (AND equality)*
    ?equality: relational ((EQ | NE) relational)*
    ?relational: additive ((LT | GT) additive)*
    ?additive: multiplicative ((PLUS | MINUS) multiplicative)*
    ?multiplicative: unary ((STAR | SLASH) unary)*
    ?unary: (BANG | MINUS) unary -> unary_op
          | primary
    ?primary: NUMBER -> number
            | "true" -> true
            | "false" -> false
            | IDENT -> identifier
            | IDENT "(" [arguments] ")" -> call
            | "(" or_expr ")"
    arguments: or_expr ("," or_expr)*

    // Tokens
    _ELSE.2: /;?[ \t\r\n]*else(?![A-Za-z0-9])/
    IDENT: /[A-Za-z][A-Za-z0-9]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    OR: "||"
    AND: "&&"
    EQ: "=="
    NE: "!="
    LT: "<"
    GT: ">"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    BANG: "!"

    WS: /[ \t\r\n]+/
    %ignore WS
"""


TALLY_PARSER = Lark(
    TALLY_GRAMMAR,
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Sequence(tuple(items))

    block = program

    def if_stmt(self, items):
        condition, then_branch = items[0], items[1]
        else_branch = items[2] if len(items) > 2 else None
        return If(condition, then_branch, else_branch)

    def while_stmt(self, items):
        condition, body = items
        return While(condition, body)

    def assignment(self, items):
        name, value = items
        return Assignment(str(name), value)

    def _fold(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        for i in range(1, len(items), 2):
            left = BinaryOp(str(items[i]), left, items[i + 1])
        return left

    or_expr = and_expr = equality = relational = additive = multiplicative = _fold

    def unary_op(self, items):
        op, operand = items
        return UnaryOp(str(op), operand)

    def number(self, items):
        return NumberLiteral(float(items[0]))

    def true(self, items):
        return BooleanLiteral(True)

    def false(self, items):
        return BooleanLiteral(False)

    def identifier(self, items):
        return Identifier(str(items[0]))

    def call(self, items):
        name = str(items[0])
        args: List[Node] = items[1] if len(items) > 1 else []
        return Call(name, tuple(args))

    def arguments(self, items):
        return list(items)


def _end_position(source: str) -> SourcePosition:
    line = source.count('\n') + 1
    column = len(source) - (source.rfind('\n') + 1) + 1
    return SourcePosition(len(source), line, column)


def _translate_characters(source: str, err: UnexpectedCharacters) -> Exception:
    pos = err.pos_in_stream
    char = source[pos]
    numeric = set('0123456789.')
    before = source[pos - 1] if pos > 0 else ''
    after = source[pos + 1] if pos + 1 < len(source) else ''
    if char == '.' and (before.isdigit() or after.isdigit()):
        start = pos
        while start > 0 and source[start - 1] in numeric:
            start -= 1
        end = pos
        while end < len(source) and source[end] in numeric:
            end += 1
        column = err.column - (pos - start)
        return MalformedNumber(source[start:end], SourcePosition(start, err.line, column))
    return UnexpectedCharacter(char, SourcePosition(pos, err.line, err.column))


def _translate_token(source: str, err: LarkUnexpectedToken) -> Exception:
    token = err.token
    expected = ' or '.join(sorted(err.expected)) or 'end of input'
    if token.type == '$END':
        return UnexpectedToken(expected, 'end of input', _end_position(source))
    position = SourcePosition(token.start_pos or 0, token.line or 1, token.column or 1)
    return UnexpectedToken(expected, f"{token.type} {token.value!r}", position)


def parse_with_lark(source: str) -> Sequence:
    """Parse Tally source with the Lark grammar.

    Raises `LexError` or `ParseError` subclasses on invalid input, exactly
    like the recursive-descent parser.
    """
    try:
        tree = TALLY_PARSER.parse(source)
    except UnexpectedCharacters as err:
        raise _translate_characters(source, err) from None
    except LarkUnexpectedToken as err:
        raise _translate_token(source, err) from None
    except UnexpectedEOF as err:
        expected = ' or '.join(sorted(err.expected)) or 'end of input'
        raise UnexpectedToken(expected, 'end of input', _end_position(source)) from None
    return ASTTransformer().transform(tree)
