"""Recursive-descent parser for the Tally language.

The parser pulls tokens from a `Lexer` one at a time and keeps a single
token of lookahead in `current`. A second token can be peeked for the two
places the grammar needs it: telling `x = ...` apart from an expression
starting with `x`, and letting an `if` absorb the `;` that precedes its
`else`.

Grammar, loosest binding first:

    program    := (statement (';' statement)* ';'?)? EOF
    statement  := if | while | block | assignment | or
    block      := '{' (statement (';' statement)* ';'?)? '}'
    if         := 'if' '(' or ')' statement (';'? 'else' statement)?
    while      := 'while' '(' or ')' statement
    assignment := IDENTIFIER '=' or
    or         := and ('||' and)*
    and        := equality ('&&' equality)*
    equality   := relational (('==' | '!=') relational)*
    relational := additive (('<' | '>') additive)*
    additive   := multiplicative (('+' | '-') multiplicative)*
    multiplicative := unary (('*' | '/') unary)*
    unary      := ('!' | '-') unary | primary
    primary    := NUMBER | BOOLEAN | IDENTIFIER call? | '(' or ')'
    call       := '(' (or (',' or)*)? ')'

The first mismatch raises `UnexpectedToken`; there is no error recovery.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Assignment, BinaryOp, BooleanLiteral, Call, Identifier, If,
    Node, NumberLiteral, Sequence, UnaryOp, While,
)
from .errors import UnexpectedToken
from .lexer import (
    BOOLEAN, EOF, IDENTIFIER, KEYWORD, NUMBER, OPERATOR, Lexer, Token,
)

ENGINES = ('descent', 'lark')


class Parser:
    def __init__(self, source: Union[str, Lexer]):
        self.lexer = source if isinstance(source, Lexer) else Lexer(source)
        self.current: Token = self.lexer.next()
        self._peeked: Optional[Token] = None

    def advance(self) -> Token:
        token = self.current
        if self._peeked is not None:
            self.current, self._peeked = self._peeked, None
        else:
            self.current = self.lexer.next()
        return token

    def peek(self) -> Token:
        """Return the token after `current` without consuming anything."""
        if self._peeked is None:
            self._peeked = self.lexer.next()
        return self._peeked

    def match(self, kind: str, text: Optional[str] = None) -> bool:
        return self.current.kind == kind and (text is None or self.current.text == text)

    def match_op(self, *ops: str) -> bool:
        return self.current.kind == OPERATOR and self.current.text in ops

    def consume(self, kind: str, text: Optional[str] = None) -> Token:
        if not self.match(kind, text):
            expected = repr(text) if text is not None else kind
            self.error(expected)
        return self.advance()

    def error(self, expected: str):
        raise UnexpectedToken(expected, self.current.describe(), self.current.position)

    # Statements

    def parse_program(self) -> Sequence:
        statements = self.parse_statements(EOF)
        self.consume(EOF)
        return Sequence(tuple(statements))

    def parse_statements(self, end_kind: str, end_text: Optional[str] = None) -> List[Node]:
        statements: List[Node] = []
        if self.match(end_kind, end_text):
            return statements
        statements.append(self.parse_statement())
        while self.match_op(';'):
            self.advance()
            if self.match(end_kind, end_text):
                break
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> Node:
        if self.match(KEYWORD, 'if'):
            return self.parse_if()
        if self.match(KEYWORD, 'while'):
            return self.parse_while()
        if self.match_op('{'):
            return self.parse_block()
        if self.match(IDENTIFIER):
            following = self.peek()
            if following.kind == OPERATOR and following.text == '=':
                name = self.advance().text
                self.advance()
                return Assignment(name, self.parse_or())
        return self.parse_or()

    def parse_block(self) -> Sequence:
        self.consume(OPERATOR, '{')
        statements = self.parse_statements(OPERATOR, '}')
        self.consume(OPERATOR, '}')
        return Sequence(tuple(statements))

    def parse_condition(self) -> Node:
        self.consume(OPERATOR, '(')
        condition = self.parse_or()
        self.consume(OPERATOR, ')')
        return condition

    def parse_if(self) -> If:
        self.consume(KEYWORD, 'if')
        condition = self.parse_condition()
        then_branch = self.parse_statement()
        else_branch = None
        if self.match_op(';'):
            following = self.peek()
            if following.kind == KEYWORD and following.text == 'else':
                self.advance()
        if self.match(KEYWORD, 'else'):
            self.advance()
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_while(self) -> While:
        self.consume(KEYWORD, 'while')
        condition = self.parse_condition()
        body = self.parse_statement()
        return While(condition, body)

    # Expressions

    def parse_binary(self, operand, *ops: str) -> Node:
        node = operand()
        while self.match_op(*ops):
            op = self.advance().text
            node = BinaryOp(op, node, operand())
        return node

    def parse_or(self) -> Node:
        return self.parse_binary(self.parse_and, '||')

    def parse_and(self) -> Node:
        return self.parse_binary(self.parse_equality, '&&')

    def parse_equality(self) -> Node:
        return self.parse_binary(self.parse_relational, '==', '!=')

    def parse_relational(self) -> Node:
        return self.parse_binary(self.parse_additive, '<', '>')

    def parse_additive(self) -> Node:
        return self.parse_binary(self.parse_multiplicative, '+', '-')

    def parse_multiplicative(self) -> Node:
        return self.parse_binary(self.parse_unary, '*', '/')

    def parse_unary(self) -> Node:
        if self.match_op('!', '-'):
            op = self.advance().text
            return UnaryOp(op, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.current
        if token.kind == NUMBER:
            self.advance()
            return NumberLiteral(float(token.text))
        if token.kind == BOOLEAN:
            self.advance()
            return BooleanLiteral(token.text == 'true')
        if token.kind == IDENTIFIER:
            self.advance()
            if self.match_op('('):
                return Call(token.text, tuple(self.parse_arguments()))
            return Identifier(token.text)
        if self.match_op('('):
            self.advance()
            expr = self.parse_or()
            self.consume(OPERATOR, ')')
            return expr
        self.error('expression')

    def parse_arguments(self) -> List[Node]:
        self.consume(OPERATOR, '(')
        args: List[Node] = []
        if not self.match_op(')'):
            args.append(self.parse_or())
            while self.match_op(','):
                self.advance()
                args.append(self.parse_or())
        self.consume(OPERATOR, ')')
        return args


def parse_program(source: str, engine: str = 'descent') -> Sequence:
    """Parse Tally source into a `Sequence`.

    `engine` picks the front end: the hand-written recursive-descent
    parser (default) or the lark grammar in `tally.grammar`. Both return
    the same tree for any valid program.
    """
    if engine == 'descent':
        return Parser(source).parse_program()
    if engine == 'lark':
        from .grammar import parse_with_lark
        return parse_with_lark(source)
    raise ValueError(f"unknown parser engine {engine!r}; expected one of {ENGINES}")
