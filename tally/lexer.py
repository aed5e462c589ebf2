"""Tokenizer for the Tally language.

The lexer turns source text into tokens on demand. `Lexer.next()` returns
one token per call and keeps returning the EOF token once the input is
exhausted. Iterating over a lexer yields every token up to and including
EOF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .errors import MalformedNumber, SourcePosition, UnexpectedCharacter

# Token kinds
NUMBER = 'NUMBER'
IDENTIFIER = 'IDENTIFIER'
KEYWORD = 'KEYWORD'
OPERATOR = 'OPERATOR'
BOOLEAN = 'BOOLEAN'
EOF = 'EOF'

KEYWORDS = {'if', 'else', 'while'}
BOOLEANS = {'true', 'false'}
TWO_CHAR_OPS = {'==', '!=', '&&', '||'}
SINGLE_OPS = {'+', '-', '*', '/', '=', '<', '>', '!', '(', ')', '{', '}', ',', ';'}
WHITESPACE = set(' \t\r\n')
DIGITS = set('0123456789')
LETTERS = set('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ')


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: SourcePosition

    def describe(self) -> str:
        """Short form used in error messages."""
        if self.kind == EOF:
            return 'end of input'
        return f"{self.kind} {self.text!r}"


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.kind == EOF:
                return

    def position(self) -> SourcePosition:
        return SourcePosition(self.pos, self.line, self.column)

    def advance(self, n: int = 1):
        for _ in range(n):
            if self.pos < len(self.source) and self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def peek_char(self, offset: int = 0) -> str:
        i = self.pos + offset
        if i < len(self.source):
            return self.source[i]
        return ''

    def next(self) -> Token:
        source = self.source
        while self.pos < len(source) and source[self.pos] in WHITESPACE:
            self.advance()
        start = self.position()
        if self.pos >= len(source):
            return Token(EOF, '', start)

        c = source[self.pos]
        if c in DIGITS or (c == '.' and self.peek_char(1) in DIGITS):
            return self.read_number(start)
        if c in LETTERS:
            begin = self.pos
            while self.pos < len(source) and (source[self.pos] in LETTERS or source[self.pos] in DIGITS):
                self.advance()
            text = source[begin:self.pos]
            if text in KEYWORDS:
                return Token(KEYWORD, text, start)
            if text in BOOLEANS:
                return Token(BOOLEAN, text, start)
            return Token(IDENTIFIER, text, start)
        pair = source[self.pos:self.pos + 2]
        if pair in TWO_CHAR_OPS:
            self.advance(2)
            return Token(OPERATOR, pair, start)
        if c in SINGLE_OPS:
            self.advance()
            return Token(OPERATOR, c, start)
        raise UnexpectedCharacter(c, start)

    def read_number(self, start: SourcePosition) -> Token:
        source = self.source
        begin = self.pos
        while self.pos < len(source) and (source[self.pos] in DIGITS or source[self.pos] == '.'):
            self.advance()
        text = source[begin:self.pos]
        whole, dot, fraction = text.partition('.')
        # digits '.' digits, with exactly one optional dot
        if not whole or (dot and (not fraction or '.' in fraction)):
            raise MalformedNumber(text, start)
        return Token(NUMBER, text, start)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily yield the tokens of `source`, ending with EOF."""
    return iter(Lexer(source))
