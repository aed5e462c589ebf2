"""Exception taxonomy for Tally.

Every failure raised while lexing, parsing or evaluating a program is a
subclass of `TallyError`. Each carries a `kind` (the class name) and a
human readable `message`, plus whatever context the stage has: the
offending character, the expected and found token, the operator and
operand types, or the variable name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourcePosition:
    """Location inside the program text (0-based offset, 1-based line/column)."""
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class TallyError(Exception):
    """Base class for all Tally failures."""
    def __init__(self, message: str, position: Optional[SourcePosition] = None):
        super().__init__(f"{self.kind}: {message}")
        self.message = message
        self.position = position

    @property
    def kind(self) -> str:
        return type(self).__name__


# Lexing

class LexError(TallyError):
    pass


class MalformedNumber(LexError):
    def __init__(self, text: str, position: SourcePosition):
        super().__init__(f"malformed number {text!r} at {position}", position)
        self.text = text


class UnexpectedCharacter(LexError):
    def __init__(self, char: str, position: SourcePosition):
        super().__init__(f"unexpected character {char!r} at {position}", position)
        self.char = char


# Parsing

class ParseError(TallyError):
    pass


class UnexpectedToken(ParseError):
    def __init__(self, expected: str, found: str, position: SourcePosition):
        super().__init__(f"expected {expected} at {position}, got {found}", position)
        self.expected = expected
        self.found = found


# Evaluation

class EvalError(TallyError):
    pass


class UndefinedVariable(EvalError):
    def __init__(self, name: str):
        super().__init__(f"undefined variable {name}")
        self.name = name


class TypeMismatch(EvalError):
    def __init__(self, operator: str, left_type: str, right_type: Optional[str] = None,
                 message: Optional[str] = None):
        if message is None:
            if right_type is None:
                message = f"unsupported {operator} for {left_type}"
            else:
                message = f"unsupported {operator} for {left_type} and {right_type}"
        super().__init__(message)
        self.operator = operator
        self.left_type = left_type
        self.right_type = right_type


class UnknownFunction(EvalError):
    def __init__(self, name: str):
        super().__init__(f"unknown function {name}")
        self.name = name


class StepLimitExceeded(EvalError):
    def __init__(self, limit: int):
        super().__init__(f"loop iteration budget of {limit} exceeded")
        self.limit = limit
