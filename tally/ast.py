"""Abstract Syntax Tree (AST) definitions for the Tally language.

Nodes are frozen dataclasses built once by a parser and never modified.
Child collections are tuples, so two parses of the same text compare
equal and a tree can be shared with any number of evaluations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class Assignment(Node):
    target: str
    value: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str  # '-' or '!'
    operand: Node


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass(frozen=True)
class While(Node):
    condition: Node
    body: Node


@dataclass(frozen=True)
class Sequence(Node):
    """A whole program or a braced block."""
    statements: Tuple[Node, ...] = ()
