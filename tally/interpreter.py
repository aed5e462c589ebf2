"""Tree-walking evaluator for the Tally language.

`Interpreter.evaluate` walks an AST produced by `tally.parser` (or
`tally.grammar`) and returns the program value. The tree is never
modified; the only side effects go through the `Store` passed in by the
caller, so independent runs started with fresh stores never see each
other's variables.

Operands are type checked at runtime. Numbers and Booleans never convert
into each other, and `NO_VALUE` is rejected by every operator, call and
condition.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Optional, TextIO

from .ast import (
    Assignment, BinaryOp, BooleanLiteral, Call, Identifier, If,
    Node, NumberLiteral, Sequence, UnaryOp, While,
)
from .builtin_function import BUILTINS
from .errors import StepLimitExceeded, TypeMismatch, UnknownFunction
from .parser import parse_program
from .store import Store
from .types import NO_VALUE, is_boolean, is_number, to_string, type_name

ARITHMETIC_OPS = {'+', '-', '*', '/'}
LOGICAL_OPS = {'&&', '||'}
EQUALITY_OPS = {'==', '!='}
RELATIONAL_OPS = {'<', '>'}


def ieee_divide(a: float, b: float) -> float:
    """Divide like IEEE 754 doubles: x/0 is a signed infinity, 0/0 is nan."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


class Interpreter:
    """Core interpreter that evaluates a Tally AST against a store.

    `debug_level` enables tracing: 1 logs assignments, 2 adds conditions
    and loop iterations, 3 logs every evaluated node. Trace lines go to
    `debug_file` when given, otherwise to stderr. The file is opened on the
    first trace line, truncated once, and appended to by later runs.
    `max_iterations` bounds the total number of `while` body executions in
    one run. Use the interpreter as a context manager, or call `close()`,
    when calling `evaluate` directly with a debug file.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None,
                 max_iterations: Optional[int] = None):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None
        self._debug_started = False
        self.max_iterations = max_iterations
        self.iterations = 0

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc_info):
        self.close()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_file:
                if self.debug_fp is None:
                    mode = 'a' if self._debug_started else 'w'
                    self.debug_fp = open(self.debug_file, mode, encoding='utf-8')
                    self._debug_started = True
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Node, store: Optional[Store] = None) -> Any:
        if store is None:
            store = Store()
        self.iterations = 0
        try:
            return self.evaluate(program, store)
        finally:
            self.close()

    def evaluate(self, node: Node, store: Store) -> Any:
        if self.debug_level >= 3:
            self.debug(f"eval {type(node).__name__}")
        if isinstance(node, NumberLiteral):
            return node.value
        if isinstance(node, BooleanLiteral):
            return node.value
        if isinstance(node, Identifier):
            return store.get(node.name)
        if isinstance(node, Assignment):
            value = self.evaluate(node.value, store)
            store.set(node.target, value)
            if self.debug_level >= 1:
                self.debug(f"assign {node.target}: {type_name(value)} = {to_string(value)}")
            return value
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, store)
            return self.apply_unary_op(node.op, operand)
        if isinstance(node, BinaryOp):
            # both sides, left first; && and || do not short-circuit
            left = self.evaluate(node.left, store)
            right = self.evaluate(node.right, store)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, Call):
            args = [self.evaluate(arg, store) for arg in node.args]
            func = BUILTINS.get(node.name)
            if func is None:
                raise UnknownFunction(node.name)
            return func(args)
        if isinstance(node, If):
            cond = self.condition('if', node.condition, store)
            if cond:
                return self.evaluate(node.then_branch, store)
            if node.else_branch is not None:
                return self.evaluate(node.else_branch, store)
            return NO_VALUE
        if isinstance(node, While):
            result = NO_VALUE
            while self.condition('while', node.condition, store):
                self.iterations += 1
                if self.max_iterations is not None and self.iterations > self.max_iterations:
                    raise StepLimitExceeded(self.max_iterations)
                if self.debug_level >= 2:
                    self.debug(f"while iteration {self.iterations}")
                result = self.evaluate(node.body, store)
            return result
        if isinstance(node, Sequence):
            result = NO_VALUE
            for stmt in node.statements:
                result = self.evaluate(stmt, store)
            return result
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def condition(self, keyword: str, node: Node, store: Store) -> bool:
        value = self.evaluate(node, store)
        if not is_boolean(value):
            raise TypeMismatch(keyword, type_name(value),
                               message=f"{keyword} condition must be Boolean, got {type_name(value)}")
        if self.debug_level >= 2:
            self.debug(f"{keyword} condition -> {to_string(value)}")
        return value

    def apply_unary_op(self, op: str, operand: Any) -> Any:
        if op == '-':
            if is_number(operand):
                return -operand
            raise TypeMismatch(op, type_name(operand))
        if op == '!':
            if is_boolean(operand):
                return not operand
            raise TypeMismatch(op, type_name(operand))
        raise TypeMismatch(op, type_name(operand), message=f"unsupported unary operator {op}")

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op in ARITHMETIC_OPS:
            if not (is_number(a) and is_number(b)):
                raise TypeMismatch(op, type_name(a), type_name(b))
            if op == '+':
                return a + b
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            return ieee_divide(a, b)
        if op in LOGICAL_OPS:
            if not (is_boolean(a) and is_boolean(b)):
                raise TypeMismatch(op, type_name(a), type_name(b))
            if op == '&&':
                return a and b
            return a or b
        if op in EQUALITY_OPS:
            same_type = (is_number(a) and is_number(b)) or (is_boolean(a) and is_boolean(b))
            if not same_type:
                raise TypeMismatch(op, type_name(a), type_name(b))
            equal = a == b
            return equal if op == '==' else not equal
        if op in RELATIONAL_OPS:
            if not (is_number(a) and is_number(b)):
                raise TypeMismatch(op, type_name(a), type_name(b))
            return a < b if op == '<' else a > b
        raise TypeMismatch(op, type_name(a), type_name(b), message=f"unknown operator {op}")


def evaluate(node: Node, store: Optional[Store] = None) -> Any:
    """Evaluate a single tree with a default interpreter."""
    if store is None:
        store = Store()
    return Interpreter().evaluate(node, store)


def run_program(source: str, store: Optional[Store] = None, engine: str = 'descent',
                debug_level: int = 0, max_iterations: Optional[int] = None) -> Any:
    """Convenience function to parse and run a Tally program from source string."""
    program = parse_program(source, engine=engine)
    interpreter = Interpreter(debug_level=debug_level, max_iterations=max_iterations)
    return interpreter.run(program, store)
