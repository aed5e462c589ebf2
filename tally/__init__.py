# Tally language package
# This package provides a parser and interpreter for the Tally language.
from .errors import TallyError, LexError, ParseError, EvalError
from .interpreter import run_program, evaluate, Interpreter
from .parser import parse_program
from .store import Store
from .types import NO_VALUE

__all__ = [
    'run_program',
    'evaluate',
    'parse_program',
    'Interpreter',
    'Store',
    'NO_VALUE',
    'TallyError',
    'LexError',
    'ParseError',
    'EvalError',
]
