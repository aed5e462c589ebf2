"""Runtime values for Tally.

A Tally value is either a Number or a Boolean. Numbers are represented by
Python `float` and Booleans by Python `bool`. Because `bool` is a subclass
of `int` and compares equal to `1.0`, the helpers below always dispatch on
the exact Python type rather than relying on equality or truthiness.

Statements that complete without a usable value (an untaken `if`, a loop
whose body never ran, an empty sequence) produce `NO_VALUE`.
"""

from __future__ import annotations

from typing import Any, Union


class NoValue:
    """Marker for the "no value" result. Use the `NO_VALUE` singleton."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NoValue'

    def __bool__(self) -> bool:
        return False


NO_VALUE = NoValue()

Value = Union[float, bool]

NUMBER = 'Number'
BOOLEAN = 'Boolean'


def is_number(value: Any) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Tally type name of a runtime value."""
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, float):
        return NUMBER
    if isinstance(value, NoValue):
        return 'NoValue'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Render a value the way the command line prints it.

    Integral numbers drop the fractional part (`5`, not `5.0`); other
    numbers use `repr`, which also covers `inf` and `nan`. Booleans print
    as `true`/`false` and `NO_VALUE` renders as an empty string.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, NoValue):
        return ''
    return str(value)
