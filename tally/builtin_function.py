import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from tally.errors import TypeMismatch
from tally.types import is_number, type_name


@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    arity: int
    fn: Callable[..., Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

    def __call__(self, args: List[Any]) -> Any:
        if len(args) != self.arity:
            raise TypeMismatch(self.name, ', '.join(type_name(a) for a in args) or 'no arguments',
                               message=f"{self.name} expects {self.arity} arguments, got {len(args)}")
        for arg in args:
            if not is_number(arg):
                raise TypeMismatch(self.name, type_name(arg),
                                   message=f"{self.name} arguments must be Number, got {type_name(arg)}")
        return self.fn(*args)


def number_min(a: float, b: float) -> float:
    """IEEE minimum: nan if either side is nan, and -0.0 below 0.0."""
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if a == b:
        return a if math.copysign(1.0, a) < 0 else b
    return a if a < b else b


def number_max(a: float, b: float) -> float:
    """IEEE maximum: nan if either side is nan, and 0.0 above -0.0."""
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if a == b:
        return a if math.copysign(1.0, a) > 0 else b
    return a if a > b else b


BUILTINS: Dict[str, BuiltinFunction] = {
    'min': BuiltinFunction('min', 2, number_min),
    'max': BuiltinFunction('max', 2, number_max),
}
