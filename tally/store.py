from typing import Any, Dict, Iterator, Optional

from tally.errors import UndefinedVariable
from tally.types import NoValue


def check_value(name: str, value: Any) -> Any:
    """Return `value` as a Tally value, widening plain ints to Number.

    Raises TypeError for anything that is not a Number, a Boolean or
    `NO_VALUE`.
    """
    if isinstance(value, (bool, float, NoValue)):
        return value
    if isinstance(value, int):
        return float(value)
    raise TypeError(f"cannot store {type(value).__name__} in variable {name}")


class Store:
    """The single variable scope of a Tally run, mapping names to values."""
    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values: Dict[str, Any] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"Store({self.values!r})"

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise UndefinedVariable(name)

    def set(self, name: str, value: Any):
        # One scope: assignment always overwrites any previous binding
        self.values[name] = check_value(name, value)
