from typing import Dict, Iterator

from bitcalc.errors import EvalError


class Context:
    """Tracks what value each variable is bound to for one session."""
    def __init__(self):
        self.values: Dict[str, int] = {}

    def lookup(self, name: str) -> int:
        if name in self.values:
            return self.values[name]
        raise EvalError(f"Variable '{name}' not found.")

    def insert(self, name: str, value: int):
        # Rebinding simply overwrites the previous value
        self.values[name] = value

    def clear(self):
        self.values.clear()

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
