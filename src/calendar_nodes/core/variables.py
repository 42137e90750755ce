"""
Flow variables - string-valued store and ${name} interpolation.

A flow keeps a flat map of variable name -> string value. Node parameters
reference variables with ${name}; the resolver substitutes the current values
before a node acts on its parameters.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, Mapping, Optional, Protocol, Union


# Non-greedy up to the first closing brace
VARIABLE_PATTERN = re.compile(r"\$\{([^}]+)\}")


class VariableStore(Protocol):
    """Read/write access to flow-scoped string variables."""

    def get(self, name: str) -> Optional[str]:
        ...

    def set(self, name: str, value: str) -> None:
        ...


class InMemoryVariableStore:
    """
    Dict-backed VariableStore.

    A name can be declared with a None value, which resolves the same as an
    undeclared one.
    """

    def __init__(self, initial: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._values: Dict[str, Optional[str]] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def snapshot(self) -> Dict[str, Optional[str]]:
        """Return a copy of all variables."""
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


Lookup = Union[VariableStore, Mapping[str, Optional[str]], Callable[[str], Optional[str]]]


def _as_lookup(variables: Lookup) -> Callable[[str], Optional[str]]:
    if callable(variables) and not hasattr(variables, "get"):
        return variables
    return variables.get


def resolve_variables(text: Optional[str], variables: Lookup) -> Optional[str]:
    """
    Replace every ${name} in text with the variable's current value.

    Unknown names and variables holding None become the empty string.
    Values are inserted literally and never re-parsed, so a value containing
    "${x}" or backslashes comes through unchanged. When text contains no
    placeholder the same object is returned.

    Args:
        text: Parameter value, possibly None or empty
        variables: VariableStore, plain mapping, or name -> value callable

    Returns:
        The interpolated string
    """
    if not text or VARIABLE_PATTERN.search(text) is None:
        return text

    lookup = _as_lookup(variables)

    def _substitute(match: re.Match) -> str:
        value = lookup(match.group(1))
        return "" if value is None else str(value)

    return VARIABLE_PATTERN.sub(_substitute, text)


class VariableResolver:
    """Binds resolve_variables to one variable store."""

    def __init__(self, variables: Lookup) -> None:
        self._variables = variables

    def resolve(self, text: Optional[str]) -> Optional[str]:
        return resolve_variables(text, self._variables)

    __call__ = resolve


__all__ = [
    "VARIABLE_PATTERN",
    "VariableStore",
    "InMemoryVariableStore",
    "VariableResolver",
    "resolve_variables",
]
