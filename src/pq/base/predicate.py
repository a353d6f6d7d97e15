"""
Composable filter expressions handed to a TableStore.

A predicate is a tree of ``Compare`` leaves joined by ``And`` nodes. Stores
either evaluate it record by record (``evaluate``) or translate it into
their own query language. The dict form is what travels over HTTP.
"""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from src.pq.base.exceptions import InvalidArgument
from src.pq.base.prefix_range import PrefixRange

OPERATORS = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": operator.lt,
    "le": operator.le,
    "gt": operator.gt,
    "ge": operator.ge,
}

# values a store can compare and hash
SCALAR_TYPES = (str, bytes, int, float, bool, type(None))


class Predicate(ABC):

    @abstractmethod
    def evaluate(self, record: Mapping[str, Any]) -> bool:
        """Return True if the record satisfies this predicate."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def conjuncts(self) -> Tuple["Predicate", ...]:
        """Clauses that must all hold, flattened one level."""
        pass

    def __and__(self, other: "Predicate") -> "And":
        if not isinstance(other, Predicate):
            return NotImplemented
        return And(self.conjuncts() + other.conjuncts())


@dataclass(frozen=True)
class Compare(Predicate):
    column: str
    op: str
    value: Any

    def __post_init__(self):
        if not isinstance(self.column, str) or not self.column:
            raise InvalidArgument("column", "column must be a non-empty string")
        if self.op not in OPERATORS:
            raise InvalidArgument("op", f"unknown operator {self.op!r}")
        if not isinstance(self.value, SCALAR_TYPES):
            raise InvalidArgument(
                "value", f"unsupported value type {type(self.value).__name__}"
            )

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        if self.column not in record:
            return False
        try:
            return bool(OPERATORS[self.op](record[self.column], self.value))
        except TypeError:
            # str vs bytes, None vs str, ...
            return False

    def to_dict(self) -> Dict[str, Any]:
        return {"column": self.column, "op": self.op, "value": self.value}

    def conjuncts(self) -> Tuple[Predicate, ...]:
        return (self,)


@dataclass(frozen=True)
class And(Predicate):
    clauses: Tuple[Predicate, ...] = ()

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return all(clause.evaluate(record) for clause in self.clauses)

    def to_dict(self) -> Dict[str, Any]:
        return {"and": [clause.to_dict() for clause in self.clauses]}

    def conjuncts(self) -> Tuple[Predicate, ...]:
        return self.clauses


MATCH_ALL = And()


def eq(column: str, value: Any) -> Compare:
    return Compare(column, "eq", value)


def ne(column: str, value: Any) -> Compare:
    return Compare(column, "ne", value)


def lt(column: str, value: Any) -> Compare:
    return Compare(column, "lt", value)


def le(column: str, value: Any) -> Compare:
    return Compare(column, "le", value)


def gt(column: str, value: Any) -> Compare:
    return Compare(column, "gt", value)


def ge(column: str, value: Any) -> Compare:
    return Compare(column, "ge", value)


def key_range(column: str, key_range: PrefixRange) -> Predicate:
    """
    ``column >= start AND column < end`` for the given range.

    The upper clause is left out when the range is unbounded.
    """
    lower = ge(column, key_range.start)
    if key_range.end is None:
        return lower
    return lower & lt(column, key_range.end)


def predicate_from_dict(data: Any) -> Predicate:
    """Rebuild a predicate from its ``to_dict`` form."""
    if not isinstance(data, Mapping):
        raise InvalidArgument("filter", "predicate must be an object")

    if "and" in data:
        clauses = data["and"]
        if not isinstance(clauses, list):
            raise InvalidArgument("filter", "'and' must be a list")
        return And(tuple(predicate_from_dict(c) for c in clauses))

    missing = [k for k in ("column", "op", "value") if k not in data]
    if missing:
        raise InvalidArgument("filter", f"missing fields: {', '.join(missing)}")
    return Compare(data["column"], data["op"], data["value"])
