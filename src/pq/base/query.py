import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from src.pq.base.predicate import MATCH_ALL, Predicate
from src.pq.base.record import Record

if TYPE_CHECKING:
    from src.pq.base.table import Table

logger = logging.getLogger("pq")


@dataclass(frozen=True)
class Query:
    """
    Immutable, lazily executed query over one table.

    ``where`` never mutates the receiver: it returns a new Query whose
    predicate is the conjunction of the existing predicate and the new
    clause. Iterating a Query executes it against the table's store; every
    iteration runs the query again.
    """

    table: "Table"
    predicate: Predicate = field(default=MATCH_ALL)

    def where(self, clause: Predicate) -> "Query":
        return Query(table=self.table, predicate=self.predicate & clause)

    def execute(self) -> Iterator[Record]:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Query.execute: table=%s store=%s filter=%s",
                self.table.name,
                type(self.table.store).__name__,
                self.predicate.to_dict(),
            )
        return self.table.store.execute(self.table, self.predicate)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.execute())
