from dataclasses import dataclass, field
from typing import Any

from src.pq.base.query import Query
from src.pq.base.record import TableSchema
from src.pq.base.table_store import TableStore


@dataclass(frozen=True)
class Table:
    store: TableStore
    name: str
    schema: TableSchema = field(default_factory=TableSchema)

    def create_query(self) -> Query:
        return Query(table=self)

    def partition(self, partition_key: Any) -> "Partition":
        return Partition(table=self, partition_key=partition_key)


@dataclass(frozen=True)
class Partition:
    """A partition key bound to the table it lives in."""

    table: Table
    partition_key: Any
