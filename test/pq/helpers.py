"""
PQ Test Helper Functions
"""
from typing import Any, Dict, Iterable, List

from src.pq.base.predicate import Predicate
from src.pq.base.record import Record, TableSchema
from src.pq.base.table import Table
from src.pq.base.table_store import TableStore
from src.pq.impl.memory_table_store import MemoryTableStore

TABLE = "EVENTS"


# ==================== Table Factory ====================

def new_table(rows: Iterable[Dict[str, Any]] = (), schema: TableSchema = TableSchema()) -> Table:
    """Create an in-memory table seeded with rows"""
    store = MemoryTableStore()
    table = Table(store=store, name=TABLE, schema=schema)
    for row in rows:
        store.put(table, row)
    return table


def event(partition: str, row_key: str, **extra) -> Dict[str, Any]:
    return {"PartitionKey": partition, "RowKey": row_key, **extra}


def row_keys(records: Iterable[Record]) -> List[Any]:
    return [r.row_key for r in records]


# ==================== Fakes ====================

class RecordingStore(TableStore):
    """Store that records every execute call and returns canned records"""

    def __init__(self, records=()):
        self.records = list(records)
        self.calls = []

    def execute(self, table: Table, predicate: Predicate):
        self.calls.append((table.name, predicate))
        return iter(self.records)


class FakeCursor:
    def __init__(self, rows, error=None):
        self.rows = rows
        self.error = error
        self.executed = []

    def execute(self, sql, params=None):
        if self.error is not None:
            raise self.error
        self.executed.append((sql, params))

    def fetchall(self):
        return list(self.rows)


class FakeConnection:
    """Just enough of pymysql.Connection for MySQLTableStore"""

    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.cursors: List[FakeCursor] = []

    def cursor(self, cursorclass=None):
        cursor = FakeCursor(self.rows, self.error)
        self.cursors.append(cursor)
        return cursor
