import bisect
import logging
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from src.pq.base.exceptions import InvalidArgument
from src.pq.base.predicate import Compare, Predicate
from src.pq.base.record import Record
from src.pq.base.table import Table
from src.pq.base.table_store import TableStore

logger = logging.getLogger("pq")

ROW_KEY_TYPES = (str, bytes)
PARTITION_KEY_TYPES = (str, bytes, int)


def _check_same_type(keyed: Dict[Any, Any], key: Any, column: str) -> None:
    existing = next(iter(keyed), None)
    if existing is not None and type(existing) is not type(key):
        raise InvalidArgument(
            column,
            f"key type {type(key).__name__} differs from stored {type(existing).__name__}",
        )


def scan_bounds(
    predicate: Predicate, partition_column: str, row_key_column: str
) -> Tuple[Optional[Any], Optional[Any], Optional[Any]]:
    """
    Extract (partition, lower, upper) from the top-level conjuncts.

    ``lower`` comes from a ``ge`` clause and ``upper`` from an ``lt`` clause
    on the row key column. Any value may be None when the predicate does not
    pin it. The bounds only narrow the scan; every candidate is still
    checked with ``evaluate``.
    """
    partition = lower = upper = None
    for clause in predicate.conjuncts():
        if not isinstance(clause, Compare):
            continue
        if clause.column == partition_column and clause.op == "eq" and partition is None:
            partition = clause.value
        elif clause.column == row_key_column and clause.op == "ge" and lower is None:
            lower = clause.value
        elif clause.column == row_key_column and clause.op == "lt" and upper is None:
            upper = clause.value
    return partition, lower, upper


class MemoryTableStore(TableStore):
    """
    Ordered in-memory table store.

    Rows are kept per (table, partition) keyed by row key. Queries that pin
    a partition and a row key interval are served by binary search over the
    sorted row keys.
    """

    def __init__(self):
        # table name -> partition key -> row key -> record
        self._tables: Dict[str, Dict[Any, Dict[Any, Record]]] = {}
        self._lock = threading.Lock()

        logger.info("MemoryTableStore initialized")

    def put(self, table: Table, data: Mapping[str, Any]) -> Record:
        """
        Insert or replace a row, keyed by its partition and row key.

        Row keys must be ``str`` or ``bytes``. All row keys of a partition,
        and all partition keys of a table, must share one type so they stay
        sortable.
        """
        record = Record(data, table.schema)
        partition_key, row_key = record.partition_key, record.row_key
        if partition_key is None:
            raise InvalidArgument(table.schema.partition_column, "missing partition key")
        if row_key is None:
            raise InvalidArgument(table.schema.row_key_column, "missing row key")
        if not isinstance(partition_key, PARTITION_KEY_TYPES) or isinstance(partition_key, bool):
            raise InvalidArgument(
                table.schema.partition_column,
                f"unsupported partition key type {type(partition_key).__name__}",
            )
        if not isinstance(row_key, ROW_KEY_TYPES):
            raise InvalidArgument(
                table.schema.row_key_column,
                f"row key must be str or bytes, got {type(row_key).__name__}",
            )

        with self._lock:
            partitions = self._tables.setdefault(table.name, {})
            _check_same_type(partitions, partition_key, table.schema.partition_column)
            rows = partitions.get(partition_key, {})
            _check_same_type(rows, row_key, table.schema.row_key_column)
            rows[row_key] = record
            partitions[partition_key] = rows

        logger.debug(
            "MemoryTableStore.put: table=%s partition=%r row=%r",
            table.name, partition_key, row_key,
        )
        return Record(record, table.schema)

    def execute(self, table: Table, predicate: Predicate) -> Iterator[Record]:
        schema = table.schema
        partition, lower, upper = scan_bounds(
            predicate, schema.partition_column, schema.row_key_column
        )
        candidates = self._snapshot(table.name, partition, lower, upper)

        logger.debug(
            "MemoryTableStore.execute: table=%s partition=%r range=[%r, %r) candidates=%d",
            table.name, partition, lower, upper, len(candidates),
        )

        for record in candidates:
            if predicate.evaluate(record):
                yield Record(record, schema)

    def _snapshot(self, table_name, partition, lower, upper) -> List[Record]:
        with self._lock:
            partitions = self._tables.get(table_name, {})
            if partition is not None:
                rows = partitions.get(partition)
                if rows is None:
                    return []
                return self._slice(rows, lower, upper)

            candidates = []
            for key in sorted(partitions):
                candidates.extend(self._slice(partitions[key], lower, upper))
            return candidates

    @staticmethod
    def _slice(rows: Dict[Any, Record], lower, upper) -> List[Record]:
        keys = sorted(rows)
        try:
            lo = 0 if lower is None else bisect.bisect_left(keys, lower)
            hi = len(keys) if upper is None else bisect.bisect_left(keys, upper)
        except TypeError:
            # bound of another type than the stored keys; let evaluate decide
            lo, hi = 0, len(keys)
        return [rows[k] for k in keys[lo:hi]]
