import logging
from typing import Any, Iterator, List, Tuple

import pymysql

from src.pq.base.exceptions import InvalidArgument, StoreError
from src.pq.base.predicate import And, Compare, Predicate
from src.pq.base.record import Record
from src.pq.base.table import Table
from src.pq.base.table_store import TableStore

logger = logging.getLogger("pq")

SQL_OPERATORS = {
    "eq": "=",
    "ne": "<>",
    "lt": "<",
    "le": "<=",
    "gt": ">",
    "ge": ">=",
}


def quote_identifier(name: str) -> str:
    if not name or "`" in name:
        raise InvalidArgument("identifier", f"unsupported identifier {name!r}")
    return f"`{name}`"


def render_predicate(predicate: Predicate) -> Tuple[str, List[Any]]:
    """
    Render a predicate as a parameterised SQL condition.

    Returns ("", []) for a predicate that matches everything.
    """
    if isinstance(predicate, Compare):
        column = quote_identifier(predicate.column)
        return f"{column} {SQL_OPERATORS[predicate.op]} %s", [predicate.value]

    if isinstance(predicate, And):
        parts, params = [], []
        for clause in predicate.clauses:
            sql, clause_params = render_predicate(clause)
            if sql:
                parts.append(sql)
                params.extend(clause_params)
        if len(parts) <= 1:
            return (parts[0] if parts else ""), params
        return "(" + " AND ".join(parts) + ")", params

    raise InvalidArgument("filter", f"unsupported predicate {type(predicate).__name__}")


class MySQLTableStore(TableStore):
    """
    Executes queries with pymysql.

    Ordinal row key comparison needs a binary collation on the row key
    column (e.g. ``VARBINARY`` or ``utf8mb4_bin``); with a case-insensitive
    collation a prefix range can pick up keys differing only in case.
    """

    def __init__(self, conn: pymysql.connections.Connection):
        self.conn = conn

        logger.info("TableStore initialized: backend=mysql")

    def build_sql(self, table: Table, predicate: Predicate) -> Tuple[str, List[Any]]:
        where, params = render_predicate(predicate)
        sql = f"SELECT * FROM {quote_identifier(table.name)}"
        if where:
            sql += f" WHERE {where}"
        sql += (
            f" ORDER BY {quote_identifier(table.schema.partition_column)},"
            f" {quote_identifier(table.schema.row_key_column)}"
        )
        return sql, params

    def execute(self, table: Table, predicate: Predicate) -> Iterator[Record]:
        sql, params = self.build_sql(table, predicate)

        logger.debug("MySQLTableStore.execute: sql=%s params=%s", sql, params)

        try:
            cursor = self.conn.cursor(pymysql.cursors.DictCursor)
            cursor.execute(sql, params)
            rows = cursor.fetchall()
        except pymysql.MySQLError as e:
            logger.error("MySQLTableStore.execute failed: table=%s err=%s", table.name, e)
            raise StoreError("mysql", details=str(e)) from e

        logger.info(
            "MySQLTableStore.execute done: table=%s records=%d", table.name, len(rows)
        )

        for row in rows:
            yield Record(row, table.schema)
