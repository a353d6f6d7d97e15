"""
Row key prefix queries.

A "row key starts with" condition is rewritten into the half-open range
``RowKey >= start AND RowKey < end`` so the store can serve it as an index
range scan within a partition instead of scanning the table.
"""

import logging

from src.pq.base.predicate import eq, key_range
from src.pq.base.prefix_range import Key, PrefixRange
from src.pq.base.query import Query
from src.pq.base.table import Partition

logger = logging.getLogger("pq")


def row_key_prefix_query(partition: Partition, prefix: Key) -> Query:
    """
    Query the rows of a partition whose row key starts with ``prefix``.

    Args:
        partition: Partition to scan; its table supplies the store and
            the partition/row key column names.
        prefix: Non-empty row key prefix.

    Returns:
        A Query that allows further criteria to be added with ``where``.

    Raises:
        InvalidArgument: If prefix is None or empty.
    """
    table = partition.table
    query = table.create_query().where(
        eq(table.schema.partition_column, partition.partition_key)
    )
    return where_row_key_prefix(query, prefix)


def where_row_key_prefix(query: Query, prefix: Key) -> Query:
    """
    Apply a row key prefix criterion to an existing query.

    Clauses already on the query are kept; the range is added by
    conjunction.

    Raises:
        InvalidArgument: If prefix is None or empty.
    """
    prefix_range = PrefixRange(prefix)

    logger.debug(
        "where_row_key_prefix: table=%s range=[%r, %r)",
        query.table.name,
        prefix_range.start,
        prefix_range.end,
    )

    return query.where(key_range(query.table.schema.row_key_column, prefix_range))
