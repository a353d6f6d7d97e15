"""
PQS (Prefix Query Service)

FastAPI application serving row key prefix queries and filtered queries
over a TableStore. Run with:

    uvicorn src.pqs.service.query_service:app
"""

import logging

import pymysql
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.pq.base.exceptions import InvalidArgument, PQException
from src.pq.base.predicate import eq, predicate_from_dict
from src.pq.base.prefix_range import PrefixRange
from src.pq.base.record import TableSchema
from src.pq.base.table import Table
from src.pq.base.table_store import TableStore
from src.pq.impl.memory_table_store import MemoryTableStore
from src.pq.impl.mysql_table_store import MySQLTableStore
from src.pq.prefix_query import row_key_prefix_query, where_row_key_prefix
from src.pqs.base.err_handle import pq_exception_handler
from src.pqs.config import PQSConfig, get_config
from src.pqs.models.models import PrefixQueryResponse, QueryRequest, QueryResponse

logger = logging.getLogger(__name__)


def build_store(config: PQSConfig) -> TableStore:
    if config.backend == "memory":
        return MemoryTableStore()

    if config.backend == "mysql":
        conn = pymysql.connect(
            host=config.mysql_host,
            port=config.mysql_port,
            user=config.mysql_user,
            password=config.mysql_password,
            database=config.mysql_db,
            autocommit=True,
            cursorclass=pymysql.cursors.DictCursor,
        )
        return MySQLTableStore(conn)

    raise InvalidArgument("backend", f"unknown backend {config.backend!r}")


def create_app(store: TableStore, schema: TableSchema = TableSchema()) -> FastAPI:
    """
    Build the query service around a store.

    Tables are resolved by name on every request; the store decides
    whether the table exists (an unknown table simply has no rows).
    """
    app = FastAPI(
        title="Prefix Query Service (PQS)",
        description="Row key prefix range queries over partitioned tables",
        version="1.0.0",
    )
    app.state.store = store
    app.state.schema = schema

    def get_table(name: str) -> Table:
        return Table(store=store, name=name, schema=schema)

    app.add_exception_handler(PQException, pq_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error("Validation error: %s", exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation error",
                "details": str(exc.errors()),
            },
        )

    @app.get("/tables/{table}/partitions/{partition_key}/rows", response_model=PrefixQueryResponse)
    def prefix_rows(table: str, partition_key: str, prefix: str):
        partition = get_table(table).partition(partition_key)
        query = row_key_prefix_query(partition, prefix)
        prefix_range = PrefixRange(prefix)

        records = [dict(r) for r in query]
        logger.info(
            "Prefix query: table=%s partition=%s prefix=%r records=%d",
            table, partition_key, prefix, len(records),
        )

        return {
            "table": table,
            "partition_key": partition_key,
            "prefix": prefix,
            "range": {"start": prefix_range.start, "end": prefix_range.end},
            "records": records,
        }

    @app.post("/tables/{table}/query", response_model=QueryResponse)
    def query_rows(table: str, req: QueryRequest):
        t = get_table(table)
        query = t.create_query()
        if req.filter is not None:
            query = query.where(predicate_from_dict(req.filter))
        if req.partition_key is not None:
            query = query.where(eq(schema.partition_column, req.partition_key))
        if req.prefix is not None:
            query = where_row_key_prefix(query, req.prefix)

        records = [dict(r) for r in query]
        logger.info("Filtered query: table=%s records=%d", table, len(records))

        return {"records": records}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


config = get_config()

logging.basicConfig(
    level=config.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = create_app(
    build_store(config),
    TableSchema(
        partition_column=config.partition_column,
        row_key_column=config.row_key_column,
    ),
)


if __name__ == "__main__":
    uvicorn.run(
        "src.pqs.service.query_service:app",
        host=config.host,
        port=config.port,
        reload=False,
        log_level=config.log_level.lower(),
    )
