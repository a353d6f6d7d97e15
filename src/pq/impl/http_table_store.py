"""
HTTP Table Store

Executes queries on a remote query service (see src/pqs) by shipping the
predicate in its dict form to ``POST /tables/{table}/query``.
"""

import logging
from typing import Iterator
from urllib.parse import quote

import httpx

from src.pq.base.exceptions import InvalidArgument, StoreError
from src.pq.base.predicate import Predicate
from src.pq.base.record import Record
from src.pq.base.table import Table
from src.pq.base.table_store import TableStore

logger = logging.getLogger("pq")


class HttpTableStore(TableStore):

    def __init__(self, base_url: str, http_client: httpx.Client):
        """
        Args:
            base_url: Base URL of the query service
            http_client: Shared httpx client for connection pooling
        """
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client

        logger.info("TableStore initialized: backend=http url=%s", self.base_url)

    def execute(self, table: Table, predicate: Predicate) -> Iterator[Record]:
        url = f"{self.base_url}/tables/{quote(table.name, safe='')}/query"
        body = {"filter": predicate.to_dict()}

        logger.debug("HttpTableStore.execute: url=%s filter=%s", url, body["filter"])

        try:
            response = self.http_client.post(url, json=body)
            response.raise_for_status()
            result = response.json()

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 400:
                raise InvalidArgument("filter", details=e.response.text) from e
            logger.error(
                "Query service failed: status=%s url=%s", e.response.status_code, url
            )
            raise StoreError("http", details=f"HTTP {e.response.status_code}") from e

        except httpx.RequestError as e:
            logger.error("Failed to connect to query service: %s url=%s", e, url)
            raise StoreError("http", details=str(e)) from e

        except ValueError as e:
            logger.error("Query service returned invalid JSON: url=%s", url)
            raise StoreError("http", details=f"invalid JSON response: {e}") from e

        records = result.get("records", []) if isinstance(result, dict) else None
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            logger.error("Query service returned unexpected body: url=%s", url)
            raise StoreError("http", details="response is not a record list")

        logger.info(
            "HttpTableStore.execute done: table=%s records=%d", table.name, len(records)
        )

        for row in records:
            yield Record(row, table.schema)
