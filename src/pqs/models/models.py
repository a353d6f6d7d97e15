from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class QueryRequest(BaseModel):
    filter: Optional[Dict[str, Any]] = None
    partition_key: Optional[str] = None
    prefix: Optional[str] = None


class RangeModel(BaseModel):
    start: str
    end: Optional[str] = None


class QueryResponse(BaseModel):
    records: List[Dict[str, Any]]


class PrefixQueryResponse(QueryResponse):
    table: str
    partition_key: str
    prefix: str
    range: RangeModel
