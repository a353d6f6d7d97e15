from dataclasses import dataclass
from typing import Any

DEFAULT_PARTITION_COLUMN = "PartitionKey"
DEFAULT_ROW_KEY_COLUMN = "RowKey"


@dataclass(frozen=True)
class TableSchema:
    partition_column: str = DEFAULT_PARTITION_COLUMN
    row_key_column: str = DEFAULT_ROW_KEY_COLUMN


class Record(dict):
    def __init__(self, data, schema: TableSchema = TableSchema()):
        super().__init__(data)
        self.schema = schema

    @property
    def partition_key(self) -> Any:
        return self.get(self.schema.partition_column)

    @property
    def row_key(self) -> Any:
        return self.get(self.schema.row_key_column)
