from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator

from src.pq.base.predicate import Predicate
from src.pq.base.record import Record

if TYPE_CHECKING:
    from src.pq.base.table import Table


class TableStore(ABC):
    """
    TableStore defines how a filtered query is executed against an
    underlying partitioned key-value store.
    """

    @abstractmethod
    def execute(self, table: "Table", predicate: Predicate) -> Iterator[Record]:
        """
        Yield every record of ``table`` satisfying ``predicate``.

        Implementations are expected to return records of one partition in
        ascending row key order when the predicate pins a partition.
        """
        pass
