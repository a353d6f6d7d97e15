from dataclasses import dataclass
from typing import Iterator, Optional, Union

from src.pq.base.exceptions import InvalidArgument

Key = Union[str, bytes]

MAX_CODE_POINT = 0x10FFFF
MAX_BYTE = 0xFF


def _successor(prefix: Key) -> Optional[Key]:
    """
    Smallest key greater than every key starting with ``prefix``.

    The last unit is incremented in place. A unit already at its maximum
    cannot be incremented, so it is dropped and the increment carries into
    the unit before it. Returns None when every unit is at its maximum.
    """
    if isinstance(prefix, bytes):
        for i in range(len(prefix) - 1, -1, -1):
            if prefix[i] < MAX_BYTE:
                return prefix[:i] + bytes([prefix[i] + 1])
        return None

    for i in range(len(prefix) - 1, -1, -1):
        code = ord(prefix[i])
        if code < MAX_CODE_POINT:
            return prefix[:i] + chr(code + 1)
    return None


@dataclass(frozen=True)
class PrefixRange:
    """
    Lexicographic half-open range ``[start, end)`` of all keys sharing a prefix.

    Comparison is ordinal: code points for ``str`` keys, byte values for
    ``bytes`` keys. ``end`` is None only when the prefix consists entirely of
    maximal units, in which case the range has no upper bound.

    >>> PrefixRange("user#")
    PrefixRange(start='user#', end='user$')
    """

    start: Key
    end: Optional[Key]

    def __init__(self, prefix: Key):
        if prefix is None:
            raise InvalidArgument("prefix", "prefix must not be None")
        if isinstance(prefix, bytearray):
            prefix = bytes(prefix)
        if not isinstance(prefix, (str, bytes)):
            raise InvalidArgument(
                "prefix", f"expected str or bytes, got {type(prefix).__name__}"
            )
        if len(prefix) == 0:
            raise InvalidArgument("prefix", "prefix must not be empty")

        object.__setattr__(self, "start", prefix)
        object.__setattr__(self, "end", _successor(prefix))

    @property
    def bounded(self) -> bool:
        return self.end is not None

    def contains(self, key: Key) -> bool:
        if key < self.start:
            return False
        return self.end is None or key < self.end

    __contains__ = contains

    def __iter__(self) -> Iterator[Optional[Key]]:
        # allows ``start, end = PrefixRange(prefix)``
        yield self.start
        yield self.end
