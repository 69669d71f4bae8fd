"""CSV writer port - encodes export rows."""

from collections.abc import Iterable, Sequence
from typing import Protocol


class CsvWriter(Protocol):
    """Port for encoding rows into CSV bytes."""

    def encode(self, rows: Iterable[Sequence[str]]) -> bytes: ...
