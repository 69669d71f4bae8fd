"""CSV writer implementation on the standard csv module."""

import csv
import io
from collections.abc import Iterable, Sequence


class StandardCsvWriter:
    """Encode rows as RFC 4180 CSV (CRLF line endings, minimal quoting)."""

    def __init__(self, encoding: str = "utf-8", delimiter: str = ",") -> None:
        self._encoding = encoding
        self._delimiter = delimiter

    def encode(self, rows: Iterable[Sequence[str]]) -> bytes:
        """Encode rows to bytes."""
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=self._delimiter, lineterminator="\r\n")
        writer.writerows(rows)
        return buf.getvalue().encode(self._encoding)
