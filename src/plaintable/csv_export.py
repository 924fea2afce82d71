"""
CSV export of table definitions.

Reuses a TableFormatter's columns (extractors and converters) to write the
same records as delimiter-separated values. Cell formatting (padding,
truncation, borders) does not apply to CSV output.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from typing import Any

from .table import TableFormatter

logger = logging.getLogger(__name__)


def render_csv(
    formatter: TableFormatter,
    records: Iterable[Any],
    *,
    delimiter: str = ",",
    quoting: int = csv.QUOTE_MINIMAL,
    header: bool = True,
    include_aggregates: bool = False,
) -> str:
    """
    Render records as CSV using a table definition.

    Args:
        formatter: Table whose columns define the CSV columns
        records: Records to write; None records give empty fields and
            separator markers are skipped
        delimiter: Field delimiter
        quoting: One of the ``csv.QUOTE_*`` constants
        header: Write the column titles as the first line
        include_aggregates: Also write subtotal and closing aggregate rows

    Returns:
        CSV text with ``\\n`` line endings

    Raises:
        ConversionError: If a value cannot be converted
    """
    data = formatter.process(records)
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, quoting=quoting, lineterminator="\n")

    if header:
        writer.writerow(formatter.titles)
    rows = data.content_rows(include_aggregates=include_aggregates)
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row.cells])

    logger.debug("Wrote %d CSV rows", len(rows))
    return buffer.getvalue()
