"""Export catalog records as CSV."""
from __future__ import annotations

import csv
import io
from typing import Iterable

from s57catalog.iso8211.records import DDR, Record


def schema_columns(ddr: DDR) -> list[tuple[str, str]]:
    """(field tag, subfield tag) for every subfield, in DDR directory order."""
    columns = []
    for tag in ddr.tags:
        for subfield in ddr.fields[tag].subfield_tags:
            columns.append((tag, subfield))
    return columns


def export_csv(ddr: DDR, records: Iterable[Record]) -> str:
    """Export records as CSV string, one column per schema subfield."""
    output = io.StringIO()
    writer = csv.writer(output)

    columns = schema_columns(ddr)
    writer.writerow(["id", *(f"{tag}.{sub}" for tag, sub in columns)])

    for rec in records:
        row = ["" if rec.id is None else rec.id]
        for tag, sub in columns:
            value = (rec.get(tag) or {}).get(sub)
            row.append("" if value is None else value)
        writer.writerow(row)

    return output.getvalue()
