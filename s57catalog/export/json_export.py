"""Export catalog records as JSON."""
from __future__ import annotations

import json
from typing import Iterable

from s57catalog.iso8211.records import Record


def record_to_dict(rec: Record) -> dict:
    return {
        "id": rec.id,
        "fields": {tag: dict(field) for tag, field in rec.fields.items()},
    }


def export_json(records: Iterable[Record]) -> str:
    """Export records as JSON string."""
    data = [record_to_dict(rec) for rec in records]
    return json.dumps(data, indent=2)
