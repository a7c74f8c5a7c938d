"""Default paths and constants for locating S-57 catalog files."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

CATALOG_FILE_NAME = "CATALOG.031"
EXCHANGE_SET_ROOT = "ENC_ROOT"

# Catalog directory subfields shown by `s57cat list`
LIST_SUBFIELDS = ("FILE", "IMPL", "VOLM", "LFIL")


def find_catalog_in(directory: Path) -> Optional[Path]:
    """Return the catalog file directly inside ``directory`` (case-insensitive)."""
    if not directory.is_dir():
        return None
    wanted = CATALOG_FILE_NAME.lower()
    for p in sorted(directory.iterdir()):
        if p.is_file() and p.name.lower() == wanted:
            return p
    return None


def derive_catalog_path(path: Path) -> Optional[Path]:
    """Resolve a file or exchange-set directory to its CATALOG.031.

    Directories are searched first at their top level, then inside an
    ENC_ROOT child directory.
    """
    if path.is_file():
        return path
    found = find_catalog_in(path)
    if found is not None:
        return found
    for child in (path / EXCHANGE_SET_ROOT, path / EXCHANGE_SET_ROOT.lower()):
        found = find_catalog_in(child)
        if found is not None:
            return found
    return None
