"""User config: default catalog path and reserved-name overrides."""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import click

from s57catalog.config import derive_catalog_path
from s57catalog.iso8211.constants import DEFAULT_NAMES, ReservedNames

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class Config:
    default_catalog: Path | None = None
    names: ReservedNames = field(default_factory=lambda: DEFAULT_NAMES)


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir("s57cat")) / "config.toml"


def load_config() -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = get_config_path()
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = Config()
    if data.get("default_catalog"):
        config.default_catalog = Path(data["default_catalog"])
    reserved = data.get("reserved", {})
    config.names = ReservedNames(
        record_id_subfield=reserved.get("record_id_subfield", DEFAULT_NAMES.record_id_subfield),
        top_level_tag=reserved.get("top_level_tag", DEFAULT_NAMES.top_level_tag),
        file_control_tag=reserved.get("file_control_tag", DEFAULT_NAMES.file_control_tag),
    )
    return config


def save_config(config: Config) -> Path:
    """Write config to TOML using literal strings for paths."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    if config.default_catalog:
        # Literal strings (single quotes) so backslashes aren't escapes
        lines.append(f"default_catalog = '{config.default_catalog}'")
    lines.append("")

    if config.names != DEFAULT_NAMES:
        lines.append("[reserved]")
        lines.append(f"record_id_subfield = \"{config.names.record_id_subfield}\"")
        lines.append(f"top_level_tag = \"{config.names.top_level_tag}\"")
        lines.append(f"file_control_tag = \"{config.names.file_control_tag}\"")
        lines.append("")

    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def resolve_catalog(catalog: Path | None, config: Config | None = None) -> Path:
    """Resolve the catalog path: --catalog > configured default.

    Raises click.UsageError with a helpful message if nothing resolves.
    """
    if catalog is None:
        config = config or load_config()
        catalog = config.default_catalog
        if catalog is None:
            raise click.UsageError(
                "No catalog provided. Either:\n"
                "  1. Run 's57cat init' to set a default catalog\n"
                "  2. Pass --catalog <path> explicitly"
            )

    if not catalog.exists():
        raise click.UsageError(f"Catalog not found: {catalog}")

    resolved = derive_catalog_path(catalog)
    if resolved is None:
        raise click.UsageError(f"No CATALOG.031 found in {catalog}")
    return resolved
