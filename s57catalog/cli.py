"""Click CLI for reading S-57 catalog (CATALOG.031) files."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click

from s57catalog.config import LIST_SUBFIELDS, derive_catalog_path
from s57catalog.iso8211.constants import CATD, ReservedNames
from s57catalog.iso8211.errors import ISO8211Error, format_error_chain
from s57catalog.iso8211.reader import CatalogReader, open_catalog
from s57catalog.profiles import Config, load_config, resolve_catalog, save_config

log = logging.getLogger(__name__)


class Context:
    """Holds the catalog path resolved from --catalog / config."""

    def __init__(self, catalog: Path | None = None):
        self._explicit_catalog = catalog
        self._config: Config | None = None
        self._resolved_catalog: Path | None = None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = load_config()
        return self._config

    @property
    def catalog(self) -> Path:
        if self._resolved_catalog is None:
            self._resolved_catalog = resolve_catalog(self._explicit_catalog, self.config)
        return self._resolved_catalog

    @property
    def names(self) -> ReservedNames:
        return self.config.names


pass_ctx = click.make_pass_decorator(Context)


@contextmanager
def catalog_reader(ctx: Context) -> Iterator[CatalogReader]:
    """Open the catalog, turning decoding errors into a readable CLI error."""
    log.info("Reading %s", ctx.catalog)
    try:
        with open_catalog(ctx.catalog, ctx.names) as reader:
            yield reader
    except ISO8211Error as err:
        raise click.ClickException(format_error_chain(err)) from err


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _format_value(value) -> str:
    return "" if value is None else str(value)


@click.group()
@click.option(
    "--catalog", required=False, default=None,
    type=click.Path(exists=False, path_type=Path),
    help="Path to CATALOG.031 or an exchange set directory (optional if configured)",
)
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug)")
@click.version_option(package_name="s57catalog")
@click.pass_context
def cli(ctx, catalog: Optional[Path], verbose: int):
    """s57cat - S-57 catalog reader.

    Decode the ISO 8211 records of an exchange set's CATALOG.031 and
    inspect, list, or export them.
    """
    _configure_logging(verbose)
    ctx.obj = Context(catalog=catalog)


@cli.command()
def init():
    """Set the default catalog path (interactive)."""
    config = load_config()
    if config.default_catalog:
        click.echo(f"Current default catalog: {config.default_catalog}")

    while True:
        raw = click.prompt("Path to CATALOG.031 or exchange set").strip().strip('"').strip("'")
        resolved = derive_catalog_path(Path(raw))
        if resolved is not None:
            break
        click.echo(f"No CATALOG.031 found at {raw}")

    config.default_catalog = resolved
    saved_path = save_config(config)
    click.echo(f"\nConfig saved to {saved_path}")
    click.echo(f"Default catalog: {resolved}")


@cli.command()
@pass_ctx
def info(ctx: Context):
    """Show the leader and schema of the catalog."""
    with catalog_reader(ctx) as reader:
        ddr = reader.ddr

    leader = ddr.leader
    click.echo(f"Catalog: {ctx.catalog}")
    click.echo(f"  Interchange level: {leader.interchange_level}")
    click.echo(f"  Version:           {leader.version}")
    click.echo(f"  Entry map:         tag={leader.tag_width} length={leader.length_width} "
               f"position={leader.position_width}")

    if ddr.file_control is not None:
        fc = ddr.file_control
        pairs = " ".join(f"{p}>{c}" for p, c in fc.tag_pairs) or "(none)"
        click.echo(f"  File title:        {fc.title or '(none)'}")
        click.echo(f"  Field tree:        {pairs}")

    click.echo(f"\n{'Tag':<6}  {'Name':<32}  {'Structure':<28}  {'Type'}")
    click.echo("-" * 90)
    for tag in ddr.tags:
        ddf = ddr.fields[tag]
        click.echo(f"{tag:<6}  {ddf.name:<32}  {ddf.controls.structure.description:<28}  "
                   f"{ddf.controls.data_type.description}")
        for sub, spec in ddf.subfields:
            click.echo(f"          {sub:<8} {spec}")


@cli.command("list")
@pass_ctx
def list_records(ctx: Context):
    """List catalog records."""
    with catalog_reader(ctx) as reader:
        click.echo(f"{'ID':>6}  " + "  ".join(f"{name:<14}" for name in LIST_SUBFIELDS))
        click.echo("-" * 72)
        count = 0
        for rec in reader:
            catd = rec.get(CATD) or {}
            cols = "  ".join(f"{_format_value(catd.get(name)):<14}" for name in LIST_SUBFIELDS)
            click.echo(f"{_format_value(rec.id):>6}  {cols}")
            count += 1
    click.echo(f"\n{count} records")


@cli.command()
@click.argument("record_id", type=int)
@pass_ctx
def show(ctx: Context, record_id: int):
    """Show every field of the record with RECORD_ID."""
    with catalog_reader(ctx) as reader:
        rec = next((r for r in reader if r.id == record_id), None)
        ddr = reader.ddr

    if rec is None:
        click.echo(f"Record {record_id} not found.")
        return

    click.echo(f"Record {record_id}")
    for tag in rec:
        ddf = ddr.get(tag)
        name = f" ({ddf.name})" if ddf is not None and ddf.name else ""
        click.echo(f"  {tag}{name}")
        for sub, value in rec[tag].items():
            click.echo(f"    {sub:<8} = {_format_value(value)}")


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), required=True)
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@pass_ctx
def export(ctx: Context, fmt: str, output: Optional[str]):
    """Export all records as CSV or JSON."""
    with catalog_reader(ctx) as reader:
        records = reader.parse_all()
        ddr = reader.ddr

    if fmt == "csv":
        from s57catalog.export.csv_export import export_csv
        data = export_csv(ddr, records)
    else:
        from s57catalog.export.json_export import export_json
        data = export_json(records)

    if output:
        Path(output).write_text(data, encoding="utf-8")
        click.echo(f"Exported {len(records)} records to {output}")
    else:
        click.echo(data)
