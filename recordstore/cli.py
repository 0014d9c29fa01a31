"""CLI for inspecting and creating record store databases."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn, Optional

import typer

from recordstore.codec import read_header
from recordstore.config import StoreConfig, load_config
from recordstore.database import Database
from recordstore.errors import RecordStoreError
from recordstore.persistence import dump, load
from recordstore.schemas import Record

app = typer.Typer(help="Record store CLI")


def _fail(message: str) -> NoReturn:
    typer.secho(f"❌ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def import_record_type(spec: str) -> type[Record]:
    """Import a Record subclass from a ``module:Class`` string."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Record type must look like 'module:Class', got {spec!r}")
    module = importlib.import_module(module_name)
    obj: object = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not (isinstance(obj, type) and issubclass(obj, Record)):
        raise ValueError(f"{spec} is not a Record subclass")
    return obj


def _record_type_or_fail(spec: str) -> type[Record]:
    try:
        return import_record_type(spec)
    except (ImportError, AttributeError, ValueError) as e:
        _fail(f"Cannot load record type {spec}: {e}")


def _load_or_fail(path: str, record_type: type[Record]) -> Database[Record]:
    try:
        return load(path, record_type)
    except RecordStoreError as e:
        _fail(str(e))


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config file"),
) -> None:
    """Record store CLI."""
    try:
        store_config = load_config(config) if config else StoreConfig()
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    logging.basicConfig(
        level=store_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = store_config


@app.command()
def inspect(path: str = typer.Argument(..., help="Database file")) -> None:
    """Show a database's settings without decoding its records."""
    db_path = Path(path)
    if not db_path.is_file():
        _fail(f"Database file not found: {path}")
    try:
        header = read_header(db_path.read_bytes())
    except (RecordStoreError, OSError) as e:
        _fail(str(e))

    typer.secho(f"📦 {header.label}", fg=typer.colors.BLUE)
    typer.echo(f"   Save path:  {header.save_path or '(derived from label)'}")
    typer.echo(f"   Strict:     {header.strict_duplicates}")
    typer.echo(f"   Records:    {header.item_count}")
    typer.echo(f"   Type hash:  {header.fingerprint.hex()}")


@app.command("list")
def list_records(
    path: str = typer.Argument(..., help="Database file"),
    record_type: str = typer.Option(..., "--record-type", "-t", help="module:Class"),
) -> None:
    """Print every record as a JSON line."""
    db = _load_or_fail(path, _record_type_or_fail(record_type))
    for record in db:
        typer.echo(record.model_dump_json())


def _text_getter(field: str) -> Callable[[Record], str]:
    def getter(record: Record) -> str:
        projected: object = record
        for part in field.split("."):
            projected = getattr(projected, part)
        return str(projected)

    return getter


@app.command()
def query(
    path: str = typer.Argument(..., help="Database file"),
    field: str = typer.Argument(..., help="Attribute path, e.g. 'age' or 'address.city'"),
    value: str = typer.Argument(..., help="Value to match, compared as text"),
    record_type: str = typer.Option(..., "--record-type", "-t", help="module:Class"),
) -> None:
    """Print one record whose field matches VALUE."""
    db = _load_or_fail(path, _record_type_or_fail(record_type))
    try:
        getter = _text_getter(field)
        record = db.query(getter, value)
    except AttributeError as e:
        _fail(f"Unknown field {field}: {e}")
    except RecordStoreError as e:
        _fail(str(e))
    typer.echo(record.model_dump_json())


@app.command()
def init(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Database label"),
    record_type: str = typer.Option(..., "--record-type", "-t", help="module:Class"),
    save_path: Optional[str] = typer.Option(None, help="Explicit database file"),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Reject duplicate inserts (default from config)"
    ),
) -> None:
    """Create an empty database file."""
    store_config: StoreConfig = ctx.obj if isinstance(ctx.obj, StoreConfig) else StoreConfig()
    record_cls = _record_type_or_fail(record_type)
    target = store_config.resolve_path(label, save_path)
    if target.exists():
        _fail(f"Database file already exists: {target}")

    try:
        db: Database[Record] = Database(
            label=label,
            record_type=record_cls,
            save_path=str(target),
            strict_duplicates=store_config.strict_duplicates if strict is None else strict,
        )
        written = dump(db)
    except (RecordStoreError, ValueError) as e:
        _fail(str(e))

    typer.secho(f"✅ Created database {label!r}", fg=typer.colors.GREEN)
    typer.echo(f"   File: {written}")


if __name__ == "__main__":
    app()
