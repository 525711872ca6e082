from __future__ import annotations

from dataclasses import dataclass
import json as _json
import logging
from pathlib import Path

import typer

from pinstore.adapters.filesystem.local import LocalFileSystem
from pinstore.application.check_pins import load_pins
from pinstore.application.result_serialization import serialize_result
from pinstore.application.settings import (
    CONFIG_FILENAME,
    Settings,
    effective_pins_file,
    read_settings,
    write_settings,
)
from pinstore.application.update_pins import migrate_pins, reset_pins, unpin_identity
from pinstore.domain.diagnostics import Severity
from pinstore.domain.result import Result

app = typer.Typer(add_completion=False)
mirror_app = typer.Typer(add_completion=False, help="Edit the mirror table.")
app.add_typer(mirror_app, name="mirror")


@dataclass
class CliContext:
    root: Path
    config: Path
    pins_file: Path
    settings: Settings


def _report(result: Result, command: str, args: list[str], json: bool) -> None:
    if json:
        typer.echo(_json.dumps(serialize_result(result, command=command, args=args)))
    else:
        for d in result.diagnostics:
            err = d.severity == Severity.ERROR
            typer.echo(f"{d.severity.value}: {d.message}", err=err)
    raise typer.Exit(result.exit_code)


def _context(ctx: typer.Context) -> CliContext:
    obj = ctx.obj
    if not isinstance(obj, CliContext):
        raise RuntimeError("CLI context was not initialised")
    return obj


@app.callback()
def main(
    ctx: typer.Context,
    root: Path = typer.Option(Path("."), "--root", help="Workspace directory."),
    config: Path | None = typer.Option(None, "--config"),
    pins_file: Path | None = typer.Option(None, "--pins-file"),
    log_level: str = typer.Option("warning", "--log-level"),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    root = root.resolve()
    config_path = config or root / CONFIG_FILENAME
    loaded = read_settings(config_path)
    if loaded.value is None:
        _report(loaded, command="config", args=[str(config_path)], json=False)
    settings = loaded.value or Settings()
    ctx.obj = CliContext(
        root=root,
        config=config_path,
        pins_file=effective_pins_file(pins_file, settings, root),
        settings=settings,
    )


@app.command()
def show(ctx: typer.Context, json: bool = False) -> None:
    cli = _context(ctx)
    result = load_pins(cli.pins_file, cli.root, LocalFileSystem(), cli.settings.mirrors())
    if not json and result.value is not None:
        if not len(result.value):
            typer.echo(f"No pins recorded in {cli.pins_file}")
        for pin in result.value.pins:
            ref = pin.package_ref
            typer.echo(f"{pin.identity}\t{ref.kind.value}\t{ref.location}\t{pin.state.description}")
    _report(result, command="show", args=[str(cli.pins_file)], json=json)


@app.command()
def check(ctx: typer.Context, json: bool = False) -> None:
    cli = _context(ctx)
    result = load_pins(cli.pins_file, cli.root, LocalFileSystem(), cli.settings.mirrors())
    if not json and result.value is not None:
        typer.echo(f"{cli.pins_file}: {len(result.value)} pins")
    _report(result, command="check", args=[str(cli.pins_file)], json=json)


@app.command()
def unpin(ctx: typer.Context, identity: str, json: bool = False) -> None:
    cli = _context(ctx)
    result = unpin_identity(
        cli.pins_file,
        cli.root,
        LocalFileSystem(),
        cli.settings.mirrors(),
        identity,
        lock_timeout=cli.settings.lock_timeout,
    )
    _report(result, command="unpin", args=[identity], json=json)


@app.command()
def reset(ctx: typer.Context, json: bool = False) -> None:
    cli = _context(ctx)
    result = reset_pins(
        cli.pins_file,
        cli.root,
        LocalFileSystem(),
        cli.settings.mirrors(),
        lock_timeout=cli.settings.lock_timeout,
    )
    _report(result, command="reset", args=[], json=json)


@app.command()
def migrate(ctx: typer.Context, json: bool = False) -> None:
    cli = _context(ctx)
    result = migrate_pins(
        cli.pins_file,
        cli.root,
        LocalFileSystem(),
        cli.settings.mirrors(),
        lock_timeout=cli.settings.lock_timeout,
    )
    _report(result, command="migrate", args=[str(cli.pins_file)], json=json)


@mirror_app.command("set")
def mirror_set(ctx: typer.Context, original: str, mirror: str) -> None:
    cli = _context(ctx)
    mirrors = cli.settings.mirrors()
    mirrors.set(mirror=mirror, original=original)
    write_settings(cli.config, cli.settings.with_mirrors(mirrors))


@mirror_app.command("unset")
def mirror_unset(ctx: typer.Context, value: str) -> None:
    cli = _context(ctx)
    mirrors = cli.settings.mirrors()
    if not mirrors.unset(value):
        typer.echo(f"error: no mirror configured for '{value}'", err=True)
        raise typer.Exit(2)
    write_settings(cli.config, cli.settings.with_mirrors(mirrors))


@mirror_app.command("list")
def mirror_list(ctx: typer.Context) -> None:
    cli = _context(ctx)
    for original, mirror in cli.settings.mirrors():
        typer.echo(f"{original} -> {mirror}")
