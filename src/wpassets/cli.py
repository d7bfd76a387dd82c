"""Command line interface for wpassets."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.syntax import Syntax
from rich.table import Table

from wpassets.config import ConfigError, ConfigManager, WpAssetsConfig, resolve_with_precedence
from wpassets.ingestion import (
    FileDescriptor,
    ImportPipeline,
    ImportReport,
    ImportSetupError,
    WalkerError,
)
from wpassets.log import configure_logging
from wpassets.redirect import PassThrough, Redirect, RedirectResolver
from wpassets.storage import AssetRepository, StoreError

console = Console()


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Report a fatal error and stop the command with exit code 1.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier used in JSON output.
        json_output: Whether JSON mode is active.
        original: Exception to chain in non-JSON mode.

    Raises:
        SystemExit: In JSON mode, after printing the error payload.
        click.ClickException: Otherwise.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool) -> None:
    """Print ``message`` unless quiet mode suppresses it (errors always print)."""
    if quiet and mode != "error":
        return
    console.print(message)


def _load_config() -> WpAssetsConfig:
    """Return the effective configuration from file and environment.

    Raises:
        ConfigError: If the configuration file is invalid.
    """
    manager = ConfigManager()
    return manager.load()


def _open_store(config: WpAssetsConfig) -> AssetRepository:
    """Return the repository described by the ``store`` settings."""
    return AssetRepository(
        Path(config.store.path),
        public_base_url=config.store.public_base_url,
    )


def _resolve_quiet(ctx: click.Context, quiet: bool, config: WpAssetsConfig) -> bool:
    if ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE:
        return quiet
    return config.cli.quiet_default


def _emit_import_summary(report: ImportReport, file_type: str | None, *, quiet: bool) -> None:
    """Print totals and the numbered error list for a finished import."""
    _emit_message("\n[green]Import Summary:[/green]", mode="summary", quiet=quiet)
    if file_type is not None:
        total_line = f"- Total files of type '{file_type}' found: {report.total}"
    else:
        total_line = f"- Total files found: {report.total}"
    _emit_message(total_line, mode="summary", quiet=quiet)
    _emit_message(f"- New assets imported: {report.imported_count}", mode="summary", quiet=quiet)
    _emit_message(
        f"- Files skipped (already exist): {report.skipped_count}", mode="summary", quiet=quiet
    )

    if not report.has_errors:
        _emit_message("\n[green]Import completed successfully.[/green]", mode="summary", quiet=quiet)
        return

    _emit_message(
        f"\n[yellow]Import completed with {len(report.errors)} errors:[/yellow]",
        mode="error",
        quiet=quiet,
    )
    for line in report.numbered_errors():
        _emit_message(escape(line), mode="error", quiet=quiet)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="wpassets")
def cli() -> None:
    """wpassets imports WordPress uploads into an asset store and redirects legacy URLs."""


@cli.command("import")
@click.argument("path", type=str)
@click.option("--collection", type=str, help="Title of an existing collection to import into.")
@click.option("--tag", type=str, help="Tag label to attach; created when missing.")
@click.option("--type", "file_type", type=str, help="Only import files of this type (image, document).")
@click.option("--json", "json_output", is_flag=True, help="Emit the import report as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def import_assets(
    ctx: click.Context,
    path: str,
    collection: str | None,
    tag: str | None,
    file_type: str | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Import every file below PATH as an asset in a collection or with a tag.

    Exactly one of --collection or --tag is required. Files whose content is
    already stored are skipped, so the command can be re-run safely.
    """
    try:
        config = _load_config()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)

    quiet_enabled = False if json_output else _resolve_quiet(ctx, quiet, config)
    store = _open_store(config)
    configure_logging(config.logging, log_dir=store.root)
    pipeline = ImportPipeline(store)

    try:
        target = pipeline.prepare(collection=collection, tag=tag, file_type=file_type, root=path)
    except WalkerError as exc:
        _handle_cli_error(
            f"FATAL ERROR: {exc}", code="walker_error", json_output=json_output, original=exc
        )
    except (ImportSetupError, StoreError) as exc:
        _handle_cli_error(str(exc), code="setup_error", json_output=json_output, original=exc)

    type_suffix = f" (type: {file_type})" if file_type is not None else ""
    _emit_message(
        f'[cyan]Starting import from "{escape(path)}" into "{escape(target.name)}"{type_suffix}...[/cyan]',
        mode="detail",
        quiet=quiet_enabled or json_output,
    )

    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=quiet_enabled or json_output or not config.cli.show_progress,
    )
    task_ids: list[Any] = []

    def _on_start(total: int) -> None:
        task_ids.append(progress.add_task("Importing", total=total))

    def _on_advance(_: FileDescriptor) -> None:
        progress.advance(task_ids[0])

    try:
        with progress:
            report = pipeline.run(
                path,
                target,
                file_type,
                on_start=_on_start,
                on_advance=_on_advance,
            )
    except WalkerError as exc:
        _handle_cli_error(
            f"FATAL ERROR: {exc}", code="walker_error", json_output=json_output, original=exc
        )
    except StoreError as exc:
        _handle_cli_error(str(exc), code="store_error", json_output=json_output, original=exc)

    if json_output:
        payload = report.to_payload()
        payload["context"] = {
            "path": path,
            "target": {"kind": target.kind, "name": target.name},
            "type": file_type,
        }
        console.print_json(data=payload)
        return

    _emit_import_summary(report, file_type, quiet=quiet_enabled)


@cli.group()
def collection() -> None:
    """Manage asset collections."""


@collection.command("create")
@click.argument("title")
def collection_create(title: str) -> None:
    """Create an empty collection named TITLE."""
    try:
        store = _open_store(_load_config())
        store.create_collection(title)
    except (ConfigError, StoreError) as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f'[green]Created collection "{escape(title)}".[/green]')


@collection.command("list")
def collection_list() -> None:
    """List collections and how many assets each holds."""
    try:
        store = _open_store(_load_config())
        collections = store.list_collections()
    except (ConfigError, StoreError) as exc:
        raise click.ClickException(str(exc)) from exc

    if not collections:
        console.print("[yellow]No collections found.[/yellow]")
        return
    table = Table(title="Collections")
    table.add_column("Title", overflow="fold")
    table.add_column("Assets", justify="right")
    for item in collections:
        table.add_row(escape(item.title), str(len(item.asset_ids)))
    console.print(table)


@cli.command()
@click.argument("request_path")
@click.option("--json", "json_output", is_flag=True, help="Emit the decision as JSON.")
def resolve(request_path: str, json_output: bool) -> None:
    """Show where REQUEST_PATH would be redirected."""
    try:
        config = _load_config()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)

    store = _open_store(config)
    configure_logging(config.logging, log_dir=store.root)
    resolver = RedirectResolver(
        store,
        path_marker=config.redirect.path_marker,
        status_code=config.redirect.status_code,
    )
    decision = resolver.resolve(request_path)

    if isinstance(decision, Redirect):
        if json_output:
            console.print_json(
                data={
                    "decision": "redirect",
                    "location": decision.location,
                    "status_code": decision.status_code,
                }
            )
        else:
            console.print(f"[green]{decision.status_code} -> {escape(decision.location)}[/green]")
    elif isinstance(decision, PassThrough):
        if json_output:
            console.print_json(data={"decision": "pass_through", "reason": decision.reason})
        else:
            console.print(f"[yellow]pass-through ({decision.reason})[/yellow]")


@cli.group()
def config() -> None:
    """Inspect and modify wpassets configuration."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Print the effective configuration as YAML."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    rendered = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist VALUE under the dotted KEY (for example redirect.status_code)."""
    if "." not in key:
        raise click.ClickException("KEY must specify a dotted path such as 'store.path'.")
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        overrides = manager.load_file_overrides()
        updated = resolve_with_precedence(
            defaults=WpAssetsConfig(),
            file_overrides=overrides,
            cli_overrides={key: parsed},
        )
        manager.save(updated)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"[green]Set {escape(key)} = {escape(repr(parsed))}[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
