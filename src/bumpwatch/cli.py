"""Command-line interface for bumpwatch."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bumpwatch import __version__
from bumpwatch.config import (
    CONFIG_FILE_NAMES,
    BumpwatchConfig,
    find_config_file,
    generate_example_config,
    load_config,
)
from bumpwatch.core.checker import UpgradeChecker
from bumpwatch.core.models import CheckReport, CheckResult, CheckStatus, Dependency
from bumpwatch.errors import BumpwatchError, ManifestNotFoundError
from bumpwatch.scanners.npm import NpmManifestScanner
from bumpwatch.utils.http import AsyncHttpClient
from bumpwatch.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="bumpwatch",
    help="bumpwatch: find npm dependencies with breaking upgrades and where their changelogs live.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    name="config",
    help="Configuration management.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Report lines carry URLs; never wrap or highlight them.
console = Console(soft_wrap=True, highlight=False)
stderr_console = Console(stderr=True)
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"bumpwatch version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """bumpwatch - know which upgrades break before you bump."""
    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    configure_logging(level=log_level)

    if config:
        logger.debug("Using configuration file: %s", config)
    ctx.obj = {"config_path": config}


def _handle_cli_error(error: Exception) -> NoReturn:
    """Handle exceptions and display user-friendly error messages.

    Args:
        error: The exception to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, BumpwatchError):
        stderr_console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")
        if error.hint:
            stderr_console.print(f"[yellow]Hint:[/yellow] {escape(error.hint)}")
    else:
        stderr_console.print(f"[red]Error: {escape(str(error))}[/red]")
        logger.exception("Command failed")

    raise typer.Exit(code=1)


def _load_cli_config(ctx: typer.Context) -> BumpwatchConfig:
    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return load_config(config_path)
    except BumpwatchError as e:
        _handle_cli_error(e)


def format_result(result: CheckResult) -> str | None:
    """Render a result as a report line, or None if nothing is reported."""
    name = result.dependency.name

    if result.status == CheckStatus.BREAKING:
        return (
            f"{name}: {result.current_version} -> {result.latest_version} "
            f"{result.changelog_url}"
        )
    if result.status == CheckStatus.NOT_IN_REGISTRY:
        return f"skipping {name} because it's not in NPM registry"
    if result.status == CheckStatus.NO_REPOSITORY:
        return f"{name} doesn't have a repo associated with the npm package"
    if result.status == CheckStatus.NOT_ON_FORGE:
        return f"{name} is not on github, but checkout: {result.repository_url}"
    return None


async def _run_check(
    config: BumpwatchConfig,
    dependencies: list[Dependency],
    report: CheckReport,
    stream: bool,
) -> None:
    """Check dependencies sequentially, printing lines as results arrive."""
    headers: dict[str, str] = {}
    if config.probe.github_token:
        headers["Authorization"] = f"Bearer {config.probe.github_token}"

    async with AsyncHttpClient(
        timeout=config.probe.timeout,
        max_retries=config.probe.retries,
        headers=headers,
    ) as http_client:
        checker = UpgradeChecker.from_config(config, http_client)
        async for result in checker.iter_results(dependencies):
            report.results.append(result)
            if not stream:
                continue
            line = format_result(result)
            if line is not None:
                console.print(line, markup=False)


@app.command()
def check(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Option(
            "--path",
            "-p",
            help="Directory containing package.json.",
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path(),
    format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format (text, json).",
        ),
    ] = "text",
    dev: Annotated[
        bool | None,
        typer.Option(
            "--dev/--no-dev",
            help="Include devDependencies (defaults to scanner.include_dev).",
        ),
    ] = None,
) -> None:
    """Check declared dependencies for breaking upgrades and locate changelogs."""
    if format not in ("text", "json"):
        stderr_console.print(f"[bold red]Error:[/bold red] Unknown format: {format}")
        raise typer.Exit(code=1)

    config = _load_cli_config(ctx)

    scanner = NpmManifestScanner(
        include_dev=config.scanner.include_dev if dev is None else dev,
        exclude_prefixes=config.scanner.exclude_prefixes,
    )

    try:
        dependencies = scanner.scan_directory(path)
    except ManifestNotFoundError as e:
        console.print(e.message)
        raise typer.Exit(code=0)
    except BumpwatchError as e:
        _handle_cli_error(e)

    report = CheckReport(manifest_path=str(scanner.manifest_path(path)))

    try:
        asyncio.run(_run_check(config, dependencies, report, stream=format == "text"))
    except BumpwatchError as e:
        _handle_cli_error(e)

    if format == "json":
        print(report.model_dump_json(indent=2))
    else:
        logger.debug(
            "Checked %d dependencies: %d breaking, %d skipped",
            len(report.results),
            report.breaking_count,
            report.skipped_count,
        )


@config_app.command("init")
def config_init(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory to create configuration file in.",
        ),
    ] = Path(),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration file.",
        ),
    ] = False,
) -> None:
    """Initialize a new configuration file."""
    config_path = path / CONFIG_FILE_NAMES[0]

    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {config_path}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    config_path.write_text(generate_example_config())
    console.print(f"Created configuration file: {config_path}")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config_path = ctx.obj.get("config_path") if ctx.obj else None
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        console.print("[yellow]No configuration file found, showing defaults.[/yellow]")
    else:
        console.print(f"Configuration file: {config_path}\n")

    config = _load_cli_config(ctx)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    def flatten_dict(d: dict, prefix: str = "") -> list:
        items = []
        for key, value in d.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                items.extend(flatten_dict(value, full_key))
            elif isinstance(value, list):
                items.append((full_key, ", ".join(str(v) for v in value) or "(empty)"))
            elif key.endswith("token") and value:
                items.append((full_key, "********"))
            else:
                items.append((full_key, str(value)))
        return items

    for key, value in flatten_dict(config.model_dump()):
        table.add_row(key, value)

    console.print(table)


if __name__ == "__main__":
    app()
