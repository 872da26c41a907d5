"""portfolio-sync CLI - portfolio metadata for your repositories.

Usage:
    portfolio-sync init [--dir PATH]
    portfolio-sync validate [--dir PATH]
    portfolio-sync update [--dir PATH]
    portfolio-sync generate --user octocat --format markdown -o portfolio.md
"""

from __future__ import annotations

import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .exceptions import ConfigExistsError, ConfigNotFoundError, GitHubError, InvalidConfigError
from .formatter import OUTPUT_FORMATS, format_entries, resolve_output_path
from .generator import GenerateStats, collect_detections, generate
from .github import GitHubSource
from .local import LocalSource
from .logging import setup_logging
from .merge import init_config, update_config
from .schema import PortfolioConfig, config_path, read_config, validate_config, write_config
from .settings import Settings

console = Console()


def _local_source(directory: str) -> LocalSource:
    try:
        return LocalSource(directory)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


async def _detect_local(source: LocalSource) -> PortfolioConfig:
    repo = source.describe()
    scan = await collect_detections(source, repo)
    return init_config(repo, scan.detections)


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context):
    """portfolio-sync - generate portfolio data from your repositories.

    Scan one project into a .portfolio.json, or every repository of a GitHub
    account into a single JSON, YAML or Markdown document.
    """
    settings = Settings.from_env()
    setup_logging(settings.log_file or None, settings.log_level, force=True)
    ctx.obj = settings


@cli.command()
@click.option("--dir", "-d", "directory", default=".", help="Target directory")
def init(directory: str):
    """Generate .portfolio.json from detected project metadata."""
    source = _local_source(directory)
    if config_path(source.root).exists():
        raise click.ClickException(
            "A .portfolio.json already exists. Use `update` to refresh it."
        )

    console.print(f"\n[cyan]Scanning {source.display_name}...[/]\n")
    config = asyncio.run(_detect_local(source))
    _print_detected(config)

    try:
        write_config(config, source.root, overwrite=False)
    except ConfigExistsError as e:
        raise click.ClickException(f"{e}. Use `update` to refresh it.") from e
    console.print("[green]Created .portfolio.json[/]")
    console.print(
        "[dim]Edit it to add featured, media links, or fix any auto-detected values.[/]\n"
    )


@cli.command()
@click.option("--dir", "-d", "directory", default=".", help="Directory with .portfolio.json")
def validate(directory: str):
    """Validate an existing .portfolio.json file."""
    path = config_path(directory)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Could not read .portfolio.json: {e}") from e

    result = validate_config(document)
    if result.success:
        console.print("\n[green].portfolio.json is valid![/]\n")
        return

    console.print("\n[red]Validation errors:[/]\n")
    for err in result.errors:
        console.print(f"  - {err}", style="red", markup=False, highlight=False)
    console.print()
    raise SystemExit(1)


@cli.command()
@click.option("--dir", "-d", "directory", default=".", help="Directory with .portfolio.json")
def update(directory: str):
    """Re-detect auto fields without overwriting manual edits."""
    source = _local_source(directory)
    try:
        existing = read_config(source.root)
    except ConfigNotFoundError as e:
        raise click.ClickException(f"{e}. Run `portfolio-sync init` first.") from e
    except InvalidConfigError as e:
        raise click.ClickException(
            "Could not read .portfolio.json:\n  " + "\n  ".join(e.errors)
        ) from e

    console.print(f"\n[cyan]Re-scanning {source.display_name}...[/]\n")
    fresh = asyncio.run(_detect_local(source))
    write_config(update_config(existing, fresh), source.root)
    console.print("[green]Updated .portfolio.json[/]\n")


@cli.command(name="generate")
@click.option("--user", "-u", required=True, help="GitHub username")
@click.option("--output", "-o", default="portfolio.json", help="Output file path")
@click.option("--format", "-f", "fmt", type=click.Choice(OUTPUT_FORMATS), default="json", help="Output format")
@click.option("--token", "-t", default=None, help="GitHub token (or set GITHUB_TOKEN)")
@click.option("--exclude", "-e", multiple=True, help="Repository to exclude (repeatable)")
@click.option("--dry-run", is_flag=True, help="Print the output instead of writing it")
@click.pass_obj
def generate_command(
    settings: Settings,
    user: str,
    output: str,
    fmt: str,
    token: str | None,
    exclude: tuple[str, ...],
    dry_run: bool,
):
    """Scan a GitHub user's repos and write one combined portfolio document."""
    console.print(f"\n[cyan]Fetching repos for [bold]{user}[/bold]...[/]\n")
    stats = GenerateStats()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Listing repositories...", total=None)

        def on_progress(name: str, current: int, total: int) -> None:
            progress.update(task, description=name, completed=current - 1, total=total)

        async def run():
            async with GitHubSource(user, token or settings.github_token) as source:
                return await generate(source, exclude, on_progress, stats)

        try:
            entries = asyncio.run(run())
        except GitHubError as e:
            raise click.ClickException(str(e)) from e
        progress.update(task, description="Done", completed=stats.processed + len(stats.errors))

    for err in stats.errors:
        console.print(f"  error: {err}", style="red", markup=False, highlight=False)

    formatted = format_entries(entries, fmt)
    written = sum(1 for e in entries if e.enabled)

    if dry_run:
        console.print("\n[yellow]--- DRY RUN ---[/]\n")
        click.echo(formatted)
    else:
        out_path = resolve_output_path(output, fmt)
        out_path.write_text(formatted + "\n", encoding="utf-8")
        console.print(f"\n[green]Wrote {written} projects to {out_path}[/]")

    console.print(
        f"\n[dim]  {stats.found} repos found, {stats.with_config} with .portfolio.json, "
        f"{stats.auto_detected} auto-detected, {len(stats.errors)} failed[/]\n"
    )


def _print_detected(config: PortfolioConfig) -> None:
    """Print a compact summary of what was detected."""
    table = Table(title="Detected", show_header=False, border_style="dim")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Name", config.name)
    table.add_row("Category", config.category or "-")
    table.add_row("Technologies", ", ".join(config.technologies or []) or "-")
    table.add_row("Status", config.status or "-")
    table.add_row("Models", f"{len(config.models or [])} found")
    table.add_row("Images", f"{len(config.images or [])} found")
    table.add_row("Description", config.short_description or "-")

    console.print(Panel.fit(table, border_style="cyan"))


if __name__ == "__main__":
    cli()
