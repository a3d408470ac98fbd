"""CLI entry point for Lunaria."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from lunaria_core.cache import ChangeCache, compute_config_fingerprint
from lunaria_core.config import LunariaConfig, load_config
from lunaria_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from lunaria_core.errors import ConfigError, LunariaError
from lunaria_core.freshness import FreshnessTracker, collect_tracked_files
from lunaria_core.vcs import GitBackend, HistoryWalker, ResolutionResult, to_utc_string

app = typer.Typer(
    name="lunaria",
    help="Localization freshness tracking from git history.",
)

config_app = typer.Typer(help="Manage Lunaria configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def _configure_logging(cfg: LunariaConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to lunaria.yaml")
    ] = None,
) -> None:
    """Global options."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(cfg)
    ctx.obj = cfg


def _short(commit_hash: str) -> str:
    return commit_hash[:7]


def _display_results(results: dict[str, ResolutionResult]) -> None:
    table = Table(title=f"Tracked files ({len(results)})")
    table.add_column("File", style="cyan")
    table.add_column("Latest change")
    table.add_column("Latest tracked change")
    for path, result in sorted(results.items()):
        latest = result.latest_change
        tracked = result.latest_tracked_change
        tracked_style = "green" if tracked.hash == latest.hash else "yellow"
        table.add_row(
            path,
            f"{_short(latest.hash)} [dim]{to_utc_string(latest.date)}[/dim]",
            f"[{tracked_style}]{_short(tracked.hash)}[/{tracked_style}] "
            f"[dim]{to_utc_string(tracked.date)}[/dim]",
        )
    rprint(table)


@app.command()
def status(
    ctx: typer.Context,
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Files to resolve, relative to the root (default: every configured file)"),
    ] = None,
    force: Annotated[bool, typer.Option("--force", help="Ignore the cache and walk full histories")] = False,
    ci: Annotated[bool, typer.Option("--ci", help="Machine-readable output")] = False,
    root: Annotated[str, typer.Option("--root", help="Repository root")] = ".",
) -> None:
    """Show the latest change and latest tracked change of each file."""
    cfg: LunariaConfig = ctx.obj
    root_path = Path(root).resolve()
    files = [Path(p).as_posix() for p in paths] if paths else collect_tracked_files(cfg, root_path)
    if not files:
        rprint("[yellow]No tracked files found.[/yellow]")
        return

    cache_dir = Path(cfg.cache_dir)
    if not cache_dir.is_absolute():
        cache_dir = root_path / cache_dir
    cache = ChangeCache.open(cache_dir, compute_config_fingerprint(cfg), force=force)
    backend = GitBackend(
        root_path,
        max_concurrent_processes=cfg.max_concurrent_processes,
        timeout=cfg.git_timeout,
    )
    tracker = FreshnessTracker(cfg, HistoryWalker(backend), cache)

    try:
        results = asyncio.run(tracker.resolve_files(files))
    except LunariaError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    cache.flush()

    if ci:
        for path, result in sorted(results.items()):
            typer.echo(
                f"{path} latest={result.latest_change.hash} "
                f"tracked={result.latest_tracked_change.hash}"
            )
    else:
        _display_results(results)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show current resolved configuration."""
    cfg: LunariaConfig = ctx.obj
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False, allow_unicode=True), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default lunaria.yaml in current directory."""
    target = Path("lunaria.yaml")
    if target.exists() and not force:
        rprint("[yellow]lunaria.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
