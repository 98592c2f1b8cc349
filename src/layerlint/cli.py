"""Layerlint CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from layerlint import __version__


@click.group()
@click.version_option(version=__version__, prog_name="layerlint")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Layerlint - architecture layer rules for Kotlin sources."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if findings or file failures occur.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to layerlint.yml (default: ./layerlint.yml if present).",
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Worker threads.")
def lint(
    *,
    paths: tuple[Path, ...],
    fmt: str | None,
    strict: bool,
    config_path: Path | None,
    jobs: int | None,
) -> None:
    """Check Kotlin sources against the architecture layer rules.

    PATHS default to the current directory.
    Exit codes: 0 = clean or findings without --strict,
    1 = findings with --strict, 2 = configuration error.
    """
    from layerlint.linter import LintError, resolve_config
    from layerlint.linter import format_json as _format_json
    from layerlint.linter import format_porcelain as _format_porcelain
    from layerlint.linter import format_rich as _format_rich
    from layerlint.linter import lint as run_lint

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        config = resolve_config(config_path)
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    result = run_lint(paths or (Path.cwd(),), config=config, jobs=jobs)

    formatters = {
        "rich": _format_rich,
        "json": _format_json,
        "porcelain": _format_porcelain,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    if fmt == "porcelain":
        for failure in result.failures:
            click.echo(f"Error: {failure.file_path}: {failure.message}", err=True)

    if strict and (result.findings or result.failures):
        sys.exit(1)


@main.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to layerlint.yml (default: ./layerlint.yml if present).",
)
def rules(*, config_path: Path | None) -> None:
    """List the registered rules and whether they are active."""
    from rich.console import Console
    from rich.table import Table

    from layerlint.linter import LintError, resolve_config
    from layerlint.provider import ArchitectureLayerRuleSetProvider

    try:
        config = resolve_config(config_path)
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    provider = ArchitectureLayerRuleSetProvider.from_config(config)
    rule_set = provider.instance()

    table = Table(title=rule_set.rule_set_id)
    table.add_column("Rule", style="bold", no_wrap=True, min_width=26)
    table.add_column("Active")
    table.add_column("Severity")
    table.add_column("Description", overflow="fold")
    for rule in rule_set.create(config):
        table.add_row(
            rule.name,
            "yes" if rule.active else "no",
            rule.severity.value,
            rule.description,
        )

    console = Console()
    console.print(table)
