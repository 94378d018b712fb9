"""CLI entry point for the UI testing workshop."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from workshop.models.config import RunConfiguration, WorkshopSettings
from workshop.models.test_result import SuiteRun
from workshop.suite import WorkshopSuite

console = Console()

DEFAULT_CONFIG = "workshop-config.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str, settings: WorkshopSettings) -> RunConfiguration:
    if Path(config).exists():
        cfg = RunConfiguration.load(config)
        return cfg.model_copy(update={"headless": settings.headless})
    return RunConfiguration.from_env(settings)


def _print_run(run: SuiteRun) -> None:
    table = Table(title=f"{run.style.capitalize()} tests")
    table.add_column("Test", style="bold")
    table.add_column("Result")
    table.add_column("Duration")
    table.add_column("Failure")
    colors = {"pass": "green", "fail": "red", "error": "red"}
    for r in run.test_results:
        color = colors[r.result]
        table.add_row(r.test_name, f"[{color}]{r.result.upper()}[/{color}]",
                      f"{r.duration_seconds}s", r.failure_reason or "")
    console.print(table)
    for line in run.visual_report:
        console.print(line, markup=False, highlight=False)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """ACME Bank UI testing workshop: traditional vs visual tests"""
    setup_logging(verbose)


@cli.command()
@click.option("--style", "-s", type=click.Choice(["traditional", "visual", "both"]),
              default="both", help="Which testing style to run")
@click.option("--site", type=click.Choice(["original", "changed"]), default=None,
              help="Demo site variant (default: $DEMO_SITE or 'original')")
@click.option("--browser", "-b", type=click.Choice(["chrome", "firefox", "safari", "edge"]),
              default=None, help="Local browser for traditional tests (default: $BROWSER or 'chrome')")
@click.option("--headless/--headed", default=None, help="Override $HEADLESS")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Run configuration file path")
def run(style: str, site: str | None, browser: str | None, headless: bool | None, config: str) -> None:
    """Run the login tests and print the results."""
    settings = WorkshopSettings.from_env()
    overrides = {k: v for k, v in (("demo_site", site), ("browser", browser), ("headless", headless))
                 if v is not None}
    settings = settings.model_copy(update=overrides)
    suite = WorkshopSuite(settings, _load_config(config, settings))

    runs: list[SuiteRun] = []
    if style in ("traditional", "both"):
        runs.append(suite.run_traditional())
    if style in ("visual", "both"):
        runs.append(suite.run_visual())

    for suite_run in runs:
        _print_run(suite_run)

    if all(r.passed for r in runs):
        console.print("\n[bold green]All suites passed[/bold green]")
    else:
        console.print("\n[bold red]Some suites failed[/bold red]")
        sys.exit(1)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Run configuration file path")
def init(config: str) -> None:
    """Create a default run configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    RunConfiguration.from_env().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nSet your API key and run the workshop:")
    console.print("  [blue]export APPLITOOLS_API_KEY=...[/blue]")
    console.print("  [blue]workshop run --style visual[/blue]")


if __name__ == "__main__":
    cli()
