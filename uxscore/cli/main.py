"""Main CLI entry point for uxscore."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from uxscore import __version__
from uxscore.core.exceptions import UXScoreError
from uxscore.core.logging import configure_logging, correlation_context
from uxscore.core.settings import (
    ScoringMode,
    UXScoreSettings,
    generate_example_config,
    generate_json_schema,
    get_settings,
)
from uxscore.loader import RecordLoader
from uxscore.scoring import (
    ProgressionTargetCalculator,
    VersionScore,
    VersionScoreAggregator,
    interpret_score,
)

EXIT_SUCCESS = 0
EXIT_ERROR = 2


class SettingsContext:
    """Context object holding the effective settings."""

    def __init__(self) -> None:
        self.settings: UXScoreSettings | None = None
        self.verbose: bool = False

    def get(self) -> UXScoreSettings:
        if self.settings is None:
            self.settings = get_settings()
        return self.settings


pass_settings = click.make_pass_decorator(SettingsContext, ensure=True)


def _create_frames_table(version: VersionScore) -> Table:
    """Create a Rich table of frame scores for one version.

    Args:
        version: Scored version.

    Returns:
        Populated Rich Table instance.
    """
    label = version.version_id or f"iteration {version.iteration}"
    table = Table(
        title=f"Version {label} ({version.iteration}/{version.total_iterations})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Frame", style="green", no_wrap=True)
    table.add_column("Heuristics", justify="right")
    table.add_column("Categories", justify="right")
    table.add_column("Combined", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Final", style="yellow", justify="right")
    table.add_column("Source", style="magenta")

    for index, frame in enumerate(version.frames, start=1):
        trace = frame.trace
        table.add_row(
            frame.frame_id or f"Frame {index}",
            _format_value(trace.heuristics_avg),
            _format_value(trace.categories_avg),
            _format_value(trace.combined),
            _format_value(trace.target),
            str(frame.score),
            _format_source(frame.source.value, trace.extra_pull_applied),
        )
    return table


def _format_value(value: float | None) -> str:
    """Format an optional trace value; absent values show as '-'."""
    if value is None:
        return "-"
    return f"{value:g}"


def _format_source(source: str, extra_pull_applied: bool | None) -> str:
    if extra_pull_applied:
        return f"{source} +pull"
    return source


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to uxscore.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="uxscore")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """uxscore - reconcile usability assessment scores.

    Examples:

      # Score every version in a file
      uxscore score versions.json

      # Machine-readable output without progression blending
      uxscore score versions.yaml --mode raw --json

      # Progression target for iteration 2 of 3
      uxscore target 2 3
    """
    ctx.ensure_object(SettingsContext)
    settings_ctx = ctx.obj
    settings_ctx.verbose = verbose

    try:
        settings_ctx.settings = get_settings(config_file=config_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    settings = settings_ctx.settings
    configure_logging(
        level="DEBUG" if verbose else settings.logging.level,
        json_output=settings.logging.json_output,
        log_file=settings.logging.file,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="score")
@click.argument("records_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in ScoringMode]),
    default=None,
    help="Scoring mode; overrides configuration",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Print results as JSON",
)
@pass_settings
def score_cmd(
    settings_ctx: SettingsContext,
    records_file: Path,
    mode: str | None,
    json_output: bool,
) -> None:
    """Score every version in RECORDS_FILE (JSON or YAML).

    Examples:

      uxscore score versions.json
      uxscore score versions.yaml --json
    """
    settings = settings_ctx.get()
    scoring = settings.scoring
    if mode is not None:
        scoring = scoring.model_copy(update={"mode": ScoringMode(mode)})

    loader = RecordLoader(default_total_iterations=scoring.default_total_iterations)
    try:
        versions = loader.load_file(records_file)
    except UXScoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    aggregator = VersionScoreAggregator(settings=scoring)
    with correlation_context():
        results = aggregator.score_versions(versions)

    if json_output:
        payload = [
            {**result.to_dict(), "band": interpret_score(result.score).value}
            for result in results
        ]
        click.echo(json.dumps(payload, indent=2))
        sys.exit(EXIT_SUCCESS)

    console = Console()
    for result in results:
        console.print(_create_frames_table(result))
        band = interpret_score(result.score).value
        detail = f"source: {result.source.value}"
        if result.recomputed is not None:
            detail += f", recomputed: {result.recomputed}"
        console.print(
            f"[bold]Version score:[/bold] {result.score} ({band}; {detail})\n"
        )
    sys.exit(EXIT_SUCCESS)


@cli.command(name="target")
@click.argument("iteration", type=int)
@click.argument("total_iterations", type=int)
def target_cmd(iteration: int, total_iterations: int) -> None:
    """Print the progression target for ITERATION of TOTAL_ITERATIONS.

    Examples:

      uxscore target 2 3
    """
    target = ProgressionTargetCalculator().target(iteration, total_iterations)
    click.echo(str(target))


@cli.command(name="config")
@click.option(
    "--schema",
    "show_schema",
    is_flag=True,
    help="Show the JSON schema of the configuration file",
)
@click.option(
    "--example",
    "show_example",
    is_flag=True,
    help="Show an example uxscore.config.yaml",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the schema or example to this file instead of stdout",
)
@pass_settings
def config_cmd(
    settings_ctx: SettingsContext,
    show_schema: bool,
    show_example: bool,
    output_path: Path | None,
) -> None:
    """Show effective configuration as JSON.

    Examples:

      uxscore config
      uxscore config --example -o uxscore.config.yaml
      uxscore config --schema
    """
    if show_schema and show_example:
        raise click.UsageError("--schema and --example are mutually exclusive")
    if output_path is not None and not (show_schema or show_example):
        raise click.UsageError("--output requires --schema or --example")

    if show_schema:
        schema = generate_json_schema(output_path)
        if output_path is None:
            click.echo(json.dumps(schema, indent=2))
        else:
            click.echo(f"Wrote schema to {output_path}")
        return

    if show_example:
        example = generate_example_config(output_path)
        if output_path is None:
            click.echo(example, nl=False)
        else:
            click.echo(f"Wrote example config to {output_path}")
        return

    click.echo(json.dumps(settings_ctx.get().to_dict(), indent=2))


@cli.command(name="version")
def version_cmd() -> None:
    """Show uxscore version information."""
    click.echo(f"uxscore v{__version__}")
    click.echo(f"Python: {sys.version.split()[0]}")


def main() -> None:
    """Main entry point for the CLI."""
    cli(auto_envvar_prefix="UXSCORE")


if __name__ == "__main__":
    main()
