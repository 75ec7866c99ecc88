"""Command-line interface for pairbuilder."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pairbuilder import __version__
from pairbuilder.builder import PairBuilderConfig, build_pairs
from pairbuilder.constants import (
    DEFAULT_OVERLAP,
    DEFAULT_PAIRS_FILENAME,
    DEFAULT_POLICY,
    PAIR_POLICY_CHOICES,
)
from pairbuilder.models import PairSet
from pairbuilder.storage import PairSetError, load_pairs, save_pairs
from pairbuilder.views import read_view_ids

DEFAULT_OUTPUT_WIDTH = 160
MIN_OUTPUT_WIDTH = 80
DEFAULT_TABLE_ROWS = 20
MAX_PARTNERS_SHOWN = 12

console = Console(width=DEFAULT_OUTPUT_WIDTH)


def _set_console(output_width: int) -> None:
    """Set global console used by all rich output helpers."""
    global console
    console = Console(width=output_width)


def setup_logging(verbose: bool = False, *, quiet: bool = False) -> None:
    """Configure logging with rich handler.

    :param verbose: Emit DEBUG records.
    :param quiet: Only emit warnings, on stderr, so stdout stays machine readable.
    """
    if quiet:
        level = logging.WARNING
        log_console = Console(stderr=True, width=console.width)
    else:
        level = logging.DEBUG if verbose else logging.INFO
        log_console = console
    handler = RichHandler(console=log_console, show_time=False, show_path=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _validate_non_negative_int(
    _ctx: click.Context, _param: click.Parameter, value: int | None
) -> int | None:
    """Validate a non-negative integer option value.

    :param _ctx: Click callback context (unused).
    :param _param: Click callback parameter metadata (unused).
    :param value: Candidate value.
    :return: Value if it is ``>= 0``.
    :raises click.BadParameter: When value is negative.
    """
    if value is not None and value < 0:
        raise click.BadParameter("must be >= 0")
    return value


def _validate_positive_int(
    _ctx: click.Context, _param: click.Parameter, value: int | None
) -> int | None:
    """Validate a positive integer option value.

    :param _ctx: Click callback context (unused).
    :param _param: Click callback parameter metadata (unused).
    :param value: Candidate value.
    :return: Value if it is strictly positive.
    :raises click.BadParameter: When value is ``<= 0``.
    """
    if value is not None and value <= 0:
        raise click.BadParameter("must be > 0")
    return value


def _validate_output_width(_ctx: click.Context, _param: click.Parameter, value: int) -> int:
    """Validate output width for rich table rendering.

    :param _ctx: Click callback context (unused).
    :param _param: Click callback parameter metadata (unused).
    :param value: Desired output width.
    :return: Value if it meets the minimum width.
    :raises click.BadParameter: When value is below the minimum width.
    """
    if value < MIN_OUTPUT_WIDTH:
        raise click.BadParameter(f"must be >= {MIN_OUTPUT_WIDTH}")
    return value


def format_partners(partners: list[int], max_items: int = MAX_PARTNERS_SHOWN) -> str:
    """Format a partner list for compact display.

    :param partners: Ascending partner view ids.
    :param max_items: Maximum ids to keep.
    :return: Space separated ids with optional overflow note.
    """
    shown = " ".join(str(view_id) for view_id in partners[:max_items])
    if len(partners) <= max_items:
        return shown
    return f"{shown} ... (+{len(partners) - max_items})"


def _pair_set_summary(pair_set: PairSet) -> dict[str, int]:
    return {
        "pairs": len(pair_set),
        "views": len(pair_set.view_ids()),
        "lines": len(pair_set.grouped_by_first()),
    }


def print_build_summary(
    *,
    view_count: int,
    config: PairBuilderConfig,
    pair_set: PairSet,
    output: Path,
) -> None:
    """Print the result of a ``build`` run.

    :param view_count: Number of distinct input views.
    :param config: Pairing configuration used.
    :param pair_set: Generated pairs.
    :param output: Path the pairs were written to.
    :return: ``None``.
    """
    console.print()

    summary = Table(title="Pair Generation Summary", show_header=False, box=None)
    summary.add_column(style="bold cyan", no_wrap=True)
    summary.add_column(style="white", no_wrap=True)

    summary.add_row("Input views", str(view_count))
    summary.add_row("Policy", config.policy)
    if config.policy == "contiguous":
        summary.add_row("Overlap", str(config.overlap))
    summary.add_row("Candidate pairs", str(len(pair_set)))
    summary.add_row("Paired views", str(len(pair_set.view_ids())))
    summary.add_row("Output", str(output))

    console.print(summary)
    console.print()


def print_pair_table(pair_set: PairSet, max_items: int | None = DEFAULT_TABLE_ROWS) -> None:
    """Print pairs grouped by their leading view id.

    :param pair_set: Pairs to print.
    :param max_items: Optional max rows.
    :return: ``None``.
    """
    grouped = pair_set.grouped_by_first()
    if not grouped:
        console.print("[yellow]No pairs found.[/yellow]")
        return

    summary = _pair_set_summary(pair_set)
    console.print(
        f"\n[bold yellow]Candidate Pairs[/bold yellow] "
        f"({summary['pairs']} pairs, {summary['views']} views)"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("View", style="cyan", justify="right", no_wrap=True)
    table.add_column("#Partners", style="green", justify="right", no_wrap=True)
    table.add_column("Partners", style="dim")

    rows = list(grouped.items())
    visible = rows if max_items is None else rows[:max_items]
    for first, partners in visible:
        table.add_row(str(first), str(len(partners)), format_partners(partners))

    console.print(table)

    if max_items is not None and len(rows) > max_items:
        console.print(f"[dim]... and {len(rows) - max_items} more[/dim]")


def print_build_json(
    *,
    view_count: int,
    config: PairBuilderConfig,
    pair_set: PairSet,
    output: Path,
) -> None:
    """Output ``build`` results as JSON."""
    payload: dict[str, Any] = {
        "summary": {
            "input_views": view_count,
            "policy": config.policy,
            "overlap": config.overlap if config.policy == "contiguous" else None,
            **_pair_set_summary(pair_set),
        },
        "output": str(output),
    }
    print(json.dumps(payload, indent=2, sort_keys=True))


def print_inspect_json(pair_set: PairSet) -> None:
    """Output loaded pairs as JSON.

    :param pair_set: Pairs to serialize.
    :return: ``None``.
    """
    payload = {
        "summary": _pair_set_summary(pair_set),
        "pairs": [list(pair.as_tuple()) for pair in pair_set],
    }
    print(json.dumps(payload, indent=2, sort_keys=True))


def _fail(message: str, exc: Exception, *, verbose: bool) -> click.exceptions.Exit:
    """Report an error on the console and build the exit signal.

    :param message: Short error prefix.
    :param exc: Error being reported.
    :param verbose: Also print the traceback.
    :return: ``Exit(1)`` to be raised by the caller.
    """
    console.print(f"[red]{message}:[/red] {exc}")
    if verbose:
        console.print_exception()
    return click.exceptions.Exit(1)


def _add_common_output_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach shared CLI output options to commands.

    :param func: Click command function.
    :return: Decorated click command function.
    """
    options = [
        click.option(
            "--json",
            "as_json",
            is_flag=True,
            help="Output JSON instead of rich tables",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Verbose logging"),
        click.option(
            "--output-width",
            type=int,
            default=DEFAULT_OUTPUT_WIDTH,
            show_default=True,
            callback=_validate_output_width,
            help="Width used for rich terminal rendering",
        ),
    ]

    for option in reversed(options):
        func = option(func)
    return func


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="pairbuilder")
def cli() -> None:
    """Select candidate image pairs for feature matching."""


@cli.command("build", help="Generate candidate pairs for a set of views")
@click.argument("views", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=DEFAULT_PAIRS_FILENAME,
    show_default=True,
    help="Pairs file to write",
)
@click.option(
    "--policy",
    type=click.Choice(PAIR_POLICY_CHOICES),
    default=DEFAULT_POLICY,
    show_default=True,
    help="Pairing policy",
)
@click.option(
    "--overlap",
    type=int,
    default=DEFAULT_OVERLAP,
    show_default=True,
    callback=_validate_non_negative_int,
    help="Number of following views paired with each view (contiguous policy)",
)
@_add_common_output_options
def build_command(
    views: Path,
    output: Path,
    policy: str,
    overlap: int,
    as_json: bool,
    verbose: bool,
    output_width: int,
) -> None:
    """Read view ids, generate candidate pairs and write the pairs file.

    :param views: Scene JSON (``.json``/``.sfm``) or whitespace separated id list.
    :param output: Destination pairs file.
    :param policy: Pairing policy name.
    :param overlap: Window size for the contiguous policy.
    :param as_json: Output JSON instead of tables.
    :param verbose: Enable debug-level logging.
    :param output_width: Width used for rich output.
    :return: ``None``.
    """
    _set_console(output_width)
    setup_logging(verbose, quiet=as_json)

    config = PairBuilderConfig(policy=policy, overlap=overlap)

    try:
        view_ids = read_view_ids(views)
        pair_set = build_pairs(view_ids, config)
        save_pairs(output, pair_set)
    except PairSetError as exc:
        raise _fail("Error", exc, verbose=verbose) from exc

    if as_json:
        print_build_json(view_count=len(view_ids), config=config, pair_set=pair_set, output=output)
    else:
        print_build_summary(
            view_count=len(view_ids),
            config=config,
            pair_set=pair_set,
            output=output,
        )

    raise click.exceptions.Exit(0)


@cli.command("inspect", help="Load a pairs file and summarize it")
@click.argument("pairs", type=click.Path(path_type=Path))
@click.option(
    "--range-start",
    type=int,
    default=None,
    callback=_validate_non_negative_int,
    help="Index of the first line to load",
)
@click.option(
    "--range-size",
    type=int,
    default=None,
    callback=_validate_positive_int,
    help="Number of lines to load from --range-start",
)
@click.option("--full-table", is_flag=True, help="Show all rows in terminal tables")
@_add_common_output_options
def inspect_command(
    pairs: Path,
    range_start: int | None,
    range_size: int | None,
    full_table: bool,
    as_json: bool,
    verbose: bool,
    output_width: int,
) -> None:
    """Load a pairs file and print its contents.

    :param pairs: Pairs file to load.
    :param range_start: Optional first line index.
    :param range_size: Optional number of lines.
    :param full_table: Show all table rows.
    :param as_json: Output JSON instead of tables.
    :param verbose: Enable debug-level logging.
    :param output_width: Width used for rich output.
    :return: ``None``.
    """
    if range_size is not None and range_start is None:
        raise click.UsageError("--range-size requires --range-start.")

    _set_console(output_width)
    setup_logging(verbose, quiet=as_json)

    try:
        pair_set = load_pairs(pairs, range_start=range_start, range_size=range_size)
    except PairSetError as exc:
        raise _fail("Error", exc, verbose=verbose) from exc

    if as_json:
        print_inspect_json(pair_set)
    else:
        print_pair_table(pair_set, max_items=None if full_table else DEFAULT_TABLE_ROWS)

    raise click.exceptions.Exit(0)


@cli.command("info", help="Print tool defaults")
def info_command() -> None:
    """Print version and default settings."""
    click.echo(f"pairbuilder {__version__}")
    click.echo(f"Default policy: {DEFAULT_POLICY}")
    click.echo(f"Available policies: {', '.join(PAIR_POLICY_CHOICES)}")
    click.echo(f"Default overlap (contiguous): {DEFAULT_OVERLAP}")
    click.echo(f"Default pairs file: {DEFAULT_PAIRS_FILENAME}")
    click.echo(f"Default output width: {DEFAULT_OUTPUT_WIDTH}")
    click.echo("Run with --help for CLI usage")


def main() -> int:
    """CLI program entrypoint.

    :return: Process exit code from click dispatch.
    """
    argv = sys.argv[1:]

    try:
        result = cli.main(args=argv, prog_name="pairbuilder", standalone_mode=False)
        if isinstance(result, int):
            return result
    except click.exceptions.Exit as exc:
        return int(exc.exit_code)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
