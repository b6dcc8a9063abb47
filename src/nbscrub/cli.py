"""Command-line interface for nbscrub."""

import functools
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nbscrub import NbScrubError, __version__
from nbscrub.config import NbScrubConfig, load_config
from nbscrub.files import find_notebooks
from nbscrub.hooks import DEFAULT_MAX_SIZE_KB, find_large_files
from nbscrub.models import CheckResult, IdAction, StripResult
from nbscrub.output.writer import NotebookWriter, ReportWriter
from nbscrub.parsing.notebook import NotebookParser
from nbscrub.processing.check import check_notebook
from nbscrub.processing.strip import strip_notebook

console = Console()
err_console = Console(stderr=True)

STDIN = Path("-")


def _split_commas(ctx, param, value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def common_options(f):
    """Options shared by every command that resolves settings."""
    options = [
        click.option(
            "--config",
            "-c",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Configuration file (.nbscrub.toml, nbscrub.toml or pyproject.toml)",
        ),
        click.option("--isolated", is_flag=True, help="Ignore all configuration files"),
        click.option(
            "--extra-keys",
            callback=_split_commas,
            help="Comma-separated metadata keys to strip, starting with `metadata` or `cell.metadata`",
        ),
        click.option(
            "--keep-keys",
            callback=_split_commas,
            help="Comma-separated metadata keys to keep even if stripped by default",
        ),
        click.option(
            "--drop-tagged-cells",
            callback=_split_commas,
            help="Comma-separated cell tags that cause the cell to be dropped",
        ),
        click.option(
            "--drop-empty-cells/--keep-empty-cells",
            default=None,
            help="Drop cells with blank source",
        ),
        click.option(
            "--drop-output/--keep-output",
            default=None,
            help="Clear code cell outputs (default: drop)",
        ),
        click.option(
            "--drop-count/--keep-count",
            default=None,
            help="Clear execution counts (default: drop)",
        ),
        click.option(
            "--strip-init-cell/--keep-init-cell",
            default=None,
            help="Clear outputs of cells marked init_cell",
        ),
        click.option(
            "--strip-kernel-info/--keep-kernel-info",
            default=None,
            help="Strip metadata.kernelspec and metadata.language_info.version",
        ),
        click.option("--keep-id", is_flag=True, help="Leave cell ids untouched"),
        click.option("--drop-id", is_flag=True, help="Remove cell ids (downgrades to nbformat 4.4)"),
        click.option("--sequential-id", is_flag=True, help="Renumber cell ids by position"),
        click.option(
            "--exclude",
            callback=_split_commas,
            help="Comma-separated file patterns to ignore",
        ),
        click.option(
            "--extend-exclude",
            callback=_split_commas,
            help="Comma-separated additional file patterns to ignore",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _resolve_id_action(keep_id: bool, drop_id: bool, sequential_id: bool) -> Optional[IdAction]:
    chosen = [
        action
        for flag, action in (
            (keep_id, IdAction.KEEP),
            (drop_id, IdAction.DROP),
            (sequential_id, IdAction.SEQUENTIAL),
        )
        if flag
    ]
    if len(chosen) > 1:
        raise click.UsageError("Use only one of --keep-id, --drop-id and --sequential-id")
    return chosen[0] if chosen else None


def build_config(
    config: Optional[Path],
    isolated: bool,
    keep_id: bool,
    drop_id: bool,
    sequential_id: bool,
    **overrides,
) -> NbScrubConfig:
    """Load configuration with command line overrides applied."""
    if config is not None and isolated:
        raise click.UsageError("--config and --isolated are mutually exclusive")
    overrides["id_action"] = _resolve_id_action(keep_id, drop_id, sequential_id)
    return load_config(config_file=config, isolated=isolated, overrides=overrides)


def handle_errors(f):
    """Report nbscrub errors on stderr and exit with status 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except NbScrubError as e:
            err_console.print(
                Panel.fit(
                    f"[red]Error:[/red] {escape(str(e))}",
                    border_style="red",
                    title=f"[bold red]{escape(type(e).__name__)}[/bold red]",
                ),
                highlight=False,
            )
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """nbscrub - Strip outputs, counts, ids and editor metadata from notebooks.

    Clean diffs. Reproducible commits.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("file", type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "--textconv",
    "-t",
    is_flag=True,
    help="Write the cleaned notebook to stdout instead of back to the file",
)
@common_options
@handle_errors
def clean(file: Path, textconv: bool, **options):
    """Clean a single notebook.

    FILE: Path to the .ipynb file, or - to read stdin and write stdout
    """
    settings = build_config(**options).to_settings()
    parser = NotebookParser()
    writer = NotebookWriter()

    from_stdin = file == STDIN
    nb = parser.parse_stdin() if from_stdin else parser.parse(file)
    nb, stripped = strip_notebook(nb, settings)

    if from_stdin or textconv:
        writer.write_stdout(nb)
    elif stripped:
        writer.write(nb, file)


@main.command("clean-all")
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--dry-run", "-d", is_flag=True, help="Report what would be cleaned without writing")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--allow-no-notebooks", is_flag=True, help="Do not fail when no notebooks are found")
@common_options
@handle_errors
def clean_all(paths: tuple[Path, ...], dry_run: bool, yes: bool, allow_no_notebooks: bool, **options):
    """Clean all notebooks in the given paths.

    PATHS: Files or directories (default: current directory)
    """
    config = build_config(**options)
    settings = config.to_settings()
    notebooks = find_notebooks(paths or (Path("."),), config.exclude_patterns)

    if not notebooks:
        if allow_no_notebooks:
            return
        raise click.ClickException("No notebooks found")

    if not (yes or dry_run):
        click.confirm(f"Clean {len(notebooks)} notebook(s)?", abort=True)

    parser = NotebookParser()
    writer = NotebookWriter()
    table = Table(title="Dry run" if dry_run else "Cleaned notebooks")
    table.add_column("Notebook", style="cyan")
    table.add_column("Result")
    failures = 0

    for path in notebooks:
        try:
            nb, stripped = strip_notebook(parser.parse(path), settings)
            if stripped and not dry_run:
                writer.write(nb, path)
            result = str(StripResult.from_stripped(stripped))
        except NbScrubError as e:
            failures += 1
            result = f"[red]{escape(str(e))}[/red]"
        table.add_row(str(path), result)

    console.print(table)
    if failures:
        sys.exit(1)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "--output-format",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format for findings (default: text)",
)
@click.option("--allow-no-notebooks", is_flag=True, help="Do not fail when no notebooks are found")
@common_options
@handle_errors
def check(paths: tuple[Path, ...], output_format: str, allow_no_notebooks: bool, **options):
    """Check notebooks for anything `clean` would remove.

    PATHS: Files or directories, or - to read stdin. Exits with status 1
    if any notebook would change.
    """
    config = build_config(**options)
    settings = config.to_settings()
    parser = NotebookParser()

    if paths == (STDIN,):
        sources = [("-", parser.parse_stdin)]
    else:
        notebooks = find_notebooks(paths or (Path("."),), config.exclude_patterns)
        if not notebooks and not allow_no_notebooks:
            raise click.ClickException("No notebooks found")
        sources = [(str(p), functools.partial(parser.parse, p)) for p in notebooks]

    results: dict[str, list[CheckResult]] = {}
    failures = 0
    for name, read in sources:
        try:
            findings = check_notebook(read(), settings)
        except NbScrubError as e:
            failures += 1
            err_console.print(f"[red]{escape(name)}:[/red] {escape(str(e))}", highlight=False)
            continue
        if findings:
            results[name] = findings

    report = ReportWriter().render(results, format=output_format)
    if report:
        click.echo(report)
    if results or failures:
        sys.exit(1)


@main.command("show-config")
@click.option(
    "--show-all",
    is_flag=True,
    help="Show all values including defaults and the resolved key list",
)
@common_options
@handle_errors
def show_config(show_all: bool, **options):
    """Show the configuration in effect."""
    config = build_config(**options)
    for key, value in config.to_toml_dict(show_all=show_all).items():
        click.echo(f"{key} = {json.dumps(value, ensure_ascii=False)}")


@main.group()
def hook():
    """Commands for pre-commit hooks."""


@hook.command("check-large-files")
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--maxkb",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_SIZE_KB,
    show_default=True,
    help="Max size in KB to consider a file large",
)
@common_options
@handle_errors
def check_large_files(files: tuple[Path, ...], maxkb: int, **options):
    """Fail if any file is too large, measuring notebooks after cleaning.

    FILES: Files to check, as passed by pre-commit
    """
    config = build_config(**options)
    large = find_large_files(files, config.to_settings(), maxkb, config.exclude_patterns)
    if not large:
        return

    table = Table(title=f"Files over {maxkb} KB")
    table.add_column("File", style="cyan")
    table.add_column("Size (KB)", justify="right", style="red")
    for path, size_kb in large:
        table.add_row(str(path), str(size_kb))
    console.print(table)
    sys.exit(1)


if __name__ == "__main__":
    main()
