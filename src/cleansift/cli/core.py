"""
Main click group and commands for cleansift.

cleansift/src/cleansift/cli/core.py
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from ..analyzers.registry import get_all_analyzers
from ..api import build_scanner
from ..config import load_config
from ..models import ClassificationResult
from ..progress import ProgressTracker
from ..reporting import BUILTIN_FORMATTERS, DEFAULT_FORMAT, FORMAT_CHOICES

__all__ = ["cli", "CleansiftContext"]

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class CleansiftContext:
    """Shared context for CLI commands."""

    verbose: bool = False


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """cleansift: classify project files as essential, non-essential or uncertain."""
    ctx.obj = CleansiftContext(verbose=verbose)

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)


@cli.command("scan")
@click.argument(
    "root",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMAT_CHOICES),
    default=DEFAULT_FORMAT,
    help="Output format",
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the report to a file"
)
@click.option("--exclude", "excludes", multiple=True, help="Extra path prefix to skip (repeatable)")
@click.pass_context
def scan(
    ctx: click.Context,
    root: Path,
    output_format: str,
    output: Optional[Path],
    excludes: tuple,
) -> None:
    """Classify every file under ROOT (dry run, nothing is moved)."""
    cleansift_ctx: CleansiftContext = ctx.obj
    root = root.resolve()
    config = load_config(root)

    tracker = ProgressTracker()
    scanner = build_scanner(root, config=config, progress=tracker)
    for prefix in excludes:
        scanner.add_exclude_pattern(prefix)

    if not scanner.analyzers:
        console.print("[red]No analyzers enabled; check [tool.cleansift] analyzers[/red]")
        ctx.exit(1)

    progress_console = Console(stderr=True)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=progress_console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Analyzing files...", total=None)

        def advance(file_path: str, result: ClassificationResult) -> None:
            progress.update(task_id, total=tracker.total_items, completed=tracker.processed_items)

        report = scanner.analyze_codebase(on_result=advance)

    if cleansift_ctx.verbose:
        logger.debug(tracker.formatted_progress())

    formatter = BUILTIN_FORMATTERS[output_format]()
    rendered = formatter.format_report(report, config)

    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
        console.print(f"[green]Report written to {output}[/green]")
    elif output_format == "json":
        click.echo(rendered)
    else:
        console.print(rendered, markup=False, highlight=False, soft_wrap=True)


@cli.command("explain")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file_path", metavar="FILE")
@click.pass_context
def explain(ctx: click.Context, root: Path, file_path: str) -> None:
    """Show how FILE (relative to ROOT) was classified and why."""
    root = root.resolve()
    scanner = build_scanner(root)
    relative = Path(file_path).as_posix()
    result = scanner.analyze_file(relative)
    reasoning = result.detailed_reasoning()

    console.print(f"[bold cyan]{result.file_path}[/bold cyan]")
    console.print(result.summary(), markup=False, highlight=False, soft_wrap=True)
    console.print(f"Priority: {result.priority_level.value}")
    console.print(f"\n[bold]Category:[/bold] {reasoning['category_explanation']}")

    console.print("\n[bold]Confidence factors:[/bold]")
    for factor in reasoning["confidence_factors"]:
        console.print(f"  - {factor}", markup=False, soft_wrap=True)

    console.print(f"\n[bold]Action:[/bold] {reasoning['action_justification']}")

    risk = reasoning["risk_assessment"]
    console.print(f"\n[bold]Risk:[/bold] {risk['level']}")
    for factor in risk["factors"]:
        console.print(f"  - {factor}", markup=False, soft_wrap=True)

    if result.dependencies:
        console.print(f"\nDependencies: {', '.join(result.dependencies)}", markup=False)
    if result.references:
        console.print(f"References: {', '.join(result.references)}", markup=False)


@cli.command("analyzers")
def list_analyzers() -> None:
    """List all registered analyzers."""
    analyzers = get_all_analyzers()

    table = Table(title="Available Cleansift Analyzers")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Priority", justify="right")
    table.add_column("Description", style="white")

    for name, analyzer_class in sorted(
        analyzers.items(), key=lambda item: (-getattr(item[1], "priority", 50), item[0])
    ):
        kind = getattr(analyzer_class, "kind", None)
        table.add_row(
            name,
            getattr(kind, "value", "unknown"),
            str(getattr(analyzer_class, "priority", 50)),
            getattr(analyzer_class, "description", "") or "No description available",
        )

    console.print(table)
    console.print(f"\nTotal: {len(analyzers)} analyzer(s)")
