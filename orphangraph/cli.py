"""Typer-based CLI for OrphanGraph dead-file analysis."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__, config
from .analyzer import OrphanAnalyzer
from .config_manager import AnalysisSettings, load_settings, save_settings
from .graph_export import export_dot, export_json
from .models import AnalysisIssue, SafetyLevel
from .report import build_check_report, build_report, write_report

console = Console()

app = typer.Typer(
    help="🧹 OrphanGraph — find source files nothing imports and rank them by deletion safety.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

LEVEL_STYLE = {
    SafetyLevel.ABSOLUTELY_SAFE: ("🟢", "green"),
    SafetyLevel.VERY_SAFE: ("🟢", "green"),
    SafetyLevel.PROBABLY_SAFE: ("🟡", "yellow"),
    SafetyLevel.RISKY: ("🟠", "dark_orange"),
    SafetyLevel.KEEP: ("🔴", "red"),
}


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"OrphanGraph v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log pipeline progress and skipped files."),
):
    """OrphanGraph: static import-graph analysis for JavaScript / TypeScript trees."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(
    root: Optional[Path],
    config_path: Optional[Path],
    skip: Optional[List[str]] = None,
    workers: Optional[int] = None,
) -> AnalysisSettings:
    try:
        settings = load_settings(root, config_path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc))
    if skip:
        settings.skip_dirs = tuple(settings.skip_dirs) + tuple(skip)
    if workers is not None:
        settings.workers = workers
    return settings


def _level_label(level: SafetyLevel) -> str:
    icon, color = LEVEL_STYLE[level]
    return f"{icon} [{color}]{level.name}[/{color}]"


def _print_issues(issues: List[AnalysisIssue], root: Path) -> None:
    if not issues:
        return
    console.print(f"\n[yellow]⚠️  {len(issues)} path(s) skipped:[/yellow]")
    for issue in issues:
        try:
            shown = issue.path.relative_to(root)
        except ValueError:
            shown = issue.path
        console.print(f"  • {escape(f'[{issue.kind}] {shown}: {issue.message}')}")


# ===================================================================
# Commands
# ===================================================================

@app.command("scan")
def scan(
    root: Path = typer.Argument(..., exists=True, file_okay=False, help="Root of the source tree."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file."),
    skip: Optional[List[str]] = typer.Option(None, "--skip", "-s", help="Extra directory name to exclude."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Parallel file workers."),
    json_out: Optional[Path] = typer.Option(None, "--json", "-o", help="Write the JSON report here."),
    min_level: str = typer.Option("KEEP", "--level", "-l", help="Only show candidates at least this safe."),
    cascade: bool = typer.Option(True, "--cascade/--no-cascade", help="Compute would-also-orphan files."),
    save: bool = typer.Option(False, "--save", help="Write the JSON report to analysis/orphan-analysis.json under ROOT."),
):
    """Scan a tree and rank every orphaned file by deletion safety."""
    try:
        threshold = SafetyLevel.parse(min_level)
    except KeyError:
        raise typer.BadParameter(f"Unknown safety level '{min_level}'.")

    analyzer = OrphanAnalyzer(root, _settings(root, config_path, skip, workers))
    result = analyzer.run(cascade=cascade)
    graph = result.graph

    console.print(f"\n[bold cyan]🔍 Analyzed {len(graph)} files under {escape(str(result.root))}[/bold cyan]")
    console.print(f"{len(result.candidates)} orphan candidate(s)\n")

    summary = Table(title="Safety distribution", show_header=True)
    summary.add_column("Level")
    summary.add_column("Files", justify="right")
    for level in SafetyLevel:
        count = sum(1 for c in result.candidates if c.level is level)
        summary.add_row(_level_label(level), str(count))
    console.print(summary)

    shown = [c for c in result.candidates if c.level.value >= threshold.value]
    if shown:
        table = Table(title="\nOrphan candidates", show_header=True, show_lines=True)
        table.add_column("File", style="cyan")
        table.add_column("Level", width=22)
        table.add_column("Type", width=10)
        table.add_column("Size", justify="right", width=8)
        table.add_column("Why", min_width=30)
        for candidate in shown:
            why = escape("\n".join(candidate.reasons))
            cascaded = result.cascades.get(candidate.path, ())
            if cascaded:
                why += "\n[yellow]Would also orphan:[/yellow] " + escape(", ".join(graph.relative(p) for p in cascaded))
            table.add_row(
                escape(graph.relative(candidate.path)),
                _level_label(candidate.level),
                candidate.source.kind.value,
                str(candidate.source.size),
                why,
            )
        console.print(table)
    elif result.candidates:
        console.print(f"\nNo candidates at {threshold.name} or safer.")
    else:
        console.print("\n[green]✓[/green] No orphaned files found.")

    _print_issues(result.issues, result.root)

    if json_out is None and save:
        json_out = result.root / config.REPORT_DIR / config.REPORT_FILE
    if json_out is not None:
        write_report(build_report(result), json_out)
        console.print(f"\n💾 Report written to {escape(str(json_out))}")


@app.command("check")
def check(
    root: Path = typer.Argument(..., exists=True, file_okay=False, help="Root of the source tree."),
    files: List[Path] = typer.Argument(..., help="Files to check, relative to ROOT or absolute."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file."),
    json_out: Optional[Path] = typer.Option(None, "--json", "-o", help="Write the JSON report here."),
):
    """Check specific files against the full import graph."""
    analyzer = OrphanAnalyzer(root, _settings(root, config_path))
    graph, checks, issues = analyzer.check_files(files)

    for item in checks:
        if not item.found:
            console.print(f"[red]✗[/red] {escape(graph.relative(item.path))} is not part of the analyzed tree")
            continue
        rel = escape(graph.relative(item.path))
        if item.candidate is None:
            console.print(f"[green]✓[/green] {rel} is imported by {len(item.importers)} file(s)")
            continue
        body = "\n".join(f"• {escape(reason)}" for reason in item.candidate.reasons)
        if item.would_also_orphan:
            body += "\n[yellow]Would also orphan:[/yellow]\n" + "\n".join(
                f"  - {escape(graph.relative(p))}" for p in item.would_also_orphan
            )
        console.print(Panel(body, title=f"{rel}  {_level_label(item.candidate.level)}", border_style="cyan"))

    _print_issues(issues, analyzer.root)

    if json_out is not None:
        write_report(build_check_report(checks, graph, issues), json_out)
        console.print(f"\n💾 Report written to {escape(str(json_out))}")

    if any(not item.found for item in checks):
        raise typer.Exit(code=1)


@app.command("cascade")
def cascade(
    root: Path = typer.Argument(..., exists=True, file_okay=False, help="Root of the source tree."),
    files: List[Path] = typer.Argument(..., help="Files you plan to delete."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file."),
):
    """Simulate deleting files and list everything that would become orphaned."""
    analyzer = OrphanAnalyzer(root, _settings(root, config_path))
    graph, rounds = analyzer.simulate(files)

    if not rounds:
        console.print("[green]✓[/green] No other files would become orphaned.")
        return

    total = sum(len(batch) for batch in rounds)
    console.print(f"[bold yellow]🔗 Deleting these files would orphan {total} more:[/bold yellow]")
    for index, batch in enumerate(rounds, start=1):
        console.print(f"\n[bold]Round {index}[/bold]")
        for path in batch:
            console.print(f"  - {escape(graph.relative(path))}")


@app.command("export-graph")
def export_graph(
    root: Path = typer.Argument(..., exists=True, file_okay=False, help="Root of the source tree."),
    fmt: str = typer.Option("dot", "--format", "-f", help="Export format: dot or json."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    focus: str = typer.Option("", "--focus", help="Only export this file and its direct neighbours."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file."),
):
    """Export the import graph to Graphviz DOT or JSON."""
    fmt = fmt.lower()
    if fmt not in {"dot", "json"}:
        raise typer.BadParameter("Format must be one of: dot, json")

    analyzer = OrphanAnalyzer(root, _settings(root, config_path))
    graph, _ = analyzer.build_graph()

    if output is None:
        output = Path.cwd() / f"{analyzer.root.name}_imports.{fmt}"

    if fmt == "dot":
        export_dot(graph, output, focus=focus)
    else:
        export_json(graph, output, focus=focus)

    typer.echo(f"Exported graph to {output}")


@app.command("show-config")
def show_config(
    root: Optional[Path] = typer.Argument(None, exists=True, file_okay=False, help="Project root."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML settings file."),
    save: bool = typer.Option(False, "--save", help="Write these settings to the user config file."),
):
    """Print the effective analysis settings."""
    settings = _settings(root, config_path)

    table = Table(title="Analysis settings", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.to_dict().items():
        table.add_row(key, escape(str(value)))
    console.print(table)
    console.print(f"\nUser config: {config.CONFIG_FILE}")

    if save:
        saved = save_settings(settings)
        console.print(f"💾 Settings saved to {escape(str(saved))}")


if __name__ == "__main__":
    app()
