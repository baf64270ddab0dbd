"""CLI interface for the plugin health scoring system."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pluginhealth.clients.update_center import UpdateCenterError
from pluginhealth.consts import DEFAULT_DATA_DIR, PROBE_ENGINE_CONCURRENCY, SCORE_ENGINE_CONCURRENCY
from pluginhealth.models.model_plugin import ResultStatus
from pluginhealth.pipeline import (
    load_plugin_overview,
    run_probe_pipeline,
    run_score_pipeline,
    run_sync_pipeline,
)
from pluginhealth.probes.registry import ProbeRegistry
from pluginhealth.reporting import probe_raw_result_counts, scoring_distribution
from pluginhealth.scores.registry import ScoringRegistry
from pluginhealth.storage.file_manager import FileManager

app = typer.Typer(
    name="phs",
    help="Plugin Health Scoring - Probe plugins and compute their health score",
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _get_score_color(score: float) -> str:
    """Get color for score display."""
    if score >= 70:
        return "green"
    elif score >= 50:
        return "yellow"
    else:
        return "red"


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    )


@app.command()
def sync(
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Import plugins from the update-center into the plugin store."""
    _configure_logging(verbose)

    console.print("\n[bold]Syncing plugins from the update-center...[/bold]\n")
    try:
        created, updated = run_sync_pipeline(data_dir)
    except UpdateCenterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("[bold green]Sync complete![/bold green]")
    console.print(f"Created: {created}, updated: {updated}")


@app.command()
def probe(
    plugin: str = typer.Option(None, "--plugin", "-p", help="Only probe this plugin"),
    concurrency: int = typer.Option(
        PROBE_ENGINE_CONCURRENCY, "--concurrency", help="Max plugins probed in parallel"
    ),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run the probes on stored plugins."""
    _configure_logging(verbose)

    console.print(f"\n[bold]Probing {plugin or 'all plugins'}...[/bold]\n")
    try:
        with _progress() as progress:
            task = progress.add_task("Probing...", total=None)

            def on_progress(current: int, total: int):
                progress.update(task, completed=current, total=total)

            report = run_probe_pipeline(
                data_dir=data_dir,
                plugin_name=plugin,
                concurrency=concurrency,
                progress_callback=on_progress,
            )
    except (UpdateCenterError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]Probe run complete![/bold green]")
    summary_table = Table(title="Probe Summary")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Count", justify="right", style="magenta")

    summary_table.add_row("Plugins", str(report.total))
    summary_table.add_row("Probes executed", str(report.executed))
    summary_table.add_row("Probes skipped", str(report.skipped))
    summary_table.add_row("Probe errors", str(report.errored))
    summary_table.add_row("Save failures", str(report.save_failures))
    summary_table.add_row("Duration", f"{report.duration_seconds:.1f}s")
    console.print(summary_table)

    errored = [o for o in report.outcomes if o.errors]
    if errored:
        console.print(f"\n[yellow]Plugins with probe errors ({len(errored)}):[/yellow]")
        for outcome in errored[:5]:
            keys = ", ".join(sorted(outcome.errors))
            console.print(f"  [dim]{outcome.plugin_name}:[/dim] {keys}")
        if len(errored) > 5:
            console.print(f"  [dim]... and {len(errored) - 5} more[/dim]")


@app.command()
def score(
    plugin: str = typer.Option(None, "--plugin", "-p", help="Only score this plugin"),
    concurrency: int = typer.Option(
        SCORE_ENGINE_CONCURRENCY, "--concurrency", help="Max plugins scored in parallel"
    ),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Compute the score of stored plugins."""
    _configure_logging(verbose)

    try:
        report = run_score_pipeline(data_dir=data_dir, plugin_name=plugin, concurrency=concurrency)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]Score run complete![/bold green]")
    summary_table = Table(title="Score Summary")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Count", justify="right", style="magenta")

    summary_table.add_row("Plugins", str(report.total))
    summary_table.add_row("Computed", str(report.computed))
    summary_table.add_row("Unchanged", str(report.unchanged))
    summary_table.add_row("Failed", str(len(report.failures)))
    summary_table.add_row("Duration", f"{report.duration_seconds:.1f}s")
    console.print(summary_table)

    if report.failures:
        console.print(f"\n[yellow]Failed plugins ({len(report.failures)}):[/yellow]")
        for name, error in list(report.failures.items())[:5]:
            console.print(f"  [dim]{name}:[/dim] {error[:80]}")


@app.command()
def show(
    plugin: str = typer.Argument(..., help="Plugin name"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
) -> None:
    """Show the probe results and latest score of a plugin."""
    stored, latest = load_plugin_overview(plugin, data_dir)
    if stored is None:
        console.print(f"[yellow]Plugin '{plugin}' not found. Run 'phs sync' first.[/yellow]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{stored.name}[/bold] {stored.version or ''}")
    if stored.scm:
        console.print(f"[dim]{stored.scm}[/dim]")

    details_table = Table(title="Probe Results")
    details_table.add_column("Probe", style="cyan", no_wrap=True)
    details_table.add_column("Status")
    details_table.add_column("Message")
    details_table.add_column("Date", style="dim")

    for key, result in sorted(stored.details.items()):
        status_color = "green" if result.status == ResultStatus.SUCCESS else "red"
        details_table.add_row(
            key,
            f"[{status_color}]{result.status.value}[/{status_color}]",
            _truncate(result.message),
            result.timestamp.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(details_table)

    if latest is None:
        console.print("\n[yellow]Not scored yet. Run 'phs score'.[/yellow]")
        return

    color = _get_score_color(latest.value)
    console.print(f"\nScore: [{color}]{latest.value}[/{color}] ({latest.computed_at:%Y-%m-%d %H:%M})")

    score_table = Table(title="Score Details")
    score_table.add_column("Scoring", style="cyan", no_wrap=True)
    score_table.add_column("Value", justify="right")
    score_table.add_column("Weight", justify="right", style="magenta")
    score_table.add_column("Reasons")

    for result in latest.details:
        reasons = "; ".join(r for c in result.components for r in c.reasons)
        score_table.add_row(
            result.key,
            f"[{_get_score_color(result.value)}]{result.value:.0f}[/{_get_score_color(result.value)}]",
            f"{result.weight:.2f}",
            _truncate(reasons, 80),
        )
    console.print(score_table)


@app.command()
def probes(
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
) -> None:
    """List registered probes and how many plugins got each result."""
    registry = ProbeRegistry()

    table = Table(title="Registered Probes")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Order", justify="right")
    table.add_column("Requires", style="dim")
    table.add_column("Description")
    for view in registry.views():
        table.add_row(view.key, str(view.order), ", ".join(view.requirements), _truncate(view.description, 70))
    console.print(table)

    counts = probe_raw_result_counts(FileManager(data_dir).list_plugins(), registry)
    if not any(counts.values()):
        console.print("\n[dim]No probe results stored yet.[/dim]")
        return

    results_table = Table(title="Probe Results")
    results_table.add_column("Probe", style="cyan", no_wrap=True)
    results_table.add_column("Message")
    results_table.add_column("Plugins", justify="right", style="magenta")
    for key, messages in counts.items():
        for message, count in messages.items():
            results_table.add_row(key, _truncate(message, 70), str(count))
    console.print(results_table)


@app.command()
def scorings(
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="Data directory"),
) -> None:
    """List registered scorings and the distribution of their values."""
    registry = ScoringRegistry()
    distribution = scoring_distribution(FileManager(data_dir).latest_scores())

    table = Table(title="Registered Scorings")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Weight", justify="right", style="magenta")
    table.add_column("Plugins", justify="right")
    table.add_column("Avg", justify="right", style="green")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Description")

    for view in registry.views():
        stats = distribution.get(view.key)
        if stats:
            table.add_row(
                view.key,
                f"{view.weight:.2f}",
                str(int(stats["count"])),
                f"{stats['average']:.1f}",
                f"{stats['min']:.0f}",
                f"{stats['max']:.0f}",
                _truncate(view.description, 60),
            )
        else:
            table.add_row(view.key, f"{view.weight:.2f}", "0", "-", "-", "-", _truncate(view.description, 60))
    console.print(table)


if __name__ == "__main__":
    app()
