"""CLI entry point for the step-height pipeline.

Usage:
    stepheight run                        # Run pipeline on configs/pipeline.yaml
    stepheight run --seed 7 --plot out.png
    stepheight info                       # Show pipeline steps
    stepheight schema edge_detection      # Show a step's config schema
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stepheight.core.logging import setup_logging

app = typer.Typer(name="stepheight", help="Robust step height extraction from height profiles")
console = Console()

DEFAULT_CONFIG = Path("configs/pipeline.yaml")


def _load_config(config: Path):
    """Load pipeline.yaml, or print why not and exit with code 1."""
    from stepheight.core.errors import StepHeightError
    from stepheight.core.pipeline_runner import load_pipeline_config

    try:
        return load_pipeline_config(config)
    except (OSError, yaml.YAMLError, ValidationError, StepHeightError) as e:
        console.print(f"[red]Cannot load pipeline config {config}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _print_steps_table(result) -> None:
    table = Table(title=f"Platforms found: {len(result.median_steps)}")
    table.add_column("#", style="dim")
    table.add_column("Start (mm)", justify="right")
    table.add_column("End (mm)", justify="right")
    table.add_column("Height (mm)", style="cyan", justify="right")
    table.add_column("Length (mm)", justify="right")

    for i, step in enumerate(result.median_steps, 1):
        table.add_row(
            str(i),
            f"{step.start_position:.3f}",
            f"{step.end_position:.3f}",
            f"{step.height:.3f}",
            f"{step.length:.3f}",
        )
    console.print(table)


@app.command()
def run(
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    seed: int = typer.Option(None, help="Noise seed (overrides config)"),
    no_noise: bool = typer.Option(False, "--no-noise", help="Disable noise injection"),
    plot: Path = typer.Option(None, help="Save a plot of every stage to this file"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Run the full pipeline and print the step report."""
    setup_logging(log_level)
    from stepheight.core.errors import StepHeightError
    from stepheight.core.pipeline_runner import run_pipeline

    pipeline_cfg = _load_config(config)

    build_entry = next((s for s in pipeline_cfg.steps if s.name == "build_profile"), None)
    if build_entry is not None:
        if seed is not None:
            build_entry.params["noise_seed"] = seed
        if no_noise:
            build_entry.params["enable_noise"] = False

    try:
        result = run_pipeline(pipeline_cfg.polygon, pipeline_cfg)
    except (StepHeightError, ValidationError) as e:
        console.print(f"[red]Pipeline failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    for warning in result.warnings:
        console.print(f"[yellow]{escape(warning)}[/yellow]")
    _print_steps_table(result)
    for line in result.report_lines():
        console.print(line, markup=False, highlight=False, soft_wrap=True)

    if plot is not None:
        from stepheight.utils.visualization import plot_pipeline_result

        plot_pipeline_result(result, title=pipeline_cfg.project_name, save_path=plot)
        console.print(f"[green]Plot saved to {plot}[/green]")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Show pipeline steps and their status."""
    pipeline_cfg = _load_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name} ({len(pipeline_cfg.polygon)} vertices)")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Depends On", style="dim")

    for i, step in enumerate(pipeline_cfg.steps, 1):
        table.add_row(
            str(i),
            step.name,
            step.module,
            "Y" if step.enabled else "N",
            ", ".join(step.depends_on) if step.depends_on else "-",
        )
    console.print(table)


@app.command()
def schema(
    step_name: str = typer.Argument(..., help="Step name (e.g. edge_detection)"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
) -> None:
    """Print the JSON schema of a step's config."""
    from stepheight.core.pipeline_runner import import_step_class

    pipeline_cfg = _load_config(config)
    entry = next((s for s in pipeline_cfg.steps if s.name == step_name), None)
    if entry is None:
        console.print(f"[red]Step '{step_name}' not found in pipeline config[/red]")
        raise typer.Exit(1)

    try:
        step_cls = import_step_class(entry.module)
    except ImportError as e:
        console.print(f"[red]Cannot import step '{step_name}': {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print_json(json.dumps(step_cls.get_config_schema()))


if __name__ == "__main__":
    app()
