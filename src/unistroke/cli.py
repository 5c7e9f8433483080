"""Unistroke CLI.

Usage:
    unistroke recognize stroke.json     — Recognize a stroke stored as JSON
    unistroke templates                 — List available templates
    unistroke export-samples out.json   — Write the built-in samples to a file
    unistroke benchmark                 — Time recognition on synthetic strokes
"""

from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from unistroke.config import RecognizerConfig
from unistroke.errors import UnistrokeError
from unistroke.profiler import StageProfiler
from unistroke.recognizer import RecognitionEngine, RecognitionStatus
from unistroke.samples import sample_templates
from unistroke.templates import load_template_source, save_template_source

app = typer.Typer(
    name="unistroke",
    help="Single-stroke gesture recognition against template shapes.",
    add_completion=False,
)


@app.callback()
def _root(
    log_level: str = typer.Option("warning", "--log-level", help="Logging level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _build_engine(
    config_path: Optional[str],
    templates_path: Optional[str],
    profiler: Optional[StageProfiler] = None,
) -> RecognitionEngine:
    try:
        config = RecognizerConfig.from_yaml(config_path) if config_path else RecognizerConfig()
        templates = load_template_source(templates_path) if templates_path else sample_templates()
        return RecognitionEngine(templates, config=config, profiler=profiler)
    except (UnistrokeError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)


def _read_stroke(path: Path) -> list:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("points", [])
    return data


@app.command()
def recognize(
    stroke: str = typer.Argument(..., help="JSON file with a list of points or {'points': [...]}"),
    config: Optional[str] = typer.Option(None, "--config", help="Recognizer config YAML"),
    templates: Optional[str] = typer.Option(None, "--templates", help="Template JSON file"),
    show_all: bool = typer.Option(False, "--all", help="Print the score for every template"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Recognize one stroke."""
    path = Path(stroke)
    if not path.exists():
        typer.echo(f"Error: stroke file not found: {stroke}", err=True)
        raise typer.Exit(2)

    try:
        points = _read_stroke(path)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {stroke} is not valid JSON: {e}", err=True)
        raise typer.Exit(2)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: could not read {stroke}: {e}", err=True)
        raise typer.Exit(2)

    engine = _build_engine(config, templates)
    result = engine.recognize(points)

    if as_json:
        typer.echo(json.dumps(result.to_dict()))
    elif result.status is RecognitionStatus.MATCHED:
        typer.echo(f"{result.name}\t{result.score:.4f}")
    else:
        typer.echo(f"{result.status.value}: {result.reason}", err=True)

    if result.matched and show_all:
        for name, score in engine.score_all(points):
            typer.echo(f"  {name:24s} {score:.4f}")

    if not result.matched:
        raise typer.Exit(1)


@app.command("templates")
def list_templates(
    templates: Optional[str] = typer.Option(None, "--templates", help="Template JSON file"),
):
    """List template names in library order."""
    engine = _build_engine(None, templates)
    for name in engine.template_names:
        typer.echo(name)


@app.command("export-samples")
def export_samples(
    output: str = typer.Argument(..., help="Destination JSON file"),
):
    """Write the built-in sample gestures as a template file."""
    pairs = sample_templates()
    save_template_source(output, pairs)
    typer.echo(f"Wrote {len(pairs)} templates to {output}")


@app.command()
def benchmark(
    iterations: int = typer.Option(200, min=1, help="Strokes to recognize"),
    config: Optional[str] = typer.Option(None, "--config", help="Recognizer config YAML"),
    seed: int = typer.Option(42, help="Random seed for stroke noise"),
):
    """Time recognition of noisy copies of the built-in samples."""
    profiler = StageProfiler()
    engine = _build_engine(config, None, profiler=profiler)
    rng = np.random.default_rng(seed)
    samples = sample_templates()

    typer.echo(
        f"Running {iterations} recognitions against {len(engine.library)} templates "
        f"(evaluations per template: {engine.matcher.evaluations})"
    )

    correct = 0
    t0 = time.perf_counter()
    for i in range(iterations):
        name, points = samples[i % len(samples)]
        theta = math.radians(rng.uniform(-10.0, 10.0))
        rot = np.array([[math.cos(theta), -math.sin(theta)], [math.sin(theta), math.cos(theta)]])
        stroke = (points @ rot.T) * rng.uniform(50.0, 300.0)
        stroke = stroke + rng.normal(0.0, 0.01 * np.ptp(stroke), stroke.shape)
        result = engine.recognize(stroke)
        if result.matched and result.name == name:
            correct += 1
    elapsed = time.perf_counter() - t0

    typer.echo(f"\nAccuracy:        {correct / iterations:.1%}")
    typer.echo(f"Average latency: {elapsed / iterations * 1000:.2f} ms")
    typer.echo("\nStage breakdown:")
    summary = profiler.summary()
    for stage, stats in summary["stages"].items():
        typer.echo(f"   {stage:15s} avg={stats['avg_ms']:.3f}ms  p95={stats['p95_ms']:.3f}ms")
    scan = summary.get("scan")
    if scan:
        typer.echo(
            f"\nPer call: {scan['templates_per_call']:.0f} templates, "
            f"{scan['evaluations_per_call']:.0f} distance evaluations"
        )
    typer.echo("\nSlowest templates:")
    for name, avg_ms in profiler.slowest_templates(3):
        typer.echo(f"   {name:24s} {avg_ms:.3f}ms")


def main():
    app()


if __name__ == "__main__":
    main()
