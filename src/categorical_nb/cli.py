"""Command-line interface for the categorical Naive Bayes classifier.

Provides ``holdout``, ``crossval``, ``predict`` and ``interactive`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    categorical-nb holdout weather.csv --ratio 0.7
    categorical-nb crossval weather.csv -k 7 --seed 42
    categorical-nb predict weather.csv "sunny,hot,high,false"
    categorical-nb interactive
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classifier import CategoricalNaiveBayes
from .config import Settings, load_settings
from .evaluation import CrossValidationResult, HoldoutResult, cross_validate, holdout_evaluate
from .models import Dataset
from .parsers import parse_attributes, read_dataset

console = Console()

MODE_HOLDOUT = "1"
MODE_CROSSVAL = "2"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {escape(str(error))}")
    sys.exit(1)


def _load(file: Path, delimiter: str) -> Dataset:
    try:
        return read_dataset(file, delimiter=delimiter)
    except (OSError, ValueError) as e:
        _fail(e)


@click.group()
@click.version_option(package_name="categorical-naive-bayes")
@click.pass_context
def main(ctx: click.Context) -> None:
    """Categorical Naive Bayes: train and evaluate on labeled CSV data.

    Each line of a data file is a comma-separated list of attribute values
    followed by the class label.
    """
    try:
        settings = load_settings()
    except ValueError as e:
        _fail(e)
    _configure_logging(settings.log_level)
    ctx.obj = settings


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--ratio", "-r", type=float, default=None,
              help="Fraction of records used for training, in [0, 1].")
@click.option("--seed", type=int, default=None, help="Random seed for the split.")
@click.option("--delimiter", "-d", default=None, help="Field delimiter.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def holdout(
    settings: Settings,
    file: Path,
    ratio: Optional[float],
    seed: Optional[int],
    delimiter: Optional[str],
    output: str,
) -> None:
    """Train on a random share of FILE and report accuracy on the rest.

    Example: categorical-nb holdout weather.csv --ratio 0.7
    """
    dataset = _load(file, delimiter or settings.delimiter)
    ratio = settings.ratio if ratio is None else ratio
    seed = settings.seed if seed is None else seed

    with console.status("[bold blue]Training...", spinner="dots"):
        try:
            result = holdout_evaluate(dataset, ratio, seed)
        except (ValueError, RuntimeError) as e:
            _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_holdout(result, file.name)


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--folds", "-k", type=int, default=None, help="Number of folds (k >= 2).")
@click.option("--seed", type=int, default=None, help="Random seed for fold assignment.")
@click.option("--delimiter", "-d", default=None, help="Field delimiter.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def crossval(
    settings: Settings,
    file: Path,
    folds: Optional[int],
    seed: Optional[int],
    delimiter: Optional[str],
    output: str,
) -> None:
    """Run k-fold cross-validation on FILE.

    Example: categorical-nb crossval weather.csv -k 7
    """
    dataset = _load(file, delimiter or settings.delimiter)
    k = settings.folds if folds is None else folds
    seed = settings.seed if seed is None else seed

    with console.status("[bold blue]Cross-validating...", spinner="dots"):
        try:
            result = cross_validate(dataset, k, seed)
        except (ValueError, RuntimeError) as e:
            _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_crossval(result, file.name)


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.argument("instance")
@click.option("--delimiter", "-d", default=None, help="Field delimiter.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def predict(
    settings: Settings,
    file: Path,
    instance: str,
    delimiter: Optional[str],
    output: str,
) -> None:
    """Train on all of FILE and classify INSTANCE.

    INSTANCE is a delimited list of attribute values without a label.

    Example: categorical-nb predict weather.csv "sunny,hot,high,false"
    """
    delimiter = delimiter or settings.delimiter
    dataset = _load(file, delimiter)

    try:
        record = parse_attributes(instance, delimiter)
        classifier = CategoricalNaiveBayes().fit(dataset)
        label = classifier.predict(record)
        proba = classifier.predict_proba(record)
    except (ValueError, RuntimeError) as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps({
            "attributes": list(record.attributes),
            "predicted_class": label,
            "probabilities": {k: round(v, 4) for k, v in proba.items()},
        }, indent=2))
        return

    table = Table(title=f"Prediction for {', '.join(record.attributes)}")
    table.add_column("Class", style="cyan")
    table.add_column("Probability", justify="right")
    for cls, p in sorted(proba.items(), key=lambda x: x[1], reverse=True):
        style = "bold green" if cls == label else ""
        table.add_row(cls, f"{p:.2%}", style=style)
    console.print(table)
    console.print(f"Predicted class: [bold green]{label}[/]")


@main.command()
@click.pass_obj
def interactive(settings: Settings) -> None:
    """Prompt for a data file and evaluation mode, then report accuracy."""
    file = click.prompt(
        "Data file path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )
    dataset = _load(file, settings.delimiter)

    mode = click.prompt(
        "Mode (1 = holdout split, 2 = k-fold cross-validation)",
        type=click.Choice([MODE_HOLDOUT, MODE_CROSSVAL]),
        show_choices=False,
    )

    try:
        if mode == MODE_HOLDOUT:
            ratio = click.prompt(
                "Training ratio", type=click.FloatRange(0.0, 1.0), default=settings.ratio,
            )
            _render_holdout(holdout_evaluate(dataset, ratio, settings.seed), file.name)
        else:
            k = click.prompt(
                "Number of folds", type=click.IntRange(2, max(2, len(dataset))),
                default=min(settings.folds, max(2, len(dataset))),
            )
            _render_crossval(cross_validate(dataset, k, settings.seed), file.name)
    except (ValueError, RuntimeError) as e:
        _fail(e)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _accuracy_style(accuracy: float) -> str:
    if accuracy >= 80:
        return "bold green"
    if accuracy >= 50:
        return "bold yellow"
    return "bold red"


def _render_holdout(result: HoldoutResult, filename: str) -> None:
    """Render a HoldoutResult with rich formatting."""
    console.print()
    console.print(Panel(
        f"[bold]{filename}[/]\n"
        f"Training size: {result.train_size} | Testing size: {result.test_size}",
        title="Holdout Evaluation",
        border_style="blue",
    ))

    metrics = result.metrics
    table = Table(title="Per-class Scores", show_lines=False)
    table.add_column("Class", style="cyan")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")
    table.add_column("Support", justify="right")
    for cls, m in metrics.per_class.items():
        table.add_row(
            cls,
            f"{m['precision']:.4f}",
            f"{m['recall']:.4f}",
            f"{m['f1']:.4f}",
            str(metrics.support.get(cls, 0)),
        )
    console.print(table)

    style = _accuracy_style(result.accuracy)
    console.print(f"Accuracy: [{style}]{result.accuracy:.2f}%[/]")
    console.print()


def _render_crossval(result: CrossValidationResult, filename: str) -> None:
    """Render a CrossValidationResult as a table of fold accuracies."""
    table = Table(title=f"{result.k}-fold Cross-Validation: {filename}", min_width=50)
    table.add_column("Fold", justify="right", width=6)
    table.add_column("Accuracy", justify="right")

    for i, accuracy in enumerate(result.fold_accuracies, 1):
        table.add_row(str(i), f"{accuracy:.2f}%")

    console.print()
    console.print(table)
    if result.dropped:
        console.print(f"[dim]{result.dropped} record(s) not assigned to any fold[/]")

    style = _accuracy_style(result.mean_accuracy)
    console.print(f"Average accuracy: [{style}]{result.mean_accuracy:.2f}%[/]")
    console.print()


if __name__ == "__main__":
    main()
