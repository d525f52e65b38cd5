from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import click

from .archive_reader import collect_entry_paths
from .config import load_config
from .errors import ShadingError
from .evaluation import ShadingEvaluation
from .graph_provider import load_graph_document
from .relocation import plan_relocation
from .reporting import write_report
from .types_report import ShadingReport

FORMATS = ["json", "markdown", "md", "html"]


def _evaluation(graph: str, config: str) -> ShadingEvaluation:
    return ShadingEvaluation(load_graph_document(Path(graph)), load_config(Path(config)))


def _emit(report: ShadingReport, fmt: str, output: Optional[str]) -> None:
    destination = Path(output) if output else None
    rendered = write_report(report, fmt, destination)
    if not destination:
        click.echo(rendered)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every classification and relocation decision.")
def main(verbose: bool) -> None:
    """Decide what a fat jar bundles and where bundled entries are relocated."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


graph_argument = click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=str))
config_option = click.option(
    "--config",
    "config",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="YAML file with the relocation prefix and banned-library policy.",
)
format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS, case_sensitive=False),
    default="markdown",
    show_default=True,
    help="Output format for the report.",
)
output_option = click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write the report to a file instead of stdout.",
)


@main.command()
@graph_argument
@config_option
@format_option
@output_option
@click.option("--fail-on-rejected", is_flag=True, help="Exit non-zero when any module was rejected from shading.")
def classify(graph: str, config: str, fmt: str, output: Optional[str], fail_on_rejected: bool) -> None:
    """Split shaded-only modules into accepted and rejected."""

    try:
        evaluation = _evaluation(graph, config)
        report = ShadingReport(calculation=evaluation.calculation, banned=evaluation.config.banned)
    except ShadingError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    _emit(report, fmt, output)

    if fail_on_rejected and report.rejected:
        raise SystemExit(1)


@main.command()
@graph_argument
@config_option
@format_option
@output_option
def plan(graph: str, config: str, fmt: str, output: Optional[str]) -> None:
    """Classify, then plan relocation over the accepted modules' archives."""

    try:
        evaluation = _evaluation(graph, config)
        report = ShadingReport(
            calculation=evaluation.calculation,
            banned=evaluation.config.banned,
            plan=evaluation.relocation_plan(),
        )
    except ShadingError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    _emit(report, fmt, output)


@main.command()
@click.argument("archives", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--prefix", required=True, help="Dotted namespace to relocate entries under.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of human text.")
def relocate(archives: tuple[str, ...], prefix: str, json_output: bool) -> None:
    """Show where every entry of the given archives would be relocated."""

    if not archives:
        click.echo("No archives supplied; nothing to relocate.", err=True)
        raise SystemExit(1)

    try:
        relocation = plan_relocation(collect_entry_paths(Path(a) for a in archives), prefix)
    except ShadingError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if json_output:
        click.echo(json.dumps(relocation.as_dict(), indent=2))
        return

    for source, target in relocation.mapping().items():
        click.echo(f"{source} -> {target}")
    if relocation.needs_manifest_attribute:
        click.echo("[manifest] Multi-Release: true")


if __name__ == "__main__":
    main()
