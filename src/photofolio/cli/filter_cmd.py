"""Filter CLI commands — validate, run and list functions."""

import json
from pathlib import Path

import click

from photofolio.cli.config_cmd import config_option, load_project_config
from photofolio.gallery import ManifestError, load_manifest, query, try_validate_filter
from photofolio.query import FunctionCategory, FunctionRegistry
from photofolio.query.errors import FilterError

manifest_option = click.option(
    "--manifest",
    "manifest_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image manifest (YAML or JSON) with an 'images' list.",
)


def load_pool(manifest_path: Path):
    """Load the image pool for a command, exiting 1 if it cannot be read."""
    try:
        return load_manifest(manifest_path)
    except ManifestError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


@click.group("filter")
def filter_group():
    """Filter expression commands."""
    pass


@filter_group.command()
@click.argument("expression")
def validate(expression: str):
    """Check that EXPRESSION parses."""
    valid, error = try_validate_filter(expression)
    if not valid:
        click.echo(click.style(error, fg="red"))
        raise SystemExit(1)

    click.echo(click.style("Filter is valid.", fg="green", bold=True))


@filter_group.command()
@click.argument("expression")
@manifest_option
@click.option(
    "--sort",
    "sort_override",
    default=None,
    help="Gallery sort override: 'field' or 'field:direction'.",
)
@config_option
def run(
    expression: str,
    manifest_path: Path,
    sort_override: str | None,
    config_path: Path | None,
):
    """Run EXPRESSION against the manifest and print matching filenames."""
    project = load_project_config(config_path)
    pool = load_pool(manifest_path)

    try:
        images = query(pool, expression, sort_override, project.sorting.images)
    except FilterError as e:
        click.echo(click.style(e.detail(), fg="red"), err=True)
        raise SystemExit(1)

    for image in images:
        click.echo(image.source_path or image.filename)

    click.echo(
        click.style(f"\n{len(images)} of {len(pool)} image(s) matched", fg="green")
    )


@filter_group.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def functions(as_json: bool):
    """List the functions available in filter expressions."""
    if as_json:
        click.echo(json.dumps(FunctionRegistry.export_documentation(), indent=2))
        return

    for category in FunctionCategory:
        definitions = FunctionRegistry.list_by_category(category)
        if not definitions:
            continue
        click.echo(click.style(f"{category.value.title()} functions:", bold=True))
        for func_def in definitions:
            click.echo(f"  {func_def.signature}")
            click.echo(f"      {func_def.description}")
            for example in func_def.examples:
                click.echo(f"      e.g. {example}")
