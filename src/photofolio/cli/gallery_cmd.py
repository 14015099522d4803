"""Gallery CLI commands — build every gallery of a site."""

from pathlib import Path

import click

from photofolio.cli.config_cmd import config_option, load_project_config
from photofolio.cli.filter_cmd import load_pool, manifest_option
from photofolio.gallery import GalleryBuilder, ManifestError, load_gallery_definitions


@click.group()
def gallery():
    """Gallery commands."""
    pass


@gallery.command()
@click.argument(
    "source_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@manifest_option
@config_option
@click.option(
    "--show-images",
    is_flag=True,
    default=False,
    help="List each gallery's images in display order.",
)
def build(
    source_dir: Path,
    manifest_path: Path,
    config_path: Path | None,
    show_images: bool,
):
    """Resolve the images of every gallery under SOURCE_DIR."""
    project = load_project_config(config_path)
    pool = load_pool(manifest_path)

    try:
        definitions = load_gallery_definitions(source_dir, project.sorting.galleries)
    except ManifestError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not definitions:
        click.echo(f"No galleries found under {source_dir}")
        return

    builder = GalleryBuilder(pool, project.sorting.images)
    results = builder.build_all(definitions)

    for result in results:
        if result.ok:
            kind = "filter" if result.gallery.is_filtered else "folder"
            click.echo(
                f"  ✓ {result.gallery.title} ({result.gallery.path}, {kind}): "
                f"{len(result.images)} image(s)"
            )
            if show_images:
                for image in result.images:
                    click.echo(f"      {image.filename}")
        else:
            click.echo(click.style(f"  ✗ {result.gallery.path}", fg="red"))
            click.echo(click.style(result.error, fg="red"))

    failed = [r for r in results if not r.ok]
    if failed:
        click.echo(
            click.style(
                f"\n{len(failed)} of {len(results)} gallery(ies) failed",
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    click.echo(
        click.style(f"\nBuilt {len(results)} gallery(ies).", fg="green", bold=True)
    )
