"""Config CLI commands — validate and show project.yaml."""

import os
from pathlib import Path

import click

from photofolio.config import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    ProjectConfig,
    ProjectConfigError,
    validate_config_file,
)
from photofolio.query.errors import ConfigurationError


def _config_path(config_path: Path | None) -> Path:
    """Explicit --config, then PHOTOFOLIO_CONFIG, then ./project.yaml."""
    if config_path is not None:
        return config_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / CONFIG_FILENAME


def load_project_config(config_path: Path | None) -> ProjectConfig:
    """Load the project config for a command, exiting 1 if it is invalid."""
    try:
        if config_path is not None:
            return ProjectConfig.load(config_path)
        return ProjectConfig.from_env(Path.cwd())
    except ProjectConfigError as e:
        for issue in e.issues:
            click.echo(click.style(str(issue), fg="red"), err=True)
        raise SystemExit(1)
    except ConfigurationError as e:
        click.echo(click.style(e.detail(), fg="red"), err=True)
        raise SystemExit(1)


config_option = click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help=f"Project config file (default: ${CONFIG_ENV_VAR} or ./{CONFIG_FILENAME}).",
)


@click.group()
def config():
    """Project config commands."""
    pass


@config.command()
@config_option
def validate(config_path: Path | None):
    """Validate project.yaml against its JSON Schema."""
    path = _config_path(config_path)
    issues = validate_config_file(path)

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    errors = [i for i in issues if i.severity == "error"]
    if errors:
        click.echo(
            click.style(f"\n{len(errors)} config error(s) found", fg="red", bold=True)
        )
        raise SystemExit(1)

    click.echo(click.style(f"Config {path} is valid.", fg="green", bold=True))


@config.command()
@config_option
def show(config_path: Path | None):
    """Show the resolved sorting configuration."""
    project = load_project_config(config_path)
    images = project.sorting.images

    click.echo(f"Config:    {project.path or '(defaults)'}")
    click.echo(f"Galleries: {project.sorting.galleries.value}")
    click.echo(f"Images:    {images.field} {images.direction.value}")
    click.echo(f"Fallback:  {images.fallback or '(none)'}")
