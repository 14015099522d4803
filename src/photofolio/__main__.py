"""Allow ``python -m photofolio``."""

from photofolio.cli.main import cli

if __name__ == "__main__":
    cli()
