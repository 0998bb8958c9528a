"""Run the CLI with ``python -m ledgeradvisor``."""

from .cli.main import cli

if __name__ == "__main__":
    cli()
