"""Run the reindexd CLI with python -m reindexd."""

from reindexd.cli.main import cli

if __name__ == "__main__":
    cli()
