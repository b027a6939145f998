"""Main CLI entry point for the cricket scorer."""

from cricket_scorer.cli.main import app

if __name__ == '__main__':
    app()
