"""
docgraph - Entry point.

Usage:
    python main.py                          # Run CLI help
    python main.py validate content/        # Audit a corpus
    python main.py stats content/           # Phase/topic completeness
    python main.py nav content/ code-quality-surface
"""

from docgraph.cli.main import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
