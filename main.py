"""
Guidelines catalog - Entry point.

Usage:
    python main.py                        # Run CLI help
    python main.py --base-path docs list  # List local documents
    python main.py serve                  # Run the MCP server over stdio
"""

from guidelines.cli.main import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
