"""Entry point for running CommitCraft as a module."""

from commitcraft.cli import app


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
