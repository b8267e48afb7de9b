"""Main entry point for ledbridge."""

from ledbridge.cli.main import cli

if __name__ == "__main__":
    cli()
