"""Allow running as ``python -m projecthub``."""

from projecthub.cli import cli_main

if __name__ == "__main__":
    cli_main()
