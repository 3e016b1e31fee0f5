"""Allow running Volcop with ``python -m volcop``."""

from volcop.cli.main import cli_main

if __name__ == "__main__":
    cli_main()
