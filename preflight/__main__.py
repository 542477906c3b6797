"""Allow ``python -m preflight``."""

from preflight.main import cli

if __name__ == "__main__":
    cli()
