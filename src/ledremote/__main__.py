"""Allow `python -m ledremote`."""

from ledremote.cli.main import cli

if __name__ == "__main__":
    cli()
