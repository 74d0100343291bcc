import sys

import click

from cuesheet.cli import cli
from cuesheet.common import CuesheetExpectedError


def main() -> None:
    try:
        cli()
    except CuesheetExpectedError as e:
        click.secho(f"{e.__class__.__module__}.{e.__class__.__name__}: ", fg="red", nl=False)
        click.secho(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
