"""
The cli module defines the cuesheet CLI interface. It does not have any domain logic of its own. It
is dedicated to parsing, resolving arguments, and delegating to the appropriate module.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import click

from cuesheet.commands import parse_commands
from cuesheet.common import VERSION
from cuesheet.config import Config
from cuesheet.lexer import format_token, tokenize
from cuesheet.loader import load_tracklist, read_cue_sheet
from cuesheet.musicbrainz import format_musicbrainz_tracklist
from cuesheet.tracklist import dump_tracklist

logger = logging.getLogger(__name__)


@dataclass
class Context:
    config: Config


# fmt: off
@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Emit verbose logging.")
@click.option("--config", "-c", type=click.Path(path_type=Path), help="Override the config file location.")
@click.version_option(VERSION, prog_name="cuesheet")
@click.pass_context
# fmt: on
def cli(cc: click.Context, verbose: bool, config: Path | None = None) -> None:
    """A parser for CD cue sheets."""
    cc.obj = Context(
        config=Config.parse(config_path_override=config),
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), nargs=1)
@click.pass_obj
def dump(ctx: Context, path: Path) -> None:
    """Print the parsed tracklist as JSON."""
    click.echo(dump_tracklist(load_tracklist(ctx.config, path)))


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), nargs=1)
@click.pass_obj
def musicbrainz(ctx: Context, path: Path) -> None:
    """Print the tracklist in the MusicBrainz tracklist parser format."""
    tracklist = load_tracklist(ctx.config, path)
    click.echo(format_musicbrainz_tracklist(ctx.config, tracklist))


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), nargs=1)
@click.pass_obj
def tokens(ctx: Context, path: Path) -> None:
    """Print the tokens of a cue sheet, one per line."""
    for token in tokenize(read_cue_sheet(ctx.config, path)):
        click.echo(f"{type(token).__name__}\t{format_token(token)}")


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), nargs=1)
@click.pass_obj
def commands(ctx: Context, path: Path) -> None:
    """Print the commands of a cue sheet, one per line."""
    for command in parse_commands(tokenize(read_cue_sheet(ctx.config, path))):
        click.echo(repr(command))
