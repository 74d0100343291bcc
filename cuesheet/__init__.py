from cuesheet.commands import (
    CatalogCommand,
    CdtextfileCommand,
    Command,
    CueSyntaxError,
    FileCommand,
    FileFormat,
    FlagsCommand,
    IndexCommand,
    IsrcCommand,
    PerformerCommand,
    PostgapCommand,
    PregapCommand,
    RemCommand,
    SongwriterCommand,
    TitleCommand,
    TrackCommand,
    TrackFlag,
    TrackType,
    parse_commands,
    parse_cue,
)
from cuesheet.common import (
    VERSION,
    CuesheetError,
    CuesheetExpectedError,
    initialize_logging,
)
from cuesheet.config import Config
from cuesheet.lexer import (
    CueLexicalError,
    CueParseError,
    NumberToken,
    StringToken,
    TimeToken,
    Token,
    tokenize,
)
from cuesheet.loader import load_tracklist, read_cue_sheet
from cuesheet.musicbrainz import format_musicbrainz_tracklist
from cuesheet.timecode import FRAMES_PER_SECOND, InvalidTimeError, Time, TimeUnderflowError
from cuesheet.tracklist import (
    IndexPoint,
    Track,
    TrackFile,
    Tracklist,
    TracklistAssemblyError,
    assemble_tracklist,
    dump_tracklist,
    infer_durations,
    parse_tracklist,
)

__all__ = [
    # Plumbing
    "initialize_logging",
    "VERSION",
    # Errors
    "CuesheetError",
    "CuesheetExpectedError",
    "CueParseError",
    "CueLexicalError",
    "CueSyntaxError",
    "TracklistAssemblyError",
    "InvalidTimeError",
    "TimeUnderflowError",
    # Configuration
    "Config",
    # Time
    "FRAMES_PER_SECOND",
    "Time",
    # Lexer
    "Token",
    "NumberToken",
    "StringToken",
    "TimeToken",
    "tokenize",
    # Commands
    "Command",
    "CatalogCommand",
    "CdtextfileCommand",
    "FileCommand",
    "FlagsCommand",
    "IndexCommand",
    "IsrcCommand",
    "PerformerCommand",
    "PostgapCommand",
    "PregapCommand",
    "RemCommand",
    "SongwriterCommand",
    "TitleCommand",
    "TrackCommand",
    "FileFormat",
    "TrackFlag",
    "TrackType",
    "parse_commands",
    "parse_cue",
    # Tracklist
    "IndexPoint",
    "Track",
    "TrackFile",
    "Tracklist",
    "assemble_tracklist",
    "dump_tracklist",
    "infer_durations",
    "parse_tracklist",
    # I/O
    "load_tracklist",
    "read_cue_sheet",
    # Formatting
    "format_musicbrainz_tracklist",
]

initialize_logging(__name__)
