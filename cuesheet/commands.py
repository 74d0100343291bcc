"""
The commands module groups the lexer's tokens into typed cue sheet commands.

Each command starts with a keyword string and is followed by a fixed number of typed arguments. The
parser is purely syntactic: it has no notion of which track or file a command belongs to; that is
reconstructed later from command order by the tracklist module.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal, TypeVar

from cuesheet.lexer import (
    CueParseError,
    NumberToken,
    StringToken,
    TimeToken,
    Token,
    format_token,
    tokenize,
)
from cuesheet.timecode import Time

logger = logging.getLogger(__name__)

T = TypeVar("T")

FileFormat = Literal["WAVE", "MP3", "AIFF", "BINARY", "MOTOROLA"]
FILE_FORMATS: list[FileFormat] = ["WAVE", "MP3", "AIFF", "BINARY", "MOTOROLA"]

TrackFlag = Literal["DCP", "4CH", "PRE", "SCMS"]
TRACK_FLAGS: list[TrackFlag] = ["DCP", "4CH", "PRE", "SCMS"]

TrackTypeKind = Literal["AUDIO", "CDG", "MODE", "CDI"]


class InvalidValueError(ValueError):
    """Raised by the keyword argument parsers; converted into a CueSyntaxError by the parser."""

    pass


SyntaxErrorKind = Literal["unexpected_end", "wrong_token", "invalid_value", "unknown_keyword"]


class CueSyntaxError(CueParseError):
    def __init__(
        self,
        *,
        kind: SyntaxErrorKind,
        position: int,
        keyword: str | None,
        expected: str,
        found: Token | None,
        feedback: str | None = None,
    ) -> None:
        self.kind = kind
        # Index of the offending token in the token sequence.
        self.position = position
        self.keyword = keyword
        self.expected = expected
        self.found = found
        self.feedback = feedback
        super().__init__(str(self))

    def __str__(self) -> str:
        found = format_token(self.found) if self.found is not None else "end of file"
        where = f"in {self.keyword} command " if self.keyword else ""
        r = f"Failed to parse cue sheet {where}at token {self.position}: expected {self.expected}, found {found}"
        if self.feedback:
            r += f" ({self.feedback})"
        return r


def parse_file_format(raw: str) -> FileFormat:
    upper = raw.upper()
    for f in FILE_FORMATS:
        if f == upper:
            return f
    raise InvalidValueError(f"Invalid file format: must be one of {{{', '.join(FILE_FORMATS)}}}")


def parse_track_flag(raw: str) -> TrackFlag:
    upper = raw.upper()
    for f in TRACK_FLAGS:
        if f == upper:
            return f
    raise InvalidValueError(f"Invalid track flag: must be one of {{{', '.join(TRACK_FLAGS)}}}")


@dataclass(frozen=True)
class TrackType:
    """
    The data type of a track. `mode` is only set for MODE tracks, and `sector_size` (in bytes) for
    MODE and CDI tracks.
    """

    kind: TrackTypeKind
    mode: int | None = None
    sector_size: int | None = None

    def __str__(self) -> str:
        if self.kind == "MODE":
            return f"MODE{self.mode}/{self.sector_size}"
        if self.kind == "CDI":
            return f"CDI/{self.sector_size}"
        return self.kind

    @property
    def is_audio(self) -> bool:
        return self.kind == "AUDIO"

    @classmethod
    def parse(cls, raw: str) -> TrackType:
        try:
            return TRACK_TYPES[raw.upper()]
        except KeyError:
            raise InvalidValueError(
                f"Invalid track type: must be one of {{{', '.join(TRACK_TYPES)}}}"
            ) from None


TRACK_TYPES: dict[str, TrackType] = {
    # Audio/Music (2352 bytes, 588 samples).
    "AUDIO": TrackType("AUDIO"),
    # Karaoke CD+G (2448 bytes).
    "CDG": TrackType("CDG"),
    "MODE1/2048": TrackType("MODE", mode=1, sector_size=2048),
    "MODE1/2352": TrackType("MODE", mode=1, sector_size=2352),
    "MODE2/2048": TrackType("MODE", mode=2, sector_size=2048),
    "MODE2/2324": TrackType("MODE", mode=2, sector_size=2324),
    "MODE2/2336": TrackType("MODE", mode=2, sector_size=2336),
    "MODE2/2352": TrackType("MODE", mode=2, sector_size=2352),
    "CDI/2336": TrackType("CDI", sector_size=2336),
    "CDI/2352": TrackType("CDI", sector_size=2352),
}


@dataclass(frozen=True)
class CatalogCommand:
    """A 13-digit UPC/EAN code."""

    catalog: str


@dataclass(frozen=True)
class CdtextfileCommand:
    """A path to a file containing CD-Text info."""

    path: str


@dataclass(frozen=True)
class FileCommand:
    """A data file; all following tracks are carved out of it."""

    path: str
    format: FileFormat


@dataclass(frozen=True)
class FlagsCommand:
    flags: list[TrackFlag]


@dataclass(frozen=True)
class IndexCommand:
    number: int
    time: Time


@dataclass(frozen=True)
class IsrcCommand:
    isrc: str


@dataclass(frozen=True)
class PerformerCommand:
    performer: str


@dataclass(frozen=True)
class PostgapCommand:
    duration: Time


@dataclass(frozen=True)
class PregapCommand:
    duration: Time


@dataclass(frozen=True)
class RemCommand:
    """A remark. The value is kept as the raw token it was lexed as."""

    key: str
    value: Token


@dataclass(frozen=True)
class SongwriterCommand:
    songwriter: str


@dataclass(frozen=True)
class TitleCommand:
    title: str


@dataclass(frozen=True)
class TrackCommand:
    number: int
    type: TrackType


Command = (
    CatalogCommand
    | CdtextfileCommand
    | FileCommand
    | FlagsCommand
    | IndexCommand
    | IsrcCommand
    | PerformerCommand
    | PostgapCommand
    | PregapCommand
    | RemCommand
    | SongwriterCommand
    | TitleCommand
    | TrackCommand
)


class _TokenCursor:
    """A read-only cursor over a token sequence. The caller's sequence is never mutated."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.position = 0
        # The keyword of the command currently being parsed, for error context.
        self.keyword: str | None = None

    def available(self) -> bool:
        return self.position < len(self.tokens)

    def peek(self) -> Token | None:
        return self.tokens[self.position] if self.available() else None

    def take(self, expected: str) -> Token:
        if not self.available():
            raise CueSyntaxError(
                kind="unexpected_end",
                position=self.position,
                keyword=self.keyword,
                expected=expected,
                found=None,
            )
        token = self.tokens[self.position]
        self.position += 1
        return token

    def wrong_token(self, expected: str, token: Token) -> CueSyntaxError:
        return CueSyntaxError(
            kind="wrong_token",
            position=self.position - 1,
            keyword=self.keyword,
            expected=expected,
            found=token,
        )

    def take_string(self, expected: str = "a string") -> str:
        token = self.take(expected)
        if not isinstance(token, StringToken):
            raise self.wrong_token(expected, token)
        return token.value

    def take_number(self, expected: str = "a two digit number") -> int:
        token = self.take(expected)
        if not isinstance(token, NumberToken):
            raise self.wrong_token(expected, token)
        return token.value

    def take_time(self, expected: str = "a mm:ss:ff timecode") -> Time:
        token = self.take(expected)
        if not isinstance(token, TimeToken):
            raise self.wrong_token(expected, token)
        return token.value

    def take_parsed(self, expected: str, parser: Callable[[str], T]) -> T:
        """Take a string token and convert it with `parser`, which raises InvalidValueError."""
        raw = self.take_string(expected)
        try:
            return parser(raw)
        except InvalidValueError as e:
            raise CueSyntaxError(
                kind="invalid_value",
                position=self.position - 1,
                keyword=self.keyword,
                expected=expected,
                found=StringToken(raw),
                feedback=str(e),
            ) from e


def _parse_catalog(raw: str) -> str:
    if not (0 < len(raw) <= 13) or any(c not in "0123456789" for c in raw):
        raise InvalidValueError("Invalid catalog number: must be at most 13 digits")
    return raw.zfill(13)


def _take_catalog(cursor: _TokenCursor) -> str:
    # The lexer only produces numbers for two digit runs, so a full catalog number arrives as a
    # string.
    expected = "a catalog number"
    token = cursor.peek()
    if isinstance(token, NumberToken):
        return f"{cursor.take_number(expected):013}"
    return cursor.take_parsed(expected, _parse_catalog)


def _take_flags(cursor: _TokenCursor) -> list[TrackFlag]:
    flags: list[TrackFlag] = []
    # Take flags until the next token is not a flag. That token is left for the next command.
    while isinstance(token := cursor.peek(), StringToken):
        try:
            flag = parse_track_flag(token.value)
        except InvalidValueError:
            break
        flags.append(flag)
        cursor.position += 1
    if not flags:
        found = cursor.peek()
        raise CueSyntaxError(
            kind="unexpected_end" if found is None else "wrong_token",
            position=cursor.position,
            keyword=cursor.keyword,
            expected=f"at least one track flag of {{{', '.join(TRACK_FLAGS)}}}",
            found=found,
        )
    return flags


def _parse_command(cursor: _TokenCursor) -> Command:
    cursor.keyword = None
    keyword_token = cursor.take("a command keyword")
    if not isinstance(keyword_token, StringToken):
        raise cursor.wrong_token("a command keyword", keyword_token)
    keyword = keyword_token.value.upper()
    cursor.keyword = keyword

    if keyword == "CATALOG":
        return CatalogCommand(catalog=_take_catalog(cursor))
    if keyword == "CDTEXTFILE":
        return CdtextfileCommand(path=cursor.take_string("a CD-Text file path"))
    if keyword == "FILE":
        path = cursor.take_string("a file path")
        file_format = cursor.take_parsed("a file format", parse_file_format)
        return FileCommand(path=path, format=file_format)
    if keyword == "FLAGS":
        return FlagsCommand(flags=_take_flags(cursor))
    if keyword == "INDEX":
        number = cursor.take_number("an index number")
        time = cursor.take_time()
        return IndexCommand(number=number, time=time)
    if keyword == "ISRC":
        return IsrcCommand(isrc=cursor.take_string("an ISRC code"))
    if keyword == "PERFORMER":
        return PerformerCommand(performer=cursor.take_string("a performer"))
    if keyword == "POSTGAP":
        return PostgapCommand(duration=cursor.take_time())
    if keyword == "PREGAP":
        return PregapCommand(duration=cursor.take_time())
    if keyword == "REM":
        key = cursor.take_string("a remark key")
        value = cursor.take("a remark value")
        return RemCommand(key=key, value=value)
    if keyword == "SONGWRITER":
        return SongwriterCommand(songwriter=cursor.take_string("a songwriter"))
    if keyword == "TITLE":
        return TitleCommand(title=cursor.take_string("a title"))
    if keyword == "TRACK":
        number = cursor.take_number("a track number")
        type_ = cursor.take_parsed("a track type", TrackType.parse)
        return TrackCommand(number=number, type=type_)

    raise CueSyntaxError(
        kind="unknown_keyword",
        position=cursor.position - 1,
        keyword=None,
        expected="a command keyword",
        found=keyword_token,
    )


def parse_commands(tokens: Sequence[Token]) -> list[Command]:
    cursor = _TokenCursor(tokens)
    commands: list[Command] = []
    while cursor.available():
        commands.append(_parse_command(cursor))
    logger.debug(f"Parsed {len(tokens)} tokens into {len(commands)} commands")
    return commands


def parse_cue(text: str) -> list[Command]:
    """Tokenize and parse a cue sheet into its commands."""
    return parse_commands(tokenize(text))
