"""
The tracklist module reconstructs the album hierarchy from the flat command sequence.

Cue sheet commands carry no explicit nesting: a TITLE before the first FILE belongs to the album,
while a TITLE after a TRACK belongs to that track. We walk the commands in order and assign each one
to the innermost open block. Two fields are derived rather than read:

1. Pregaps: a PREGAP must be directly followed by an INDEX; we insert an implicit INDEX 00 at that
   index's time minus the pregap.
2. Durations: a track's duration is the distance from its last index to the first index of the
   following track in the same file. It is only known once the next track has been read, so the
   last track of each file has no duration.
"""

from __future__ import annotations

import dataclasses
import itertools
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, NamedTuple

from cuesheet.commands import (
    CatalogCommand,
    CdtextfileCommand,
    Command,
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
    parse_cue,
)
from cuesheet.common import CuesheetExpectedError
from cuesheet.lexer import NumberToken, TimeToken, Token
from cuesheet.timecode import Time, TimeUnderflowError

logger = logging.getLogger(__name__)

AssemblyErrorKind = Literal[
    "missing_album_title",
    "missing_track_title",
    "missing_track",
    "pregap_without_index",
    "unexpected_command",
    "time_underflow",
]


class TracklistAssemblyError(CuesheetExpectedError):
    def __init__(
        self,
        *,
        kind: AssemblyErrorKind,
        position: int,
        feedback: str,
        command: Command | None = None,
    ) -> None:
        self.kind = kind
        # Index of the offending command in the command sequence.
        self.position = position
        self.feedback = feedback
        self.command = command
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Failed to assemble tracklist at command {self.position}: {self.feedback}"


class IndexPoint(NamedTuple):
    number: int
    time: Time


@dataclass(frozen=True)
class Track:
    number: int
    type: TrackType
    title: str
    performer: str | None = None
    songwriter: str | None = None
    isrc: str | None = None
    flags: list[TrackFlag] = dataclasses.field(default_factory=list)
    pregap: Time | None = None
    postgap: Time | None = None
    # Index points in the order they were declared, including an implicit INDEX 00 for pregaps.
    indexes: list[IndexPoint] = dataclasses.field(default_factory=list)
    # Only known if this track and the next track in the same file both have indexes.
    duration: Time | None = None
    remarks: dict[str, str] = dataclasses.field(default_factory=dict)

    @property
    def start(self) -> Time | None:
        """The time of INDEX 01, which is where the track is audible."""
        for index in self.indexes:
            if index.number == 1:
                return index.time
        return None

    def dump(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "type": str(self.type),
            "title": self.title,
            "performer": self.performer,
            "songwriter": self.songwriter,
            "isrc": self.isrc,
            "flags": self.flags,
            "pregap": str(self.pregap) if self.pregap else None,
            "postgap": str(self.postgap) if self.postgap else None,
            "indexes": [{"number": i.number, "time": str(i.time)} for i in self.indexes],
            "duration": str(self.duration) if self.duration else None,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class TrackFile:
    name: str
    format: FileFormat
    tracks: list[Track]

    def dump(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "format": self.format,
            "tracks": [t.dump() for t in self.tracks],
        }


@dataclass(frozen=True)
class Tracklist:
    title: str
    files: list[TrackFile]
    performer: str | None = None
    songwriter: str | None = None
    catalog: str | None = None
    cdtextfile: str | None = None
    remarks: dict[str, str] = dataclasses.field(default_factory=dict)

    @property
    def tracks(self) -> list[Track]:
        return [t for f in self.files for t in f.tracks]

    def dump(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "performer": self.performer,
            "songwriter": self.songwriter,
            "catalog": self.catalog,
            "cdtextfile": self.cdtextfile,
            "remarks": self.remarks,
            "files": [f.dump() for f in self.files],
        }

    @classmethod
    def parse(cls, text: str) -> Tracklist:
        return parse_tracklist(text)


class _CommandCursor:
    """A read-only cursor over a command sequence. The caller's sequence is never mutated."""

    def __init__(self, commands: Sequence[Command]) -> None:
        self.commands = commands
        self.position = 0

    def available(self) -> bool:
        return self.position < len(self.commands)

    def peek(self, offset: int = 0) -> Command | None:
        idx = self.position + offset
        return self.commands[idx] if idx < len(self.commands) else None

    def take(self) -> Command:
        command = self.commands[self.position]
        self.position += 1
        return command


def _remark_value(token: Token) -> str:
    if isinstance(token, NumberToken):
        return f"{token.value:02}"
    if isinstance(token, TimeToken):
        return str(token.value)
    return token.value


def _subtract(left: Time, right: Time, *, position: int, what: str) -> Time:
    try:
        return left - right
    except TimeUnderflowError as e:
        raise TracklistAssemblyError(
            kind="time_underflow",
            position=position,
            feedback=f"Cannot compute {what}: {e}",
        ) from e


def assemble_tracklist(commands: Sequence[Command]) -> Tracklist:
    cursor = _CommandCursor(commands)

    # Album header. Later occurrences of a field overwrite earlier ones.
    title: str | None = None
    performer: str | None = None
    songwriter: str | None = None
    catalog: str | None = None
    cdtextfile: str | None = None
    remarks: dict[str, str] = {}
    while (command := cursor.peek()) is not None:
        if isinstance(command, TitleCommand):
            title = command.title
        elif isinstance(command, PerformerCommand):
            performer = command.performer
        elif isinstance(command, SongwriterCommand):
            songwriter = command.songwriter
        elif isinstance(command, CatalogCommand):
            catalog = command.catalog
        elif isinstance(command, CdtextfileCommand):
            cdtextfile = command.path
        elif isinstance(command, RemCommand):
            remarks[command.key] = _remark_value(command.value)
        else:
            break
        cursor.position += 1

    if title is None:
        raise TracklistAssemblyError(
            kind="missing_album_title",
            position=cursor.position,
            feedback="The album has no TITLE: it must be declared before the first FILE.",
            command=cursor.peek(),
        )

    files: list[TrackFile] = []
    while isinstance(cursor.peek(), FileCommand):
        files.append(_assemble_file(cursor))

    if (leftover := cursor.peek()) is not None:
        raise TracklistAssemblyError(
            kind="unexpected_command",
            position=cursor.position,
            feedback=f"Unexpected {type(leftover).__name__}: expected a FILE or the end of the cue sheet.",
            command=leftover,
        )

    tracklist = Tracklist(
        title=title,
        files=files,
        performer=performer,
        songwriter=songwriter,
        catalog=catalog,
        cdtextfile=cdtextfile,
        remarks=remarks,
    )
    logger.debug(
        f"Assembled tracklist {title=} with {len(files)} files and {len(tracklist.tracks)} tracks"
    )
    return tracklist


def _assemble_file(cursor: _CommandCursor) -> TrackFile:
    file_position = cursor.position
    file_command = cursor.take()
    assert isinstance(file_command, FileCommand)

    if not isinstance(cursor.peek(), TrackCommand):
        raise TracklistAssemblyError(
            kind="missing_track",
            position=cursor.position,
            feedback=f"FILE {file_command.path} must be followed by a TRACK.",
            command=cursor.peek(),
        )

    tracks: list[Track] = []
    while isinstance(cursor.peek(), TrackCommand):
        tracks.append(_assemble_track(cursor))

    try:
        tracks = infer_durations(tracks)
    except TimeUnderflowError as e:
        raise TracklistAssemblyError(
            kind="time_underflow",
            position=file_position,
            feedback=f"Cannot compute the track durations of FILE {file_command.path}: {e}",
            command=file_command,
        ) from e

    return TrackFile(name=file_command.path, format=file_command.format, tracks=tracks)


def _assemble_track(cursor: _CommandCursor) -> Track:
    track_position = cursor.position
    track_command = cursor.take()
    assert isinstance(track_command, TrackCommand)

    title: str | None = None
    performer: str | None = None
    songwriter: str | None = None
    isrc: str | None = None
    flags: list[TrackFlag] = []
    pregap: Time | None = None
    postgap: Time | None = None
    indexes: list[IndexPoint] = []
    remarks: dict[str, str] = {}
    while (command := cursor.peek()) is not None:
        if isinstance(command, TitleCommand):
            title = command.title
        elif isinstance(command, PerformerCommand):
            performer = command.performer
        elif isinstance(command, SongwriterCommand):
            songwriter = command.songwriter
        elif isinstance(command, IsrcCommand):
            isrc = command.isrc
        elif isinstance(command, FlagsCommand):
            flags = list(command.flags)
        elif isinstance(command, PostgapCommand):
            postgap = command.duration
        elif isinstance(command, RemCommand):
            remarks[command.key] = _remark_value(command.value)
        elif isinstance(command, PregapCommand):
            following = cursor.peek(1)
            if not isinstance(following, IndexCommand):
                raise TracklistAssemblyError(
                    kind="pregap_without_index",
                    position=cursor.position,
                    feedback=f"PREGAP of track {track_command.number} must be directly followed by an INDEX.",
                    command=command,
                )
            pregap = command.duration
            start = _subtract(
                following.time,
                command.duration,
                position=cursor.position,
                what=f"the pregap start of track {track_command.number}",
            )
            indexes.append(IndexPoint(0, start))
        elif isinstance(command, IndexCommand):
            indexes.append(IndexPoint(command.number, command.time))
        else:
            break
        cursor.position += 1

    if title is None:
        raise TracklistAssemblyError(
            kind="missing_track_title",
            position=track_position,
            feedback=f"Track {track_command.number} has no TITLE.",
            command=track_command,
        )

    return Track(
        number=track_command.number,
        type=track_command.type,
        title=title,
        performer=performer,
        songwriter=songwriter,
        isrc=isrc,
        flags=flags,
        pregap=pregap,
        postgap=postgap,
        indexes=indexes,
        remarks=remarks,
    )


def infer_durations(tracks: Sequence[Track]) -> list[Track]:
    """
    Fill in the duration of every track from its successor: the duration runs from the track's last
    index to the next track's first index. A track without indexes breaks the chain, leaving both
    itself and its predecessor without a duration. The final track never has a duration.

    Raises TimeUnderflowError if a track starts before its predecessor's last index.
    """
    rval: list[Track] = []
    for previous, current in itertools.pairwise(tracks):
        duration = None
        if previous.indexes and current.indexes:
            duration = current.indexes[0].time - previous.indexes[-1].time
        rval.append(dataclasses.replace(previous, duration=duration))
    if tracks:
        rval.append(dataclasses.replace(tracks[-1], duration=None))
    return rval


def parse_tracklist(text: str) -> Tracklist:
    """Parse the full text of a cue sheet into a Tracklist."""
    return assemble_tracklist(parse_cue(text))


def dump_tracklist(tracklist: Tracklist) -> str:
    return json.dumps(tracklist.dump())
