"""
The musicbrainz module formats a tracklist for the MusicBrainz release editor's tracklist parser,
which accepts one line per track (`number title - artist duration`).

A cue sheet alone cannot bound the last track of a file, so its duration is always unknown and
printed as the configured placeholder.
"""

from __future__ import annotations

import re
import typing
from typing import Any

import jinja2

from cuesheet.common import CuesheetExpectedError

if typing.TYPE_CHECKING:
    from cuesheet.config import Config
    from cuesheet.tracklist import Track, Tracklist


class MultipleFilesError(CuesheetExpectedError):
    pass


class MissingPerformerError(CuesheetExpectedError):
    pass


def zeropad(x: int) -> str:
    return f"{x:02}"


ENVIRONMENT = jinja2.Environment()
ENVIRONMENT.filters["zeropad"] = zeropad


def format_musicbrainz_tracklist(c: Config, tracklist: Tracklist) -> str:
    # TODO: Support multi-file cue sheets once the tracks can be offset by the file lengths.
    if len(tracklist.files) != 1:
        raise MultipleFilesError(
            f"Expected exactly one FILE in the cue sheet, found {len(tracklist.files)}"
        )
    template = ENVIRONMENT.from_string(c.musicbrainz_track_template)
    lines = [
        _collapse_spacing(template.render(**_calc_track_variables(c, tracklist, track)))
        for track in tracklist.files[0].tracks
    ]
    return "\n".join(lines)


def _calc_track_variables(c: Config, tracklist: Tracklist, track: Track) -> dict[str, Any]:
    performer = track.performer or tracklist.performer
    if performer is None:
        raise MissingPerformerError(
            f"Track {track.number} ({track.title}) has no PERFORMER and the album has none to fall back to"
        )
    return {
        "number": zeropad(track.number),
        "title": track.title,
        "performer": performer,
        "duration": track.duration.short() if track.duration else c.unknown_duration,
        "songwriter": track.songwriter,
        "isrc": track.isrc,
        "album": tracklist.title,
        "albumperformer": tracklist.performer,
    }


COLLAPSE_SPACING_REGEX = re.compile(r"\s+", flags=re.MULTILINE)


def _collapse_spacing(x: str) -> str:
    # All newlines and multi-spaces are replaced with a single space in the final output.
    return COLLAPSE_SPACING_REGEX.sub(" ", x).strip()
