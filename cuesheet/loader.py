"""
The loader module reads cue sheets from disk. Cue sheets predate widespread UTF-8, so we try each
configured encoding in turn until one decodes the file.
"""

import logging
from pathlib import Path

from cuesheet.common import CuesheetExpectedError
from cuesheet.config import Config
from cuesheet.tracklist import Tracklist, parse_tracklist

logger = logging.getLogger(__name__)


class CueSheetNotFoundError(CuesheetExpectedError):
    pass


class CueSheetDecodeError(CuesheetExpectedError):
    pass


def read_cue_sheet(c: Config, path: Path) -> str:
    try:
        data = path.read_bytes()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise CueSheetNotFoundError(f"Cue sheet not found ({path})") from e

    for encoding in c.encodings:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            logger.debug(f"Failed to decode {path} as {encoding}, trying next encoding")
            continue
        logger.debug(f"Decoded cue sheet {path} as {encoding}")
        return text

    raise CueSheetDecodeError(
        f"Failed to decode cue sheet ({path}): tried encodings {', '.join(c.encodings)}"
    )


def load_tracklist(c: Config, path: Path) -> Tracklist:
    tracklist = parse_tracklist(read_cue_sheet(c, path))
    logger.info(f"Parsed cue sheet {path} ({tracklist.title})")
    return tracklist
