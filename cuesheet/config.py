"""
The config module defines the configuration options and their parsing logic.

The configuration file is optional: every key has a default, and a missing file at the default
location simply yields the defaults. Unrecognized keys are reported as a warning.
"""

from __future__ import annotations

import codecs
import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import appdirs
import jinja2
import tomllib

from cuesheet.common import CuesheetExpectedError
from cuesheet.musicbrainz import ENVIRONMENT

CONFIG_PATH = Path(appdirs.user_config_dir("cuesheet")) / "config.toml"

DEFAULT_ENCODINGS = ["utf-8", "cp1252"]
DEFAULT_UNKNOWN_DURATION = "??:??"
DEFAULT_MUSICBRAINZ_TRACK_TEMPLATE = "{{ number }} {{ title }} - {{ performer }} {{ duration }}"

logger = logging.getLogger(__name__)


class ConfigNotFoundError(CuesheetExpectedError):
    pass


class ConfigDecodeError(CuesheetExpectedError):
    pass


class InvalidConfigValueError(CuesheetExpectedError, ValueError):
    pass


@dataclass(frozen=True)
class Config:
    # Encodings to try, in order, when reading a cue sheet from disk.
    encodings: list[str] = field(default_factory=lambda: list(DEFAULT_ENCODINGS))
    # Printed in place of a duration that cannot be inferred (e.g. the last track of a file).
    unknown_duration: str = DEFAULT_UNKNOWN_DURATION
    musicbrainz_track_template: str = DEFAULT_MUSICBRAINZ_TRACK_TEMPLATE

    @classmethod
    def parse(cls, config_path_override: Path | None = None) -> Config:
        # As we parse, delete consumed values from the data dictionary. If any are left over at the
        # end of the config, warn that unknown config keys were found.
        cfgpath = config_path_override or CONFIG_PATH
        try:
            with cfgpath.open("r") as fp:
                data = tomllib.loads(fp.read())
        except FileNotFoundError as e:
            if config_path_override is None:
                logger.debug(f"No configuration file found at {cfgpath}, using defaults")
                return Config()
            raise ConfigNotFoundError(f"Configuration file not found ({cfgpath})") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigDecodeError(
                f"Failed to decode configuration file: invalid TOML: {e}"
            ) from e

        try:
            encodings = data["encodings"]
            del data["encodings"]
            if not isinstance(encodings, list) or not encodings:
                raise ValueError(f"Must be a non-empty list[str]: got {encodings!r}")
            for enc in encodings:
                if not isinstance(enc, str):
                    raise ValueError(f"Each encoding must be of type str: got {type(enc)}")
                try:
                    codecs.lookup(enc)
                except LookupError as e:
                    raise ValueError(f"Unknown encoding {enc}") from e
        except KeyError:
            encodings = list(DEFAULT_ENCODINGS)
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for encodings in configuration file ({cfgpath}): {e}"
            ) from e

        try:
            unknown_duration = data["unknown_duration"]
            del data["unknown_duration"]
            if not isinstance(unknown_duration, str):
                raise ValueError(f"Must be a str: got {type(unknown_duration)}")
        except KeyError:
            unknown_duration = DEFAULT_UNKNOWN_DURATION
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for unknown_duration in configuration file ({cfgpath}): {e}"
            ) from e

        try:
            musicbrainz_track_template = data["musicbrainz_track_template"]
            del data["musicbrainz_track_template"]
            if not isinstance(musicbrainz_track_template, str):
                raise ValueError(f"Must be a str: got {type(musicbrainz_track_template)}")
            ENVIRONMENT.parse(musicbrainz_track_template)
        except KeyError:
            musicbrainz_track_template = DEFAULT_MUSICBRAINZ_TRACK_TEMPLATE
        except jinja2.TemplateSyntaxError as e:
            raise InvalidConfigValueError(
                f"Invalid value for musicbrainz_track_template in configuration file ({cfgpath}): "
                f"failed to compile template: {e}"
            ) from e
        except ValueError as e:
            raise InvalidConfigValueError(
                f"Invalid value for musicbrainz_track_template in configuration file ({cfgpath}): {e}"
            ) from e

        if data:
            unrecognized_accessors: list[str] = []
            # Do a DFS over the data keys to assemble the map of unknown keys. State is a tuple of
            # ("accessor", node).
            dfs_state: deque[tuple[str, Any]] = deque([("", data)])
            while dfs_state:
                accessor, node = dfs_state.pop()
                if isinstance(node, dict):
                    for k, v in node.items():
                        child_accessor = k if not accessor else f"{accessor}.{k}"
                        dfs_state.append((child_accessor, v))
                    continue
                unrecognized_accessors.append(accessor)
            logger.warning(
                f"Unrecognized options found in configuration file: {', '.join(unrecognized_accessors)}"
            )

        return Config(
            encodings=encodings,
            unknown_duration=unknown_duration,
            musicbrainz_track_template=musicbrainz_track_template,
        )
