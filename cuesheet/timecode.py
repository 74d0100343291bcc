"""
The timecode module implements the `mm:ss:ff` time values used throughout cue sheets.

A cue sheet addresses positions in frames, where a frame is 1/75th of a second. Every Time is
reducible to a non-negative total frame count, and all arithmetic and ordering happens on that
count. Subtraction never wraps around: subtracting a later time from an earlier one raises
`TimeUnderflowError`.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from cuesheet.common import CuesheetExpectedError

FRAMES_PER_SECOND = 75

# Exactly eight characters. Anything else (single digit components, trailing garbage) is rejected.
TIMECODE_REGEX = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})")


class InvalidTimeError(CuesheetExpectedError, ValueError):
    pass


class TimeUnderflowError(CuesheetExpectedError, ArithmeticError):
    def __init__(self, left: Time, right: Time) -> None:
        self.left = left
        self.right = right
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Cannot subtract {self.right} from {self.left}: the result would be negative"


@functools.total_ordering
@dataclass(frozen=True)
class Time:
    minutes: int
    seconds: int
    frames: int

    def __post_init__(self) -> None:
        if self.minutes < 0:
            raise InvalidTimeError(f"Invalid minutes {self.minutes}: must not be negative")
        if not 0 <= self.seconds < 60:
            raise InvalidTimeError(f"Invalid seconds {self.seconds}: must be in [0, 60)")
        if not 0 <= self.frames < FRAMES_PER_SECOND:
            raise InvalidTimeError(f"Invalid frames {self.frames}: must be in [0, {FRAMES_PER_SECOND})")

    def __str__(self) -> str:
        return f"{self.minutes:02}:{self.seconds:02}:{self.frames:02}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self.total_frames < other.total_frames

    def __sub__(self, other: Time) -> Time:
        diff = self.total_frames - other.total_frames
        if diff < 0:
            raise TimeUnderflowError(self, other)
        return Time.from_frames(diff)

    @property
    def total_frames(self) -> int:
        return (self.minutes * 60 + self.seconds) * FRAMES_PER_SECOND + self.frames

    @property
    def total_seconds(self) -> float:
        return self.total_frames / FRAMES_PER_SECOND

    def short(self) -> str:
        """Format as `mm:ss`, dropping the frames."""
        return f"{self.minutes:02}:{self.seconds:02}"

    @classmethod
    def from_frames(cls, frames: int) -> Time:
        if frames < 0:
            raise InvalidTimeError(f"Invalid frame count {frames}: must not be negative")
        seconds, frames = divmod(frames, FRAMES_PER_SECOND)
        minutes, seconds = divmod(seconds, 60)
        return Time(minutes=minutes, seconds=seconds, frames=frames)

    @classmethod
    def parse(cls, raw: str) -> Time:
        m = TIMECODE_REGEX.fullmatch(raw)
        if not m:
            raise InvalidTimeError(f"Invalid timecode {raw!r}: must be of the form mm:ss:ff")
        return Time(minutes=int(m[1]), seconds=int(m[2]), frames=int(m[3]))
