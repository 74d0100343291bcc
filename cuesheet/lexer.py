"""
The lexer module turns the raw text of a cue sheet into a flat sequence of tokens.

The lexer knows nothing about the cue sheet grammar. It recognizes three kinds of tokens: two-digit
numbers, `mm:ss:ff` timecodes, and strings (bare or double-quoted). At each position, the
recognizers are tried in a fixed priority order (timecode, then number, then string) rather than by
longest match. This is what makes an 8-character disc ID such as `860B640B` lex as a single string
instead of the number 86 followed by garbage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import click

from cuesheet.common import CuesheetExpectedError
from cuesheet.timecode import InvalidTimeError, Time

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
ASCII_DIGITS = "0123456789"


class CueParseError(CuesheetExpectedError):
    pass


LexicalErrorKind = Literal["unterminated_string", "quote_in_bare_string"]


class CueLexicalError(CueParseError):
    def __init__(self, *, kind: LexicalErrorKind, text: str, index: int, feedback: str) -> None:
        self.kind = kind
        self.text = text
        self.index = index
        self.feedback = feedback
        super().__init__(str(self))

    @property
    def line(self) -> int:
        """1-indexed line of the failure."""
        return self.text.count("\n", 0, self.index) + 1

    @property
    def column(self) -> int:
        """0-indexed column of the failure."""
        return self.index - (self.text.rfind("\n", 0, self.index) + 1)

    def __str__(self) -> str:
        start = self.text.rfind("\n", 0, self.index) + 1
        end = self.text.find("\n", self.index)
        source_line = self.text[start : end if end != -1 else len(self.text)]
        return f"""\
Failed to tokenize cue sheet, invalid syntax on line {self.line}:

    {source_line}
    {" " * self.column}{click.style("^", fg="red")}
    {" " * self.column}{click.style(self.feedback, bold=True)}
"""


@dataclass(frozen=True)
class NumberToken:
    # Always exactly two digits in the source text.
    value: int


@dataclass(frozen=True)
class StringToken:
    value: str


@dataclass(frozen=True)
class TimeToken:
    value: Time


Token = NumberToken | StringToken | TimeToken


def is_whitespace(c: str) -> bool:
    return c.isspace() or c == BYTE_ORDER_MARK


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0

    def available(self) -> bool:
        return self.position < len(self.text)

    def skip_whitespace(self) -> None:
        while self.available() and is_whitespace(self.text[self.position]):
            self.position += 1

    def try_take_time(self) -> Time | None:
        candidate = self.text[self.position : self.position + 8]
        if len(candidate) != 8:
            return None
        try:
            time = Time.parse(candidate)
        except InvalidTimeError:
            return None
        self.position += 8
        return time

    def try_take_number(self) -> int | None:
        # Numbers are only ever two digits long, and must be followed by whitespace or the end of the
        # text. Anything else falls through to the string recognizer.
        candidate = self.text[self.position : self.position + 2]
        if len(candidate) != 2 or any(c not in ASCII_DIGITS for c in candidate):
            return None
        boundary = self.position + 2
        if boundary < len(self.text) and not is_whitespace(self.text[boundary]):
            return None
        self.position = boundary
        return int(candidate)

    def take_string(self) -> str:
        start = self.position
        if self.text[start] == '"':
            end = self.text.find('"', start + 1)
            if end == -1:
                raise CueLexicalError(
                    kind="unterminated_string",
                    text=self.text,
                    index=start,
                    feedback="Quoted string is never closed: expected a matching '\"' before the end of the file.",
                )
            self.position = end + 1
            return self.text[start + 1 : end]

        while self.available() and not is_whitespace(self.text[self.position]):
            if self.text[self.position] == '"':
                raise CueLexicalError(
                    kind="quote_in_bare_string",
                    text=self.text,
                    index=self.position,
                    feedback="The '\"' character is not allowed inside an unquoted string.",
                )
            self.position += 1
        return self.text[start : self.position]


def tokenize(text: str) -> list[Token]:
    reader = _Reader(text)
    tokens: list[Token] = []

    reader.skip_whitespace()
    while reader.available():
        if (time := reader.try_take_time()) is not None:
            tokens.append(TimeToken(time))
        elif (number := reader.try_take_number()) is not None:
            tokens.append(NumberToken(number))
        else:
            tokens.append(StringToken(reader.take_string()))
        reader.skip_whitespace()

    logger.debug(f"Tokenized cue sheet into {len(tokens)} tokens")
    return tokens


def format_token(token: Token) -> str:
    """Render a token the way it would appear in a cue sheet, for error messages and debugging."""
    if isinstance(token, NumberToken):
        return f"{token.value:02}"
    if isinstance(token, TimeToken):
        return str(token.value)
    return f'"{token.value}"'
