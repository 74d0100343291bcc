import pytest

from cuesheet.commands import (
    CatalogCommand,
    CdtextfileCommand,
    CueSyntaxError,
    FileCommand,
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
    TrackType,
    parse_commands,
    parse_cue,
    parse_file_format,
    parse_track_flag,
)
from cuesheet.lexer import NumberToken, StringToken, TimeToken
from cuesheet.timecode import Time


def test_parse_all_commands() -> None:
    cue = """
    REM DISCID 860B640B
    REM DATE 1991
    CATALOG 0724384757727
    CDTEXTFILE "disc.cdt"
    PERFORMER "My Bloody Valentine"
    SONGWRITER "Kevin Shields"
    TITLE "Loveless"
    FILE "Loveless.wav" WAVE
      TRACK 01 AUDIO
        FLAGS DCP 4CH
        ISRC GBAAA9100001
        PREGAP 00:02:00
        INDEX 01 00:00:00
        POSTGAP 00:01:00
    """
    assert parse_cue(cue) == [
        RemCommand(key="DISCID", value=StringToken("860B640B")),
        RemCommand(key="DATE", value=StringToken("1991")),
        CatalogCommand(catalog="0724384757727"),
        CdtextfileCommand(path="disc.cdt"),
        PerformerCommand(performer="My Bloody Valentine"),
        SongwriterCommand(songwriter="Kevin Shields"),
        TitleCommand(title="Loveless"),
        FileCommand(path="Loveless.wav", format="WAVE"),
        TrackCommand(number=1, type=TrackType("AUDIO")),
        FlagsCommand(flags=["DCP", "4CH"]),
        IsrcCommand(isrc="GBAAA9100001"),
        PregapCommand(duration=Time(0, 2, 0)),
        IndexCommand(number=1, time=Time(0, 0, 0)),
        PostgapCommand(duration=Time(0, 1, 0)),
    ]


def test_parse_keywords_case_insensitive() -> None:
    assert parse_cue('title "x" file "a.mp3" mp3 track 02 audio') == [
        TitleCommand(title="x"),
        FileCommand(path="a.mp3", format="MP3"),
        TrackCommand(number=2, type=TrackType("AUDIO")),
    ]


def test_parse_catalog_zero_padded() -> None:
    assert parse_commands([StringToken("CATALOG"), NumberToken(42)]) == [
        CatalogCommand(catalog="0000000000042")
    ]
    assert parse_cue("CATALOG 123") == [CatalogCommand(catalog="0000000000123")]
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("CATALOG 12345678901234")
    assert exc.value.kind == "invalid_value"
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("CATALOG ABC")
    assert exc.value.kind == "invalid_value"


def test_parse_rem_keeps_raw_token() -> None:
    assert parse_cue("REM A 12 REM B 00:01:02 REM C x") == [
        RemCommand(key="A", value=NumberToken(12)),
        RemCommand(key="B", value=TimeToken(Time(0, 1, 2))),
        RemCommand(key="C", value=StringToken("x")),
    ]


def test_parse_flags_stops_at_non_flag() -> None:
    assert parse_cue("FLAGS DCP PRE SCMS TITLE x") == [
        FlagsCommand(flags=["DCP", "PRE", "SCMS"]),
        TitleCommand(title="x"),
    ]
    # A non-string token also terminates the flags.
    assert parse_cue("FLAGS pre REM X 01") == [
        FlagsCommand(flags=["PRE"]),
        RemCommand(key="X", value=NumberToken(1)),
    ]
    assert parse_cue("FLAGS DCP") == [FlagsCommand(flags=["DCP"])]


def test_parse_flags_requires_a_flag() -> None:
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("FLAGS TITLE x")
    assert exc.value.kind == "wrong_token"
    assert exc.value.keyword == "FLAGS"
    assert exc.value.found == StringToken("TITLE")

    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("FLAGS")
    assert exc.value.kind == "unexpected_end"


def test_parse_track_types() -> None:
    assert TrackType.parse("AUDIO") == TrackType("AUDIO")
    assert TrackType.parse("cdg") == TrackType("CDG")
    assert TrackType.parse("MODE1/2048") == TrackType("MODE", mode=1, sector_size=2048)
    assert TrackType.parse("MODE2/2336") == TrackType("MODE", mode=2, sector_size=2336)
    assert TrackType.parse("CDI/2352") == TrackType("CDI", sector_size=2352)
    assert str(TrackType.parse("mode2/2324")) == "MODE2/2324"
    assert TrackType("AUDIO").is_audio
    assert not TrackType("CDG").is_audio


def test_parse_enums() -> None:
    assert parse_file_format("wave") == "WAVE"
    assert parse_file_format("Binary") == "BINARY"
    assert parse_file_format("MOTOROLA") == "MOTOROLA"
    assert parse_track_flag("4ch") == "4CH"


def test_parse_invalid_enum_values() -> None:
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue('FILE "a.flac" FLAC')
    assert exc.value.kind == "invalid_value"
    assert exc.value.keyword == "FILE"
    assert exc.value.position == 2
    assert exc.value.found == StringToken("FLAC")

    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("TRACK 01 MODE3/2048")
    assert exc.value.kind == "invalid_value"
    assert exc.value.keyword == "TRACK"


def test_parse_wrong_token() -> None:
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("INDEX 01 1:00:00")
    assert exc.value.kind == "wrong_token"
    assert exc.value.keyword == "INDEX"
    assert exc.value.position == 2
    assert exc.value.expected == "a mm:ss:ff timecode"
    assert exc.value.found == StringToken("1:00:00")
    assert (
        str(exc.value)
        == 'Failed to parse cue sheet in INDEX command at token 2: expected a mm:ss:ff timecode, found "1:00:00"'
    )

    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("TRACK 1 AUDIO")
    assert exc.value.kind == "wrong_token"
    assert exc.value.found == StringToken("1")

    # The keyword itself must be a string.
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("01 TITLE x")
    assert exc.value.kind == "wrong_token"
    assert exc.value.keyword is None
    assert exc.value.position == 0


def test_parse_unexpected_end() -> None:
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("TITLE")
    assert exc.value.kind == "unexpected_end"
    assert exc.value.position == 1
    assert exc.value.found is None
    assert str(exc.value) == "Failed to parse cue sheet in TITLE command at token 1: expected a title, found end of file"

    with pytest.raises(CueSyntaxError) as exc:
        parse_cue("REM COMMENT")
    assert exc.value.kind == "unexpected_end"


def test_parse_unknown_keyword() -> None:
    with pytest.raises(CueSyntaxError) as exc:
        parse_cue('TITLE "x" ARRANGER "y"')
    assert exc.value.kind == "unknown_keyword"
    assert exc.value.position == 2
    assert exc.value.found == StringToken("ARRANGER")


def test_parse_does_not_mutate_tokens() -> None:
    tokens = [StringToken("TITLE"), StringToken("x"), StringToken("FLAGS"), StringToken("DCP")]
    copy = list(tokens)
    parse_commands(tokens)
    assert tokens == copy
