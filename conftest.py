import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from cuesheet.config import Config

logger = logging.getLogger(__name__)

TESTDATA = Path(__file__).resolve().parent / "testdata"
TEST_CUE_LOVELESS = TESTDATA / "Loveless.cue"
TEST_CUE_MIXED_MODE = TESTDATA / "Mixed Mode.cue"
TEST_CUE_FULL = TESTDATA / "Full.cue"


@pytest.fixture(autouse=True)
def debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)


@pytest.fixture()
def isolated_dir() -> Iterator[Path]:
    with CliRunner().isolated_filesystem():
        yield Path.cwd()


@pytest.fixture()
def config(isolated_dir: Path) -> Config:
    return Config(
        encodings=["utf-8", "cp1252"],
        unknown_duration="??:??",
        musicbrainz_track_template="{{ number }} {{ title }} - {{ performer }} {{ duration }}",
    )


@pytest.fixture()
def config_path(isolated_dir: Path) -> Path:
    """An empty configuration file, for tests that go through `Config.parse`."""
    path = isolated_dir / "config.toml"
    path.touch()
    return path
