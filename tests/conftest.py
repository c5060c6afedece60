"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path
from unittest.mock import Mock

from lrcsync.config import settings as settings_module
from lrcsync.lyrics import lrclib as lrclib_module
from lrcsync.lyrics.models import LyricsCandidate, TrackMetadata
from lrcsync.sync import synchronizer as synchronizer_module

SYNCED = "[00:12.00] Line one\n[00:15.50] Line two\n"

@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)

@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the user's config, environment and singletons"""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for var in ("LRCLIB_URL", "LRCSYNC_TOLERANCE", "LRCSYNC_LOG_LEVEL", "LRCSYNC_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    settings_module._settings = None
    lrclib_module._lrclib_client = None
    synchronizer_module._synchronizer_instance = None
    yield
    settings_module._settings = None
    lrclib_module._lrclib_client = None
    synchronizer_module._synchronizer_instance = None

@pytest.fixture
def mock_settings():
    """Mock settings for testing"""
    settings = Mock()
    settings.lrclib.url = "https://lrclib.example"
    settings.lrclib.timeout = 10.0
    settings.lrclib.user_agent = ""
    settings.sync.include_hidden = False
    settings.sync.force = False
    settings.sync.ignore = []
    settings.sync.search = True
    settings.sync.tolerance = 5.0
    settings.sync.ignore_filenames = [".lrcsyncignore", ".ignore"]
    settings.sync.dry_run = False
    return settings

@pytest.fixture
def sample_record():
    """One lyrics record as returned by the service"""
    return {
        'id': 3396226,
        'trackName': 'I Want to Live',
        'artistName': 'Borislav Slavov',
        'albumName': "Baldur's Gate 3 (Original Game Soundtrack)",
        'duration': 233,
        'instrumental': False,
        'plainLyrics': "I feel your breath upon my neck\n",
        'syncedLyrics': "[00:17.12] I feel your breath upon my neck\n",
    }

@pytest.fixture
def sample_metadata():
    """Tags of a typical audio file"""
    return TrackMetadata(
        title="Song",
        artists=("Artist",),
        album="Album",
        duration=200.0,
    )

@pytest.fixture
def make_candidate():
    """Factory for LyricsCandidate values"""
    counter = iter(range(1, 10000))

    def factory(duration=200.0, synced=SYNCED, instrumental=False, **overrides):
        fields = dict(
            id=next(counter),
            track_name="Song",
            artist_name="Artist",
            album_name="Album",
            duration=duration,
            instrumental=instrumental,
            plain_lyrics="Line one\nLine two\n" if synced else None,
            synced_lyrics=synced,
        )
        fields.update(overrides)
        return LyricsCandidate(**fields)

    return factory
