# tests/test_metadata.py
"""Test tag reading with a mocked mutagen"""

import pytest
from unittest.mock import Mock, patch

from mutagen import MutagenError
from mutagen.id3 import ID3, TALB, TIT2, TPE1

from lrcsync.audio.metadata import MetadataReader, get_metadata_reader
from lrcsync.exceptions import TagReadError
from lrcsync.lyrics.models import TrackMetadata


def fake_audio(tags, length=200.0):
    audio = Mock()
    audio.tags = tags
    audio.info.length = length
    return audio


@pytest.fixture
def audio_file(temp_dir):
    path = temp_dir / "song.flac"
    path.write_bytes(b"fLaC")
    return path


class TestMetadataReader:
    """Test metadata extraction"""

    def test_reads_all_fields(self, audio_file):
        """Test title, artists, album and duration are extracted"""
        tags = {'title': ['Song'], 'artist': ['A', 'B'], 'album': ['Album']}
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio(tags, 215.5)) as mock_file:
            metadata = MetadataReader().read(audio_file)

        mock_file.assert_called_once_with(str(audio_file), easy=True)
        assert metadata == TrackMetadata("Song", ("A", "B"), "Album", 215.5)

    def test_missing_tags(self, audio_file):
        """Test a file without tags gives empty metadata with duration"""
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio(None)):
            metadata = MetadataReader().read(audio_file)

        assert metadata == TrackMetadata("", (), None, 200.0)

    def test_blank_values_are_dropped(self, audio_file):
        """Test whitespace-only tag values count as missing"""
        tags = {'title': ['  Song  '], 'artist': ['', 'B'], 'album': ['   ']}
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio(tags)):
            metadata = MetadataReader().read(audio_file)

        assert metadata.title == "Song"
        assert metadata.artists == ("B",)
        assert metadata.album is None

    def test_string_tag_value(self, audio_file):
        """Test a bare string tag value is accepted"""
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio({'title': 'Song'})):
            assert MetadataReader().read(audio_file).title == "Song"

    def test_raw_id3_frames(self, temp_dir):
        """Test WAVE files with a plain ID3 tag are read by frame id"""
        path = temp_dir / "song.wav"
        path.write_bytes(b"RIFF")
        tags = ID3()
        tags.add(TIT2(encoding=3, text=["Song"]))
        tags.add(TPE1(encoding=3, text=["Band", "Guest"]))
        tags.add(TALB(encoding=3, text=["Album"]))
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio(tags, 180.0)):
            metadata = MetadataReader().read(path)

        assert metadata == TrackMetadata("Song", ("Band", "Guest"), "Album", 180.0)

    @pytest.mark.parametrize("length", [0, 0.0, None])
    def test_unknown_duration(self, audio_file, length):
        """Test a zero or missing stream length means no duration"""
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=fake_audio({}, length)):
            assert MetadataReader().read(audio_file).duration is None

    def test_unsupported_format(self, audio_file):
        """Test mutagen not recognising the file raises TagReadError"""
        with patch('lrcsync.audio.metadata.mutagen.File', return_value=None):
            with pytest.raises(TagReadError):
                MetadataReader().read(audio_file)

    def test_corrupt_file(self, audio_file):
        """Test mutagen errors are wrapped in TagReadError"""
        with patch('lrcsync.audio.metadata.mutagen.File', side_effect=MutagenError("bad header")):
            with pytest.raises(TagReadError) as exc_info:
                MetadataReader().read(audio_file)
        assert exc_info.value.details['file_path'] == str(audio_file)

    def test_missing_file(self, temp_dir):
        """Test a missing file raises TagReadError without calling mutagen"""
        with patch('lrcsync.audio.metadata.mutagen.File') as mock_file:
            with pytest.raises(TagReadError):
                MetadataReader().read(temp_dir / "gone.mp3")
        mock_file.assert_not_called()

    def test_shared_reader(self):
        """Test the factory returns one shared reader"""
        assert get_metadata_reader() is get_metadata_reader()
