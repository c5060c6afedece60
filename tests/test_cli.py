# tests/test_cli.py
"""Test the command-line interface"""

import logging
import pytest
import yaml
from unittest.mock import Mock, patch
from click.testing import CliRunner

from lrcsync import __version__
from lrcsync.config.settings import get_settings
from lrcsync.lyrics.models import TrackMetadata
from lrcsync.main import cli
from lrcsync.sync.synchronizer import SyncResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs root handlers bound to the runner's streams"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def fake_synchronizer():
    synchronizer = Mock()
    synchronizer.sync_directory.return_value = SyncResult(scanned=2, written=1, not_found=1, total_time=1.0)
    with patch('lrcsync.main.get_synchronizer', return_value=synchronizer):
        yield synchronizer


class TestCli:
    """Test the command group"""

    def test_version(self, runner):
        """Test version output"""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert f"lrcsync v{__version__}" in result.output

    def test_no_command_shows_help(self, runner):
        """Test the banner and help are shown without a subcommand"""
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "sync" in result.output

    def test_missing_config_file(self, runner, temp_dir):
        """Test a missing explicit config file exits with status 1"""
        result = runner.invoke(cli, ['--config', str(temp_dir / "nope.yaml"), 'config', 'show'])
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestSyncCommand:
    """Test the sync command"""

    def test_sync_runs_and_summarizes(self, runner, temp_dir, fake_synchronizer):
        """Test a run prints its summary and exits 0"""
        result = runner.invoke(cli, ['sync', str(temp_dir)])
        assert result.exit_code == 0, result.output
        assert "Written: 1" in result.output
        assert "Not found: 1" in result.output
        fake_synchronizer.sync_directory.assert_called_once()

    def test_options_override_settings(self, runner, temp_dir, fake_synchronizer):
        """Test command-line options land in the settings"""
        result = runner.invoke(cli, [
            'sync', str(temp_dir),
            '-u', 'https://mirror.example',
            '-a', '-f', '-s', '--dry-run',
            '-t', '2.5',
            '-i', 'album,duration', '-i', 'artist',
        ])
        assert result.exit_code == 0, result.output

        settings = get_settings()
        assert settings.lrclib.url == 'https://mirror.example'
        assert settings.sync.include_hidden
        assert settings.sync.force
        assert settings.sync.search
        assert settings.sync.dry_run
        assert settings.sync.tolerance == 2.5
        assert settings.sync.ignore == ['album', 'duration', 'artist']

    def test_failures_do_not_change_exit_code(self, runner, temp_dir, fake_synchronizer):
        """Test per-file failures are listed but the run still succeeds"""
        failed = SyncResult(scanned=1)
        failed.record_failure(str(temp_dir / "a.mp3"), "timeout")
        fake_synchronizer.sync_directory.return_value = failed

        result = runner.invoke(cli, ['sync', str(temp_dir)])
        assert result.exit_code == 0
        assert "a.mp3: timeout" in result.output

    def test_missing_directory(self, runner, temp_dir, fake_synchronizer):
        """Test a missing library directory is a configuration error"""
        result = runner.invoke(cli, ['sync', str(temp_dir / "missing")])
        assert result.exit_code == 1
        fake_synchronizer.sync_directory.assert_not_called()

    def test_invalid_url(self, runner, temp_dir, fake_synchronizer):
        """Test an invalid service URL is a configuration error"""
        result = runner.invoke(cli, ['sync', str(temp_dir), '-u', 'not-a-url'])
        assert result.exit_code == 1
        fake_synchronizer.sync_directory.assert_not_called()

    def test_end_to_end(self, runner, temp_dir, make_candidate):
        """Test a real run writes lyrics using a fake service and tag reader"""
        (temp_dir / "song.mp3").write_bytes(b"")
        client = Mock()
        client.exact_get.return_value = make_candidate(synced="[00:01.00]hi")
        reader = Mock()
        reader.read.return_value = TrackMetadata(title="Song", artists=("Band",), duration=200.0)

        with patch('lrcsync.sync.synchronizer.get_lrclib_client', return_value=client), \
                patch('lrcsync.sync.synchronizer.get_metadata_reader', return_value=reader):
            result = runner.invoke(cli, ['sync', str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert (temp_dir / "song.lrc").read_text(encoding="utf-8") == "[00:01.00]hi"


class TestConfigCommands:
    """Test the config command group"""

    def test_show(self, runner):
        """Test the effective settings are printed"""
        result = runner.invoke(cli, ['config', 'show'])
        assert result.exit_code == 0
        assert "https://lrclib.net" in result.output
        assert "Tolerance: 5.0s" in result.output

    def test_show_with_config_file(self, runner, temp_dir):
        """Test an explicit config file is reflected"""
        path = temp_dir / "c.yaml"
        path.write_text(yaml.safe_dump({'sync': {'tolerance': 1.0}}), encoding="utf-8")
        result = runner.invoke(cli, ['--config', str(path), 'config', 'show'])
        assert result.exit_code == 0
        assert "Tolerance: 1.0s" in result.output
        assert str(path) in result.output

    def test_init_writes_file(self, runner, temp_dir):
        """Test config init writes a loadable YAML file"""
        target = temp_dir / "out" / "config.yaml"
        result = runner.invoke(cli, ['config', 'init', '--path', str(target)])
        assert result.exit_code == 0
        data = yaml.safe_load(target.read_text(encoding="utf-8"))
        assert data['lrclib']['url'] == "https://lrclib.net"
