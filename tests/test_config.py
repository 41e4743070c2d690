"""Tests for configuration objects, file type detection and entries."""

from datetime import timezone

from explorercache.config import CacheConfig, HttpConfig
from explorercache.core.entry import FileEntry
from explorercache.errors import NetworkError
from explorercache.file_types import DEFAULT_TEXT_EXTENSIONS, file_extension, is_text_file


class TestCacheConfig:

    def test_defaults(self):
        config = CacheConfig()
        assert config.startup_delay == 1.0
        assert config.idle_pause == 0.2
        assert config.level_delay == 0.5
        assert config.error_backoff == 5.0
        assert config.text_extensions == DEFAULT_TEXT_EXTENSIONS
        assert config.validate() == []

    def test_immediate_preset(self):
        config = CacheConfig.immediate(level_delay=0.1)
        assert config.startup_delay == 0
        assert config.error_backoff == 0
        assert config.level_delay == 0.1

    def test_validate_reports_problems(self):
        config = CacheConfig(startup_delay=-1, error_backoff=-2, text_extensions=frozenset())
        errors = config.validate()
        assert "startup_delay cannot be negative" in errors
        assert "error_backoff cannot be negative" in errors
        assert "text_extensions cannot be empty" in errors

    def test_validate_extension_format(self):
        assert CacheConfig(text_extensions=frozenset({'.md'})).validate()
        assert CacheConfig(text_extensions=frozenset({'MD'})).validate()

    def test_http_config(self):
        assert HttpConfig().validate() == []
        assert HttpConfig(timeout=-1).validate() == ["timeout must be positive"]


class TestFileTypes:

    def test_known_text_extensions(self):
        assert is_text_file('readme.md')
        assert is_text_file('App.TSX')
        assert is_text_file('/deep/path/config.yaml')
        assert is_text_file('archive.tar.json')

    def test_other_files(self):
        assert not is_text_file('photo.png')
        assert not is_text_file('Makefile')
        assert not is_text_file('')
        assert not is_text_file(None)

    def test_custom_extensions(self):
        assert is_text_file('data.csv', frozenset({'csv'}))
        assert not is_text_file('readme.md', frozenset({'csv'}))

    def test_file_extension(self):
        assert file_extension('a.b.C') == 'c'
        assert file_extension('Makefile') == 'makefile'


class TestFileEntry:

    def test_from_json(self):
        entry = FileEntry.from_json({
            'name': 'notes.txt',
            'path': '/docs/notes.txt',
            'isDirectory': False,
            'size': 12,
            'modified': '2024-05-06T07:08:09.000Z',
            'type': 'text/plain',
        })
        assert entry.path == '/docs/notes.txt'
        assert not entry.is_directory
        assert entry.modified.tzinfo == timezone.utc
        assert entry.mime_type == 'text/plain'

    def test_to_json_omits_type_for_directories(self):
        entry = FileEntry(name='docs', path='/docs', is_directory=True, mime_type='x')
        data = entry.to_json()
        assert data['isDirectory'] is True
        assert 'type' not in data
        assert data['modified'] is None


def test_network_error_repr():
    error = NetworkError("gone", status_code=404, path='/a')
    assert repr(error) == "NetworkError('gone', status_code=404, path='/a')"
