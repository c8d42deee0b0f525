"""Tests for upload type path resolution."""

from pathlib import Path

import pytest

from server.apps.uploads.exceptions import UploadTypeConfigurationError
from server.apps.uploads.infrastructure.path_resolver import (
    PathResolver,
    UploadTypes,
    get_upload_types,
    is_plain_name,
    leaf_name,
)


class TestUploadTypes:
    """Tests for UploadTypes mapping."""

    def test_converts_roots_to_paths(self):
        """Test roots given as strings become Path objects."""
        upload_types = UploadTypes({'avatars': '/data/avatars'})

        assert upload_types['avatars'] == Path('/data/avatars')
        assert list(upload_types) == ['avatars']
        assert len(upload_types) == 1

    def test_is_immutable(self):
        """Test mapping cannot be changed after creation."""
        roots = {'avatars': '/data/avatars'}
        upload_types = UploadTypes(roots)

        roots['other'] = '/data/other'

        assert 'other' not in upload_types
        with pytest.raises(TypeError):
            upload_types['other'] = Path('/data/other')  # type: ignore[index]

    def test_from_settings(self, settings, tmp_path):
        """Test upload types are read from UPLOAD_TYPES setting."""
        settings.UPLOAD_TYPES = {'avatars': tmp_path / 'avatars'}

        upload_types = UploadTypes.from_settings()

        assert dict(upload_types) == {'avatars': tmp_path / 'avatars'}

    def test_cached_upload_types_follow_overridden_setting(
        self,
        settings,
        tmp_path,
    ):
        """Test cache is cleared when UPLOAD_TYPES is overridden."""
        settings.UPLOAD_TYPES = {'first': tmp_path / 'first'}
        assert list(get_upload_types()) == ['first']

        settings.UPLOAD_TYPES = {'second': tmp_path / 'second'}
        assert list(get_upload_types()) == ['second']

    def test_cached_upload_types_are_reused(self):
        """Test the same mapping is returned while settings are unchanged."""
        assert get_upload_types() is get_upload_types()


class TestPathResolver:
    """Tests for PathResolver."""

    def test_root_for_known_type(self, resolver, upload_root):
        """Test resolving configured upload type."""
        assert resolver.root_for('images') == upload_root / 'images'

    def test_root_for_unknown_type(self, resolver):
        """Test unknown upload type raises configuration error."""
        with pytest.raises(UploadTypeConfigurationError, match='avatars'):
            resolver.root_for('avatars')

    def test_exists_for_directory(self, resolver, upload_root):
        """Test existing subdirectory is found."""
        (upload_root / 'images' / '2024').mkdir()

        assert resolver.exists(upload_root / 'images', '2024')

    def test_exists_for_file(self, resolver, upload_root):
        """Test regular file is not a subdirectory."""
        (upload_root / 'images' / 'photo.jpg').write_bytes(b'jpeg')

        assert not resolver.exists(upload_root / 'images', 'photo.jpg')

    def test_exists_for_missing(self, resolver, upload_root):
        """Test missing subdirectory is not found."""
        assert not resolver.exists(upload_root / 'images', 'missing')

    def test_subdirectory_path_does_no_io(self, resolver):
        """Test joining paths that do not exist."""
        result = resolver.subdirectory_path('/nowhere', 'a/b')

        assert result == Path('/nowhere/a/b')

    @pytest.mark.parametrize(('path', 'expected'), [
        ('2024', True),
        ('2024/summer', True),
        ('2024/../2025', True),
        ('', False),
        ('.', False),
        ('2024/..', False),
        ('..', False),
        ('../files', False),
        ('/etc', False),
    ])
    def test_is_within_root(self, resolver, path, expected):
        """Test only paths strictly below root are accepted."""
        assert resolver.is_within_root('/data/images', path) is expected

    def test_from_settings_uses_configured_types(self, settings, tmp_path):
        """Test resolver built from settings knows configured types."""
        settings.UPLOAD_TYPES = {'avatars': tmp_path}

        resolver = PathResolver.from_settings()

        assert resolver.root_for('avatars') == tmp_path


@pytest.mark.parametrize(('relative_path', 'expected'), [
    ('2024', '2024'),
    ('2024/summer', 'summer'),
    ('2024/summer/', 'summer'),
    ('', ''),
    (None, ''),
    ('.', ''),
    ('/', ''),
    ('..', ''),
])
def test_leaf_name(relative_path, expected):
    """Test extracting folder name from relative path."""
    assert leaf_name(relative_path) == expected


@pytest.mark.parametrize(('name', 'expected'), [
    ('2025', True),
    ('summer photos', True),
    ('a/b', False),
    ('.', False),
    ('..', False),
    ('bad\x00name', False),
])
def test_is_plain_name(name, expected):
    """Test folder names must be a single path component."""
    assert is_plain_name(name) is expected
