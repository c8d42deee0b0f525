"""Tests for subdirectory lifecycle operations."""

import logging
import os
import shutil

import pytest

from server.apps.uploads.infrastructure.path_resolver import (
    PathResolver,
    UploadTypes,
)
from server.apps.uploads.logic.directory_operations import (
    DirectoryLifecycleManager,
)
from server.apps.uploads.logic.results import ErrorKind, Outcome


def _failing(*args, **kwargs):
    raise PermissionError('Permission denied')


class TestCreate:
    """Tests for DirectoryLifecycleManager.create."""

    def test_create_success(self, manager, upload_root):
        """Test new subdirectory is created."""
        result = manager.create('images', '2024')

        assert result.success
        assert result.status_code == 200
        assert result.path == upload_root / 'images' / '2024'
        assert (upload_root / 'images' / '2024').is_dir()

    def test_create_twice(self, manager):
        """Test creating existing subdirectory fails."""
        manager.create('images', '2024')

        result = manager.create('images', '2024')

        assert not result.success
        assert result.error_kind is ErrorKind.VALIDATION
        assert 'already exists' in result.message

    def test_create_over_file(self, manager, upload_root):
        """Test creating subdirectory with the name of a file fails."""
        (upload_root / 'images' / 'photo.jpg').write_bytes(b'jpeg')

        result = manager.create('images', 'photo.jpg')

        assert result.error_kind is ErrorKind.VALIDATION
        assert 'already exists' in result.message

    def test_create_nested(self, manager, upload_root):
        """Test creating subdirectory inside existing one."""
        (upload_root / 'images' / '2024').mkdir()

        result = manager.create('images', '2024/summer')

        assert result.success
        assert (upload_root / 'images' / '2024' / 'summer').is_dir()

    def test_create_is_not_recursive(self, manager, upload_root):
        """Test missing parents are not created."""
        result = manager.create('images', 'missing/summer')

        assert result.error_kind is ErrorKind.IO_FAILURE
        assert not (upload_root / 'images' / 'missing').exists()

    @pytest.mark.parametrize('name', ['', '.', '/'])
    def test_create_root(self, manager, name):
        """Test upload type root cannot be created again."""
        result = manager.create('images', name)

        assert result.error_kind is ErrorKind.VALIDATION

    def test_create_unknown_upload_type(self, manager):
        """Test unknown upload type is a validation failure."""
        result = manager.create('avatars', '2024')

        assert result.error_kind is ErrorKind.VALIDATION

    def test_create_outside_root(self, manager, upload_root):
        """Test traversal out of upload type root is refused."""
        result = manager.create('images', '../escaped')

        assert result.error_kind is ErrorKind.VALIDATION
        assert not (upload_root / 'escaped').exists()

    def test_create_io_failure(self, manager, monkeypatch):
        """Test OSError from mkdir becomes failure result."""
        monkeypatch.setattr(os, 'mkdir', _failing)

        result = manager.create('images', '2024')

        assert result.outcome is Outcome.FAILURE
        assert result.error_kind is ErrorKind.IO_FAILURE
        assert result.status_code == 500


class TestRemove:
    """Tests for DirectoryLifecycleManager.remove."""

    def test_remove_recursively(self, manager, upload_root):
        """Test subdirectory is removed with all its content."""
        nested = upload_root / 'images' / '2024' / 'summer'
        nested.mkdir(parents=True)
        (nested / 'photo.jpg').write_bytes(b'jpeg')
        (upload_root / 'images' / '2024' / 'notes.txt').write_text('n')

        result = manager.remove('images', '2024')

        assert result.success
        assert not (upload_root / 'images' / '2024').exists()
        assert (upload_root / 'images').is_dir()

    def test_remove_nested(self, manager, upload_root):
        """Test removing nested subdirectory keeps its parent."""
        (upload_root / 'images' / '2024' / 'summer').mkdir(parents=True)

        result = manager.remove('images', '2024/summer')

        assert result.success
        assert (upload_root / 'images' / '2024').is_dir()
        assert not (upload_root / 'images' / '2024' / 'summer').exists()

    def test_remove_missing(self, manager, upload_root):
        """Test removing missing subdirectory fails without changes."""
        (upload_root / 'images' / 'other').mkdir()

        result = manager.remove('images', '2024')

        assert result.error_kind is ErrorKind.NOT_FOUND
        assert 'does not exist' in result.message
        assert (upload_root / 'images' / 'other').is_dir()

    def test_remove_file(self, manager, upload_root):
        """Test regular files are not removed as subdirectories."""
        (upload_root / 'images' / 'photo.jpg').write_bytes(b'jpeg')

        result = manager.remove('images', 'photo.jpg')

        assert result.error_kind is ErrorKind.NOT_FOUND
        assert (upload_root / 'images' / 'photo.jpg').exists()

    @pytest.mark.parametrize('upload_type', ['images', '', None, 'avatars'])
    @pytest.mark.parametrize('relative_path', ['', None, '.', '/'])
    def test_remove_root(self, manager, upload_root, upload_type, relative_path):
        """Test upload type root is never removed."""
        result = manager.remove(upload_type, relative_path)

        assert result.error_kind is ErrorKind.VALIDATION
        assert result.message == 'Cannot remove main folder!'
        assert (upload_root / 'images').is_dir()

    @pytest.mark.parametrize('upload_type', ['', None])
    def test_remove_without_upload_type(self, manager, upload_type):
        """Test upload type is required."""
        result = manager.remove(upload_type, '2024')

        assert result.error_kind is ErrorKind.VALIDATION
        assert result.message == 'You need to select upload type!'

    def test_remove_unknown_upload_type(self, manager):
        """Test unknown upload type is a validation failure."""
        result = manager.remove('avatars', '2024')

        assert result.error_kind is ErrorKind.VALIDATION

    def test_remove_outside_root(self, manager, upload_root):
        """Test sibling upload type cannot be removed by traversal."""
        result = manager.remove('images', '../files')

        assert result.error_kind is ErrorKind.VALIDATION
        assert (upload_root / 'files').is_dir()

    def test_remove_io_failure(self, manager, upload_root, monkeypatch):
        """Test OSError from rmtree becomes failure result."""
        (upload_root / 'images' / '2024').mkdir()
        monkeypatch.setattr(shutil, 'rmtree', _failing)

        result = manager.remove('images', '2024')

        assert result.error_kind is ErrorKind.IO_FAILURE
        assert (upload_root / 'images' / '2024').is_dir()


class TestRename:
    """Tests for DirectoryLifecycleManager.rename."""

    def test_rename_success(self, manager, upload_root):
        """Test renamed folder keeps content and parent."""
        (upload_root / 'images' / '2024').mkdir()
        (upload_root / 'images' / '2024' / 'photo.jpg').write_bytes(b'jpeg')

        result = manager.rename('images', '2024', '2025')

        assert result.success
        assert result.path == upload_root / 'images' / '2025'
        assert not (upload_root / 'images' / '2024').exists()
        assert (upload_root / 'images' / '2025' / 'photo.jpg').exists()

    def test_rename_nested(self, manager, upload_root):
        """Test nested folder is renamed at the same level."""
        (upload_root / 'images' / '2024' / 'summer').mkdir(parents=True)

        result = manager.rename('images', '2024/summer', 'winter')

        assert result.success
        assert (upload_root / 'images' / '2024' / 'winter').is_dir()
        assert not (upload_root / 'images' / 'winter').exists()

    def test_rename_to_same_name(self, manager, upload_root):
        """Test renaming to the current name fails first."""
        result = manager.rename('', '2024', '2024')

        assert result.error_kind is ErrorKind.VALIDATION
        assert 'same' in result.message

    def test_rename_to_same_name_nested(self, manager, upload_root):
        """Test current name is compared, not the whole path."""
        (upload_root / 'images' / '2024' / 'summer').mkdir(parents=True)

        result = manager.rename('images', '2024/summer', 'summer')

        assert result.error_kind is ErrorKind.VALIDATION
        assert (upload_root / 'images' / '2024' / 'summer').is_dir()

    @pytest.mark.parametrize('new_name', ['', None])
    def test_rename_empty_new_name(self, manager, new_name):
        """Test new name is required."""
        result = manager.rename('images', '2024', new_name)

        assert result.error_kind is ErrorKind.VALIDATION
        assert result.message == 'New name is an empty string - action aborted.'

    def test_rename_root(self, manager):
        """Test upload type root cannot be renamed."""
        result = manager.rename('images', '', '2025')

        assert result.error_kind is ErrorKind.VALIDATION
        assert result.message.startswith('Current name is an empty string')

    def test_rename_without_upload_type(self, manager):
        """Test upload type is required."""
        result = manager.rename('', '2024', '2025')

        assert result.error_kind is ErrorKind.VALIDATION
        assert result.message.startswith('Upload type is an empty string')

    def test_rename_unknown_upload_type(self, manager):
        """Test unknown upload type is a validation failure."""
        result = manager.rename('avatars', '2024', '2025')

        assert result.error_kind is ErrorKind.VALIDATION

    def test_rename_missing(self, manager):
        """Test renaming missing folder fails as not found."""
        result = manager.rename('images', '2024', '2025')

        assert result.error_kind is ErrorKind.NOT_FOUND
        assert result.message.startswith('Target directory')

    def test_rename_file(self, manager, upload_root):
        """Test files are rejected by the subdirectory check."""
        (upload_root / 'images' / 'photo.jpg').write_bytes(b'jpeg')

        result = manager.rename('images', 'photo.jpg', 'other.jpg')

        assert result.error_kind is ErrorKind.NOT_FOUND
        assert result.message == 'Subdirectory with this name does not exist!'
        assert (upload_root / 'images' / 'photo.jpg').exists()

    def test_rename_collision(self, manager, upload_root):
        """Test renaming onto existing sibling leaves both untouched."""
        (upload_root / 'images' / '2024').mkdir()
        (upload_root / 'images' / '2024' / 'a.jpg').write_bytes(b'a')
        (upload_root / 'images' / '2025').mkdir()
        (upload_root / 'images' / '2025' / 'b.jpg').write_bytes(b'b')

        result = manager.rename('images', '2024', '2025')

        assert result.error_kind is ErrorKind.VALIDATION
        assert 'already exist' in result.message
        assert (upload_root / 'images' / '2024' / 'a.jpg').exists()
        assert (upload_root / 'images' / '2025' / 'b.jpg').exists()
        assert not (upload_root / 'images' / '2025' / 'a.jpg').exists()

    @pytest.mark.parametrize('new_name', ['../moved', 'a/b', '..', '.'])
    def test_rename_to_path(self, manager, upload_root, new_name):
        """Test new name must be a single folder name."""
        (upload_root / 'images' / '2024').mkdir()

        result = manager.rename('images', '2024', new_name)

        assert result.error_kind is ErrorKind.VALIDATION
        assert (upload_root / 'images' / '2024').is_dir()

    def test_rename_outside_root(self, manager, upload_root):
        """Test folders outside of root cannot be renamed."""
        result = manager.rename('images', '../files', 'renamed')

        assert result.error_kind is ErrorKind.VALIDATION
        assert (upload_root / 'files').is_dir()

    def test_rename_io_failure(self, manager, upload_root, monkeypatch):
        """Test OSError from rename becomes failure result."""
        (upload_root / 'images' / '2024').mkdir()
        monkeypatch.setattr(os, 'rename', _failing)

        result = manager.rename('images', '2024', '2025')

        assert result.error_kind is ErrorKind.IO_FAILURE
        assert 'unallowed characters' in result.message


def test_avatars_lifecycle(tmp_path):
    """Test create, rename and remove of one folder end to end."""
    avatars = tmp_path / 'data' / 'avatars'
    avatars.mkdir(parents=True)
    manager = DirectoryLifecycleManager(
        PathResolver(UploadTypes({'avatars': avatars})),
    )

    assert manager.create('avatars', '2024').success
    assert (avatars / '2024').is_dir()

    assert manager.rename('avatars', '2024', '2025').success
    assert (avatars / '2025').is_dir()
    assert not (avatars / '2024').exists()

    assert manager.remove('avatars', '2025').success
    assert not (avatars / '2025').exists()

    result = manager.remove('avatars', '2025')
    assert not result.success
    assert 'does not exist' in result.message


def test_operations_use_given_logger(resolver, caplog):
    """Test operation audit trail goes to the injected logger."""
    audit_logger = logging.getLogger('tests.uploads.audit')
    manager = DirectoryLifecycleManager(resolver, audit_logger)

    with caplog.at_level(logging.INFO, logger='tests.uploads.audit'):
        manager.create('images', '2024')

    messages = [
        record.getMessage()
        for record in caplog.records
        if record.name == 'tests.uploads.audit'
    ]
    assert messages[0].startswith('Started creating subdirectory')
    assert messages[-1].startswith('Finished creating subdirectory')


def test_disabled_logger_does_not_change_outcome(resolver, upload_root):
    """Test operations succeed with logging switched off."""
    silent_logger = logging.getLogger('tests.uploads.silent')
    silent_logger.disabled = True
    manager = DirectoryLifecycleManager(resolver, silent_logger)

    try:
        assert manager.create('images', '2024').success
    finally:
        silent_logger.disabled = False
    assert (upload_root / 'images' / '2024').is_dir()
