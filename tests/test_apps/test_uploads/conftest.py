"""Shared fixtures for uploads app tests."""

import pytest

from server.apps.uploads.infrastructure.path_resolver import (
    PathResolver,
    UploadTypes,
)
from server.apps.uploads.logic.directory_operations import (
    DirectoryLifecycleManager,
)
from server.apps.uploads.logic.move_operations import CrossTypeMover


@pytest.fixture
def upload_root(tmp_path):
    """Create parent directory of upload type roots.

    Returns:
        Path with `images` and `files` roots created inside.
    """
    root = tmp_path / 'upload'
    (root / 'images').mkdir(parents=True)
    (root / 'files').mkdir()
    return root


@pytest.fixture
def upload_types(upload_root):
    """Upload types rooted in the temporary upload directory.

    Returns:
        UploadTypes with `images` and `files`.
    """
    return UploadTypes({
        'images': upload_root / 'images',
        'files': upload_root / 'files',
    })


@pytest.fixture
def resolver(upload_types):
    """Path resolver for temporary upload types.

    Returns:
        PathResolver instance.
    """
    return PathResolver(upload_types)


@pytest.fixture
def manager(resolver):
    """Directory lifecycle manager for temporary upload types.

    Returns:
        DirectoryLifecycleManager instance.
    """
    return DirectoryLifecycleManager(resolver)


@pytest.fixture
def mover(resolver):
    """Cross type mover with default merge policy.

    Returns:
        CrossTypeMover instance.
    """
    return CrossTypeMover(resolver)


@pytest.fixture
def upload_settings(settings, upload_types):
    """Point Django settings at the temporary upload types.

    Returns:
        Overridden settings object.
    """
    settings.UPLOAD_TYPES = dict(upload_types)
    settings.UPLOAD_MOVE_CONFLICT_POLICY = 'overwrite'
    return settings
