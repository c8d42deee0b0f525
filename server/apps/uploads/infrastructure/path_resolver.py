"""Resolution of upload types to their root directories.

Upload types are named categories of uploaded content. Each one maps to
exactly one root directory, subdirectories are addressed relative to it:

    images -> /srv/upload/images
    ('images', '2024/summer') -> /srv/upload/images/2024/summer
"""

import functools
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Final, final, override

from django.conf import settings

from server.apps.uploads.exceptions import UploadTypeConfigurationError

_CURRENT_DIR: Final = '.'
_PARENT_DIR: Final = '..'


@final
class UploadTypes(Mapping[str, Path]):
    """Immutable mapping of upload type identifiers to root directories."""

    def __init__(self, roots: Mapping[str, str | os.PathLike[str]]) -> None:
        """Initialize upload types.

        Args:
            roots: Upload type identifier -> root directory.
        """
        self._roots = MappingProxyType({
            upload_type: Path(root)
            for upload_type, root in roots.items()
        })

    @classmethod
    def from_settings(cls) -> 'UploadTypes':
        """Build upload types from the ``UPLOAD_TYPES`` setting.

        Returns:
            UploadTypes with every configured root.
        """
        return cls(getattr(settings, 'UPLOAD_TYPES', {}))

    @override
    def __getitem__(self, upload_type: str) -> Path:
        return self._roots[upload_type]

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._roots)

    @override
    def __len__(self) -> int:
        return len(self._roots)

    @override
    def __repr__(self) -> str:
        return f'UploadTypes({dict(self._roots)!r})'


@functools.cache
def get_upload_types() -> UploadTypes:
    """Get upload types configured for this process.

    The mapping is read from settings on first use and reused afterwards.
    The cache is cleared by ``signals.reset_upload_types`` when
    ``UPLOAD_TYPES`` is overridden.

    Returns:
        Configured UploadTypes.
    """
    return UploadTypes.from_settings()


@final
class PathResolver:
    """Maps upload types to directories and checks subdirectories.

    Holds no state besides the upload types it was given, every other
    answer comes from the filesystem.
    """

    def __init__(self, upload_types: UploadTypes) -> None:
        """Initialize path resolver.

        Args:
            upload_types: Configured upload types.
        """
        self._upload_types = upload_types

    @classmethod
    def from_settings(cls) -> 'PathResolver':
        """Create resolver for the upload types of this process.

        Returns:
            PathResolver using ``get_upload_types()``.
        """
        return cls(get_upload_types())

    @property
    def upload_types(self) -> UploadTypes:
        """Get configured upload types."""
        return self._upload_types

    def root_for(self, upload_type: str) -> Path:
        """Get root directory of an upload type.

        Args:
            upload_type: Upload type identifier.

        Returns:
            Configured root directory.

        Raises:
            UploadTypeConfigurationError: If upload type is not configured.
        """
        try:
            return self._upload_types[upload_type]
        except KeyError as error:
            raise UploadTypeConfigurationError(upload_type) from error

    def exists(self, root: str | os.PathLike[str], relative_path: str) -> bool:
        """Check if subdirectory exists under root.

        Args:
            root: Root directory.
            relative_path: Subdirectory path relative to root.

        Returns:
            True if ``root/relative_path`` exists and is a directory.
        """
        return os.path.isdir(self.subdirectory_path(root, relative_path))

    def subdirectory_path(
        self,
        root: str | os.PathLike[str],
        name: str,
    ) -> Path:
        """Join root and subdirectory name, no filesystem access.

        Args:
            root: Root directory.
            name: Subdirectory name or relative path.

        Returns:
            Joined path.
        """
        return Path(root) / name

    def is_within_root(
        self,
        root: str | os.PathLike[str],
        path: str | os.PathLike[str],
    ) -> bool:
        """Check that path lies strictly below root.

        Purely lexical: ``..`` components are collapsed, symbolic links
        are not followed.

        Args:
            root: Root directory.
            path: Path to check, absolute or relative to root.

        Returns:
            True if path is a descendant of root and not root itself.
        """
        normalized_root = os.path.normpath(os.path.abspath(root))
        normalized_path = os.path.normpath(
            os.path.abspath(os.path.join(normalized_root, path)),
        )
        if normalized_path == normalized_root:
            return False
        return normalized_path.startswith(normalized_root + os.sep)


def leaf_name(relative_path: str | None) -> str:
    """Get last component of a relative subdirectory path.

    Example: '2024/summer/' -> 'summer'

    Args:
        relative_path: Path relative to an upload type root.

    Returns:
        Folder name, empty string for root-like paths ('', '.', '/').
    """
    if not relative_path:
        return ''
    name = os.path.basename(os.path.normpath(relative_path))
    if name in {_CURRENT_DIR, _PARENT_DIR, os.sep}:
        return ''
    return name


def is_plain_name(name: str) -> bool:
    """Check that name is a single path component.

    Args:
        name: Proposed folder name.

    Returns:
        False for names with separators, '.', '..' or null bytes.
    """
    if name in {_CURRENT_DIR, _PARENT_DIR}:
        return False
    if '\x00' in name:
        return False
    separators = {os.sep, '/'}
    if os.altsep:
        separators.add(os.altsep)
    return not any(separator in name for separator in separators)
