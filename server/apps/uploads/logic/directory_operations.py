"""Business logic for subdirectory lifecycle operations.

Subdirectories live below the root of an upload type. They can be
created, renamed and removed, the root itself is never touched.

Every operation validates its input before mutating the filesystem and
reports the outcome as an ``OperationResult``. Concurrent requests on the
same subdirectory are not serialized.
"""

import logging
import os
import shutil
from typing import Final, final

from server.apps.uploads.exceptions import UploadTypeConfigurationError
from server.apps.uploads.infrastructure.path_resolver import (
    PathResolver,
    is_plain_name,
    leaf_name,
)
from server.apps.uploads.logic.results import ErrorKind, OperationResult

# New subdirectories are created world-writable, umask still applies
_FOLDER_MODE: Final = 0o777

logger = logging.getLogger(__name__)


@final
class DirectoryLifecycleManager:
    """Creates, renames and removes subdirectories of upload types."""

    def __init__(
        self,
        resolver: PathResolver,
        operation_logger: logging.Logger | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            resolver: Resolver for upload type roots.
            operation_logger: Logger for the audit trail of operations,
                module logger by default.
        """
        self._resolver = resolver
        self._logger = operation_logger or logger

    def create(self, upload_type: str, name: str) -> OperationResult:
        """Create subdirectory in upload type root.

        Only the last component is created, parents must already exist.

        Args:
            upload_type: Upload type identifier.
            name: Subdirectory name or path relative to the root.

        Returns:
            OperationResult with the created path on success.
        """
        self._logger.info(
            'Started creating subdirectory: upload_type=%s, name=%s',
            upload_type,
            name,
        )

        if not leaf_name(name):
            self._logger.info('Subdirectory name is empty - creation aborted.')
            return OperationResult.failed(
                'Subdirectory name is an empty string - action aborted.',
                ErrorKind.VALIDATION,
            )

        try:
            root = self._resolver.root_for(upload_type)
        except UploadTypeConfigurationError:
            self._logger.info('Unknown upload type - creation aborted.')
            return OperationResult.failed(
                'You need to select a valid upload type!',
                ErrorKind.VALIDATION,
            )

        if not self._resolver.is_within_root(root, name):
            self._logger.info('Subdirectory escapes upload type root.')
            return OperationResult.failed(
                'Subdirectory must be located inside upload type folder.',
                ErrorKind.VALIDATION,
            )

        subdirectory_path = self._resolver.subdirectory_path(root, name)
        if os.path.lexists(subdirectory_path):
            self._logger.info('Subdirectory with this name already exists.')
            return OperationResult.failed(
                'Subdirectory with this name for selected upload type '
                'already exists.',
                ErrorKind.VALIDATION,
            )

        try:
            os.mkdir(subdirectory_path, _FOLDER_MODE)
        except OSError:
            self._logger.exception(
                'Exception was thrown while creating folder: %s',
                subdirectory_path,
            )
            return OperationResult.failed(
                'There was an error while trying to create new folder '
                'for given upload type.',
                ErrorKind.IO_FAILURE,
            )

        self._logger.info(
            'Finished creating subdirectory: %s',
            subdirectory_path,
        )
        return OperationResult.ok(
            'Subdirectory for selected upload type has been successfully '
            'created.',
            path=subdirectory_path,
        )

    def remove(
        self,
        upload_type: str | None,
        relative_path: str | None,
    ) -> OperationResult:
        """Remove subdirectory with everything inside it.

        Deletion is not atomic: if it fails midway, the already deleted
        part stays deleted.

        Args:
            upload_type: Upload type identifier.
            relative_path: Subdirectory path relative to the root.

        Returns:
            OperationResult of the removal.
        """
        subdirectory_name = leaf_name(relative_path)
        self._logger.info(
            'Started removing folder: upload_type=%s, subdirectory_name=%s, '
            'path=%s',
            upload_type,
            subdirectory_name,
            relative_path,
        )

        if not subdirectory_name:
            return OperationResult.failed(
                'Cannot remove main folder!',
                ErrorKind.VALIDATION,
            )

        if not upload_type:
            return OperationResult.failed(
                'You need to select upload type!',
                ErrorKind.VALIDATION,
            )

        try:
            root = self._resolver.root_for(upload_type)
        except UploadTypeConfigurationError:
            self._logger.info('Unknown upload type - removal aborted.')
            return OperationResult.failed(
                'You need to select a valid upload type!',
                ErrorKind.VALIDATION,
            )

        if not self._resolver.is_within_root(root, relative_path):
            self._logger.info('Removed folder escapes upload type root.')
            return OperationResult.failed(
                'Cannot remove folders outside of upload type folder!',
                ErrorKind.VALIDATION,
            )

        if not self._resolver.exists(root, relative_path):
            self._logger.info(
                'Removed folder does not exist - removal aborted.',
            )
            return OperationResult.failed(
                'This subdirectory does not exist for current upload type.',
                ErrorKind.NOT_FOUND,
            )

        subdirectory_path = self._resolver.subdirectory_path(
            root,
            relative_path,
        )
        try:
            shutil.rmtree(subdirectory_path)
        except OSError:
            self._logger.exception(
                'Could not remove folder: %s',
                subdirectory_path,
            )
            return OperationResult.failed(
                'There was an error when trying to remove subdirectory!',
                ErrorKind.IO_FAILURE,
            )

        self._logger.info('Finished removing folder: %s', subdirectory_path)
        return OperationResult.ok(
            'Subdirectory has been successfully removed.',
            path=subdirectory_path,
        )

    def rename(  # noqa: WPS212, WPS231
        self,
        upload_type: str | None,
        current_relative_path: str | None,
        new_name: str | None,
    ) -> OperationResult:
        """Rename subdirectory, keeping it under the same parent.

        Checks run in a fixed order and the first failing one wins.

        Args:
            upload_type: Upload type identifier.
            current_relative_path: Subdirectory path relative to the root.
            new_name: New folder name (single path component).

        Returns:
            OperationResult with the renamed path on success.
        """
        current_name = leaf_name(current_relative_path)
        self._logger.info(
            'Started renaming subdirectory: upload_type=%s, '
            'current_name=%s, new_name=%s, path=%s',
            upload_type,
            current_name,
            new_name,
            current_relative_path,
        )

        if current_name == new_name:
            self._logger.info(
                'Subdirectory name will not change - renaming aborted.',
            )
            return OperationResult.failed(
                'You are trying to change folder name to the same that '
                'there already is - action aborted.',
                ErrorKind.VALIDATION,
            )

        if not new_name:
            self._logger.info(
                'Subdirectory new name is an empty string - renaming aborted.',
            )
            return OperationResult.failed(
                'New name is an empty string - action aborted.',
                ErrorKind.VALIDATION,
            )

        if not current_name:
            self._logger.info(
                'Subdirectory current name is an empty string - '
                'renaming aborted.',
            )
            return OperationResult.failed(
                'Current name is an empty string - action aborted.',
                ErrorKind.VALIDATION,
            )

        if not upload_type:
            self._logger.info(
                'Upload type has not been provided - renaming aborted.',
            )
            return OperationResult.failed(
                'Upload type is an empty string - action aborted.',
                ErrorKind.VALIDATION,
            )

        try:
            root = self._resolver.root_for(upload_type)
        except UploadTypeConfigurationError:
            self._logger.info('Unknown upload type - renaming aborted.')
            return OperationResult.failed(
                'Upload type is not configured - action aborted.',
                ErrorKind.VALIDATION,
            )

        current_path = self._resolver.subdirectory_path(
            root,
            current_relative_path,
        )
        if not os.path.exists(current_path):
            self._logger.info(
                'Target directory for which user tried to change name '
                'does not exist.',
            )
            return OperationResult.failed(
                'Target directory for which You try to change name '
                'does not exist.',
                ErrorKind.NOT_FOUND,
            )

        if not self._resolver.exists(root, current_relative_path):
            self._logger.info('Subdirectory with this name does not exist!')
            return OperationResult.failed(
                'Subdirectory with this name does not exist!',
                ErrorKind.NOT_FOUND,
            )

        within_root = self._resolver.is_within_root(
            root,
            current_relative_path,
        )
        if not within_root or not is_plain_name(new_name):
            self._logger.info(
                'Subdirectory path or new name is not allowed - '
                'renaming aborted.',
            )
            return OperationResult.failed(
                'New name must be a single folder name inside upload type '
                'folder - action aborted.',
                ErrorKind.VALIDATION,
            )

        parent_path = current_path.parent
        new_path = self._resolver.subdirectory_path(parent_path, new_name)
        if self._resolver.exists(parent_path, new_name):
            self._logger.info(
                'Subdirectory with this name already exists - '
                'renaming aborted.',
            )
            return OperationResult.failed(
                'Cannot change subdirectory name! Subdirectory with this '
                'name already exist.',
                ErrorKind.VALIDATION,
            )

        try:
            os.rename(current_path, new_path)
        except OSError:
            self._logger.exception(
                'Exception was thrown while renaming folder: %s -> %s',
                current_path,
                new_path,
            )
            return OperationResult.failed(
                'There was an error when renaming the folder! Most likely '
                'due to unallowed characters used in name.',
                ErrorKind.IO_FAILURE,
            )

        self._logger.info(
            'Finished renaming subdirectory: %s -> %s',
            current_path,
            new_path,
        )
        return OperationResult.ok(
            'Folder name has been successfully changed.',
            path=new_path,
        )
