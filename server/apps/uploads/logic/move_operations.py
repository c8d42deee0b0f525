"""Business logic for moving subdirectory data between upload types.

Data is copied first and the source is removed afterwards, so a failure
never loses data: at worst it exists in both places. When the target
subdirectory already exists the two trees are merged, same-named files
are resolved by a ``MergePolicy``. A name that is a file on one side and
a folder on the other refuses the move before anything is copied.
"""

import enum
import errno
import logging
import os
import shutil
from collections.abc import Iterator
from pathlib import Path
from typing import final

from django.conf import settings

from server.apps.uploads.exceptions import UploadTypeConfigurationError
from server.apps.uploads.infrastructure.path_resolver import (
    PathResolver,
    leaf_name,
)
from server.apps.uploads.logic.results import ErrorKind, OperationResult

logger = logging.getLogger(__name__)


class MergePolicy(enum.StrEnum):
    """What to do with a file that already exists in the target."""

    OVERWRITE = 'overwrite'
    SKIP = 'skip'
    FAIL = 'fail'

    @classmethod
    def from_settings(cls) -> 'MergePolicy':
        """Get policy configured by ``UPLOAD_MOVE_CONFLICT_POLICY``.

        Returns:
            Configured MergePolicy, OVERWRITE when unset.

        Raises:
            ValueError: If the setting holds an unknown policy.
        """
        configured = getattr(settings, 'UPLOAD_MOVE_CONFLICT_POLICY', None)
        return cls(configured or cls.OVERWRITE)


@final
class CrossTypeMover:
    """Copies or moves a subdirectory from one upload type to another."""

    def __init__(
        self,
        resolver: PathResolver,
        merge_policy: MergePolicy = MergePolicy.OVERWRITE,
        operation_logger: logging.Logger | None = None,
    ) -> None:
        """Initialize mover.

        Args:
            resolver: Resolver for upload type roots.
            merge_policy: Policy for same-named files in existing targets.
            operation_logger: Logger for the audit trail of operations,
                module logger by default.
        """
        self._resolver = resolver
        self._merge_policy = merge_policy
        self._logger = operation_logger or logger

    @property
    def merge_policy(self) -> MergePolicy:
        """Get policy for same-named files."""
        return self._merge_policy

    def move_data(  # noqa: WPS211, WPS212, WPS231
        self,
        current_upload_type: str | None,
        target_upload_type: str | None,
        current_subdirectory_name: str | None,
        target_subdirectory_name: str | None,
        remove_current: bool = False,
    ) -> OperationResult:
        """Copy subdirectory contents to another upload type.

        The target subdirectory is created when missing. With
        ``remove_current`` the source is deleted after a successful copy;
        if that deletion fails the result is a partial success.

        Args:
            current_upload_type: Source upload type.
            target_upload_type: Target upload type.
            current_subdirectory_name: Source path relative to its root.
            target_subdirectory_name: Target path relative to its root.
            remove_current: Delete the source after copying.

        Returns:
            OperationResult with the target path unless the move failed.
        """
        self._logger.info(
            'Started moving data: current_upload_type=%s, '
            'target_upload_type=%s, current_subdirectory=%s, '
            'target_subdirectory=%s, remove_current=%s, policy=%s',
            current_upload_type,
            target_upload_type,
            current_subdirectory_name,
            target_subdirectory_name,
            remove_current,
            self._merge_policy,
        )

        if not current_upload_type or not target_upload_type:
            return OperationResult.failed(
                'You need to select both current and target upload type!',
                ErrorKind.VALIDATION,
            )

        source_name = leaf_name(current_subdirectory_name)
        target_name = leaf_name(target_subdirectory_name)
        if not source_name or not target_name:
            self._logger.info('Main folder selected - moving aborted.')
            return OperationResult.failed(
                'You need to select both current and target subdirectory, '
                'main folders cannot be moved!',
                ErrorKind.VALIDATION,
            )

        try:
            current_root = self._resolver.root_for(current_upload_type)
            target_root = self._resolver.root_for(target_upload_type)
        except UploadTypeConfigurationError as error:
            self._logger.info('Unknown upload type: %s', error.upload_type)
            return OperationResult.failed(
                'You need to select a valid upload type!',
                ErrorKind.VALIDATION,
            )

        within_roots = (
            self._resolver.is_within_root(
                current_root,
                current_subdirectory_name,
            ) and
            self._resolver.is_within_root(
                target_root,
                target_subdirectory_name,
            )
        )
        if not within_roots:
            self._logger.info('Subdirectory escapes upload type root.')
            return OperationResult.failed(
                'Subdirectories must be located inside upload type folders!',
                ErrorKind.VALIDATION,
            )

        source_path = self._resolver.subdirectory_path(
            current_root,
            current_subdirectory_name,
        )
        target_path = self._resolver.subdirectory_path(
            target_root,
            target_subdirectory_name,
        )

        if not self._resolver.exists(current_root, current_subdirectory_name):
            self._logger.info('Source folder does not exist - moving aborted.')
            return OperationResult.failed(
                'This subdirectory does not exist for current upload type.',
                ErrorKind.NOT_FOUND,
            )

        if _is_same_or_nested(source_path, target_path):
            self._logger.info('Target is inside source - moving aborted.')
            return OperationResult.failed(
                'Target subdirectory cannot be the current one or be '
                'located inside it!',
                ErrorKind.VALIDATION,
            )

        if os.path.exists(target_path) and not os.path.isdir(target_path):
            return OperationResult.failed(
                'Target subdirectory name is already used by a file!',
                ErrorKind.VALIDATION,
            )

        try:
            refusal = self._check_merge(source_path, target_path)
        except OSError:
            self._logger.exception('Could not read folder: %s', source_path)
            return OperationResult.failed(
                'There was an error while reading current folder, nothing '
                'has been copied.',
                ErrorKind.IO_FAILURE,
            )
        if refusal is not None:
            return refusal

        try:
            copied = merge_tree(source_path, target_path, self._merge_policy)
        except OSError:
            self._logger.exception(
                'Could not copy data: %s -> %s',
                source_path,
                target_path,
            )
            return OperationResult.failed(
                'There was an error while copying data, some files might '
                'have been copied already.',
                ErrorKind.IO_FAILURE,
            )

        self._logger.info(
            'Copied %d files: %s -> %s',
            copied,
            source_path,
            target_path,
        )

        if not remove_current:
            return OperationResult.ok(
                'Data has been successfully copied.',
                path=target_path,
            )

        try:
            shutil.rmtree(source_path)
        except OSError:
            self._logger.exception(
                'Could not remove current folder after copy: %s',
                source_path,
            )
            return OperationResult.partial(
                'Data has been copied, but current folder could not be '
                'removed.',
                ErrorKind.IO_FAILURE,
                path=target_path,
            )

        self._logger.info('Finished moving data, removed: %s', source_path)
        return OperationResult.ok(
            'Data has been successfully moved.',
            path=target_path,
        )

    def _check_merge(
        self,
        source_path: Path,
        target_path: Path,
    ) -> OperationResult | None:
        """Find reasons to refuse merging source into target.

        Args:
            source_path: Source subdirectory.
            target_path: Target subdirectory.

        Returns:
            Failure result, or None when copying can start.

        Raises:
            OSError: If source cannot be walked.
        """
        clashes = find_type_clashes(source_path, target_path)
        if clashes:
            self._logger.info(
                'Found %d file and folder name clashes - moving aborted.',
                len(clashes),
            )
            return OperationResult.failed(
                'Target subdirectory has folders and files with the same '
                'names: {names}'.format(names=', '.join(sorted(clashes))),
                ErrorKind.VALIDATION,
            )

        if self._merge_policy is not MergePolicy.FAIL:
            return None

        conflicts = find_conflicts(source_path, target_path)
        if not conflicts:
            return None

        self._logger.info(
            'Found %d conflicting files - moving aborted.',
            len(conflicts),
        )
        return OperationResult.failed(
            'Target subdirectory already contains files with the '
            'same names: {names}'.format(
                names=', '.join(sorted(conflicts)),
            ),
            ErrorKind.VALIDATION,
        )


def merge_tree(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
    policy: MergePolicy = MergePolicy.OVERWRITE,
) -> int:
    """Copy source tree into target, merging with what is there.

    Directories are combined, never replaced. A file that exists in both
    places is overwritten or kept according to ``policy``; with
    ``MergePolicy.FAIL`` callers are expected to check
    ``find_conflicts`` first, remaining conflicts are overwritten.
    Symbolic links in source are followed and their content is copied.
    A link back to one of its own ancestors is not copied.

    Args:
        source: Directory to copy from.
        target: Directory to copy into, created when missing.
        policy: Policy for same-named files.

    Returns:
        Number of files copied.

    Raises:
        IsADirectoryError: If a source file meets a target directory.
        OSError: If any filesystem call fails. Already copied files stay.
    """
    copied = 0
    for dirpath, relative, filenames in _walk_source(source):
        target_dir = Path(target) / relative
        os.makedirs(target_dir, exist_ok=True)

        for filename in filenames:
            destination = target_dir / filename
            if os.path.isdir(destination):
                raise IsADirectoryError(
                    errno.EISDIR,
                    'Cannot replace directory with a file',
                    os.fspath(destination),
                )
            if os.path.lexists(destination):
                if policy is MergePolicy.SKIP:
                    logger.debug('Skipping existing file: %s', destination)
                    continue
                if os.path.islink(destination):
                    # copy2 would write through the link
                    os.unlink(destination)
            shutil.copy2(os.path.join(dirpath, filename), destination)
            copied += 1
    return copied


def find_conflicts(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
) -> list[str]:
    """Find files present in both trees.

    Args:
        source: Directory that would be copied.
        target: Directory it would be copied into.

    Returns:
        Conflicting paths relative to source, empty when target is missing.
    """
    if not os.path.isdir(target):
        return []

    conflicts = []
    for _, relative, filenames in _walk_source(source):
        for filename in filenames:
            if os.path.lexists(os.path.join(target, relative, filename)):
                conflicts.append(
                    os.path.normpath(os.path.join(relative, filename)),
                )
    return conflicts


def find_type_clashes(
    source: str | os.PathLike[str],
    target: str | os.PathLike[str],
) -> list[str]:
    """Find paths that are a file in one tree and a folder in the other.

    Such paths cannot be merged by any policy.

    Args:
        source: Directory that would be copied.
        target: Directory it would be copied into.

    Returns:
        Clashing paths relative to source, empty when target is missing.
    """
    if not os.path.isdir(target):
        return []

    clashes = []
    for _, relative, filenames in _walk_source(source):
        target_dir = os.path.join(target, relative)
        if os.path.lexists(target_dir) and not os.path.isdir(target_dir):
            clashes.append(relative)
            continue
        clashes.extend(
            os.path.normpath(os.path.join(relative, filename))
            for filename in filenames
            if os.path.isdir(os.path.join(target_dir, filename))
        )
    return clashes


def _walk_source(
    source: str | os.PathLike[str],
) -> Iterator[tuple[str, str, list[str]]]:
    """Walk source tree in name order, following symbolic links.

    Yields:
        (directory path, path relative to source, sorted file names).

    Raises:
        OSError: If any directory cannot be listed.
    """
    top = os.fspath(source)
    top_stat = os.stat(top)
    ancestors = {top: frozenset({(top_stat.st_dev, top_stat.st_ino)})}

    walk = os.walk(top, onerror=_reraise, followlinks=True)
    for dirpath, dirnames, filenames in walk:
        chain = ancestors.pop(dirpath)
        kept = []
        for dirname in sorted(dirnames):
            subdirectory = os.path.join(dirpath, dirname)
            dir_stat = os.stat(subdirectory)
            inode = (dir_stat.st_dev, dir_stat.st_ino)
            if inode in chain:
                logger.warning(
                    'Directory loop detected, not copying: %s',
                    subdirectory,
                )
                continue
            ancestors[subdirectory] = chain | {inode}
            kept.append(dirname)
        dirnames[:] = kept

        relative = os.path.normpath(os.path.relpath(dirpath, top))
        yield dirpath, relative, sorted(filenames)


def _reraise(error: OSError) -> None:
    raise error


def _is_same_or_nested(source: Path, target: Path) -> bool:
    resolved_source = source.resolve()
    resolved_target = target.resolve()
    return (
        resolved_target == resolved_source or
        resolved_source in resolved_target.parents
    )
