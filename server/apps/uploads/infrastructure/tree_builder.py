"""Directory tree snapshots.

A directory tree is a nested dict of directories only, files are never
represented. Leaves are empty dicts:

    {'/upload/images/2024': {'/upload/images/2024/summer': {}}}

Trees are recomputed on every call, nothing is cached.
"""

import logging
import os
from collections.abc import Iterable
from typing import TypeAlias

logger = logging.getLogger(__name__)

DirectoryTree: TypeAlias = dict[str, 'DirectoryTree']

_Inode: TypeAlias = tuple[int, int]


def build_tree(
    root_path: str | os.PathLike[str],
    use_name_as_key: bool = False,
) -> DirectoryTree:
    """Build tree of directories below root_path.

    Entries are visited in name order. A directory that is already one of
    its own ancestors (symbolic link loop) or that cannot be listed is
    included as an empty leaf.

    Args:
        root_path: Directory to walk.
        use_name_as_key: Key nodes by folder name instead of full path.

    Returns:
        Nested dict of subdirectories, empty when there are none.

    Raises:
        OSError: If root_path itself cannot be listed.
    """
    root_stat = os.stat(root_path)
    return _walk(
        os.fspath(root_path),
        use_name_as_key,
        ancestors=frozenset({(root_stat.st_dev, root_stat.st_ino)}),
    )


def build_trees_for_many(
    root_paths: Iterable[str | os.PathLike[str]],
    use_name_as_key: bool = False,
) -> dict[str, DirectoryTree]:
    """Build trees for several roots independently.

    Args:
        root_paths: Directories to walk.
        use_name_as_key: Key nodes by folder name instead of full path.

    Returns:
        Root path (as given) -> its directory tree.
    """
    return {
        os.fspath(root_path): build_tree(root_path, use_name_as_key)
        for root_path in root_paths
    }


def _walk(
    path: str,
    use_name_as_key: bool,
    ancestors: frozenset[_Inode],
) -> DirectoryTree:
    tree: DirectoryTree = {}
    with os.scandir(path) as entries:
        directories = sorted(
            (entry for entry in entries if entry.is_dir()),
            key=lambda entry: entry.name,
        )

    for entry in directories:
        key = entry.name if use_name_as_key else entry.path
        try:
            entry_stat = entry.stat()
        except OSError:
            logger.warning('Could not stat directory: %s', entry.path)
            tree[key] = {}
            continue
        inode = (entry_stat.st_dev, entry_stat.st_ino)
        if inode in ancestors:
            logger.warning(
                'Directory loop detected, not descending: %s',
                entry.path,
            )
            tree[key] = {}
            continue
        try:
            tree[key] = _walk(entry.path, use_name_as_key, ancestors | {inode})
        except OSError:
            logger.warning('Could not list directory: %s', entry.path)
            tree[key] = {}
    return tree
