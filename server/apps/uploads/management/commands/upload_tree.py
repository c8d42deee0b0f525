"""Management command to print directory trees of upload types."""

import json
import logging
from typing import Any, final, override

from django.core.management.base import BaseCommand, CommandError

from server.apps.uploads.exceptions import UploadTypeConfigurationError
from server.apps.uploads.infrastructure.path_resolver import PathResolver
from server.apps.uploads.infrastructure.tree_builder import (
    DirectoryTree,
    build_tree,
)

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Print subdirectory trees of upload type roots as JSON."""

    help = 'Print subdirectory trees of configured upload types as JSON'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'upload_types',
            nargs='*',
            help='Upload types to print (default: all configured)',
        )
        parser.add_argument(
            '--names',
            action='store_true',
            help='Key folders by name instead of full path',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If an unknown upload type is requested.
        """
        resolver = PathResolver.from_settings()
        upload_types = options['upload_types'] or list(resolver.upload_types)

        trees: dict[str, DirectoryTree] = {}
        for upload_type in upload_types:
            try:
                root = resolver.root_for(upload_type)
            except UploadTypeConfigurationError as error:
                raise CommandError(str(error)) from error

            if not root.is_dir():
                self.stderr.write(
                    f'Skipping {upload_type}: {root} is not a directory',
                )
                continue

            logger.debug('Building tree for %s: %s', upload_type, root)
            trees[upload_type] = build_tree(root, options['names'])

        self.stdout.write(json.dumps(trees, indent=2))
