"""Django app configuration for uploads app."""

from typing import override

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured


class UploadsConfig(AppConfig):
    """Configuration for uploads app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.uploads'
    verbose_name = 'Uploads'

    @override
    def ready(self) -> None:
        """Import signal handlers and validate move conflict policy.

        Raises:
            ImproperlyConfigured: If ``UPLOAD_MOVE_CONFLICT_POLICY`` names
                an unknown policy.
        """
        from server.apps.uploads import signals  # noqa: F401
        from server.apps.uploads.logic.move_operations import MergePolicy

        try:
            MergePolicy.from_settings()
        except ValueError as error:
            raise ImproperlyConfigured(
                'UPLOAD_MOVE_CONFLICT_POLICY must be one of: {choices}'.format(
                    choices=', '.join(MergePolicy),
                ),
            ) from error
