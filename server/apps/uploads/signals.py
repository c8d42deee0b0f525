"""Signal handlers for uploads app."""

import logging

from django.core.signals import setting_changed
from django.dispatch import receiver

from server.apps.uploads.infrastructure.path_resolver import get_upload_types

logger = logging.getLogger(__name__)

_UPLOAD_TYPES_SETTING = 'UPLOAD_TYPES'


@receiver(setting_changed)
def reset_upload_types(
    sender: object,
    setting: str,
    **kwargs: object,
) -> None:
    """Drop the cached upload types when the setting changes.

    Settings only change at runtime under ``override_settings`` in tests,
    the production process reads the mapping once.

    Args:
        sender: Signal sender.
        setting: Name of the changed setting.
        **kwargs: Additional signal arguments.
    """
    if setting != _UPLOAD_TYPES_SETTING:
        return

    logger.debug('Upload setting %s changed, clearing cache', setting)
    get_upload_types.cache_clear()
