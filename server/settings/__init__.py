"""
Main settings file.

Settings are split into components with ``django-split-settings``.
Environment specific values are read by ``python-decouple``.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/uploads.py',
)
