"""Upload directories settings.

Every upload type is a named category of uploaded content with its own
root directory. The mapping is read once per process, see
``server.apps.uploads.infrastructure.path_resolver.get_upload_types``.
"""

from decouple import Csv

from server.settings.components import BASE_DIR, config

# Parent directory of all upload type roots
UPLOAD_ROOT = BASE_DIR.joinpath(config('UPLOAD_ROOT', default='upload'))

# Upload type identifier -> root directory
UPLOAD_TYPES = {
    upload_type: UPLOAD_ROOT.joinpath(upload_type)
    for upload_type in config(
        'UPLOAD_TYPE_NAMES',
        cast=Csv(),
        default='images,files',
    )
}

# What to do with same-named files when moving data into an existing
# subdirectory: 'overwrite', 'skip' or 'fail'
UPLOAD_MOVE_CONFLICT_POLICY = config(
    'UPLOAD_MOVE_CONFLICT_POLICY',
    default='overwrite',
)
