"""Views for managing upload type subdirectories."""

import logging
from http import HTTPStatus
from typing import Final

from django import forms
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from server.apps.uploads.forms import (
    CreateSubdirectoryForm,
    MoveSubdirectoryDataForm,
    RemoveSubdirectoryForm,
    RenameSubdirectoryForm,
)
from server.apps.uploads.infrastructure.path_resolver import PathResolver
from server.apps.uploads.infrastructure.tree_builder import (
    DirectoryTree,
    build_trees_for_many,
)
from server.apps.uploads.logic.directory_operations import (
    DirectoryLifecycleManager,
)
from server.apps.uploads.logic.move_operations import (
    CrossTypeMover,
    MergePolicy,
)
from server.apps.uploads.logic.results import OperationResult, Outcome

logger = logging.getLogger(__name__)

_ACTION_FIELD: Final = 'action'
_SETTINGS_TEMPLATE: Final = 'uploads/settings.html'
_SETTINGS_URL_NAME: Final = 'uploads:settings'

# Query string keys of the standalone endpoints
KEY_SUBDIRECTORY_CURRENT_PATH: Final = 'subdirectory_current_path'
KEY_SUBDIRECTORY_NEW_NAME: Final = 'subdirectory_new_name'

_FORMS: Final[dict[str, type[forms.Form]]] = {
    'create': CreateSubdirectoryForm,
    'rename': RenameSubdirectoryForm,
    'remove': RemoveSubdirectoryForm,
    'move': MoveSubdirectoryDataForm,
}

_MESSAGE_LEVELS: Final = {
    Outcome.SUCCESS: messages.SUCCESS,
    Outcome.PARTIAL_SUCCESS: messages.WARNING,
    Outcome.FAILURE: messages.ERROR,
}

_TreeNodes = list[tuple[str, '_TreeNodes']]


def message_level_for(result: OperationResult) -> int:
    """Map operation outcome to a flash message level.

    Args:
        result: Result of a subdirectory operation.

    Returns:
        One of ``django.contrib.messages`` levels.
    """
    return _MESSAGE_LEVELS[result.outcome]


@require_http_methods(['GET', 'POST'])
def upload_settings(request: HttpRequest) -> HttpResponse:
    """Display subdirectory management page and handle its forms.

    Every form posts an ``action`` field naming the operation. Valid
    submissions redirect back with a flash message, invalid ones render
    the page again with errors.

    Args:
        request: HTTP request.

    Returns:
        Rendered page or redirect.
    """
    bound_forms: dict[str, forms.Form] = {}

    if request.method == 'POST':
        action = request.POST.get(_ACTION_FIELD, '')
        form_class = _FORMS.get(action)
        if form_class is None:
            messages.error(request, 'Unknown action requested.')
            return redirect(_SETTINGS_URL_NAME)

        form = form_class(request.POST, auto_id=f'id_{action}_%s')
        if form.is_valid():
            result = _perform(action, form.cleaned_data)
            messages.add_message(
                request,
                message_level_for(result),
                result.message,
            )
            return redirect(_SETTINGS_URL_NAME)

        messages.error(request, 'Submitted form contains errors.')
        bound_forms[action] = form

    resolver = PathResolver.from_settings()
    context = {
        f'{name}_form': bound_forms.get(name) or empty_form_class(
            auto_id=f'id_{name}_%s',
        )
        for name, empty_form_class in _FORMS.items()
    }
    context['trees'] = _upload_type_trees(resolver)
    return render(request, _SETTINGS_TEMPLATE, context)


@require_POST
def remove_subdirectory(
    request: HttpRequest,
    upload_type: str,
) -> HttpResponse:
    """Remove subdirectory given in query string.

    Args:
        request: HTTP request.
        upload_type: Upload type identifier from URL.

    Returns:
        Plain response with result message and status.
    """
    if KEY_SUBDIRECTORY_CURRENT_PATH not in request.GET:
        return HttpResponse(
            'Subdirectory location is missing in request.',
            status=HTTPStatus.BAD_REQUEST,
        )

    result = _get_manager().remove(
        upload_type,
        request.GET[KEY_SUBDIRECTORY_CURRENT_PATH],
    )
    return HttpResponse(result.message, status=result.status_code)


@require_POST
def rename_subdirectory(
    request: HttpRequest,
    upload_type: str,
) -> HttpResponse:
    """Rename subdirectory given in query string.

    Args:
        request: HTTP request.
        upload_type: Upload type identifier from URL.

    Returns:
        Plain response with result message and status.
    """
    if KEY_SUBDIRECTORY_NEW_NAME not in request.GET:
        return HttpResponse(
            'Subdirectory new name is missing in request.',
            status=HTTPStatus.BAD_REQUEST,
        )

    if KEY_SUBDIRECTORY_CURRENT_PATH not in request.GET:
        return HttpResponse(
            'Subdirectory current name is missing in request.',
            status=HTTPStatus.BAD_REQUEST,
        )

    result = _get_manager().rename(
        upload_type,
        request.GET[KEY_SUBDIRECTORY_CURRENT_PATH],
        request.GET[KEY_SUBDIRECTORY_NEW_NAME],
    )
    return HttpResponse(result.message, status=result.status_code)


def _get_manager() -> DirectoryLifecycleManager:
    return DirectoryLifecycleManager(PathResolver.from_settings())


def _get_mover() -> CrossTypeMover:
    return CrossTypeMover(
        PathResolver.from_settings(),
        merge_policy=MergePolicy.from_settings(),
    )


def _perform(action: str, cleaned_data: dict[str, object]) -> OperationResult:
    """Run operation for a validated form.

    Args:
        action: Submitted action name.
        cleaned_data: Cleaned data of the matching form.

    Returns:
        Result of the operation.
    """
    logger.info('Handling subdirectory action: %s', action)
    if action == 'create':
        return _get_manager().create(
            cleaned_data['upload_type'],
            cleaned_data['subdirectory_name'],
        )
    if action == 'rename':
        return _get_manager().rename(
            cleaned_data['upload_type'],
            cleaned_data['subdirectory_current_path'],
            cleaned_data['subdirectory_new_name'],
        )
    if action == 'remove':
        return _get_manager().remove(
            cleaned_data['upload_type'],
            cleaned_data['subdirectory_current_path'],
        )
    return _get_mover().move_data(
        cleaned_data['current_upload_type'],
        cleaned_data['target_upload_type'],
        cleaned_data['current_subdirectory_name'],
        cleaned_data['target_subdirectory_name'],
        remove_current=cleaned_data['remove_current_folder'],
    )


def _upload_type_trees(
    resolver: PathResolver,
) -> list[tuple[str, _TreeNodes]]:
    """Build display trees of every existing upload type root.

    Args:
        resolver: Resolver for upload type roots.

    Returns:
        (upload type, nodes) pairs, nodes are (name, children) pairs.
    """
    roots = {
        upload_type: root
        for upload_type, root in resolver.upload_types.items()
        if root.is_dir()
    }
    trees = build_trees_for_many(roots.values(), use_name_as_key=True)
    return [
        (upload_type, _as_nodes(trees[str(root)]))
        for upload_type, root in roots.items()
    ]


def _as_nodes(tree: DirectoryTree) -> _TreeNodes:
    # Templates resolve dict keys before methods, folder names like
    # 'items' would shadow dict.items
    return [(name, _as_nodes(children)) for name, children in tree.items()]
