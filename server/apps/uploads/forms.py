"""Forms decoding subdirectory management requests."""

from typing import Final

from django import forms

from server.apps.uploads.infrastructure.path_resolver import get_upload_types

_NAME_MAX_LENGTH: Final = 255
_PATH_MAX_LENGTH: Final = 4096


def _upload_type_choices() -> list[tuple[str, str]]:
    """Get choices for upload type fields.

    Evaluated on every render so overridden settings are picked up.

    Returns:
        (identifier, label) pairs in configuration order.
    """
    return [
        (upload_type, upload_type.replace('_', ' ').capitalize())
        for upload_type in get_upload_types()
    ]


class CreateSubdirectoryForm(forms.Form):
    """Create a subdirectory in an upload type."""

    upload_type = forms.ChoiceField(choices=_upload_type_choices)
    subdirectory_name = forms.CharField(max_length=_NAME_MAX_LENGTH)


class RenameSubdirectoryForm(forms.Form):
    """Rename an existing subdirectory."""

    upload_type = forms.ChoiceField(choices=_upload_type_choices)
    subdirectory_current_path = forms.CharField(
        max_length=_PATH_MAX_LENGTH,
        help_text='Path relative to the upload type folder',
    )
    subdirectory_new_name = forms.CharField(max_length=_NAME_MAX_LENGTH)


class RemoveSubdirectoryForm(forms.Form):
    """Remove a subdirectory with all its content."""

    upload_type = forms.ChoiceField(choices=_upload_type_choices)
    subdirectory_current_path = forms.CharField(
        max_length=_PATH_MAX_LENGTH,
        help_text='Path relative to the upload type folder',
    )


class MoveSubdirectoryDataForm(forms.Form):
    """Move or copy subdirectory data to another upload type."""

    current_upload_type = forms.ChoiceField(choices=_upload_type_choices)
    current_subdirectory_name = forms.CharField(max_length=_PATH_MAX_LENGTH)
    target_upload_type = forms.ChoiceField(choices=_upload_type_choices)
    target_subdirectory_name = forms.CharField(max_length=_PATH_MAX_LENGTH)
    remove_current_folder = forms.BooleanField(
        required=False,
        help_text='Remove current folder after copying its data',
    )

    def clean(self) -> dict[str, object]:
        """Reject moving a subdirectory onto itself.

        Returns:
            Cleaned data.

        Raises:
            ValidationError: If source and target are the same folder.
        """
        cleaned_data = super().clean()
        same_type = (
            cleaned_data.get('current_upload_type') ==
            cleaned_data.get('target_upload_type')
        )
        same_name = (
            cleaned_data.get('current_subdirectory_name') ==
            cleaned_data.get('target_subdirectory_name')
        )
        if same_type and same_name:
            raise forms.ValidationError(
                'Current and target subdirectory are the same folder.',
            )
        return cleaned_data
