"""Forms for payments app."""

from typing import Any, Final

from django import forms

from server.apps.payments.models import Bill

_DATE_FORMAT: Final = '%Y-%m-%d'

_DATEPICKER_ATTRS: Final = {
    'data-provide': 'datepicker',
    'data-date-format': 'yyyy-mm-dd',
    'data-date-today-highlight': 'true',
    'autocomplete': 'off',
}


class BillForm(forms.ModelForm):
    """Create or edit a bill."""

    class Meta:
        """Form metadata."""

        model = Bill
        fields = (
            'start_date',
            'end_date',
            'name',
            'information',
            'planned_amount',
        )
        widgets = {
            'start_date': forms.DateInput(
                format=_DATE_FORMAT,
                attrs=_DATEPICKER_ATTRS,
            ),
            'end_date': forms.DateInput(
                format=_DATE_FORMAT,
                attrs=_DATEPICKER_ATTRS,
            ),
        }

    def clean(self) -> dict[str, Any]:
        """Check that the period does not end before it starts.

        Returns:
            Cleaned data.
        """
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')
        if start_date and end_date and end_date < start_date:
            self.add_error('end_date', 'End date cannot be before start date.')
        return cleaned_data
