"""Django admin configuration for payments app."""

from django.contrib import admin

from server.apps.payments.forms import BillForm
from server.apps.payments.models import Bill


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin[Bill]):
    """Admin interface for Bill model."""

    form = BillForm

    list_display = [
        'name',
        'start_date',
        'end_date',
        'planned_amount',
    ]

    list_filter = [
        'start_date',
    ]

    search_fields = [
        'name',
        'information',
    ]

    readonly_fields = [
        'created_at',
        'modified_at',
    ]

    fieldsets = (
        ('Bill', {
            'fields': ('name', 'information', 'planned_amount'),
        }),
        ('Period', {
            'fields': ('start_date', 'end_date'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'modified_at'),
        }),
    )
