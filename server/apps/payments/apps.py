"""Django app configuration for payments app."""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for payments app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.payments'
    verbose_name = 'Payments'
