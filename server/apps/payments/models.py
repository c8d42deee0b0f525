"""Database models for payments app."""

from typing import Final, final, override

from django.db import models

_NAME_MAX_LENGTH: Final = 255


@final
class Bill(models.Model):
    """Bill planned for a period of time.

    A plain record: the planned amount is what the user expects to pay
    between ``start_date`` and ``end_date``.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    information = models.TextField(
        blank=True,
        default='',
        help_text='Free-form notes about the bill',
    )

    start_date = models.DateField()
    end_date = models.DateField()

    planned_amount = models.IntegerField(
        help_text='Amount planned to be paid in the period',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Bill'  # type: ignore[mutable-override]
        verbose_name_plural = 'Bills'  # type: ignore[mutable-override]
        ordering = ['-start_date']

        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F('start_date')),
                name='bill_end_after_start',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.name} ({self.start_date} - {self.end_date})'
