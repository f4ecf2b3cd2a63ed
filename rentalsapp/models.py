import math

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Rental(models.Model):

    STATUS_PENDING = 'Pending'
    STATUS_ACTIVE = 'Active'
    STATUS_COMPLETED = 'Completed'

    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
    )

    COLLECTION_CHOICES = (
        ('Pickup', 'Pickup'),
        ('Delivery', 'Delivery'),
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rentals'
    )

    # The watch may be deleted while rentals still point at it
    watch = models.ForeignKey(
        'watchesapp.Watch',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='rentals'
    )

    rental_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    rental_start_date = models.DateTimeField(default=timezone.now)
    rental_end_date = models.DateTimeField()
    total_rental_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )

    rental_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    collection_mode = models.CharField(max_length=20, choices=COLLECTION_CHOICES, default='Pickup')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rental_end_date__gte=models.F('rental_start_date')),
                name='rental_end_after_start',
            ),
            models.CheckConstraint(
                condition=models.Q(total_rental_price__gte=0),
                name='rental_price_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(rental_days__gte=1),
                name='rental_days_at_least_one',
            ),
        ]

    def clean(self):
        if self.rental_start_date and self.rental_end_date and self.rental_end_date < self.rental_start_date:
            raise ValidationError(
                {'rental_end_date': 'Rental end date must be after or equal to the start date.'}
            )

    @property
    def duration_days(self):
        if not self.rental_start_date or not self.rental_end_date:
            return 0
        seconds = (self.rental_end_date - self.rental_start_date).total_seconds()
        return math.ceil(seconds / 86400)

    def __str__(self):
        return f"Rental {self.pk} of watch {self.watch_id} by user {self.user_id}"
