from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

MIN_WATCH_YEAR = 1000

CONDITION_CHOICES = (
    ('New', 'New'),
    ('Excellent', 'Excellent'),
    ('Good', 'Good'),
    ('Fair', 'Fair'),
    ('Poor', 'Poor'),
)
CONDITIONS = [value for value, _ in CONDITION_CHOICES]


def normalize_condition(value):
    """Title-case a condition so 'excellent' and 'EXCELLENT' both store as 'Excellent'."""
    if value is None:
        return value
    return str(value).strip().title()


def current_year():
    return timezone.now().year


class Brand(models.Model):

    brand_name = models.CharField(max_length=100, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['brand_name']

    def __str__(self):
        return self.brand_name


class Watch(models.Model):

    brand = models.ForeignKey(
        Brand,
        on_delete=models.PROTECT,
        related_name='watches'
    )

    model = models.CharField(max_length=255)
    year = models.PositiveIntegerField(validators=[MinValueValidator(MIN_WATCH_YEAR)])
    rental_day_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default='Good')
    quantity = models.PositiveIntegerField(default=1)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='watch_quantity_non_negative',
            ),
        ]

    @property
    def in_stock(self):
        return self.quantity > 0

    def __str__(self):
        return f"{self.brand} {self.model} ({self.year})"
