from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


def stamp_payment_date(payment, previous_status=None, now=None):
    """
    Set ``payment_date`` when the payment moves into Completed.

    ``previous_status`` is the status before the write; ``None`` means the
    payment is new. Staying in Completed keeps the original date.
    """
    if payment.payment_status == Payment.STATUS_COMPLETED and previous_status != Payment.STATUS_COMPLETED:
        payment.payment_date = now or timezone.now()
    return payment


class Payment(models.Model):

    STATUS_PENDING = 'Pending'
    STATUS_COMPLETED = 'Completed'
    STATUS_FAILED = 'Failed'
    STATUS_REFUNDED = 'Refunded'

    PAYMENT_STATUS = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_REFUNDED, 'Refunded'),
    )

    PAYMENT_METHODS = (
        ('Credit Card', 'Credit Card'),
        ('PayPal', 'PayPal'),
        ('Bank Transfer', 'Bank Transfer'),
        ('Cash', 'Cash'),
    )

    # Payments outlive the rental they settle
    rental = models.ForeignKey(
        'rentalsapp.Rental',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='payments'
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS, default=STATUS_PENDING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHODS, default='Credit Card')
    transaction_id = models.CharField(max_length=100, blank=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    comment = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name='payment_amount_non_negative',
            ),
        ]

    def clean(self):
        if self.payment_status == self.STATUS_COMPLETED and not (self.transaction_id or '').strip():
            raise ValidationError(
                {'transaction_id': 'Transaction ID is required for completed payments.'}
            )

    def __str__(self):
        return f"Payment {self.pk} of {self.amount} for rental {self.rental_id}"
