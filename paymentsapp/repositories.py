import threading
import time

from .models import Payment


class TransactionIdGenerator:
    """
    Time based transaction ids that never repeat within the process.

    Each id uses the wall clock in nanoseconds, bumped past the previous id
    when the clock has not moved on (coarse clocks, fast callers).
    """

    def __init__(self, prefix='TXN', clock=time.time_ns):
        self.prefix = prefix
        self.clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            stamp = max(self.clock(), self._last + 1)
            self._last = stamp
        return f'{self.prefix}-{stamp}'


new_transaction_id = TransactionIdGenerator()


class PaymentRepository:

    model = Payment

    def queryset(self):
        return self.model.objects.all()

    def get(self, payment_id):
        try:
            return self.queryset().get(pk=payment_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def add(self, payment):
        payment.full_clean()
        payment.save()
        return payment

    def all(self):
        return self.queryset().order_by('-created_at', '-id')

    def for_rentals(self, rental_ids):
        return self.all().filter(rental_id__in=list(rental_ids))

    def save(self, payment, fields):
        # the rental may have been deleted since, so it is not revalidated
        payment.full_clean(exclude=['rental'])
        payment.save(update_fields=list(fields) + ['updated_at'])
        return payment

    def delete(self, payment):
        payment.delete()
