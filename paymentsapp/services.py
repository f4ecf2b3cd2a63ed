"""
Payment processing.

A payment settles one rental. Users pay for their own rentals; only admins
change a payment afterwards. Payments and rentals keep independent statuses.
"""

import logging
from decimal import Decimal, InvalidOperation

from timeless.errors import NotFoundError, ValidationError, is_blank, require_fields
from timeless.policy import CREATE, LIST_OWN, READ, authorize, require_admin
from rentalsapp.repositories import RentalRepository
from .models import Payment, stamp_payment_date
from .repositories import PaymentRepository, new_transaction_id

logger = logging.getLogger(__name__)

PAYMENT_METHODS = [value for value, _ in Payment.PAYMENT_METHODS]
PAYMENT_STATUSES = [value for value, _ in Payment.PAYMENT_STATUS]

# largest value the amount column (12 digits, 2 decimal places) holds
MAX_AMOUNT = Decimal('9999999999.99')


def parse_amount(value):
    if isinstance(value, bool):
        raise ValidationError('amount must be a number')
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError('amount must be a number')

    if not amount.is_finite():
        raise ValidationError('amount must be a number')
    if amount < 0:
        raise ValidationError('amount must be greater than or equal to 0')
    if amount > MAX_AMOUNT:
        raise ValidationError(f'amount must be less than or equal to {MAX_AMOUNT}')
    return amount.quantize(Decimal('0.01'))


class PaymentService:

    def __init__(self, payments=None, rentals=None, transaction_ids=None):
        self.payments = payments or PaymentRepository()
        self.rentals = rentals or RentalRepository()
        self.transaction_ids = transaction_ids or new_transaction_id

    def owner_of(self, payment):
        rental = self.rentals.get(payment.rental_id)
        return rental.user_id if rental is not None else None

    def create_payment(self, actor, rental_id, amount, payment_method, transaction_id=None, comment=None):
        authorize(actor, CREATE)
        require_fields(
            {'rental_id': rental_id, 'amount': amount, 'payment_method': payment_method},
            ['rental_id', 'amount', 'payment_method'],
        )
        amount = parse_amount(amount)
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Invalid payment method. Use one of: {', '.join(PAYMENT_METHODS)}"
            )

        rental = self.rentals.get(rental_id)
        if rental is None:
            raise NotFoundError('Rental not found')

        authorize(actor, READ, rental.user_id, message='Not authorized to pay for this rental')

        payment = Payment(
            rental_id=rental.pk,
            amount=amount,
            payment_method=payment_method,
            payment_status=Payment.STATUS_COMPLETED,
            transaction_id=('' if is_blank(transaction_id) else str(transaction_id).strip()) or self.transaction_ids(),
            comment='' if is_blank(comment) else str(comment).strip(),
        )
        stamp_payment_date(payment)
        self.payments.add(payment)

        logger.info(
            'Payment %s of %s by %s for rental %s (%s)',
            payment.pk, payment.amount, payment.payment_method, rental.pk, payment.transaction_id
        )
        return payment

    def get_payment(self, actor, payment_id):
        payment = self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError('Payment not found')

        authorize(actor, READ, self.owner_of(payment), message='Not authorized to view this payment')
        return payment

    def list_payments(self, actor):
        require_admin(actor)
        return list(self.payments.all())

    def list_own_payments(self, actor):
        authorize(actor, LIST_OWN)
        return list(self.payments.for_rentals(self.rentals.ids_for_user(actor.id)))

    def update_payment_status(self, actor, payment_id, new_status, transaction_id=None):
        require_admin(actor)
        payment = self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError('Payment not found')

        require_fields({'payment_status': new_status}, ['payment_status'])
        if new_status not in PAYMENT_STATUSES:
            raise ValidationError(f"payment_status must be one of: {', '.join(PAYMENT_STATUSES)}")

        transaction_id = None if is_blank(transaction_id) else str(transaction_id).strip()
        if new_status == Payment.STATUS_COMPLETED and not payment.transaction_id and not transaction_id:
            raise ValidationError('Transaction ID is required for completed payments.')

        previous = payment.payment_status
        payment.payment_status = new_status
        fields = ['payment_status', 'payment_date']
        if transaction_id:
            payment.transaction_id = transaction_id
            fields.append('transaction_id')
        stamp_payment_date(payment, previous_status=previous)
        self.payments.save(payment, fields)

        logger.info('Payment %s status %s -> %s', payment.pk, previous, new_status)
        return payment

    def delete_payment(self, actor, payment_id):
        require_admin(actor)
        payment = self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError('Payment not found')

        self.payments.delete(payment)
        logger.info('Deleted payment %s', payment_id)
