"""
Rental lifecycle.

A rental moves Pending -> Active -> Completed through admin status updates.
Creating a rental takes one unit of the watch from the inventory ledger and
deleting it gives the unit back.
"""

import logging
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from timeless.errors import NotFoundError, ValidationError, is_blank, require_fields
from timeless.policy import CREATE, LIST_OWN, READ, authorize, require_admin
from watchesapp.ledger import InventoryLedger
from watchesapp.repositories import WatchRepository
from .models import Rental
from .repositories import RentalRepository

logger = logging.getLogger(__name__)

RENTAL_STATUSES = [value for value, _ in Rental.STATUS_CHOICES]
COLLECTION_MODES = [value for value, _ in Rental.COLLECTION_CHOICES]


def parse_rental_days(value):
    """Coerce the requested duration into a whole number of days (at least 1)."""
    if isinstance(value, bool):
        raise ValidationError('rental_days must be a whole number of days')
    try:
        days = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError('rental_days must be a whole number of days')

    if not days.is_finite():
        raise ValidationError('rental_days must be a whole number of days')
    if days <= 0:
        raise ValidationError('Rental duration must be at least 1 day')
    if days != days.to_integral_value():
        raise ValidationError('rental_days must be a whole number of days')
    return int(days)


def rental_end_date(start, rental_days):
    try:
        return start + timedelta(days=rental_days)
    except OverflowError:
        raise ValidationError('Rental duration is too long')


def rental_price(day_price, rental_days):
    return (Decimal(day_price) * rental_days).quantize(Decimal('0.01'))


class RentalService:

    def __init__(self, rentals=None, watches=None, ledger=None):
        self.rentals = rentals or RentalRepository()
        self.watches = watches or WatchRepository()
        self.ledger = ledger or InventoryLedger(self.watches)

    def create_rental(self, actor, watch_id, rental_days, collection_mode=None):
        authorize(actor, CREATE)
        require_fields({'watch_id': watch_id, 'rental_days': rental_days}, ['watch_id', 'rental_days'])
        days = parse_rental_days(rental_days)

        if is_blank(collection_mode):
            collection_mode = 'Pickup'
        elif collection_mode not in COLLECTION_MODES:
            raise ValidationError(f"collection_mode must be one of: {', '.join(COLLECTION_MODES)}")

        watch = self.watches.get(watch_id)
        if watch is None:
            raise NotFoundError('Watch not found')

        start = timezone.now()
        end = rental_end_date(start, days)

        with transaction.atomic():
            self.ledger.reserve_unit(watch.pk)

            rental = self.rentals.create(
                user_id=actor.id,
                watch_id=watch.pk,
                rental_days=days,
                rental_start_date=start,
                rental_end_date=end,
                total_rental_price=rental_price(watch.rental_day_price, days),
                rental_status=Rental.STATUS_PENDING,
                collection_mode=collection_mode,
            )

        logger.info(
            'User %s rented watch %s for %s days (rental %s, total %s)',
            actor.id, watch.pk, days, rental.pk, rental.total_rental_price
        )
        return rental

    def get_rental(self, actor, rental_id):
        rental = self.rentals.get(rental_id)
        if rental is None:
            raise NotFoundError('Rental not found')

        authorize(actor, READ, rental.user_id, message='Not authorized to view this rental')
        return rental

    def list_rentals(self, actor):
        require_admin(actor)
        return list(self.rentals.all())

    def list_own_rentals(self, actor):
        authorize(actor, LIST_OWN)
        return list(self.rentals.for_user(actor.id))

    def update_rental_status(self, actor, rental_id, new_status):
        require_admin(actor)
        rental = self.rentals.get(rental_id)
        if rental is None:
            raise NotFoundError('Rental not found')

        require_fields({'rental_status': new_status}, ['rental_status'])
        if new_status not in RENTAL_STATUSES:
            raise ValidationError(f"rental_status must be one of: {', '.join(RENTAL_STATUSES)}")

        # Any status may replace any other, there is no transition table
        previous = rental.rental_status
        rental.rental_status = new_status
        self.rentals.save(rental, ['rental_status'])

        logger.info('Rental %s status %s -> %s', rental.pk, previous, new_status)
        return rental

    def delete_rental(self, actor, rental_id):
        require_admin(actor)
        rental = self.rentals.get(rental_id)
        if rental is None:
            raise NotFoundError('Rental not found')

        with transaction.atomic():
            self.ledger.release_unit(rental.watch_id)
            self.rentals.delete(rental)

        logger.info('Deleted rental %s', rental_id)
