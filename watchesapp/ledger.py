"""
Inventory ledger.

Keeps ``Watch.quantity`` non-negative while rentals take and return units.
Every rental holds exactly one unit for as long as the rental record exists.
"""

import logging

from timeless.errors import NotFoundError, OutOfStockError
from .repositories import WatchRepository

logger = logging.getLogger(__name__)


class InventoryLedger:

    def __init__(self, watches=None):
        self.watches = watches or WatchRepository()

    def reserve_unit(self, watch_id):
        """
        Take one unit of a watch.

        The check and the decrement happen in one conditional update, so two
        callers racing for the last unit cannot both succeed. When nothing was
        updated the watch is looked up again to tell a missing watch apart
        from an empty one.
        """
        if self.watches.decrement_if_available(watch_id):
            logger.info('Reserved one unit of watch %s', watch_id)
            return

        if not self.watches.exists(watch_id):
            raise NotFoundError('Watch not found')
        raise OutOfStockError()

    def release_unit(self, watch_id):
        """Return one unit. Releasing stock of a deleted watch does nothing."""
        if self.watches.increment(watch_id):
            logger.info('Released one unit of watch %s', watch_id)
            return True

        logger.info('Watch %s no longer exists, nothing to restock', watch_id)
        return False
