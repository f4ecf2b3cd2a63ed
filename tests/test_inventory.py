import pytest
from django.db import connection, transaction
from django.test.utils import CaptureQueriesContext

from timeless.errors import ErrorKind, ServiceError
from watchesapp.ledger import InventoryLedger
from watchesapp.models import Watch


@pytest.fixture
def ledger():
    return InventoryLedger()


def test_reserve_takes_exactly_one_unit(ledger, make_watch):
    watch = make_watch(quantity=2)

    ledger.reserve_unit(watch.pk)

    watch.refresh_from_db()
    assert watch.quantity == 1


def test_reserve_last_unit_then_out_of_stock(ledger, make_watch):
    watch = make_watch(quantity=1)
    ledger.reserve_unit(watch.pk)

    with pytest.raises(ServiceError) as caught:
        ledger.reserve_unit(watch.pk)

    assert caught.value.kind is ErrorKind.VALIDATION
    assert caught.value.message == 'Watch is out of stock'
    watch.refresh_from_db()
    assert watch.quantity == 0


def test_reserve_unknown_watch_is_not_found(ledger, db):
    with pytest.raises(ServiceError) as caught:
        ledger.reserve_unit(987654)

    assert caught.value.kind is ErrorKind.NOT_FOUND
    assert caught.value.message == 'Watch not found'


def test_reserve_with_malformed_id_is_not_found(ledger, db):
    with pytest.raises(ServiceError) as caught:
        ledger.reserve_unit('not-an-id')

    assert caught.value.kind is ErrorKind.NOT_FOUND


def test_release_returns_one_unit(ledger, make_watch):
    watch = make_watch(quantity=0)

    assert ledger.release_unit(watch.pk) is True

    watch.refresh_from_db()
    assert watch.quantity == 1


def test_release_for_deleted_watch_is_a_no_op(ledger, make_watch):
    watch = make_watch(quantity=3)
    watch_id = watch.pk
    watch.delete()

    assert ledger.release_unit(watch_id) is False
    assert not Watch.objects.filter(pk=watch_id).exists()


class FakeWatches:
    """In-memory stand-in for the repository the ledger is built with."""

    def __init__(self, stock):
        self.stock = dict(stock)

    def exists(self, watch_id):
        return watch_id in self.stock

    def decrement_if_available(self, watch_id):
        if self.stock.get(watch_id, 0) >= 1:
            self.stock[watch_id] -= 1
            return 1
        return 0

    def increment(self, watch_id):
        if watch_id in self.stock:
            self.stock[watch_id] += 1
            return 1
        return 0


def test_ledger_only_talks_to_its_repository():
    watches = FakeWatches({'a': 1})
    ledger = InventoryLedger(watches)

    ledger.reserve_unit('a')
    with pytest.raises(ServiceError):
        ledger.reserve_unit('a')
    ledger.release_unit('a')
    ledger.release_unit('gone')

    assert watches.stock == {'a': 1}


def test_reserve_is_a_single_conditional_update(ledger, make_watch):
    watch = make_watch(quantity=1)

    with CaptureQueriesContext(connection) as queries:
        ledger.reserve_unit(watch.pk)

    assert len(queries) == 1
    sql = queries[0]['sql']
    assert sql.startswith('UPDATE')
    assert '"quantity" >= 1' in sql


def test_racing_reservations_for_last_unit_sell_it_once(make_watch):
    watch = make_watch(quantity=1)
    # both requests saw one unit left before either wrote
    seen = [Watch.objects.get(pk=watch.pk).quantity for _ in range(2)]
    assert seen == [1, 1]

    outcomes = []
    for ledger in (InventoryLedger(), InventoryLedger()):
        try:
            with transaction.atomic():
                ledger.reserve_unit(watch.pk)
            outcomes.append('reserved')
        except ServiceError as exc:
            outcomes.append(exc.message)

    assert outcomes == ['reserved', 'Watch is out of stock']
    watch.refresh_from_db()
    assert watch.quantity == 0
