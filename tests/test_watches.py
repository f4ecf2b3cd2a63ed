from decimal import Decimal

import pytest
from django.utils import timezone

from watchesapp.models import Brand, Watch, normalize_condition


def watch_payload(brand, **overrides):
    payload = {
        'brand_id': brand.pk,
        'model': 'Submariner',
        'year': 2020,
        'rental_day_price': '75.00',
        'condition': 'excellent',
        'quantity': 3,
        'description': 'Steel diver',
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize('value, expected', [('excellent', 'Excellent'), ('  GOOD ', 'Good'), (None, None)])
def test_normalize_condition(value, expected):
    assert normalize_condition(value) == expected


class TestBrowseWatches:

    def test_list_is_public(self, api_client, watch):
        res = api_client.get('/api/watches')

        assert res.status_code == 200
        assert res.data[0]['brand'] == {'id': watch.brand_id, 'brand_name': 'TestBrand'}
        assert res.data[0]['rental_day_price'] == Decimal('50.00')
        assert res.data[0]['in_stock'] is True

    def test_detail_is_public(self, api_client, watch):
        res = api_client.get(f'/api/watches/{watch.pk}')

        assert res.status_code == 200
        assert res.data['model'] == 'Test Watch'
        assert res.data['quantity'] == 5

    def test_sold_out_watch_is_flagged(self, api_client, make_watch):
        watch = make_watch(quantity=0)

        assert api_client.get(f'/api/watches/{watch.pk}').data['in_stock'] is False

    def test_unknown_watch(self, api_client, db):
        res = api_client.get('/api/watches/4040')

        assert res.status_code == 404
        assert res.json()['message'] == 'Watch not found'

    def test_search_by_model(self, api_client, make_watch):
        make_watch(model='Speedmaster')
        make_watch(model='Daytona')

        res = api_client.get('/api/watches', {'search': 'speed'})

        assert [row['model'] for row in res.data] == ['Speedmaster']

    def test_order_by_price(self, api_client, make_watch):
        make_watch(model='Dear', rental_day_price='90.00')
        make_watch(model='Cheap', rental_day_price='10.00')

        res = api_client.get('/api/watches', {'ordering': 'rental_day_price'})

        assert [row['model'] for row in res.data] == ['Cheap', 'Dear']


class TestManageWatches:

    def test_admin_creates_watch(self, admin_client, brand):
        res = admin_client.post('/api/watches', watch_payload(brand), format='json')

        assert res.status_code == 201
        assert res.data['condition'] == 'Excellent'
        watch = Watch.objects.get(pk=res.data['id'])
        assert watch.quantity == 3
        assert watch.rental_day_price == Decimal('75.00')

    def test_missing_fields(self, admin_client, brand):
        payload = watch_payload(brand)
        del payload['year']
        del payload['quantity']

        res = admin_client.post('/api/watches', payload, format='json')

        assert res.status_code == 400
        assert res.json()['message'] == 'Missing required fields: year, quantity'

    def test_unknown_brand(self, admin_client, brand):
        res = admin_client.post('/api/watches', watch_payload(brand, brand_id=9999), format='json')

        assert res.status_code == 404
        assert res.json()['message'] == 'Brand not found'

    @pytest.mark.parametrize('year', [999, timezone.now().year + 1])
    def test_year_out_of_range(self, admin_client, brand, year):
        res = admin_client.post('/api/watches', watch_payload(brand, year=year), format='json')

        assert res.status_code == 400
        assert res.json()['message'].startswith('year: ')

    def test_invalid_condition(self, admin_client, brand):
        res = admin_client.post('/api/watches', watch_payload(brand, condition='Mint'), format='json')
        assert res.status_code == 400

    def test_negative_quantity(self, admin_client, brand):
        res = admin_client.post('/api/watches', watch_payload(brand, quantity=-1), format='json')

        assert res.status_code == 400
        assert not Watch.objects.exists()

    def test_user_cannot_create(self, user_client, brand):
        res = user_client.post('/api/watches', watch_payload(brand), format='json')

        assert res.status_code == 403
        assert res.json()['message'] == 'Not authorized as admin'

    def test_anonymous_cannot_create(self, api_client, brand):
        assert api_client.post('/api/watches', watch_payload(brand), format='json').status_code == 401

    @pytest.mark.parametrize('method', ['put', 'patch'])
    def test_update_is_partial(self, admin_client, watch, method):
        res = getattr(admin_client, method)(
            f'/api/watches/{watch.pk}', {'quantity': 9, 'condition': 'fair'}, format='json'
        )

        assert res.status_code == 200
        watch.refresh_from_db()
        assert watch.quantity == 9
        assert watch.condition == 'Fair'
        assert watch.model == 'Test Watch'

    def test_admin_deletes(self, admin_client, watch):
        res = admin_client.delete(f'/api/watches/{watch.pk}')

        assert res.data['message'] == 'Watch removed'
        assert not Watch.objects.exists()


class TestBrands:

    def test_public_list_sorted_by_name(self, api_client, db):
        Brand.objects.create(brand_name='Rolex')
        Brand.objects.create(brand_name='Omega')

        res = api_client.get('/api/brands')

        assert [row['brand_name'] for row in res.data] == ['Omega', 'Rolex']

    def test_admin_creates_brand(self, admin_client):
        res = admin_client.post('/api/brands', {'brand_name': '  Seiko '}, format='json')

        assert res.status_code == 201
        assert res.data['brand_name'] == 'Seiko'

    def test_duplicate_name_ignores_case(self, admin_client, brand):
        res = admin_client.post('/api/brands', {'brand_name': 'testbrand'}, format='json')

        assert res.status_code == 409
        assert res.json()['message'] == 'Brand already exists'

    def test_rename(self, admin_client, brand):
        res = admin_client.patch(f'/api/brands/{brand.pk}', {'brand_name': 'Tudor'}, format='json')

        assert res.status_code == 200
        brand.refresh_from_db()
        assert brand.brand_name == 'Tudor'

    def test_rename_to_existing_name(self, admin_client, brand):
        other = Brand.objects.create(brand_name='Omega')

        res = admin_client.patch(f'/api/brands/{other.pk}', {'brand_name': 'TESTBRAND'}, format='json')

        assert res.status_code == 409

    def test_brand_in_use_cannot_be_deleted(self, admin_client, watch):
        res = admin_client.delete(f'/api/brands/{watch.brand_id}')

        assert res.status_code == 409
        assert res.json()['message'] == 'Brand is still used by existing watches'

    def test_unused_brand_is_deleted(self, admin_client, brand):
        res = admin_client.delete(f'/api/brands/{brand.pk}')

        assert res.data['message'] == 'Brand removed'
        assert not Brand.objects.exists()

    def test_user_cannot_create_brand(self, user_client):
        assert user_client.post('/api/brands', {'brand_name': 'Casio'}, format='json').status_code == 403
