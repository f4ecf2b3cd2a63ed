"""
Shared fixtures: users with tokens, a brand and watches, rentals.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from rentalsapp.models import Rental
from timeless.authentication import issue_token
from timeless.policy import Actor
from usersapp.models import Address, User
from watchesapp.models import Brand, Watch

PASSWORD = 'CorrectPW'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def make(suffix, role=User.ROLE_USER, **extra):
        address = Address.objects.create(
            street_address='1 George Street',
            suburb='Sydney',
            state='NSW',
            postcode='2000',
        )
        return User.objects.create_user(
            email=f'davidbeckham{suffix}@example.com',
            password=PASSWORD,
            first_name='David',
            last_name='Beckham',
            phone_number='1234567890',
            role=role,
            address=address,
            **extra
        )
    return make


@pytest.fixture
def user(make_user):
    return make_user('-user')


@pytest.fixture
def other_user(make_user):
    return make_user('-other')


@pytest.fixture
def admin(make_user):
    return make_user('-admin', role=User.ROLE_ADMIN)


@pytest.fixture
def client_for():
    def build(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user).key}')
        return client
    return build


@pytest.fixture
def user_client(client_for, user):
    return client_for(user)


@pytest.fixture
def other_client(client_for, other_user):
    return client_for(other_user)


@pytest.fixture
def admin_client(client_for, admin):
    return client_for(admin)


@pytest.fixture
def actor():
    def build(user):
        return Actor.from_user(user)
    return build


@pytest.fixture
def brand(db):
    return Brand.objects.create(brand_name='TestBrand')


@pytest.fixture
def make_watch(brand):
    def make(quantity=5, rental_day_price='50.00', **extra):
        return Watch.objects.create(
            brand=brand,
            model=extra.pop('model', 'Test Watch'),
            year=extra.pop('year', 2023),
            rental_day_price=Decimal(rental_day_price),
            condition=extra.pop('condition', 'Good'),
            quantity=quantity,
            **extra
        )
    return make


@pytest.fixture
def watch(make_watch):
    return make_watch()


@pytest.fixture
def make_rental(db):
    def make(user, watch, rental_days=3, **extra):
        start = timezone.now()
        return Rental.objects.create(
            user=user,
            watch=watch,
            rental_days=rental_days,
            rental_start_date=start,
            rental_end_date=start + timedelta(days=rental_days),
            total_rental_price=watch.rental_day_price * rental_days,
            rental_status=extra.pop('rental_status', Rental.STATUS_PENDING),
            collection_mode=extra.pop('collection_mode', 'Pickup'),
            **extra
        )
    return make


@pytest.fixture
def rental(make_rental, user, watch):
    return make_rental(user, watch)
