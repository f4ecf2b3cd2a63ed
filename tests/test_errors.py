import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import exceptions

from timeless.errors import (
    ErrorKind, ServiceError, ConflictError, ForbiddenError, NotFoundError,
    OutOfStockError, UnauthorizedError, ValidationError, require_fields,
)
from timeless.exception_handler import api_exception_handler, flatten_errors


@pytest.mark.parametrize('build, status_code', [
    (ValidationError, 400),
    (UnauthorizedError, 401),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (OutOfStockError, 400),
])
def test_each_kind_maps_to_one_status(build, status_code):
    error = build()
    assert isinstance(error, ServiceError)
    assert error.kind.status == status_code

    response = api_exception_handler(error, {})
    assert response.status_code == status_code
    assert response.data == {'success': False, 'message': error.message}


def test_out_of_stock_is_a_validation_failure():
    error = OutOfStockError()
    assert error.kind is ErrorKind.VALIDATION
    assert error.message == 'Watch is out of stock'


def test_require_fields_names_every_missing_field():
    with pytest.raises(ServiceError) as caught:
        require_fields({'amount': 0, 'payment_method': '  '}, ['rental_id', 'amount', 'payment_method'])

    assert caught.value.kind is ErrorKind.VALIDATION
    assert caught.value.message == 'Missing required fields: rental_id, payment_method'


def test_require_fields_accepts_zero():
    require_fields({'rental_days': 0}, ['rental_days'])


def test_not_authenticated_gets_401():
    response = api_exception_handler(exceptions.NotAuthenticated(), {})
    assert response.status_code == 401
    assert response.data['message'] == 'Not authorized, no token provided'


def test_serializer_errors_are_flattened_into_one_message():
    exc = exceptions.ValidationError({'year': ['Year must be a 4-digit number'], 'state': ['bad']})
    response = api_exception_handler(exc, {})
    assert response.status_code == 400
    assert response.data['message'] == 'year: Year must be a 4-digit number; state: bad'


def test_model_validation_errors_are_400():
    exc = DjangoValidationError({'transaction_id': ['Transaction ID is required for completed payments.']})
    response = api_exception_handler(exc, {})
    assert response.status_code == 400
    assert 'Transaction ID is required' in response.data['message']


def test_integrity_error_is_conflict():
    response = api_exception_handler(IntegrityError('UNIQUE constraint failed'), {})
    assert response.status_code == 409
    assert response.data == {'success': False, 'message': 'Duplicate value error'}


def test_unexpected_errors_are_500_without_stack(settings):
    settings.DEBUG = False
    response = api_exception_handler(RuntimeError('boom'), {'view': None})
    assert response.status_code == 500
    assert response.data == {'success': False, 'message': 'Internal Server Error'}


def test_unexpected_errors_carry_stack_in_debug(settings):
    settings.DEBUG = True
    response = api_exception_handler(RuntimeError('boom'), {'view': None})
    assert response.status_code == 500
    assert 'RuntimeError: boom' in response.data['stack']


def test_flatten_nested_errors():
    assert flatten_errors({'address': {'postcode': ['invalid']}}) == ['address.postcode: invalid']
    assert flatten_errors(['one', 'two']) == ['one', 'two']
