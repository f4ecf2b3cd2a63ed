import logging
import traceback

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from .errors import ServiceError

logger = logging.getLogger(__name__)


def error_response(message, status_code, headers=None):
    return Response(
        {'success': False, 'message': message},
        status=status_code,
        headers=headers,
    )


def flatten_errors(detail, prefix=None):
    """Collapse nested serializer errors into 'field: message' strings."""
    if isinstance(detail, dict):
        messages = []
        for field, value in detail.items():
            label = None if field in ('non_field_errors', '__all__') else field
            if prefix and label:
                label = f'{prefix}.{label}'
            messages.extend(flatten_errors(value, label or prefix))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for value in detail:
            messages.extend(flatten_errors(value, prefix))
        return messages
    return [f'{prefix}: {detail}' if prefix else str(detail)]


def api_exception_handler(exc, context):
    """Translate every failure raised by a view into the JSON error body."""
    if isinstance(exc, ServiceError):
        return error_response(exc.message, exc.kind.status)

    if isinstance(exc, exceptions.NotAuthenticated):
        return error_response(
            'Not authorized, no token provided',
            status.HTTP_401_UNAUTHORIZED,
            headers={'WWW-Authenticate': 'Bearer'},
        )

    if isinstance(exc, exceptions.AuthenticationFailed):
        return error_response(
            str(exc.detail),
            status.HTTP_401_UNAUTHORIZED,
            headers={'WWW-Authenticate': 'Bearer'},
        )

    if isinstance(exc, exceptions.ValidationError):
        return error_response('; '.join(flatten_errors(exc.detail)), status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        return error_response('; '.join(flatten_errors(detail)), status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, (Http404, ObjectDoesNotExist)):
        return error_response('Resource not found', status.HTTP_404_NOT_FOUND)

    if isinstance(exc, ProtectedError):
        return error_response('Resource is still referenced by other records', status.HTTP_409_CONFLICT)

    if isinstance(exc, IntegrityError):
        logger.warning('Integrity error: %s', exc)
        return error_response('Duplicate value error', status.HTTP_409_CONFLICT)

    if isinstance(exc, exceptions.APIException):
        return error_response(str(exc.detail), exc.status_code)

    logger.error('Unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
    body = {'success': False, 'message': 'Internal Server Error'}
    if settings.DEBUG:
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
