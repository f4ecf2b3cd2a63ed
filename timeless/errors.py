"""
Failure vocabulary shared by every service.

Services never pick HTTP status codes. They raise a ``ServiceError`` tagged
with one ``ErrorKind`` and the exception handler in
``timeless.exception_handler`` turns the kind into a response.
"""

import enum


class ErrorKind(enum.Enum):
    VALIDATION = (400, 'Invalid input')
    UNAUTHORIZED = (401, 'Not authorized')
    FORBIDDEN = (403, 'Access forbidden')
    NOT_FOUND = (404, 'Resource not found')
    CONFLICT = (409, 'Conflict: Duplicate entry')

    def __init__(self, status, default_message):
        self.status = status
        self.default_message = default_message


class ServiceError(Exception):
    """A typed failure carrying ``kind`` and a human readable ``message``."""

    def __init__(self, kind, message=None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    def __repr__(self):
        return f'ServiceError({self.kind.name}, {self.message!r})'


def ValidationError(message=None):
    return ServiceError(ErrorKind.VALIDATION, message)


def UnauthorizedError(message=None):
    return ServiceError(ErrorKind.UNAUTHORIZED, message)


def ForbiddenError(message=None):
    return ServiceError(ErrorKind.FORBIDDEN, message)


def NotFoundError(message=None):
    return ServiceError(ErrorKind.NOT_FOUND, message)


def ConflictError(message=None):
    return ServiceError(ErrorKind.CONFLICT, message)


def OutOfStockError(message='Watch is out of stock'):
    return ServiceError(ErrorKind.VALIDATION, message)


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data, fields):
    """Raise one validation error naming every field missing from ``data``."""
    missing = [field for field in fields if is_blank(data.get(field))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
