"""
Who may do what.

``can_perform`` is a pure decision over an ``Actor``, an action and the id of
the user owning the resource (when there is one). ``authorize`` turns a
denial into a Forbidden ``ServiceError``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ForbiddenError

logger = logging.getLogger(__name__)

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'

CREATE = 'create'
READ = 'read'
UPDATE = 'update'
DELETE = 'delete'
LIST_ALL = 'list_all'
LIST_OWN = 'list_own'
ADMINISTER = 'administer'

ACTIONS = (CREATE, READ, UPDATE, DELETE, LIST_ALL, LIST_OWN, ADMINISTER)


@dataclass(frozen=True)
class Actor:
    id: Optional[int]
    role: Optional[str] = None

    @property
    def is_anonymous(self):
        return self.id is None

    @property
    def is_admin(self):
        return not self.is_anonymous and self.role == ROLE_ADMIN

    @classmethod
    def anonymous(cls):
        return cls(id=None, role=None)

    @classmethod
    def from_user(cls, user):
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        return cls(id=user.pk, role=(user.role or ROLE_USER).lower())


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ''

    def __bool__(self):
        return self.allowed


ALLOW = Decision(True)


def can_perform(actor, action, owner_id=None):
    if action not in ACTIONS:
        raise ValueError(f'Unknown action: {action}')

    if actor.is_anonymous:
        return Decision(False, 'Not authorized')

    if actor.is_admin:
        return ALLOW

    if action in (LIST_ALL, ADMINISTER):
        return Decision(False, 'Not authorized as admin')

    if action in (CREATE, LIST_OWN):
        return ALLOW

    if owner_id is not None and owner_id == actor.id:
        return ALLOW

    return Decision(False, f'Not authorized to {action} this resource')


def authorize(actor, action, owner_id=None, message=None):
    decision = can_perform(actor, action, owner_id)
    if not decision:
        logger.warning('Denied %s for actor %s: %s', action, actor.id, decision.reason)
        raise ForbiddenError(message or decision.reason)
    return decision


def require_admin(actor):
    return authorize(actor, ADMINISTER)
