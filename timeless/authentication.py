import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import exceptions
from rest_framework.authentication import TokenAuthentication
from rest_framework.authtoken.models import Token

logger = logging.getLogger(__name__)


def token_expired(token):
    return token.created + settings.AUTH_TOKEN_TTL <= timezone.now()


def issue_token(user):
    """Return a live token for ``user``, replacing one that has expired."""
    token, created = Token.objects.get_or_create(user=user)
    if not created and token_expired(token):
        token.delete()
        token = Token.objects.create(user=user)
    return token


class BearerTokenAuthentication(TokenAuthentication):
    """
    Reads ``Authorization: Bearer <key>`` and refuses expired tokens.
    """
    keyword = 'Bearer'

    def authenticate_credentials(self, key):
        model = self.get_model()
        try:
            token = model.objects.select_related('user').get(key=key)
        except model.DoesNotExist:
            raise exceptions.AuthenticationFailed('Not authorized, token failed')

        if not token.user.is_active:
            raise exceptions.AuthenticationFailed('Not authorized, user not found')

        if token_expired(token):
            logger.info('Rejected expired token for user %s', token.user_id)
            raise exceptions.AuthenticationFailed('Invalid or expired token, please log in again')

        return (token.user, token)
