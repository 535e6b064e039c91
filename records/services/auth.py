"""JWT issuing and revocation on top of ``djangorestframework-simplejwt``."""
from __future__ import annotations

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken


def issue_tokens(user) -> dict[str, str]:
    """Return a refresh/access pair for ``user``.

    Both tokens carry ``username`` and ``role`` claims; the access token
    inherits them from the refresh token.
    """
    refresh = RefreshToken.for_user(user)
    refresh['username'] = user.username
    refresh['role'] = user.role
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


def blacklist_tokens(user, refresh: str | None = None) -> int:
    """Blacklist one refresh token, or every outstanding token of ``user``.

    Returns the number of tokens blacklisted.  An invalid ``refresh``
    value, or one issued to another user, raises
    ``rest_framework_simplejwt.exceptions.TokenError``.
    """
    if refresh:
        token = RefreshToken(refresh)
        if str(token.get(api_settings.USER_ID_CLAIM)) != str(user.pk):
            raise TokenError('Token does not belong to this user')
        token.blacklist()
        return 1
    count = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        if created:
            count += 1
    return count
