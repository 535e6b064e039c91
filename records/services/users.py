from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

User = get_user_model()
logger = logging.getLogger(__name__)


class UsernameTaken(Exception):
    """Raised when a username is already registered."""


def get_user_by_username(username: str) -> Optional[User]:
    return User.objects.filter(username=username).first()


def create_user(username: str, password: str, *, email: str = '', first_name: str = '',
                last_name: str = '', role: str = 'patient') -> User:
    """Create a user with a hashed password.

    The unique constraint on ``username`` is the final arbiter: a
    concurrent registration that slips past the existence check still
    surfaces as :class:`UsernameTaken`.
    """
    if get_user_by_username(username) is not None:
        raise UsernameTaken(username)
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                password=password,
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
    except IntegrityError as exc:
        raise UsernameTaken(username) from exc
    logger.info("created user %s (%s)", user.username, user.role)
    return user
