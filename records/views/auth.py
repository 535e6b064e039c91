"""
Authentication endpoints.

``login``, ``refresh`` and ``register`` are public and ignore a stale
bearer token; ``logout`` needs a valid one.  Every response uses the ``{success, message, data}`` envelope.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from records.authentication import OptionalBearerAuthentication
from records.permissions import ADMIN_ROLES, role_of
from records.responses import api_response
from records.serializers.auth import LoginSerializer, RegisterSerializer
from records.services.audit import log_action
from records.services.auth import blacklist_tokens, issue_tokens
from records.services.users import UsernameTaken, create_user
from records.throttling import LoginRateThrottle, RegisterRateThrottle

logger = logging.getLogger(__name__)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """Exchange username/password for a bearer token."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    if user is None:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'ip': request.META.get('REMOTE_ADDR')})
        return api_response(status.HTTP_401_UNAUTHORIZED, False, 'Invalid credentials')

    tokens = issue_tokens(user)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})

    return api_response(status.HTTP_200_OK, True, 'Login successful', {
        'token': tokens['access'],
        'refresh': tokens['refresh'],
        'user': {
            'username': user.username,
            'email': user.email,
            'role': user.role,
            'fullName': f"{user.first_name} {user.last_name}".strip(),
        },
    })


@api_view(['POST'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
@throttle_classes([RegisterRateThrottle])
def register_view(request):
    """Create an account.

    Anyone may sign up as a patient; staff roles can only be granted by
    an authenticated admin.
    """
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    if vd['role'] != 'patient' and role_of(request) not in ADMIN_ROLES:
        return api_response(status.HTTP_403_FORBIDDEN, False, 'Only administrators may register staff accounts')

    try:
        user = create_user(
            vd['username'], vd['password'],
            email=vd['email'], first_name=vd['first_name'], last_name=vd['last_name'], role=vd['role'],
        )
    except UsernameTaken:
        return api_response(status.HTTP_409_CONFLICT, False, 'Username already exists')

    log_action(user=request.user or user, action='register', object_type='user', object_id=user.id,
               detail={'username': user.username, 'role': user.role})
    return api_response(status.HTTP_201_CREATED, True, 'User registered successfully')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token for a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as exc:
        return api_response(status.HTTP_401_UNAUTHORIZED, False, str(exc))
    data = {'token': s.validated_data['access']}
    if 'refresh' in s.validated_data:
        data['refresh'] = s.validated_data['refresh']
    return api_response(status.HTTP_200_OK, True, 'Token refreshed', data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token, or all of the caller's tokens."""
    try:
        count = blacklist_tokens(request.user, request.data.get('refresh'))
    except TokenError as exc:
        return api_response(status.HTTP_400_BAD_REQUEST, False, str(exc))
    logger.info("user %s logged out, %d token(s) blacklisted", request.user.username, count)
    return api_response(status.HTTP_200_OK, True, 'Logged out', {'blacklisted': count})
