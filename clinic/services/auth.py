import logging

from django.contrib.auth import authenticate
from django.db import transaction

from ..exceptions import BadCredentials, Conflict, UnknownUser
from ..models import User
from . import tokens

logger = logging.getLogger(__name__)


def _session(user: User, pair: tokens.TokenPair) -> dict:
    return {
        'accessToken': pair.access,
        'refreshToken': pair.refresh,
        'tokenType': 'Bearer',
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'fullName': user.full_name,
        'role': user.role,
    }


def register(*, username: str, email: str, password: str, full_name: str, role: str) -> dict:
    with transaction.atomic():
        if User.objects.filter(username=username).exists():
            raise Conflict('Username already exists')
        if User.objects.filter(email=email).exists():
            raise Conflict('Email already exists')
        user = User.objects.create_user(
            username=username, email=email, password=password, full_name=full_name, role=role,
        )
    logger.info('user registered: %s (%s)', user.username, user.role)
    return _session(user, tokens.issue_pair(user))


def login(request, *, username: str, password: str) -> dict:
    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info('login failed for %s', username)
        raise BadCredentials()
    logger.info('login ok: %s', user.username)
    return _session(user, tokens.issue_pair(user))


def refresh(raw_refresh: str) -> dict:
    username = tokens.subject_of(raw_refresh)
    user = User.objects.filter(username=username).first()
    if user is None:
        logger.info('refresh for unknown subject %s', username)
        raise UnknownUser()
    # No rotation: the caller keeps using the same refresh token
    return _session(user, tokens.TokenPair(access=tokens.issue_access(user), refresh=raw_refresh))
