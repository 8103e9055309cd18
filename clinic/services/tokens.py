"""
Bearer token issuing and validation.

Tokens are simplejwt HS256 tokens whose ``sub`` claim is the username.
Lifetimes come from ``SIMPLE_JWT`` (24h access, 7d refresh by default).
Nothing is persisted: validity is signature + expiry only.
"""
from __future__ import annotations

from dataclasses import dataclass

from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken, Token


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str


def issue_access(user) -> str:
    return str(AccessToken.for_user(user))


def issue_pair(user) -> TokenPair:
    return TokenPair(access=issue_access(user), refresh=str(RefreshToken.for_user(user)))


def decode(raw: str, token_class: type[Token] = AccessToken) -> Token:
    """Verify signature, expiry and token type; raise InvalidToken otherwise."""
    try:
        return token_class(raw)
    except TokenError as e:
        raise InvalidToken(str(e)) from e


def subject_of(raw: str, token_class: type[Token] = RefreshToken) -> str:
    token = decode(raw, token_class)
    try:
        return str(token[api_settings.USER_ID_CLAIM])
    except KeyError as e:
        raise InvalidToken('Token contained no recognizable user identification') from e


def is_valid_for(raw: str, user, token_class: type[Token] = AccessToken) -> bool:
    """True when ``raw`` verifies, has not expired and names ``user``."""
    try:
        return subject_of(raw, token_class) == getattr(user, api_settings.USER_ID_FIELD)
    except InvalidToken:
        return False
