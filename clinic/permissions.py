"""
Route-level access policy.

A single ordered table maps (HTTP method, path pattern) to the roles
allowed through, plus the message returned when a role is refused.  The
first matching rule wins.  Authenticated requests that match no rule are
allowed for every role; unauthenticated requests to non-public paths are
rejected before the table is consulted.

Patterns use ``*`` for one path segment and a trailing ``/**`` for the
prefix itself and anything below it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from rest_framework.permissions import BasePermission

from .models import User

ADMIN = User.ROLE_ADMIN
DOCTOR = User.ROLE_DOCTOR
PATIENT = User.ROLE_PATIENT
ALL_ROLES = frozenset({ADMIN, DOCTOR, PATIENT})

DEFAULT_DENIED = "Access Denied - You don't have permission to perform this action"


def compile_pattern(pattern: str) -> re.Pattern:
    suffix = ''
    if pattern.endswith('/**'):
        pattern = pattern[:-3]
        suffix = '(?:/.*)?'
    parts = [
        '[^/]+' if part == '*' else re.escape(part)
        for part in pattern.split('/')
    ]
    return re.compile('^' + '/'.join(parts) + suffix + '$')


@dataclass(frozen=True)
class AccessRule:
    methods: frozenset[str] | None  # None = any method
    pattern: str
    roles: frozenset[str] | None  # None = public
    message: str = DEFAULT_DENIED
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'regex', compile_pattern(self.pattern))

    @property
    def is_public(self) -> bool:
        return self.roles is None

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method not in self.methods:
            return False
        return bool(self.regex.match(path))

    def allows(self, role: str | None) -> bool:
        return self.is_public or role in self.roles


def _rule(methods, pattern, roles, message=DEFAULT_DENIED) -> AccessRule:
    return AccessRule(
        frozenset(methods.split()) if methods else None,
        pattern,
        frozenset(roles) if roles is not None else None,
        message,
    )


POLICY: tuple[AccessRule, ...] = (
    # Public
    _rule(None, '/health', None),
    _rule(None, '/auth/**', None),
    _rule(None, '/swagger/**', None),
    _rule(None, '/redoc/**', None),
    _rule(None, '/metrics', None),
    # Patients
    _rule('POST', '/patients/**', {ADMIN}, 'Access Denied - Only ADMIN can create patients'),
    _rule('PUT DELETE', '/patients/**', {ADMIN}, 'Access Denied - Only ADMIN can modify patient records'),
    _rule('GET', '/patients/**', {ADMIN, DOCTOR}, 'Access Denied - Only ADMIN and DOCTOR can view patients'),
    # Doctors
    _rule('POST', '/doctors/**', {ADMIN}, 'Access Denied - Only ADMIN can register doctors'),
    _rule('PUT DELETE', '/doctors/**', {ADMIN}, 'Access Denied - Only ADMIN can modify doctor profiles'),
    _rule('PATCH', '/doctors/**', {ADMIN}),
    _rule('GET', '/doctors/**', ALL_ROLES),
    # Appointments
    _rule('POST', '/appointments/**', {ADMIN, PATIENT}, 'Access Denied - Only ADMIN and PATIENT can book appointments'),
    _rule('PUT', '/appointments/*/status', {ADMIN, DOCTOR}, 'Access Denied - Only ADMIN and DOCTOR can update appointment status'),
    _rule('PUT', '/appointments/*/reschedule', {ADMIN, DOCTOR}),
    _rule('PUT', '/appointments/*/cancel', ALL_ROLES),
    _rule('DELETE', '/appointments/**', {ADMIN}, 'Access Denied - Only ADMIN can delete appointments'),
    _rule('GET', '/appointments/**', ALL_ROLES),
    # Dashboard
    _rule(None, '/dashboard/**', {ADMIN}),
)


def match_rule(method: str, path: str, policy: tuple[AccessRule, ...] = POLICY) -> AccessRule | None:
    for rule in policy:
        if rule.matches(method, path):
            return rule
    return None


class RoutePolicyPermission(BasePermission):
    """Enforce :data:`POLICY` before any view body runs."""

    message = DEFAULT_DENIED

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        rule = match_rule(request.method, request.path_info)
        if rule is not None and rule.is_public:
            return True
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if rule is None or rule.allows(getattr(user, "role", None)):
            return True
        self.message = rule.message
        return False
