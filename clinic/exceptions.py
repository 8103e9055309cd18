"""
Domain exceptions and the unified API exception handler.

Services raise the exception types defined here; the handler turns them
(and DRF/Django errors) into the ``{'ok': False, 'error': {...}}``
envelope with a fixed status-code mapping.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .authentication import failure_code

logger = logging.getLogger(__name__)


class ResourceNotFound(exceptions.NotFound):
    default_code = 'not_found'

    def __init__(self, entity: str, pk):
        super().__init__(f'{entity} not found with id: {pk}')


class Conflict(exceptions.APIException):
    """Uniqueness or business-rule violation."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This operation conflicts with existing data or business rules.'
    default_code = 'conflict'


class InvalidState(Conflict):
    default_code = 'invalid_state'


class InvalidArgument(exceptions.ValidationError):
    default_code = 'invalid_argument'


class BadCredentials(exceptions.AuthenticationFailed):
    default_detail = 'Invalid username or password'
    default_code = 'bad_credentials'


class UnknownUser(exceptions.AuthenticationFailed):
    default_detail = 'User not found'
    default_code = 'user_not_found'


GENERIC_AUTH_MESSAGE = 'Authentication failed'
# Auth failures whose own message is shown to the client
SPECIFIC_AUTH_CODES = {BadCredentials.default_code, UnknownUser.default_code}
VALIDATION_MESSAGE = 'Validation failed - Please check your input'
SERVER_ERROR_MESSAGE = 'An unexpected error occurred'

DETAILS = {
    400: 'Please check the highlighted fields and try again.',
    401: 'Please check your credentials and try again.',
    403: 'Your current role does not have permission to access this resource. '
         'Contact your administrator if you believe this is an error.',
    404: 'The requested resource could not be found.',
    409: 'This operation conflicts with existing data or business rules.',
    500: 'Please contact support if this issue persists.',
}


def integrity_message(exc: Exception) -> str:
    """Best-effort user-facing text for a unique-constraint violation."""
    text = str(exc).lower()
    if 'username' in text:
        return 'Username already exists - Please choose a different username'
    if 'email' in text:
        return 'Email already registered - Please use a different email'
    if 'doctor' in text and 'appointment_date' in text:
        return 'Doctor already has an appointment at this time - Please choose a different time slot'
    return 'Data conflict - This record already exists'


def _envelope(request, status_code: int, code: str, message, fields=None) -> Response:
    error = {
        'code': code,
        'message': message,
        'details': DETAILS.get(status_code, ''),
    }
    if fields is not None:
        error['fields'] = fields
    body = {
        'ok': False,
        'status': status_code,
        'error': error,
        'path': getattr(request, 'path', None),
        'timestamp': timezone.now().isoformat(),
    }
    return Response(body, status=status_code)


def _flatten(detail):
    """Collapse DRF's list-of-messages per field into one message per field."""
    if isinstance(detail, dict):
        return {k: _flatten(v) for k, v in detail.items()}
    if isinstance(detail, list):
        return str(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    request = context.get('request')

    if isinstance(exc, ProtectedError):
        return _envelope(
            request, 409, 'conflict',
            'Record is still referenced by existing appointments and cannot be deleted',
        )
    if isinstance(exc, IntegrityError):
        logger.warning('integrity error on %s: %s', getattr(request, 'path', '?'), exc)
        return _envelope(request, 409, 'conflict', integrity_message(exc))

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error on %s', getattr(request, 'path', '?'), exc_info=exc)
        return _envelope(request, 500, 'server_error', SERVER_ERROR_MESSAGE)

    code = getattr(exc, 'default_code', 'api_error')
    if isinstance(exc, exceptions.AuthenticationFailed):
        code = failure_code(exc) or code
    if isinstance(exc, exceptions.ValidationError) and not isinstance(exc, InvalidArgument):
        fields = _flatten(exc.detail) if isinstance(exc.detail, dict) else {'non_field_errors': _flatten(exc.detail)}
        resp = _envelope(request, resp.status_code, 'validation_error', VALIDATION_MESSAGE, fields)
    elif isinstance(exc, exceptions.NotAuthenticated):
        resp = _envelope(request, resp.status_code, 'not_authenticated', str(exc.detail))
    elif isinstance(exc, exceptions.AuthenticationFailed) and failure_code(exc) not in SPECIFIC_AUTH_CODES:
        # Token errors carry library-specific detail; keep the message fixed
        resp = _envelope(request, resp.status_code, 'authentication_failed', GENERIC_AUTH_MESSAGE)
    else:
        detail = resp.data.get('detail', resp.data) if isinstance(resp.data, dict) else resp.data
        resp = _envelope(request, resp.status_code, code, _flatten(detail))

    # Preserve WWW-Authenticate so 401s stay 401s for clients
    auth_header = getattr(exc, 'auth_header', None)
    if auth_header:
        resp['WWW-Authenticate'] = auth_header
    return resp
