"""
Project-wide error contract.

Every failed request answers with a flat body ``{"error": "<message>"}``.
Domain exceptions raised by the app service layers carry an ``ErrorKind``
which decides the HTTP status; DRF's own errors (validation, authentication,
permissions, 404) are flattened to the same shape.
"""

import logging
from enum import Enum

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed taxonomy of failures a caller can observe."""

    UNAUTHENTICATED = 'unauthenticated'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    INVALID_INPUT = 'invalid_input'
    INVALID_STATE = 'invalid_state'
    UNKNOWN = 'unknown'


STATUS_BY_KIND = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

FALLBACK_MESSAGE = 'An unknown error occurred'


def flatten_error_detail(detail) -> str:
    """
    Reduce a DRF error payload to one human-readable message.

    Validation errors arrive as nested dicts/lists; the first message wins
    and is prefixed with its field name (``"amount: Ensure ..."``).
    """
    if isinstance(detail, dict):
        if not detail:
            return FALLBACK_MESSAGE
        if 'detail' in detail:
            return flatten_error_detail(detail['detail'])
        field, value = next(iter(detail.items()))
        message = flatten_error_detail(value)
        if field == 'non_field_errors':
            return message
        return f"{field}: {message}"
    if isinstance(detail, (list, tuple)):
        if not detail:
            return FALLBACK_MESSAGE
        return flatten_error_detail(detail[0])
    message = str(detail)
    return message or FALLBACK_MESSAGE


def api_exception_handler(exc, context):
    """
    DRF exception handler producing ``{"error": ...}`` bodies.

    Configured through ``REST_FRAMEWORK['EXCEPTION_HANDLER']``.
    """
    kind = getattr(exc, 'kind', None)
    if isinstance(kind, ErrorKind):
        body = {'error': str(exc) or FALLBACK_MESSAGE}
        extra = getattr(exc, 'extra', None)
        if extra:
            body.update(extra)
        return Response(body, status=STATUS_BY_KIND[kind])

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(
            "Unhandled error in %s: %s",
            view.__class__.__name__ if view else 'unknown view',
            exc,
            exc_info=exc,
        )
        return None

    if isinstance(exc, Http404):
        message = 'Not found'
    elif isinstance(exc, PermissionDenied):
        message = 'You do not have permission to perform this action.'
    else:
        message = flatten_error_detail(response.data)
    response.data = {'error': message}
    return response
