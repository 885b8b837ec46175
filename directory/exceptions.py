"""
Directory error taxonomy and the unified API exception handler.

Services raise the domain errors below; the DRF ``EXCEPTION_HANDLER``
setting points at :func:`api_exception_handler`, which turns them into
fixed ``{"message": ...}`` response shapes.  Anything it does not
recognise is logged and answered with a 500.
"""
from __future__ import annotations

import logging
from typing import Optional

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """Base class for errors raised by the directory services."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        data = {'message': self.message}
        if self.field:
            data['field'] = self.field
        return data


class ConflictError(DirectoryError):
    """A uniqueness constraint would be violated."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = 'Record already exists'


class RecordNotFound(DirectoryError):
    """The addressed record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Record not found'


class UnknownReferenceError(DirectoryError):
    """A related id in the payload does not match an existing row."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Unknown reference'

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, ids=()):
        super().__init__(message, field)
        self.ids = sorted(ids)


def api_exception_handler(exc, context):
    if isinstance(exc, DirectoryError):
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, drf_exceptions.ValidationError):
        return Response({'message': 'Validation failed', 'errors': exc.detail}, status=exc.status_code)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.error('Unhandled error in %s', type(view).__name__ if view else 'unknown view', exc_info=exc)
        return Response({'message': DirectoryError.default_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    resp.data = {'message': str(detail)}
    return resp
