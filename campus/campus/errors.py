"""Error taxonomy shared by every app.

Each error carries the HTTP status it maps to and a message that is safe to
show to the user. Views turn them into responses with ``error_response``;
websocket consumers turn them into ``error`` frames with ``error_frame``.
"""
import logging
import uuid

from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class CampusError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'error'
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CampusError):
    code = 'validation_error'
    default_message = 'Invalid input'


class EmptyText(ValidationError):
    code = 'empty_text'
    default_message = 'Message cannot be empty'


class DomainNotAllowed(ValidationError):
    code = 'domain_not_allowed'
    default_message = 'Email domain is not allowed'


class AlreadyRequested(ValidationError):
    status_code = status.HTTP_409_CONFLICT
    code = 'already_requested'
    default_message = 'A friend request already exists between these users'


class AuthorizationError(CampusError):
    status_code = status.HTTP_403_FORBIDDEN
    code = 'authorization_error'
    default_message = 'Not allowed'


class NotAuthorized(AuthorizationError):
    code = 'not_authorized'


class InvalidCredentials(AuthorizationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = 'invalid_credentials'
    default_message = 'Invalid email or password'


class NotFoundError(CampusError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'
    default_message = 'Not found'


class NotFound(NotFoundError):
    pass


class TransientBackendError(CampusError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = 'backend_unavailable'
    default_message = 'Service temporarily unavailable, please retry'


def error_body(exc):
    body = {"error": exc.message, "code": exc.code}
    if isinstance(exc, TransientBackendError):
        body["retry"] = True
    return body


def error_response(exc):
    if isinstance(exc, AuthorizationError):
        logger.warning(f"Denied: {exc.message}")
    elif isinstance(exc, TransientBackendError):
        logger.error(f"Backend failure: {exc.message}")
    return Response(error_body(exc), status=exc.status_code)


def error_frame(exc):
    frame = {"type": "error", "event_id": str(uuid.uuid4())}
    frame.update(error_body(exc))
    frame["message"] = frame.pop("error")
    return frame
