"""Map domain errors to HTTP responses.

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Only the error code and
the user-safe message leave the process.
"""

import math

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from booths.domain.errors import (
    AdmissionDeniedError,
    DomainError,
    ErrorCode,
    RateLimitedError,
)

STATUS_BY_CODE = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OPERATOR_INFO: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EXPIRY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.BOOTH_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.OPERATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.SESSION_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.SESSION_INVALID: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.CODE_EXPIRED: status.HTTP_410_GONE,
    ErrorCode.BOOTH_INACTIVE: status.HTTP_403_FORBIDDEN,
    ErrorCode.ADMISSION_DENIED: status.HTTP_409_CONFLICT,
    ErrorCode.CODE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_exception_handler(exc, context):
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    body = {"error": {"code": exc.code.value, "message": exc.message}}
    headers = {}
    if isinstance(exc, AdmissionDeniedError):
        body["error"]["limit"] = exc.limit
    if isinstance(exc, RateLimitedError):
        seconds = max(math.ceil(exc.retry_after.total_seconds()), 1)
        body["error"]["retry_after"] = seconds
        headers["Retry-After"] = str(seconds)
    if exc.retryable:
        body["error"]["retryable"] = True

    return Response(
        body,
        status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
        headers=headers,
    )
