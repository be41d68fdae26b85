# accounting/api/errors.py

"""
Maps domain errors raised by services to HTTP responses.

validation / configuration / budget -> 400
not found                           -> 404
posting failure                     -> 409
"""

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    BudgetExceededError,
    NotFoundError,
    PostingFailedError,
)


def service_error_response(exc: AccountingServiceError) -> Response:
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, PostingFailedError):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

    payload = {"detail": str(exc)}
    if isinstance(exc, BudgetExceededError):
        payload["violations"] = [
            {k: str(v) for k, v in violation.items()} for violation in exc.violations
        ]
    return Response(payload, status=status.HTTP_400_BAD_REQUEST)
