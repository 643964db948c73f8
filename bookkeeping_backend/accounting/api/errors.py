# accounting/api/errors.py

"""
HTTP MAPPING FOR LEDGER ERRORS

- ledger_error_response : LedgerError -> {"detail": "..."} + its status code
- ledger_exception_handler : DRF EXCEPTION_HANDLER; anything DRF does not
  know about becomes a logged, generic 500

Consistency / store failures never leak internal detail; it is logged only.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from accounting.services.exceptions import GENERIC_FAILURE_MESSAGE, LedgerError

logger = logging.getLogger("ledger.api")


def ledger_error_response(exc: LedgerError) -> Response:
    if exc.http_status >= 500:
        logger.error(
            "Ledger operation failed",
            extra={
                "error": exc.__class__.__name__,
                "internal_detail": str(exc),
                "retryable": exc.retryable,
            },
        )
    return Response({"detail": exc.public_message}, status=exc.http_status)


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerError):
        return ledger_error_response(exc)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    logger.exception(
        "Unhandled API exception",
        extra={"view": view.__class__.__name__ if view is not None else None},
    )
    return Response(
        {"detail": GENERIC_FAILURE_MESSAGE},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
