from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, TypeVar

from galaswap_arb.common import log_event
from galaswap_arb.trading.errors import RemoteUnavailable, SwapArbError

T = TypeVar("T")

UNEXPECTED_ERROR_REASON = "unexpected_error"


def error_fields(error: BaseException) -> dict[str, Any]:
    if not isinstance(error, SwapArbError):
        return {"reason": UNEXPECTED_ERROR_REASON, "error_type": type(error).__name__}

    fields: dict[str, Any] = {"reason": error.reason}
    if isinstance(error, RemoteUnavailable):
        fields["status"] = error.status
        fields["endpoint"] = error.endpoint
    return fields


async def guarded_call(
    action: Callable[[], Awaitable[T] | T],
    *,
    logger: logging.Logger,
    event: str,
    message: str,
    level: str = "warning",
    default: T | None = None,
    **fields: Any,
) -> T | None:
    """Run ``action`` and log a failure instead of raising it.

    Domain errors are logged at ``level`` with their reason (plus HTTP status and endpoint
    for remote failures). Anything else is logged with its traceback.
    """
    try:
        result = action()
        if inspect.isawaitable(result):
            return await result
        return result
    except asyncio.CancelledError:
        raise
    except Exception as error:
        log_event(
            logger,
            level=level if isinstance(error, SwapArbError) else "exception",
            event=event,
            message=message,
            error=str(error),
            **error_fields(error),
            **fields,
        )
        return default
