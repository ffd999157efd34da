"""Translation of service failures into HTTP errors.

Services raise `ValueError` for anything the client got wrong and let
store errors propagate. Controllers wrap service calls in
`service_errors(...)` so both map to the same response shapes
everywhere: 400 with the service message, or 500 with a generic
per-operation message after logging the cause.
"""

import logging
from contextlib import contextmanager

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("app.api")

VALUE_ERROR_PREFIX = "Value error, "


@contextmanager
def service_errors(failure_message: str):
    try:
        yield
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        logger.exception(failure_message)
        raise HTTPException(status_code=500, detail=failure_message) from exc


def validation_message(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into newline-separated human messages.

    Messages raised by our own validators are used verbatim; generic
    type errors are prefixed with the offending field.
    """
    messages = []
    for err in exc.errors():
        ctx_error = (err.get("ctx") or {}).get("error")
        if ctx_error is not None:
            messages.append(str(ctx_error))
            continue
        msg = str(err.get("msg", ""))
        if err.get("type") == "value_error" and msg.startswith(VALUE_ERROR_PREFIX):
            messages.append(msg[len(VALUE_ERROR_PREFIX):])
            continue
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        messages.append(f"{field}: {msg}")
    # keep order, drop duplicates
    return "\n".join(dict.fromkeys(messages))
