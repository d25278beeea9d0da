"""Translate tool exceptions into HTTP errors."""

import logging
import traceback
from functools import wraps
from typing import Callable, TypeVar

from fastapi import HTTPException

from uslex.core.exceptions import InputValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def error_detail(error: Exception, **fields) -> dict:
    return {"error_type": type(error).__name__, "error_message": str(error), **fields}


def handle_errors(func: Callable[..., T]) -> Callable[..., T]:
    """Route decorator: bad tool arguments become 400s naming the field, anything unexpected a 500.

    HTTPExceptions raised by the route pass through untouched.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except InputValidationError as e:
            raise HTTPException(status_code=400, detail=error_detail(e, field=e.field))
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=500, detail=error_detail(e, traceback=traceback.format_exc())
            )

    return wrapper
