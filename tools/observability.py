"""Observability helpers for instrumenting pipeline operations."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from wear_app.logging_config import get_logger, log_event, operation_context, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value if isinstance(value, (str, int, float, bool, type(None))) else type(value).__name__
    return redact_for_log(preview)


def instrument_operation(
    operation: str,
    input_model: type[BaseModel] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a consumer-facing call with a correlation scope, validation and timing logs.

    When ``input_model`` is given, keyword arguments are validated and replaced
    by the model's dump; a validation failure is logged and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with operation_context(operation) as correlation_id:
                start = time.perf_counter()

                if input_model:
                    try:
                        kwargs = input_model.model_validate(kwargs).model_dump()
                    except ValidationError as exc:
                        log_event(
                            LOGGER,
                            logging.WARNING,
                            "operation_validation_failed",
                            operation=operation,
                            correlation_id=correlation_id,
                            errors=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()],
                        )
                        raise

                log_event(
                    LOGGER,
                    logging.DEBUG,
                    "operation_started",
                    operation=operation,
                    correlation_id=correlation_id,
                    kwargs=_preview_kwargs(kwargs),
                )
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    duration_ms = round((time.perf_counter() - start) * 1000, 2)
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "operation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        duration_ms=duration_ms,
                        exc_info=True,
                    )
                    raise
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                log_event(
                    LOGGER,
                    logging.INFO,
                    "operation_completed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=duration_ms,
                )
                return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
