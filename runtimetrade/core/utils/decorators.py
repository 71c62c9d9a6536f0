"""
Utility decorators for logging store and dashboard operations.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

_CONTEXT_PARAMS = ("user_id", "trade_id", "event_id", "ticker", "side", "shares", "price", "kind")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if isinstance(value, Enum):
        return str(value.value)
    return value


def _extract_operation_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract identifiers and trade fields from function arguments."""
    context: dict[str, Any] = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in ("self", "cls"):
            continue
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif hasattr(value, "ticker") and hasattr(value, "side"):
            context["ticker"] = value.ticker
            context["side"] = _serialize_parameter_value(value.side)
    return context


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Build the correlation context for one call."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()
    return {
        "correlation_id": str(uuid.uuid4())[:8],
        **_extract_operation_context(bound_args),
    }


def _describe_result(result: Any) -> str:
    if result is None or isinstance(result, bool | int | float | str):
        return repr(result)
    record_id = getattr(result, "id", None)
    if record_id is not None:
        return f"{type(result).__name__}({record_id})"
    return type(result).__name__


F = TypeVar("F", bound=Callable[..., Any])


def log_operation(func: F) -> F:
    """Decorator to log a mutating operation with a correlation id and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _setup_logging_context(func, args, kwargs)
        func_name = func.__qualname__
        bound_logger = logger.bind(**context)
        bound_logger.debug(f"Operation started: {func_name} [{context['correlation_id']}]")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            bound_logger.error(
                f"Operation failed: {func_name} [{context['correlation_id']}] "
                f"after {execution_time_ms:.2f}ms: {type(e).__name__}: {e}"
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        bound_logger.info(
            f"Operation completed: {func_name} [{context['correlation_id']}] "
            f"-> {_describe_result(result)} in {execution_time_ms:.2f}ms"
        )
        return result

    return wrapper  # type: ignore
