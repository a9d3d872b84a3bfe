from __future__ import annotations

"""Optional tracing for service loads.

Spans go to LangSmith and/or Langfuse when their SDK is installed and keys
are configured; otherwise ``traceable`` returns the function untouched.
Both plain and ``async def`` callables are supported.
"""

import atexit
import functools
import inspect
import os
import sys
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, cast

from item_services.config import env_truthy


F = TypeVar("F", bound=Callable[..., Any])
DEFAULT_PROJECT_NAME = "item-services"


try:
    from langsmith import traceable as _langsmith_traceable
except Exception:
    _langsmith_traceable = None

try:
    from langfuse import observe as _langfuse_observe
except Exception:
    _langfuse_observe = None

try:
    from langfuse import get_client as _langfuse_get_client
except Exception:
    _langfuse_get_client = None

try:
    from langfuse import propagate_attributes as _langfuse_propagate_attributes
except Exception:
    _langfuse_propagate_attributes = None


_ATEXIT_REGISTERED = False


def langsmith_enabled() -> bool:
    return env_truthy("ENABLE_LANGSMITH_TRACING", True) and bool(os.getenv("LANGSMITH_API_KEY"))


def langfuse_enabled() -> bool:
    return (
        env_truthy("ENABLE_LANGFUSE_TRACING", True)
        and bool(os.getenv("LANGFUSE_PUBLIC_KEY"))
        and bool(os.getenv("LANGFUSE_SECRET_KEY"))
    )


def _compose_decorators(decorators: list[Callable[[F], F]]) -> Callable[[F], F]:
    def _decorator(func: F) -> F:
        wrapped = func
        # First provider in the list ends up outermost.
        for dec in reversed(decorators):
            wrapped = dec(wrapped)
        return wrapped

    return _decorator


def _langfuse_as_type(run_type: Any) -> str | None:
    value = str(run_type).strip().lower() if run_type is not None else ""
    if value in {"tool", "chain", "retriever"}:
        return value
    return None


def _trace_attributes() -> AbstractContextManager[Any]:
    user_id = os.getenv("LANGFUSE_USER_ID")
    session_id = os.getenv("LANGFUSE_SESSION_ID")
    if not (user_id or session_id) or _langfuse_propagate_attributes is None:
        return nullcontext()
    try:
        return _langfuse_propagate_attributes(user_id=user_id, session_id=session_id)
    except Exception:
        return nullcontext()


def _langfuse_trace_identity_decorator(func: F) -> F:
    if _langfuse_propagate_attributes is None:
        return func

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def _async_wrapped(*f_args: Any, **f_kwargs: Any) -> Any:
            with _trace_attributes():
                return await func(*f_args, **f_kwargs)

        return cast(F, _async_wrapped)

    @functools.wraps(func)
    def _wrapped(*f_args: Any, **f_kwargs: Any) -> Any:
        with _trace_attributes():
            return func(*f_args, **f_kwargs)

    return cast(F, _wrapped)


def traceable(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Return a decorator that fans out traces to enabled providers."""
    decorators: list[Callable[[F], F]] = []

    if langfuse_enabled() and _langfuse_observe is not None:
        lf_kwargs = dict(kwargs)
        as_type = _langfuse_as_type(lf_kwargs.pop("run_type", None))
        if as_type is not None:
            lf_kwargs["as_type"] = as_type
        decorators.append(cast(Callable[[F], F], _langfuse_observe(*args, **lf_kwargs)))
        decorators.append(_langfuse_trace_identity_decorator)

    if langsmith_enabled() and _langsmith_traceable is not None:
        decorators.append(cast(Callable[[F], F], _langsmith_traceable(*args, **kwargs)))

    return _compose_decorators(decorators)


def _flush_tracing_clients() -> None:
    # Short-lived CLI runs would otherwise drop queued spans.
    if _langfuse_get_client is not None and langfuse_enabled():
        try:
            _langfuse_get_client().flush()
        except Exception:
            pass


def configure_tracing(project_name: str = DEFAULT_PROJECT_NAME) -> None:
    """Set provider defaults for whichever tracing backends are configured."""
    global _ATEXIT_REGISTERED

    if langsmith_enabled():
        os.environ.setdefault("LANGSMITH_TRACING", "true")
        os.environ.setdefault("LANGSMITH_PROJECT", project_name)
        if _langsmith_traceable is None:
            print(
                "Warning: LangSmith tracing enabled but langsmith SDK is not installed; LangSmith tracing is disabled.",
                file=sys.stderr,
            )

    if langfuse_enabled():
        os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "true")
        os.environ.setdefault("LANGFUSE_HOST", os.getenv("LANGFUSE_BASE_URL", "https://cloud.langfuse.com"))
        if _langfuse_observe is None:
            print(
                "Warning: Langfuse tracing enabled but langfuse SDK is not installed; Langfuse tracing is disabled.",
                file=sys.stderr,
            )

    if not _ATEXIT_REGISTERED:
        atexit.register(_flush_tracing_clients)
        _ATEXIT_REGISTERED = True
