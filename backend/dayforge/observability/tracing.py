"""Span helpers on top of Opik traces."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from dayforge.observability import client as opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def get_opik_client():
    return opik_client.get_opik_client()


def _start_trace(name: str, metadata: Dict[str, Any]) -> Optional["Trace"]:
    client = get_opik_client()
    if not client:
        return None
    try:
        return client.trace(name=name, metadata=metadata or None)
    except Exception as exc:  # pragma: no cover - exporter failures never break planning
        logger.debug("Unable to start Opik trace %s: %s", name, exc)
        return None


def _close_trace(name: str, opik_trace: Optional["Trace"]) -> None:
    if not opik_trace:
        return
    try:
        opik_trace.end()
    except Exception:  # pragma: no cover
        logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Wrap a unit of work in an Opik trace.

    Yields None when tracing is disabled, so callers must guard updates.
    Exceptions are attached to the trace and re-raised unchanged.
    """
    trace_metadata = {key: value for key, value in (metadata or {}).items() if value is not None}
    if user_id:
        trace_metadata.setdefault("user_id", str(user_id))
    if request_id:
        trace_metadata.setdefault("request_id", request_id)

    opik_trace = _start_trace(name, trace_metadata)
    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            try:
                opik_trace.update(error_info={"exception_type": type(exc).__name__, "message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to Opik trace %s", name, exc_info=True)
        raise
    finally:
        _close_trace(name, opik_trace)
