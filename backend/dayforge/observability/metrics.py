"""Metric helpers recorded as short Opik traces."""
from __future__ import annotations

from typing import Any, Dict, Optional

from dayforge.observability.tracing import trace


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a single metric value; a no-op when Opik is disabled."""
    payload: Dict[str, Any] = dict(metadata or {})
    payload["value"] = value
    with trace(f"metric:{name}", metadata=payload):
        pass
