"""Tests for metrics and tracing helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from dayforge.observability import metrics
from dayforge.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.error_info: Dict[str, Any] | None = None
        self.ended = False

    def update(self, metadata: Dict[str, Any] | None = None, error_info: Dict[str, Any] | None = None) -> None:
        if metadata:
            self.metadata.update(metadata)
        if error_info:
            self.error_info = error_info

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("day_plan.run.blocks_created", 21, metadata={"user_id": "u-1"})

    assert dummy_client.traces, "Metric call should record a trace"
    recorded = dummy_client.traces[0]
    assert recorded.name == "metric:day_plan.run.blocks_created"
    assert recorded.metadata["value"] == 21
    assert recorded.metadata["user_id"] == "u-1"
    assert recorded.ended is True


def test_trace_drops_empty_metadata_and_tags_ids(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with tracing.trace("day_plan.run", metadata={"date": "2025-11-04", "notes": None}, user_id="u-1", request_id="r-1"):
        pass

    assert dummy_client.traces[0].metadata == {"date": "2025-11-04", "user_id": "u-1", "request_id": "r-1"}


def test_trace_records_error_and_reraises(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(ValueError):
        with tracing.trace("day_plan.run"):
            raise ValueError("bad input")

    recorded = dummy_client.traces[0]
    assert recorded.error_info == {"exception_type": "ValueError", "message": "bad input"}
    assert recorded.ended is True


def test_trace_yields_none_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("day_plan.run") as opik_trace:
        assert opik_trace is None
