"""Tests for telemetry primitives and their use in the form service."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import pytest

from voiceform.services.result import ServiceError, ServiceResult
from voiceform.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)

# ── Span ─────────────────────────────────────────────────────────────


class TestSpan:
    def test_duration_zero_until_ended(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="s")
        time.sleep(0.002)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_omits_empty_sections(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "annotations" not in d
        assert "children" not in d

    def test_to_dict_nests_children_and_annotations(self) -> None:
        root = Span(name="root")
        child = Span(name="classify", parent=root)
        child.annotate("command", "set_field")
        root.children.append(child)
        child.end()
        root.end()
        d = root.to_dict()
        assert d["children"][0]["name"] == "classify"
        assert d["children"][0]["annotations"] == {"command": "set_field"}


# ── trace_span ───────────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_enabled_without_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("x") as span:
            assert span is None

    def test_child_attached_to_current(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("a") as a:
                assert a is not None
                with trace_span("b"):
                    pass
            assert [c.name for c in root.children] == ["a"]
            assert [c.name for c in root.children[0].children] == ["b"]
            assert root.children[0].end_time is not None
        finally:
            _current_span.reset(token)


# ── @traced ──────────────────────────────────────────────────────────


class TestTraced:
    def test_noop_when_disabled(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="op")

        assert op().meta is None

    def test_injects_meta_when_enabled(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("stage"):
                pass
            return ServiceResult(ok=True, op="op", meta={"existing": 1})

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["existing"] == 1
        tel = result.meta["telemetry"]
        assert tel["name"].endswith("op")
        assert tel["children"][0]["name"] == "stage"

    def test_error_result_gets_telemetry(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=False, op="op", error=ServiceError(code="X", message="no"))

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert "telemetry" in result.meta

    def test_nested_traced_calls_become_children(self) -> None:
        @traced
        def inner() -> ServiceResult:
            return ServiceResult(ok=True, op="inner")

        @traced
        def outer() -> ServiceResult:
            inner_result = inner()
            assert inner_result.meta is None  # only the root carries the tree
            return ServiceResult(ok=True, op="outer")

        enable_telemetry()
        result = outer()
        assert result.meta is not None
        assert result.meta["telemetry"]["children"][0]["name"].endswith("inner")

    def test_exception_propagates_and_restores_context(self) -> None:
        @traced
        def op() -> ServiceResult:
            raise ValueError("boom")

        enable_telemetry()
        with pytest.raises(ValueError, match="boom"):
            op()
        assert _current_span.get() is None

    def test_non_result_passthrough(self) -> None:
        @traced
        def op() -> str:
            return "plain"

        enable_telemetry()
        assert op() == "plain"


class TestGetCurrentSpan:
    def test_none_when_disabled(self) -> None:
        assert get_current_span() is None

    def test_current_when_enabled(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            assert get_current_span() is root
        finally:
            _current_span.reset(token)
            disable_telemetry()


# ── Service integration ─────────────────────────────────────────────


class TestTracedService:
    def test_transcript_span_tree(self, service: Any) -> None:
        asyncio.run(service.start_listening())
        enable_telemetry()
        result = service.handle_transcript("set salary to 50k")
        assert result.ok
        tel = result.meta["telemetry"]
        assert tel["name"] == "VoiceFormService.handle_transcript"
        children = {c["name"]: c for c in tel["children"]}
        assert children["classify"]["annotations"] == {"command": "set_field"}
        set_span = children["VoiceFormService.set_field"]
        assert set_span["children"][0]["annotations"] == {"kind": "currency"}
