"""Tests for stage pipeline building, running and logging."""

from __future__ import annotations

import logging

import pytest

from docrest_core import (
    ConfigurationError,
    ErrorHandler,
    IStage,
    LoggingMiddleware,
    ResourceRequest,
    build_pipeline,
    run_pipeline,
)


class TrackingStage(IStage):
    """Test stage that records when it runs."""

    def __init__(self, name: str, calls: list[str]):
        self.name = name
        self.calls = calls

    async def __call__(self, request, next_stage):
        self.calls.append(f"{self.name}_before")
        result = await next_stage(request)
        self.calls.append(f"{self.name}_after")
        return result


class FailingStage(IStage):
    def __init__(self, error: Exception):
        self.error = error

    async def __call__(self, request, next_stage):
        raise self.error


@pytest.mark.asyncio
class TestBuildPipeline:
    async def test_no_stages_calls_handler_directly(self) -> None:
        async def handler(request):
            return "result"

        pipeline = build_pipeline([], handler)

        assert await pipeline(ResourceRequest()) == "result"

    async def test_first_stage_is_outermost(self) -> None:
        calls: list[str] = []

        async def handler(request):
            calls.append("handler")

        pipeline = build_pipeline(
            [TrackingStage("outer", calls), TrackingStage("inner", calls)], handler
        )
        await pipeline(ResourceRequest())

        assert calls == [
            "outer_before",
            "inner_before",
            "handler",
            "inner_after",
            "outer_after",
        ]


@pytest.mark.asyncio
class TestRunPipeline:
    async def test_failure_skips_remaining_stages(self) -> None:
        calls: list[str] = []

        async def handler(request):
            calls.append("handler")

        pipeline = build_pipeline(
            [FailingStage(ValueError("boom")), TrackingStage("later", calls)], handler
        )
        request = await run_pipeline(pipeline, ResourceRequest(), ErrorHandler())

        assert calls == []
        assert request.state.status_code == 400
        assert request.state.result["message"] == "boom"

    async def test_configuration_error_propagates(self) -> None:
        async def handler(request):
            raise ConfigurationError("misconfigured")

        pipeline = build_pipeline([], handler)

        with pytest.raises(ConfigurationError):
            await run_pipeline(pipeline, ResourceRequest(), ErrorHandler())

    async def test_success_returns_request(self) -> None:
        async def handler(request):
            request.state.status_code = 200
            request.state.result = [1, 2]

        request = ResourceRequest()
        returned = await run_pipeline(
            build_pipeline([], handler), request, ErrorHandler()
        )

        assert returned is request
        assert request.state.result == [1, 2]


@pytest.mark.asyncio
class TestLoggingMiddleware:
    async def test_logs_start_and_completion(self, caplog) -> None:
        async def handler(request):
            return None

        pipeline = build_pipeline([LoggingMiddleware("customers", "get_items")], handler)
        request = ResourceRequest()

        with caplog.at_level(logging.INFO, logger="docrest.middleware"):
            await pipeline(request)

        messages = [r.getMessage() for r in caplog.records]
        assert any(
            "Handling get_items customers" in m and request.request_id in m
            for m in messages
        )
        assert any("get_items customers completed" in m for m in messages)

    async def test_logs_and_reraises_failures(self, caplog) -> None:
        async def handler(request):
            raise ValueError("boom")

        pipeline = build_pipeline([LoggingMiddleware("customers", "create")], handler)

        with caplog.at_level(logging.INFO, logger="docrest.middleware"):
            with pytest.raises(ValueError):
                await pipeline(ResourceRequest())

        assert any("create customers failed" in r.getMessage() for r in caplog.records)

    async def test_configuration_errors_are_not_logged(self, caplog) -> None:
        async def handler(request):
            raise ConfigurationError("bad access level")

        pipeline = build_pipeline([LoggingMiddleware("customers", "get_items")], handler)

        with caplog.at_level(logging.INFO, logger="docrest.middleware"):
            with pytest.raises(ConfigurationError):
                await pipeline(ResourceRequest())

        assert not any(r.levelno >= logging.ERROR for r in caplog.records)
        assert not any("failed" in r.getMessage() for r in caplog.records)
