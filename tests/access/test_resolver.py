"""Tests for AccessResolver and AccessMiddleware."""

from __future__ import annotations

import asyncio

import pytest

from docrest_access import (
    AccessMiddleware,
    AccessResolver,
    AsyncAccessSpec,
    SyncAccessSpec,
    fixed_access,
    get_current_access,
)
from docrest_core import (
    AccessLevel,
    ErrorHandler,
    ResourceRequest,
    UnsupportedAccessError,
    build_pipeline,
    run_pipeline,
)


def _header_access(request: ResourceRequest) -> str:
    return request.headers.get("x-access", "public")


async def _async_header_access(request: ResourceRequest) -> str:
    await asyncio.sleep(0)
    return request.headers.get("x-access", "public")


@pytest.mark.asyncio
class TestAccessResolver:
    async def test_defaults_to_public(self) -> None:
        resolver = AccessResolver()
        assert await resolver.resolve(ResourceRequest()) is AccessLevel.PUBLIC

    @pytest.mark.parametrize("level", ["public", "protected", "private"])
    async def test_sync_spec(self, level: str) -> None:
        resolver = AccessResolver(SyncAccessSpec(_header_access))
        request = ResourceRequest(headers={"x-access": level})
        assert await resolver.resolve(request) == AccessLevel(level)

    @pytest.mark.parametrize("level", ["public", "protected", "private"])
    async def test_async_spec(self, level: str) -> None:
        resolver = AccessResolver(AsyncAccessSpec(_async_header_access))
        request = ResourceRequest(headers={"x-access": level})
        assert await resolver.resolve(request) == AccessLevel(level)

    async def test_fixed_access(self) -> None:
        resolver = AccessResolver(fixed_access("protected"))
        assert await resolver.resolve(ResourceRequest()) is AccessLevel.PROTECTED

    async def test_sync_unsupported_value_raises(self) -> None:
        resolver = AccessResolver(fixed_access("admin"))
        with pytest.raises(UnsupportedAccessError) as exc_info:
            await resolver.resolve(ResourceRequest())
        assert str(exc_info.value) == (
            'Unsupported access, must be "private", "protected" or "public"'
        )

    async def test_async_unsupported_value_raises(self) -> None:
        async def _admin(request):
            return "admin"

        resolver = AccessResolver(AsyncAccessSpec(_admin))
        with pytest.raises(UnsupportedAccessError):
            await resolver.resolve(ResourceRequest())

    def test_rejects_plain_callables(self) -> None:
        with pytest.raises(TypeError):
            AccessResolver(_header_access)  # type: ignore[arg-type]


@pytest.mark.asyncio
class TestAccessMiddleware:
    async def test_stores_level_on_state_and_context(self) -> None:
        seen: list[AccessLevel | None] = []

        async def handler(request):
            seen.append(get_current_access())

        pipeline = build_pipeline(
            [AccessMiddleware(AccessResolver(fixed_access("private")))], handler
        )
        request = ResourceRequest()
        await pipeline(request)

        assert request.state.access is AccessLevel.PRIVATE
        assert seen == [AccessLevel.PRIVATE]
        assert get_current_access() is None

    async def test_async_failure_goes_to_failure_channel(self) -> None:
        async def _broken(request):
            raise RuntimeError("identity service down")

        handler_called = False

        async def handler(request):
            nonlocal handler_called
            handler_called = True

        pipeline = build_pipeline(
            [AccessMiddleware(AccessResolver(AsyncAccessSpec(_broken)))], handler
        )
        request = await run_pipeline(pipeline, ResourceRequest(), ErrorHandler())

        assert handler_called is False
        assert request.state.status_code == 400
        assert request.state.result == {
            "name": "RuntimeError",
            "message": "identity service down",
        }

    async def test_unsupported_value_is_not_reported(self) -> None:
        async def handler(request):
            return None

        pipeline = build_pipeline(
            [AccessMiddleware(AccessResolver(fixed_access("root")))], handler
        )
        request = ResourceRequest()

        with pytest.raises(UnsupportedAccessError):
            await run_pipeline(pipeline, request, ErrorHandler())
        assert request.state.error_reported is False
