"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    ConcurrentModificationError,
    InsufficientPointsError,
    RepositoryUnavailableError,
    TaskAlreadyCompletedError,
    TaskNotFoundError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise TaskNotFoundError(7)

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "TASK_NOT_FOUND"
        assert "7" in body["message"]
        assert body["details"]["task_id"] == 7
        assert "retry-after" not in response.headers

    @pytest.mark.asyncio
    async def test_already_completed_is_conflict(self) -> None:
        app = _create_test_app()

        @app.get("/raise-done")
        async def _() -> None:
            raise TaskAlreadyCompletedError(1)

        response = await _get(app, "/raise-done")

        assert response.status_code == 409
        assert response.json()["error_code"] == "TASK_ALREADY_COMPLETED"

    @pytest.mark.asyncio
    async def test_insufficient_points_is_client_error(self) -> None:
        app = _create_test_app()

        @app.get("/raise-points")
        async def _() -> None:
            raise InsufficientPointsError()

        response = await _get(app, "/raise-points")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INSUFFICIENT_POINTS"

    @pytest.mark.asyncio
    async def test_concurrent_modification_sets_retry_after(self) -> None:
        app = _create_test_app()

        @app.get("/raise-conflict")
        async def _() -> None:
            raise ConcurrentModificationError("u1", 3)

        response = await _get(app, "/raise-conflict")

        assert response.status_code == 409
        assert response.headers["retry-after"] == "1"
        body = response.json()
        assert body["error_code"] == "CONCURRENT_MODIFICATION"
        assert body["details"] is None

    @pytest.mark.asyncio
    async def test_repository_unavailable_is_503(self) -> None:
        app = _create_test_app()

        @app.get("/raise-storage")
        async def _() -> None:
            raise RepositoryUnavailableError()

        response = await _get(app, "/raise-storage")

        assert response.status_code == 503
        assert response.json()["error_code"] == "REPOSITORY_UNAVAILABLE"
        assert "retry-after" in response.headers

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            task_id: int = Field(..., ge=1)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"task_id": 0})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.task_id"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
