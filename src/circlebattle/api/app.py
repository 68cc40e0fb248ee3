"""FastAPI application wiring for the circle battle engine."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from circlebattle.api import routes
from circlebattle.api.runtime import ApiState, build_state
from circlebattle.config import get_settings
from circlebattle.errors import BattleEngineError, ErrorCode

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FAILED_PRECONDITION: status.HTTP_412_PRECONDITION_FAILED,
    ErrorCode.ABORTED: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def battle_engine_error_handler(
    request: Request, exc: BattleEngineError
) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"code": str(exc.code), "detail": exc.detail},
    )


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Circle Battle API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BattleEngineError, battle_engine_error_handler)
    app.include_router(routes.router)
    return app


app = create_app()
