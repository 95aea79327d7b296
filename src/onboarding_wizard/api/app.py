"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from onboarding_wizard.api.onboarding import router as onboarding_router
from onboarding_wizard.app_logging import configure_logging
from onboarding_wizard.containers import AppContainer
from onboarding_wizard.errors import (
    EntityValidationError,
    IdentifierFormatError,
    OnboardingError,
    ProductNotFoundError,
    RequestFormatError,
    SessionNotFoundError,
    StoreError,
)

_STATUS_BY_ERROR: dict[type[OnboardingError], int] = {
    IdentifierFormatError: status.HTTP_400_BAD_REQUEST,
    RequestFormatError: status.HTTP_400_BAD_REQUEST,
    EntityValidationError: status.HTTP_400_BAD_REQUEST,
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(onboarding_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.exception(
            "Onboarding store failure",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        body = _error_body("Internal server error", exc.code)
        if container.settings.is_local:
            body["debug"] = repr(exc.__cause__ or exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body
        )

    @app.exception_handler(OnboardingError)
    async def onboarding_error_handler(
        request: Request, exc: OnboardingError
    ) -> JSONResponse:
        details = (
            [violation.to_dict() for violation in exc.violations]
            if isinstance(exc, EntityValidationError)
            else []
        )
        return JSONResponse(
            status_code=_status_for(exc),
            content=_error_body(str(exc), exc.code, details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "code": error["type"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(
                "Invalid request body", RequestFormatError.code, details
            ),
        )

    return app


def _status_for(exc: OnboardingError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(
    message: str, code: str, details: list[dict[str, str]] | None = None
) -> dict[str, object]:
    return {"error": message, "code": code, "details": details or []}
