import logging
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from ledgerapi import containers
from ledgerapi.config import settings
from ledgerapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from ledgerapi.core.exceptions import BaseAPIException
from ledgerapi.logging_config import setup_logging
from ledgerapi.routers import (
    account_router,
    attendance_router,
    batch_router,
    discussion_router,
    favorites_router,
    health_router,
    recovery_router,
    token_router,
)

load_dotenv("ledgerapi/.env")

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Request: {request.method} {request.url}")
        response = await call_next(request)
        logger.info(f"Response: {response.status_code}")
        return response

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(account_router.router, prefix=settings.API_V1_STR)
    app.include_router(token_router.router, prefix=settings.API_V1_STR)
    app.include_router(attendance_router.router, prefix=settings.API_V1_STR)
    app.include_router(recovery_router.router, prefix=settings.API_V1_STR)
    app.include_router(favorites_router.router, prefix=settings.API_V1_STR)
    app.include_router(discussion_router.router, prefix=settings.API_V1_STR)
    app.include_router(batch_router.router, prefix=settings.API_V1_STR)

    return app


app = create_app()

handler = Mangum(app)
