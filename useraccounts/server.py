# useraccounts/server.py
# FastAPI application factory: wires settings, store and services together

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.collection import Collection
from starlette.exceptions import HTTPException as StarletteHTTPException

from useraccounts.config import Settings
from useraccounts.routes.auth import router as auth_router
from useraccounts.routes.password import router as password_router
from useraccounts.services.account_service import AccountService
from useraccounts.services.credential_store import CredentialStore
from useraccounts.services.notification_service import NotificationSender
from useraccounts.services.otp_service import OTPService
from useraccounts.utils.auth import PasswordHasher, TokenIssuer
from useraccounts.utils.db_setup import get_users_collection, setup_db_indexes
from useraccounts.utils.response import error_response, success_response

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    users: Optional[Collection] = None,
    notifier: Optional[NotificationSender] = None,
) -> FastAPI:
    """Build the API around an already validated Settings instance."""
    if users is None:
        users = get_users_collection(settings)
    setup_db_indexes(users)

    hasher = PasswordHasher(settings.bcrypt_rounds)
    token_issuer = TokenIssuer(
        settings.jwt_secret, settings.jwt_algorithm, settings.token_expire_days
    )
    store = CredentialStore(users, hasher)
    account_service = AccountService(
        settings=settings,
        store=store,
        hasher=hasher,
        tokens=token_issuer,
        otps=OTPService(settings.otp_expiry_minutes),
        notifier=notifier or NotificationSender(settings),
    )

    app = FastAPI(
        title="User Accounts API",
        description="Registration, password and OTP login for user accounts",
        version="1.0.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.credential_store = store
    app.state.token_issuer = token_issuer
    app.state.account_service = account_service

    # Add security headers middleware
    @app.middleware("http")
    async def add_security_headers(request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    origins = ["*"] if settings.is_development else settings.origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    logger.info(f"CORS middleware configured with origins: {origins}")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return error_response(detail, exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Body-level errors have no field path; fall back to the message
        fields = [
            ".".join(str(part) for part in error["loc"][1:]) or error["msg"] for error in exc.errors()
        ]
        return error_response(f"Invalid request fields: {', '.join(fields)}")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return error_response(
            "Internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=str(exc) if settings.is_development else None,
        )

    app.include_router(auth_router, prefix="/api/login")
    app.include_router(password_router, prefix="/api/password")
    logger.info("API routes included")

    # Health check endpoint
    @app.get("/")
    async def root():
        """Return a basic health check message."""
        return success_response("Server is running")

    return app
