import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .routers import user_router
from .configs import Settings, load_settings, configure_logging
from .errors import StreamifyError, InternalError
from .models import init_db, close_db
from .services import UserService, FriendRequestService, FriendshipService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application. Settings are read from the environment
    when none are given.
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Streamify",
        description="Backend of the **Streamify** language-exchange network.\n\n"
                    "Friend requests, friends list and user recommendations.",
        version="1.0.0"
    )
    app.state.settings = settings

    # Stores hold no connection state and can be created right away
    app.state.user_service = UserService()
    app.state.friend_request_service = FriendRequestService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors raised by the services
    @app.exception_handler(StreamifyError)
    async def streamify_exception_handler(request: Request, exc: StreamifyError):
        if isinstance(exc, InternalError):
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message}
        )

    # RequestValidationError (query/path parameters)
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        error_messages = []
        for error in errors:
            field = " -> ".join(str(loc) for loc in error["loc"])
            message = error.get("msg", "Validation error")
            error_messages.append(f"{field}: {message}")

        detail = "; ".join(error_messages) if error_messages else "invalid request data"

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": detail}
        )

    # Connect to the database on startup
    @app.on_event("startup")
    async def startup_db_client():
        client = await init_db(settings)
        app.state.friendship_service = FriendshipService(
            users=app.state.user_service,
            friend_requests=app.state.friend_request_service,
            settings=settings,
            client=client
        )

    @app.on_event("shutdown")
    async def shutdown_db_client():
        close_db()

    app.include_router(user_router.router, prefix="/api/users", tags=["Users"])

    @app.get("/")
    def read_root():
        return {"message": "Server is running"}

    return app


def run():
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "streamify.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=settings.env == "development"
    )
