import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL, PUBLIC_URL, SECRET_KEY
from .database import create_tables
from .errors import IdentityProviderError, StoreError
from .logging_setup import setup_logging
from .routers import auth, comments, pages, tasks

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Tasks+",
    description="Personal tasks with public sharing and comments",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Holds the OAuth state between the sign-in redirect and the callback
app.add_middleware(
    SessionMiddleware,
    secret_key=SECRET_KEY,
    session_cookie="oauth_state",
    max_age=10 * 60,
    same_site="lax",
    https_only=PUBLIC_URL.startswith("https://"),
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(comments.router, prefix="/api", tags=["comments"])
app.include_router(pages.router, include_in_schema=False)


# Create tables on startup
@app.on_event("startup")
def on_startup():
    create_tables()


@app.get("/health")
def health_check():
    return {"status": "healthy"}


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api")


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    message = "The service is temporarily unavailable. Please try again."
    if _wants_json(request):
        return JSONResponse(status_code=503, content={"detail": message, "retryable": True})
    return pages.templates.TemplateResponse(
        request,
        "error.html",
        {"user": auth.read_session(request), "message": message},
        status_code=503,
    )


@app.exception_handler(IdentityProviderError)
async def identity_error_handler(request: Request, exc: IdentityProviderError):
    logger.warning("Sign-in failed: %s", exc)
    message = "Sign-in with the identity provider failed. Please try again."
    # Only the browser-facing sign-in routes raise this.
    return pages.templates.TemplateResponse(
        request,
        "error.html",
        {"user": None, "message": message},
        status_code=502,
    )
