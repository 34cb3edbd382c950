from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.api.v1.endpoints import ai, auth, portfolio, uploads
from app.core.config import settings
from app.core.errors import AppError
from app.core.rate_limit import LoginAttemptStore
from app.db.database import close_database_connection, connect_to_database, get_engine
from app.db.schema_probe import SchemaProbe
from contextlib import asynccontextmanager
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = settings.missing_required()
    if missing:
        logger.warning(f"Missing required environment variables: {', '.join(missing)}")
    connect_to_database()
    app.state.schema_probe = SchemaProbe(get_engine())
    app.state.login_attempts = LoginAttemptStore()
    yield
    close_database_connection()


app = FastAPI(title="ResumeCraft API", version="0.3.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(ai.router, prefix="/api/ai", tags=["ai"])
app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])
app.include_router(uploads.router, prefix="/api/upload", tags=["upload"])


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(include_detail=not settings.is_production),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid input") if errors else "Invalid input"
    # pydantic prefixes messages raised from validators
    message = message.removeprefix("Value error, ")
    return JSONResponse(status_code=400, content={"message": message})


@app.get("/", tags=["health"])
async def root():
    """Health check endpoint returning service status."""
    return {"status": "ok", "message": "Resume Builder API is running"}


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
