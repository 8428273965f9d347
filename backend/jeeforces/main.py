"""Main FastAPI application"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from redis import Redis, RedisError
from pathlib import Path
from typing import Optional
import logging
import traceback
import time
import uuid

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from jeeforces.config import Settings, settings as default_settings
from jeeforces.core.database import build_engine, build_session_factory, init_db
from jeeforces.core.exceptions import BaseAPIException
from jeeforces.core.route_guard import GuardDecision, evaluate, is_guarded
from jeeforces.core.session import resolve_identity
from jeeforces.core.timeutil import utcnow
from jeeforces.schemas.response import HealthResponse
from jeeforces.services.mailer import Mailer
from jeeforces.services.rate_limiter import build_rate_limiters
from jeeforces.services.user_service import user_service
from jeeforces.api.v1 import admin, auth, contests, discussions, problems, reports, site, submissions, users

# Configure logging - ensure log directory exists
_log_dir = Path(default_settings.get_log_file()).parent
_log_dir.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(default_settings.get_log_file()),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "jeeforces_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "jeeforces_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)
GUARD_REDIRECTS = Counter(
    "jeeforces_route_guard_redirects_total",
    "Page requests redirected by the route guard",
    ["location"],
)


def _error_body(request: Request, message: str, details=None) -> dict:
    body = {
        "success": False,
        "error": message,
        "path": request.url.path,
        "timestamp": utcnow().isoformat(),
    }
    if details is not None:
        body["details"] = details
    return body


def create_app(settings: Optional[Settings] = None, redis_client: Optional[Redis] = None) -> FastAPI:
    """
    Build the application and its shared resources

    Args:
        settings: Configuration; the environment-derived settings by default
        redis_client: Redis connection; one is opened from REDIS_URL by default

    Returns:
        Configured FastAPI app
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None
    )

    engine = build_engine(settings)
    if redis_client is None:
        redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.redis = redis_client
    app.state.rate_limiters = build_rate_limiters(redis_client, settings)
    app.state.mailer = Mailer(settings)

    # GZip compression for large responses
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def guard_pages(request: Request, call_next):
        """Redirect page requests the caller may not see"""
        path = request.url.path
        if not is_guarded(path):
            return await call_next(request)

        decision = evaluate(path, resolve_identity(request))
        if decision is GuardDecision.ALLOW:
            return await call_next(request)

        GUARD_REDIRECTS.labels(decision.location).inc()
        return RedirectResponse(decision.location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    # Security headers + request timing middleware
    @app.middleware("http")
    async def add_headers_and_timing(request: Request, call_next):
        """Add security headers and log slow requests"""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["X-Request-ID"] = request_id

        REQUEST_COUNT.labels(request.method, request.url.path, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(request.method, request.url.path).observe(duration)

        if duration > 1.0:
            logger.warning(
                "Slow request: %s %s took %.2fs request_id=%s",
                request.method,
                request.url.path,
                duration,
                request_id,
            )

        return response

    # Exception handlers
    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        """Handle custom API exceptions"""
        logger.error(
            f"API Exception: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "details": exc.details,
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors"""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"]
            })

        logger.warning(
            f"Validation error: {errors}",
            extra={"path": request.url.path, "method": request.method}
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(request, "Validation failed", errors),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors"""
        logger.error(
            f"Database error: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "traceback": traceback.format_exc()
            }
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "A database error occurred. Please try again later."),
        )

    @app.exception_handler(RedisError)
    async def redis_exception_handler(request: Request, exc: RedisError):
        """Handle key-value store errors"""
        logger.error(
            f"Redis error: {str(exc)}",
            extra={"path": request.url.path, "method": request.method}
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "Internal Server Error"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.critical(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "traceback": traceback.format_exc()
            }
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "Internal Server Error"),
        )

    # Startup event
    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup"""
        settings.validate_security_settings()
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        # Initialize database
        try:
            init_db(engine, settings)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

        # Create admin user if doesn't exist
        db = app.state.session_factory()
        try:
            user_service.ensure_admin(
                db, settings.ADMIN_USERNAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to create admin user: {e}")
        finally:
            db.close()

    # Shutdown event
    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the database pool and the Redis connection"""
        engine.dispose()
        try:
            redis_client.close()
        except RedisError as e:
            logger.warning(f"Error closing Redis connection: {e}")
        logger.info(f"Shutting down {settings.APP_NAME}")

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint"""
        db_ok, db_error = True, None
        db = app.state.session_factory()
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            db_ok, db_error = False, str(exc)
        finally:
            db.close()

        redis_ok, redis_error = True, None
        try:
            redis_client.ping()
        except RedisError as exc:
            redis_ok, redis_error = False, str(exc)

        return {
            "status": "healthy" if db_ok and redis_ok else "degraded",
            "version": settings.APP_VERSION,
            "timestamp": utcnow().isoformat(),
            "readiness": {
                "database": {"ok": db_ok, "error": db_error},
                "redis": {"ok": redis_ok, "error": redis_error},
            },
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Root endpoint
    @app.get("/api")
    async def root():
        """Root endpoint"""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "docs": "/api/docs" if settings.DEBUG else "disabled"
        }

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api", tags=["Users"])
    app.include_router(problems.router, prefix="/api/problems", tags=["Problems"])
    app.include_router(contests.router, prefix="/api/contests", tags=["Contests"])
    app.include_router(submissions.router, prefix="/api/submissions", tags=["Submissions"])
    app.include_router(discussions.router, prefix="/api/discussions", tags=["Discussions"])
    app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(site.router, tags=["Site"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "jeeforces.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        workers=1 if default_settings.DEBUG else default_settings.WORKERS
    )
