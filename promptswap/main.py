"""
FastAPI application main module.
Wires request correlation, logging, error handling and the swap routes.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
from contextlib import asynccontextmanager
from promptswap import config
from promptswap.api.routes import api_router
from promptswap.api.deps import load_swap_action_handler, register_swap_action_handler
from promptswap.errors import AppError, ErrorCodes, code_for_status
from promptswap.models.schemas import error_response, success_response
from promptswap.utils import (
    bind_request_id,
    get_logger,
    get_request_id,
    reset_request_id,
    setup_logging,
    with_request_id_header,
)

# Setup logging before creating the app
setup_logging(
    log_level=config.LOG_LEVEL,
    log_file=config.LOG_FILE,
    enable_console=True
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Binds the configured swap action handler on startup.
    """
    logger.info("Application startup initiated")
    try:
        if config.SWAP_ACTION_HANDLER:
            handler = load_swap_action_handler(config.SWAP_ACTION_HANDLER)
            register_swap_action_handler(app, handler)
        else:
            logger.warning("SWAP_ACTION_HANDLER not set; swap action routes will return 503")
        logger.info("Application startup completed successfully")
        yield
    except Exception as e:  # pragma: no cover
        logger.error("Application startup failed", error=str(e), exc_info=True)
        raise
    finally:
        logger.info("Application shutdown completed")

app = FastAPI(
    title="PromptSwap Swap API",
    description="""
    Route layer for prompt swaps.

    ## Swap actions
    `POST /api/swaps/{id}/cancel` and `POST /api/swaps/{id}/accept` forward to the
    configured swap action handler and return its response unchanged.

    ## Request correlation
    Send `x-request-id` to correlate a call across logs; every response echoes it,
    or carries a freshly generated UUID when none was supplied.
    """,
    version=config.SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-request-id", "X-Process-Time"],
)

# Request ID and comprehensive logging middleware
@app.middleware("http")
async def add_request_context_and_logging(request: Request, call_next):
    """
    Add request ID, timing, and request/response logging.
    """
    request_id = get_request_id(request)
    request.state.request_id = request_id
    request.state.start_time = time.time()
    # Everything logged below, including the route and its dependencies, carries this ID.
    token = bind_request_id(request_id)
    try:
        logger.info(
            "Request started",
            method=request.method,
            url=str(request.url),
            user_agent=request.headers.get("User-Agent"),
            remote_addr=request.client.host if request.client else "unknown"
        )

        response = await call_next(request)

        process_time = time.time() - request.state.start_time

        with_request_id_header(response, request_id)
        response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"

        logger.info(
            "Request completed",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2)
        )

        return response
    finally:
        reset_request_id(token)

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id(request)

# Custom exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render operational errors with their own status and code."""
    request_id = _request_id(request)

    logger.warning(
        "Application error",
        code=exc.code,
        category=exc.category.value,
        status_code=exc.status_code,
        detail=exc.message,
        url=str(request.url),
        method=request.method
    )

    return with_request_id_header(
        JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.code, exc.message, jsonable_encoder(exc.details), request_id)
        ),
        request_id
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    request_id = _request_id(request)
    errors = jsonable_encoder(exc.errors())

    logger.warning(
        "Request validation failed",
        errors=errors,
        url=str(request.url),
        method=request.method
    )

    return with_request_id_header(
        JSONResponse(
            status_code=422,
            content=error_response(ErrorCodes.VALIDATION_ERROR, "Request validation failed", {"errors": errors}, request_id)
        ),
        request_id
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    request_id = _request_id(request)

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        url=str(request.url),
        method=request.method
    )

    response = JSONResponse(
        status_code=exc.status_code,
        content=error_response(code_for_status(exc.status_code), str(exc.detail), None, request_id),
        headers=getattr(exc, "headers", None)
    )
    return with_request_id_header(response, request_id)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions.

    Runs in the server error middleware, outside the request context, so the
    request ID is passed to the logger explicitly.
    """
    request_id = _request_id(request)

    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=request_id,
        url=str(request.url),
        method=request.method,
        exc_info=True
    )

    return with_request_id_header(
        JSONResponse(
            status_code=500,
            content=error_response(ErrorCodes.INTERNAL_ERROR, "Internal server error", None, request_id)
        ),
        request_id
    )

# Health check endpoints
@app.get("/health", tags=["health"], summary="Basic health check")
async def health_check():
    """Basic health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "timestamp": time.time(),
    }

@app.get("/health/detailed", tags=["health"], summary="Detailed health check")
async def detailed_health_check():
    """Detailed health check with database and swap handler status."""
    health_status = {
        "status": "healthy",
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "timestamp": time.time(),
        "checks": {}
    }

    try:
        from promptswap.database import SessionLocal
        from sqlalchemy import text
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    handler = getattr(app.state, "swap_action_handler", None)
    health_status["checks"]["swap_action_handler"] = "registered" if handler is not None else "missing"
    if handler is None and health_status["status"] == "healthy":
        health_status["status"] = "degraded"

    return health_status

@app.get("/", tags=["root"])
async def root():
    """API root endpoint with basic information."""
    return success_response({
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api"
    })

app.include_router(api_router, prefix="/api")

# Development server configuration
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting development server")

    uvicorn.run(
        "promptswap.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["promptswap"],
        log_level="info",
        access_log=True
    )
