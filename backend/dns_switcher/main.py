"""
DNS Switcher - Main Application Entry Point
"""
import logging
import os
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from dns_switcher.config import settings
from dns_switcher.exceptions import DnsSwitcherError
from dns_switcher.extensions import limiter
from dns_switcher.routers import dns
from dns_switcher.schemas.dns import ErrorDetail, ErrorResponse, ServiceInfo

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No router connection is opened here; every request opens its own.
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    logger.info(
        "Router %s:%d, custom DNS %s, managed comment '%s'",
        settings.MIKROTIK_HOST, settings.MIKROTIK_PORT, settings.CUSTOM_DNS, settings.APP_COMMENT,
    )
    yield
    logger.info("%s shutting down", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Rate limiting
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.info("%s %s rate limited: %s", request.method, request.url.path, exc.detail)
    body = ErrorResponse(
        error=ErrorDetail(message=f"Rate limit exceeded: {exc.detail}", code="RateLimitExceeded")
    )
    return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content=body.model_dump())


@app.exception_handler(DnsSwitcherError)
async def dns_switcher_error_handler(request: Request, exc: DnsSwitcherError):
    log = logger.warning if exc.status_code >= 500 else logger.info
    log("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    body = ErrorResponse(error=ErrorDetail(message=exc.message, code=type(exc).__name__))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request ID middleware for log correlation
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    if request.url.path.startswith("/api"):
        peer = request.client.host if request.client else "-"
        logger.info("[%s] %s %s from %s -> %d", request_id, request.method, request.url.path, peer, response.status_code)
    return response


# CSRF Origin validation middleware
@app.middleware("http")
async def csrf_origin_check(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        origin = request.headers.get("origin")
        if origin:
            allowed = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else []
            if allowed and origin not in allowed:
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content=ErrorResponse(
                        error=ErrorDetail(message="Origin not allowed", code="OriginNotAllowed")
                    ).model_dump(),
                )
    return await call_next(request)


# Security headers middleware
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.HTTPS_ONLY:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


# Routers
app.include_router(dns.router)


@app.get("/api", response_model=ServiceInfo)
async def service_info():
    return ServiceInfo(
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        custom_dns=settings.CUSTOM_DNS,
        endpoints={
            "GET /api/dns": "Show current DNS mode for the calling client",
            "PUT /api/dns": f"Switch to custom DNS ({settings.CUSTOM_DNS})",
            "DELETE /api/dns": "Remove custom DNS (use default from DHCP server)",
        },
    )


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": settings.APP_VERSION}


# Serve frontend static files when present
if os.path.exists(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="frontend")


def run():
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, proxy_headers=False)
