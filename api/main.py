import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from assets.paths import PUBLIC_PREFIX
from assets.storage import init_store
from catalog import router as catalog_router
from content import router as content_router
from core import db, envelope, settings
from core.errors import ApiError
from core.logging import configure_logging
from records import registry
from records import router as records_router

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Upload directories and the DB pool are created once per process.
    configure_logging()
    init_store(settings.upload_root(), registry.upload_subdirs())
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="dealership-content-api", lifespan=lifespan)

_origins = settings.cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    if response.status_code >= 500:
        level = logging.ERROR
    elif response.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        "%s %s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.exception_handler(ApiError)
async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed error=%s", exc.message)
    return JSONResponse(status_code=exc.status_code, content=envelope.failure(exc.message))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = None
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = f"{location}: {errors[0].get('msg')}" if location else errors[0].get("msg")
    return JSONResponse(status_code=400, content=envelope.failure("Invalid request.", error=detail))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error type=%s", type(exc).__name__)
    return JSONResponse(status_code=500, content=envelope.failure("Internal server error."))


# Fixed paths (e.g. /api/car-service-offers/cards) must win over /{record_id}.
app.include_router(catalog_router.router)
app.include_router(content_router.router)
for resource_router in records_router.all_routers():
    app.include_router(resource_router)

app.mount(
    f"/{PUBLIC_PREFIX}",
    StaticFiles(directory=settings.upload_root(), check_dir=False),
    name=PUBLIC_PREFIX,
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return envelope.ok(message="dealership content api")


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port())
