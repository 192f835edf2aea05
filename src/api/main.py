import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_settings
from api.metrics import GENERATION_ERRORS_TOTAL, REQUESTS_TOTAL
from api.routers import generate, ops
from microskill.errors import GenerationError

# Logging configuration
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="MicroSkill")
app.include_router(generate.router)
app.include_router(ops.router)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    # Upstream trouble is a bad gateway; our own misconfiguration is a 500
    status_code = 502 if exc.source == "provider" else 500
    logger.error(f"Generation failed on {request.url.path}: {exc!r} {exc.message}")

    GENERATION_ERRORS_TOTAL.labels(provider=exc.provider or "none", code=exc.code).inc()
    REQUESTS_TOTAL.labels(endpoint=request.url.path, status="error").inc()
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    REQUESTS_TOTAL.labels(endpoint=request.url.path, status="rejected").inc()
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    REQUESTS_TOTAL.labels(endpoint=request.url.path, status="rejected").inc()
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )
