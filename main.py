# main.py
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import HOST, LOG_LEVEL, PORT
from database import close_client, ensure_indexes, get_db
from errors import AppError, ValidationError
from routes import attraction, booking, city, country, package, province, review, upload, user
from utils.response import send_error

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

REQUEST_SOURCES = {"body", "query", "path", "header", "cookie"}

app = FastAPI(title="Travel Booking API")

app.include_router(user.router, prefix="/user", tags=["user"])
app.include_router(country.router, prefix="/country", tags=["country"])
app.include_router(province.router, prefix="/province", tags=["province"])
app.include_router(city.router, prefix="/city", tags=["city"])
app.include_router(attraction.router, prefix="/attraction", tags=["attraction"])
app.include_router(package.router, prefix="/package", tags=["package"])
app.include_router(booking.router, prefix="/booking", tags=["booking"])
app.include_router(review.router, prefix="/review", tags=["review"])
app.include_router(upload.router, prefix="/upload", tags=["upload"])


def format_location(loc) -> str:
    parts = list(loc)
    if parts and parts[0] in REQUEST_SOURCES and len(parts) > 1:
        parts = parts[1:]
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def format_validation_error(error: dict) -> str:
    """Flatten one pydantic error into ``items[0].qtyAdults: ...``."""
    location = format_location(error.get("loc", ()))
    if error.get("type") == "missing":
        return f"{location} is required"
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return f"{location} {error['ctx']['error']}"
    return f"{location}: {error.get('msg')}"


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    errors = exc.errors if isinstance(exc, ValidationError) else None
    return send_error(exc.status_code, exc.message, exc.detail, errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    exc = ValidationError(format_validation_error(error) for error in exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return send_error(exc.status_code, exc.message, errors=exc.errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return send_error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return send_error(500, "Internal server error", str(exc))


@app.get("/")
async def root():
    return {"message": "API is running..."}


@app.on_event("startup")
async def create_indexes():
    await ensure_indexes(get_db())


@app.on_event("shutdown")
async def shutdown_db_client():
    await close_client()


if __name__ == "__main__":
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
