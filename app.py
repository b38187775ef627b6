# SPDX-License-Identifier: GPL-3.0-only

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from api_client import ApiError, AuthExpired
from auth import create_auth_service
from routers.v1.api import router as v1_router
from logutils import get_logger
from utils import get_env_var

logger = get_logger(__name__)

LOGIN_PATH = "/auth/login"

environment = get_env_var("ENVIRONMENT", "development").lower()
docs_url = None if environment == "production" else "/docs"
redoc_url = None if environment == "production" else "/redoc"

app = FastAPI(title="Campaign Dashboard", docs_url=docs_url, redoc_url=redoc_url)
app.state.auth_service = create_auth_service()
app.state.last_batch_id = None


@app.exception_handler(AuthExpired)
def auth_expired_handler(request: Request, exc: AuthExpired):
    request.app.state.auth_service.expire()
    logger.warning("Redirecting %s to login: %s", request.url.path, exc.message)
    return JSONResponse({"error": exc.message, "redirect": LOGIN_PATH}, status_code=401)


@app.exception_handler(ApiError)
def api_error_handler(_, exc: ApiError):
    status_code = exc.status_code
    if not status_code or not 400 <= status_code < 500:
        status_code = 502
    logger.error(exc.message)
    return JSONResponse({"error": exc.message}, status_code=status_code)


@app.exception_handler(HTTPException)
def http_exception_handler(_, exc: HTTPException):
    logger.error(exc.detail)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
def validation_exception_handler(_, exc: RequestValidationError):
    first_error = exc.errors()[0]
    field = " ".join(str(loc) for loc in first_error["loc"])
    message = first_error.get("msg", "Invalid input")
    error_message = f"{field}, {message}"

    logger.error(error_message)
    return JSONResponse({"error": error_message}, status_code=400)


@app.exception_handler(Exception)
def internal_exception_handler(_, exc: Exception):
    logger.exception(exc)
    return JSONResponse(
        {"error": "Oops! Something went wrong. Please try again later."},
        status_code=500,
    )


app.include_router(v1_router, prefix="/v1")
