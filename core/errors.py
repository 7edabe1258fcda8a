# core/errors.py
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("uvicorn.error")

REQUEST_ID_HEADER = "X-Request-Id"

UPLOAD_ERROR_MESSAGES = {
    "LIMIT_FILE_SIZE": "Uploaded file is too large.",
    "LIMIT_FILE_COUNT": "Too many files uploaded.",
    "LIMIT_UNEXPECTED_FILE": "Unexpected file field. Use 'files' or 'file'.",
    "UNSUPPORTED_FILE": "Unsupported file type.",
}


class UploadError(Exception):
    """Raised by the upload helpers when a multipart file breaks a limit."""

    def __init__(self, code: str, field: Optional[str] = None, message: Optional[str] = None):
        self.code = code
        self.field = field
        self.message = message or UPLOAD_ERROR_MESSAGES.get(code, f"Upload error: {code}")
        super().__init__(self.message)


def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
    return request_id


def _reply(
    request: Request,
    status_code: int,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    request_id = get_request_id(request)
    body = {"error": message, "requestId": request_id}
    if extra:
        body.update(extra)
    response_headers = {REQUEST_ID_HEADER: request_id}
    if headers:
        response_headers.update(headers)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=response_headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return _reply(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return _reply(request, 400, "Validation failed", {"details": details})


async def upload_exception_handler(request: Request, exc: UploadError) -> JSONResponse:
    extra: Dict[str, Any] = {"code": exc.code}
    if exc.field:
        extra["field"] = exc.field
    return _reply(request, 400, exc.message, extra)


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} integrity error: {exc.orig}")
    return _reply(request, 409, "Resource already exists")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _reply(request, 500, str(exc) or "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UploadError, upload_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
