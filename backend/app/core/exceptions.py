"""
Error taxonomy for the E-Shop backend and its HTTP mapping

Services raise these; the handlers registered here turn them into the
unified error body {"success": false, "error": "..."}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """Base class for every error the API reports to clients"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ShopError):
    """Identifier is well-formed but no record matches"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InvalidIdentifierError(ShopError):
    """Identifier is malformed; rejected before any query"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid Id"


class InvalidReferenceError(ShopError):
    """A referenced category, product or user does not exist"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid reference"


class InvalidArgumentError(ShopError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidCredentialsError(ShopError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Password is Wrong"


class InvalidAssetError(ShopError):
    """Uploaded file is missing or of a type we do not accept"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid Image Type"


class MissingAssetError(InvalidAssetError):
    default_message = "No Image in the request"


class AuthenticationError(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PersistenceError(ShopError):
    """The database rejected or failed an operation"""
    default_message = "Database operation failed"


class PaymentGatewayError(ShopError):
    default_message = "Checkout session cannot be created"


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed request fields are reported as a plain 400"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("; ".join(problems) or "Invalid request"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
