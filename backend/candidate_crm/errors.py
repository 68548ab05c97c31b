"""
Error taxonomy shared by repositories, services and routers.

Components raise a ``CRMError`` subclass with a human-readable message; the
HTTP layer turns it into the uniform ``{"is_success": false, "message": ...}``
envelope.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class CRMError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Operation failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(CRMError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(CRMError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NotFoundOrUnauthorized(NotFound):
    default_message = "Not found or not authorized"


class StorageWriteError(CRMError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to write to storage"


class StorageReadError(CRMError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to read from storage"


class ParseError(CRMError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Failed to parse resume content"


class ExtractionConfigError(CRMError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Resume extraction service not configured"


class ExtractionServiceError(CRMError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to extract resume data"


class OperationFailed(CRMError):
    pass


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"is_success": False, "message": exc.message, "data": None},
    )
