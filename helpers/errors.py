from fastapi import Request
from fastapi.responses import JSONResponse


class DirectoryError(Exception):
    """Base for errors raised by the directory and the availability resolver.

    Each subclass carries the HTTP status it is rendered with.
    """

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInput(DirectoryError):
    status_code = 400


class NotFound(DirectoryError):
    status_code = 404


class Conflict(DirectoryError):
    status_code = 409


async def directory_error_handler(request: Request, exc: DirectoryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
