"""Error codes and exceptions for the engine and its HTTP boundary."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pachislo.config import settings


class ErrorCode(str, Enum):
    """Engine and boundary error codes."""

    UNRECOGNIZED_COMMAND = "UNRECOGNIZED_COMMAND"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INSUFFICIENT_BALLS = "INSUFFICIENT_BALLS"
    HOST_CALLBACK_FAILURE = "HOST_CALLBACK_FAILURE"
    INVALID_REQUEST = "INVALID_REQUEST"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.UNRECOGNIZED_COMMAND: 400,
    ErrorCode.INVALID_CONFIGURATION: 422,
    ErrorCode.INSUFFICIENT_BALLS: 409,
    ErrorCode.HOST_CALLBACK_FAILURE: 502,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}

# A recoverable error leaves the session usable for the next command.
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.UNRECOGNIZED_COMMAND: True,
    ErrorCode.INVALID_CONFIGURATION: False,
    ErrorCode.INSUFFICIENT_BALLS: True,
    ErrorCode.HOST_CALLBACK_FAILURE: False,
    ErrorCode.INVALID_REQUEST: True,
    ErrorCode.SESSION_NOT_FOUND: False,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class PachisloError(Exception):
    """Base engine error that maps to a protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )


def invalid_configuration(message: str) -> PachisloError:
    """Shorthand used by config and renderer validation."""
    return PachisloError(ErrorCode.INVALID_CONFIGURATION, message)
