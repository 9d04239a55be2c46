# application error taxonomy shared by the service, providers and api
from typing import Any, Dict, Optional


GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred. Please try again later."
GENERATION_FAILED_MESSAGE = "Failed to generate curriculum using AI. Please try again."


class AppError(Exception):
    """Base class for expected failures that carry a machine-readable code"""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    # message that is safe to show to the caller
    @property
    def public_message(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.public_message}


# bad, missing, oversized or wrong-type upload
class ClientInputError(AppError):
    status_code = 400
    default_code = "BAD_REQUEST"


# extraction produced nothing usable
class MalformedDocument(AppError):
    status_code = 400
    default_code = "PDF_PARSE_ERROR"


# backend call failed or its output could not be interpreted
class GenerationFailure(AppError):
    status_code = 502
    default_code = "GENERATION_FAILED"

    def __init__(self, message: str = GENERATION_FAILED_MESSAGE, code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code, details)


class InternalError(AppError):
    status_code = 500
    default_code = "INTERNAL_ERROR"

    @property
    def public_message(self) -> str:
        return GENERIC_INTERNAL_MESSAGE
