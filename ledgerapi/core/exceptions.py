from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class ErrorCode:
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    INTERNAL = "INTERNAL"


class BaseAPIException(HTTPException):
    """Base exception for API errors"""
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details
                }
            }
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class InvalidArgumentError(BaseAPIException):
    """Malformed, missing or out-of-range input"""
    def __init__(self, message: str = "Invalid argument", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=ErrorCode.INVALID_ARGUMENT,
            message=message,
            details=details
        )


class NotFoundError(BaseAPIException):
    """Resource not found errors"""
    def __init__(self, message: str = "Resource not found", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=ErrorCode.NOT_FOUND,
            message=message,
            details=details
        )


class AlreadyExistsError(BaseAPIException):
    """Duplicate daily claim, device already bound to an active account"""
    def __init__(self, message: str = "Resource already exists", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code=ErrorCode.ALREADY_EXISTS,
            message=message,
            details=details
        )


class FailedPreconditionError(BaseAPIException):
    """Operation rejected by current state (e.g. balance would go negative)"""
    def __init__(self, message: str = "Failed precondition", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            error_code=ErrorCode.FAILED_PRECONDITION,
            message=message,
            details=details
        )


class InsufficientBalanceError(FailedPreconditionError):
    """Insufficient balance errors"""
    def __init__(self, message: str = "Insufficient tokens", details: Optional[Dict] = None):
        super().__init__(message=message, details=details)


class ResourceExhaustedError(BaseAPIException):
    """Quota exceeded errors"""
    def __init__(self, message: str = "Resource exhausted", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code=ErrorCode.RESOURCE_EXHAUSTED,
            message=message,
            details=details
        )


class InternalServerError(BaseAPIException):
    """Internal server errors"""
    def __init__(self, message: str = "Internal server error", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=ErrorCode.INTERNAL,
            message=message,
            details=details
        )
