"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Unknown identifier or wrong password"""
    def __init__(self):
        super().__init__("Invalid email/username or password")


# Authorization Errors
class AuthorizationError(BaseAPIException):
    """Insufficient permissions"""
    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, status_code=403)


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", status_code=404)


# Business Logic Errors
class BusinessLogicError(BaseAPIException):
    """Business logic error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class MissingFieldError(BusinessLogicError):
    """A required body field is absent or empty"""


class AlreadyRegisteredError(BusinessLogicError):
    """User is already in the contest's participant set"""
    def __init__(self):
        super().__init__("Already registered")


class InvalidVerificationLinkError(BusinessLogicError):
    """Verification token absent, unknown, consumed or expired"""
    def __init__(self, message: str = "Link expired or invalid"):
        super().__init__(message)


class NoProblemsLeftError(BaseAPIException):
    """Every matching problem was already attempted in practice"""
    def __init__(self):
        super().__init__(
            "No more problems found. You've solved them all for the selected subjects!",
            status_code=404,
        )


class ContestNotActiveError(BaseAPIException):
    """Submission outside the contest window"""
    def __init__(self):
        super().__init__("Contest is not active", status_code=403)


class DuplicateUsernameError(BusinessLogicError):
    """Username already exists"""
    def __init__(self):
        super().__init__("Username already exists")


class DuplicateEmailError(BusinessLogicError):
    """Email already exists"""
    def __init__(self):
        super().__init__("Email already exists")


class EmailDeliveryError(BaseAPIException):
    """Outgoing mail could not be delivered"""
    def __init__(self, message: str = "Could not send verification email"):
        super().__init__(message, status_code=502)


class RateLimitExceededError(BaseAPIException):
    """Rate limit exceeded"""
    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status_code=429, details=details)
