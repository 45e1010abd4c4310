from typing import Optional

from fastapi import status
from fastapi.responses import JSONResponse

class ApplicationException(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_response(self):
        return JSONResponse(
            status_code=self.status_code,
            content={"error": self.message}
        )


class ValidationError(ApplicationException):
    """Malformed or empty submission."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFoundError(ApplicationException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ForbiddenError(ApplicationException):
    def __init__(self, message: str = "Not allowed"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class PrerequisiteError(ApplicationException):
    """An earlier onboarding choice is missing."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class OnboardingAlreadyCompletedError(ApplicationException):
    def __init__(self, message: str = "Onboarding already completed"):
        super().__init__(message, status.HTTP_409_CONFLICT)


class StepAccessDeniedError(ApplicationException):
    """Requested step is ahead of what the user may reach."""

    def __init__(self, message: str, redirect_to: Optional[str] = None):
        super().__init__(message, status.HTTP_409_CONFLICT)
        self.redirect_to = redirect_to

    def to_response(self):
        return JSONResponse(
            status_code=self.status_code,
            content={"error": self.message, "redirect_to": self.redirect_to}
        )


# Internal errors, recovered where they are raised and never sent to clients

class UnknownStepError(Exception):
    def __init__(self, step):
        super().__init__(f"Unknown onboarding step: {step!r}")
        self.step = step


class StaleStateError(Exception):
    def __init__(self, persisted):
        super().__init__(f"Persisted onboarding step is not in the registry: {persisted!r}")
        self.persisted = persisted
