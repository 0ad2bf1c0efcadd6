"""Error taxonomy shared by services, stores and the HTTP boundary.

Callers branch on the exception class; messages are for humans only.
"""


class InternovaError(Exception):
    """Base class for every error raised by the core."""

    message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(InternovaError):
    """Client-correctable input problem (bad role, GPA out of range, bad file...)."""

    message = "Invalid request"


class ConflictError(InternovaError):
    """Uniqueness violation, e.g. an email that is already registered."""

    message = "An account with this email address already exists."


class AuthenticationError(InternovaError):
    """Invalid credentials or invalid/expired token. Never says which check failed."""

    message = "Invalid email or password."


class AuthorizationError(InternovaError):
    """Authenticated caller without the required role."""

    message = "You do not have access to this resource."


class NotFoundError(InternovaError):
    message = "Not found"


class TransientInfraError(InternovaError):
    """Infrastructure failure. Details are logged, never returned to the caller."""

    message = "Service temporarily unavailable. Please try again later."


class StorageUnavailableError(TransientInfraError):
    message = "Failed to upload resume. Please try again later."


class PersistenceError(TransientInfraError):
    message = "Failed to save profile. Please try again later."


class FatalConfigError(InternovaError):
    """Startup configuration is missing or unusable. The process must not serve traffic."""

    message = "Invalid configuration"
