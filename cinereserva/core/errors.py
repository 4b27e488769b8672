"""Error taxonomy shared by the data access layer, validation and handlers.

The API layer maps each kind to an HTTP status in exactly one place
(``cinereserva.api.errors``); nothing below it knows about HTTP.
"""


class ServiceError(Exception):
    """Base class for every error the services raise on purpose."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(ServiceError):
    """Request payload is missing a field or breaks a field rule."""


class NotFoundError(ServiceError):
    """The addressed record does not exist."""


class ConflictError(ServiceError):
    """A uniqueness rule (username, email, role name) would be violated."""


class UnauthorizedError(ServiceError):
    """Bad credentials or an invalid/expired bearer token."""


class StoreError(ServiceError):
    """Store, driver or connection failure. The message is for logs only."""


class StoreTimeoutError(StoreError):
    """A store call exceeded its deadline."""
