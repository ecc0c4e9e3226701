"""Error taxonomy for the order and payment flows.

Services raise these; ``shopadmin.main`` maps each class to its HTTP status
so routes never build error responses by hand.
"""


class ShopError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(ShopError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(ShopError):
    """No matching order or payment."""

    status_code = 404


class SignatureMismatch(ShopError):
    """Gateway signature verification failed."""

    status_code = 400


class GatewayError(ShopError):
    """The remote payment provider failed."""

    status_code = 500


class StorageError(ShopError):
    """A database read or write failed."""

    status_code = 500
