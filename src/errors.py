"""Error taxonomy shared by the services and the HTTP layer."""


class StorefrontError(Exception):
    """Base error. Carries the HTTP status the API reports it with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(StorefrontError):
    status_code = 400


class NotFound(StorefrontError):
    status_code = 404


class Unauthorized(StorefrontError):
    status_code = 401


class Forbidden(Unauthorized):
    """Credential is valid but does not own the resource."""


class Conflict(StorefrontError):
    status_code = 409


class StoreFailure(StorefrontError):
    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class QueryFailure(StoreFailure):
    pass
