# parking_registry/errors.py
"""
Registry error taxonomy.
Raised by the store and the registry service, translated to HTTP status codes
and the JSON envelope only at the API boundary (see main.py).
"""


class RegistryError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    """Missing or malformed input."""


class ConflictError(RegistryError):
    """The plate already has a record inside the lot."""


class CapacityError(RegistryError):
    """The lot is full."""


class AlreadyExitedError(RegistryError):
    """Exit registered twice for the same record."""


class NotFoundError(RegistryError):
    status_code = 404
