"""Customer domain errors.

Raised by the service layer when a request breaks a business rule.
The routes translate them into HTTP responses.
"""

EMAIL_TAKEN_MESSAGE = "Email already in use. Please choose a different email address."
NO_CHANGES_MESSAGE = "No data changes found"


class CustomerServiceError(Exception):
    pass


class ResourceNotFoundError(CustomerServiceError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(f"Customer with id [{customer_id}] not found")


class DuplicateResourceError(CustomerServiceError):
    """The email already belongs to a customer."""

    def __init__(self, message: str = EMAIL_TAKEN_MESSAGE):
        super().__init__(message)


class RequestValidationError(CustomerServiceError):
    """An update request that would not change anything."""

    def __init__(self, message: str = NO_CHANGES_MESSAGE):
        super().__init__(message)


class StorageUnavailableError(Exception):
    """The storage backend could not be reached.

    Not a ``CustomerServiceError``.  The service lets it through and the
    API reports it as a server-side fault.
    """
