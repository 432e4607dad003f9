"""
Domain errors raised by the store.

Each error carries an HTTP-style status so an outer layer can turn it into a
response without inspecting the message. Store connectivity and query errors
are not wrapped here; they propagate as SQLAlchemy exceptions.
"""


class JoblyError(Exception):
    """Base class for Jobly domain errors."""

    status = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status}}


class BadRequestError(JoblyError):
    """Raised when a caller supplies unusable arguments (e.g. an empty update)."""

    status = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class NotFoundError(JoblyError):
    """Raised when a lookup, update, delete or search matches no rows."""

    status = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class ConflictError(JoblyError):
    """Raised when creating a record whose key already exists."""

    status = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message)
