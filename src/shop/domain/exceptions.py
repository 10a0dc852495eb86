"""Domain-level exceptions.

Every error carries the status code the outer layers (HTTP, CLI) report,
so they can catch DomainException uniformly and translate it.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    status_code = 500


class ValidationError(DomainException):
    """Input is malformed or a business rule was violated."""

    status_code = 400


class NotFoundError(DomainException):
    """A referenced entity does not exist."""

    status_code = 404


class PersistenceError(DomainException):
    """The underlying store could not be read or written."""

    status_code = 500
