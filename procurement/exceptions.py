"""
Typed errors raised by the procurement services.

Each carries a machine-readable ``code`` and the HTTP status the API maps it
to; the exception handlers in ``procurement.main`` render them uniformly.
"""


class ProcurementError(Exception):
    """Base class for service-level errors."""

    code = "PROCUREMENT_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ProcurementError):
    """A referenced record does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource} tidak ditemukan")
        self.resource = resource
        self.identifier = identifier
