"""Domain error kinds shared by the store, the services and the HTTP shell.

Every error carries the HTTP status it maps to, so the exception handler in
``procurement.main`` only has to read ``http_status`` and ``reason``.
"""
from contextlib import contextmanager


class ProcurementError(Exception):
    default_reason = "unexpected error"
    http_status = 400

    def __init__(self, reason: str | None = None) -> None:
        self.reason = (reason or self.default_reason).strip()
        super().__init__(self.reason)


class NotFound(ProcurementError):
    default_reason = "not found"
    http_status = 404


class UserNotFound(ProcurementError):
    default_reason = "user does not exist"
    http_status = 401


class UserIsNotOrgResponsible(ProcurementError):
    default_reason = "user is not organization responsible"
    http_status = 403


class InvalidInput(ProcurementError):
    default_reason = "incorrect request"
    http_status = 400


class Conflict(ProcurementError):
    default_reason = "entity was modified concurrently, retry against the latest version"
    http_status = 409


class PersistenceError(ProcurementError):
    """Underlying store failure. ``constraint`` is True for integrity violations."""

    default_reason = "internal storage error"
    http_status = 500

    def __init__(self, reason: str | None = None, *, constraint: bool = False) -> None:
        super().__init__(reason)
        self.constraint = constraint


TENDER_NOT_FOUND = "tender does not exist"
BID_NOT_FOUND = "bid does not exist"
ORG_NOT_FOUND = "organization does not exist"
VERSION_NOT_FOUND = "version does not exist"


@contextmanager
def constraint_violation_as_invalid(reason: str):
    """Report a store constraint violation (duplicate name, bad reference) as InvalidInput."""
    try:
        yield
    except PersistenceError as e:
        if e.constraint:
            raise InvalidInput(reason) from e
        raise
