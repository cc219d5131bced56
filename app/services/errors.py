"""Error taxonomy shared by the offer and agreement services.

Services raise these; the HTTP layer maps each kind to a status code in
``app.api.error_handlers``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for every error a service surfaces to its caller."""

    kind = "service_error"


class ValidationError(ServiceError):
    """Malformed or out-of-range input the caller can fix."""

    kind = "validation_error"


class UnauthorizedError(ServiceError):
    """No authenticated actor."""

    kind = "unauthorized"


class ForbiddenError(ServiceError):
    """The actor lacks the role or ownership the operation requires."""

    kind = "forbidden"


class NotFoundError(ServiceError):
    kind = "not_found"


class InvalidStateError(ServiceError):
    """The entity is not in the lifecycle state the operation requires."""

    kind = "invalid_state"


class ConflictError(ServiceError):
    """Uniqueness or idempotency violation."""

    kind = "conflict"


class UnavailableError(ServiceError):
    """The property is not open for offers."""

    kind = "unavailable"


class PreconditionError(ServiceError):
    """Prerequisite data is missing, e.g. the tenant has no linked wallet."""

    kind = "precondition_failed"


class StoreUnavailableError(ServiceError):
    """The pinning backend returned a non-success response or was unreachable."""

    kind = "store_unavailable"


class LedgerUnavailableError(ServiceError):
    """RPC or network failure talking to the ledger."""

    kind = "ledger_unavailable"


class LedgerRejectedError(ServiceError):
    """The ledger transaction reverted."""

    kind = "ledger_rejected"


class ReconciliationRequiredError(ServiceError):
    """The ledger confirmed but the local agreement could not be stored."""

    kind = "reconciliation_required"

    def __init__(self, message: str, *, offer_id: str, tx_hash: str) -> None:
        super().__init__(message)
        self.offer_id = offer_id
        self.tx_hash = tx_hash
