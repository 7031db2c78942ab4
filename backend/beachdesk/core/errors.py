"""Typed failures raised by the booking engine."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any


class LedgerError(ValueError):
    """Base class for recoverable engine failures."""

    def to_dict(self) -> dict[str, Any]:
        return {"message": str(self)}


class ValidationError(LedgerError):
    """Malformed or missing input; carries every violation found."""

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))

    def to_dict(self) -> dict[str, Any]:
        return {"message": str(self), "errors": self.errors}


class NotFound(LedgerError):
    """A referenced entity id does not resolve."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(LedgerError):
    """A unit is already booked on at least one requested day."""

    def __init__(
        self,
        message: str,
        *,
        conflict_date: date,
        conflicting_rental_id: object,
        conflicting_client_name: str,
    ) -> None:
        self.conflict_date = conflict_date
        self.conflicting_rental_id = conflicting_rental_id
        self.conflicting_client_name = conflicting_client_name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "conflict_date": self.conflict_date.isoformat(),
            "conflicting_rental_id": str(self.conflicting_rental_id),
            "conflicting_client_name": self.conflicting_client_name,
        }


class OverpaymentError(LedgerError):
    """A payment would exceed the rental's remaining balance."""

    def __init__(self, amount: Decimal, pending: Decimal) -> None:
        self.amount = amount
        self.pending = pending
        super().__init__(
            f"Payment of {amount} exceeds the pending amount of {pending}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "amount": str(self.amount),
            "pending": str(self.pending),
        }


class PersistenceError(LedgerError):
    """The underlying store failed to read or write."""


__all__ = [
    "ConflictError",
    "LedgerError",
    "NotFound",
    "OverpaymentError",
    "PersistenceError",
    "ValidationError",
]
