"""Custom exception hierarchy for the campaign journal."""

from typing import Optional


class DagdaError(Exception):
    """Base exception for all campaign journal errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Not Found ----

class NotFoundError(DagdaError):
    """A referenced aggregate does not exist."""


class PartyNotFoundError(NotFoundError):
    """No party with the given id."""

    def __init__(self, party_id: str):
        super().__init__(f"Party {party_id} not found", {"party_id": party_id})
        self.party_id = party_id


class SaveSlotNotFoundError(NotFoundError):
    """No save slot with the given id for the party."""

    def __init__(self, slot_id: str, party_id: str = ""):
        details = {"slot_id": slot_id}
        if party_id:
            details["party_id"] = party_id
        super().__init__(f"Save slot {slot_id} not found", details)
        self.slot_id = slot_id


# ---- Precondition Violations ----

class PreconditionError(DagdaError):
    """Operation rejected because the current state does not allow it."""


class InsufficientLuckError(PreconditionError):
    """Requested luck cost exceeds the character's remaining luck."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            "Not enough luck",
            {"requested": requested, "available": available},
        )
        self.requested = requested
        self.available = available


class SaveSlotLimitError(PreconditionError):
    """All save slots are taken and the requested slot is a new one."""

    def __init__(self, slot: int, max_slots: int):
        super().__init__(
            f"Maximum of {max_slots} saves reached",
            {"slot": slot, "max_slots": max_slots},
        )


class RestoreNotAllowedError(PreconditionError):
    """Game mode forbids restoring this slot."""


class PartyNotActiveError(PreconditionError):
    """Play actions are not allowed on a finished or dead party."""

    def __init__(self, party_id: str, status: str):
        super().__init__(
            f"Party {party_id} is {status.lower()}",
            {"party_id": party_id, "status": status},
        )
        self.status = status


class CombatOverError(PreconditionError):
    """The combat already reached an outcome."""


# ---- Format Errors ----

class FormatError(DagdaError):
    """A document could not be parsed."""


class ImportFormatError(FormatError):
    """Import document is not valid JSON or lacks the expected shape."""


# ---- Invariants ----

class InvariantViolationError(DagdaError):
    """Stored state breaks an invariant that should always hold."""


# ---- Validation Errors ----

class ValidationError(DagdaError):
    """Input validation failed."""


class InvalidInputError(ValidationError):
    """Argument passed to a use case is out of range or malformed."""


class InvalidConfigError(ValidationError):
    """Configuration value is invalid."""


# ---- Storage Errors ----

class DatabaseError(DagdaError):
    """Database operation failed."""
