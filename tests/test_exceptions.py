"""Tests for the custom exception hierarchy."""

import pytest
from config.exceptions import (
    DagdaError,
    NotFoundError,
    PartyNotFoundError,
    SaveSlotNotFoundError,
    PreconditionError,
    InsufficientLuckError,
    SaveSlotLimitError,
    RestoreNotAllowedError,
    PartyNotActiveError,
    CombatOverError,
    FormatError,
    ImportFormatError,
    InvariantViolationError,
    ValidationError,
    InvalidInputError,
    InvalidConfigError,
    DatabaseError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_dagda_error(self):
        leaf_classes = [
            PartyNotFoundError, SaveSlotNotFoundError,
            InsufficientLuckError, SaveSlotLimitError, RestoreNotAllowedError,
            PartyNotActiveError, CombatOverError,
            ImportFormatError, InvariantViolationError,
            InvalidInputError, InvalidConfigError, DatabaseError,
        ]
        for cls in leaf_classes:
            assert issubclass(cls, DagdaError), f"{cls.__name__} must inherit DagdaError"

    def test_not_found_subclasses(self):
        assert issubclass(PartyNotFoundError, NotFoundError)
        assert issubclass(SaveSlotNotFoundError, NotFoundError)

    def test_precondition_subclasses(self):
        for cls in (InsufficientLuckError, SaveSlotLimitError, RestoreNotAllowedError,
                    PartyNotActiveError, CombatOverError):
            assert issubclass(cls, PreconditionError)

    def test_format_subclasses(self):
        assert issubclass(ImportFormatError, FormatError)

    def test_validation_subclasses(self):
        assert issubclass(InvalidInputError, ValidationError)
        assert issubclass(InvalidConfigError, ValidationError)


class TestExceptionCreation:
    def test_basic_message(self):
        err = RestoreNotAllowedError("Only the latest save")
        assert err.message == "Only the latest save"
        assert err.details == {}
        assert str(err) == "Only the latest save"

    def test_str_renders_details(self):
        err = InsufficientLuckError(requested=3, available=1)
        assert str(err) == "Not enough luck (requested=3, available=1)"
        assert err.requested == 3
        assert err.available == 1

    def test_party_not_found_carries_id(self):
        err = PartyNotFoundError("abc")
        assert err.party_id == "abc"
        assert "abc" in str(err)

    def test_save_slot_not_found_details(self):
        err = SaveSlotNotFoundError("s1", "p1")
        assert err.details == {"slot_id": "s1", "party_id": "p1"}

    def test_party_not_active_status(self):
        err = PartyNotActiveError("p1", "DEAD")
        assert err.status == "DEAD"
        assert "dead" in err.message

    def test_slot_limit_message(self):
        err = SaveSlotLimitError(slot=2, max_slots=3)
        assert "Maximum of 3 saves" in str(err)

    def test_catchable_as_base(self):
        with pytest.raises(DagdaError):
            raise CombatOverError("Combat is over")

    def test_catchable_as_specific_type(self):
        with pytest.raises(ImportFormatError):
            raise ImportFormatError("Invalid JSON file")
