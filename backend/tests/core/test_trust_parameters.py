"""Trust parameters and error hierarchy tests."""

import dataclasses

import pytest

from lorraine.core.domain_types import Modality
from lorraine.core.errors import (
    DatabaseError, DomainPackValidationError, ErrorCategory, ErrorContext,
    EventValidationError, LorraineError, ResourceNotFoundError,
)
from lorraine.core.trust_parameters import DEFAULT_TRUST_PARAMETERS, TrustParameters


# --- Parameters ---------------------------------------------------------------

def test_every_modality_has_a_strength():
    for modality in Modality:
        assert 0.0 < DEFAULT_TRUST_PARAMETERS.strength(modality) <= 1.0


def test_strength_accepts_wire_strings():
    assert DEFAULT_TRUST_PARAMETERS.strength("conversation:unprompted") == 0.95


def test_parameters_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_TRUST_PARAMETERS.base_half_life_days = 1.0


def test_strength_table_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_TRUST_PARAMETERS.modality_strength[Modality.GRILL_RECALL] = 1.0


def test_override_single_field():
    params = TrustParameters(propagation_threshold=0.1)
    assert params.propagation_threshold == 0.1
    assert params.base_half_life_days == 30.0


# --- Errors -------------------------------------------------------------------

def test_validation_error_keeps_every_message():
    error = EventValidationError(["a is bad", "b is bad"], ErrorContext(person_id="p1"))
    assert isinstance(error, LorraineError)
    assert error.http_status == 400
    assert error.category == ErrorCategory.VALIDATION
    body = error.to_response()["error"]
    assert body["code"] == "INVALID_EVENT"
    assert body["details"] == ["a is bad", "b is bad"]
    assert body["context"]["person_id"] == "p1"


def test_domain_pack_error_code():
    assert DomainPackValidationError(["x"]).code == "INVALID_DOMAIN_PACK"


def test_not_found_and_database_errors():
    assert ResourceNotFoundError("Event", "ver_1").http_status == 404
    db = DatabaseError("boom", "commit")
    assert db.http_status == 503
    assert db.message == "Database commit failed: boom"
    assert db.operation == "commit"
