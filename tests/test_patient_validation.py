"""Tests for the pure patient field rules."""
import pytest

from app.system_models.patient_model.patient_validation import (
    check_address,
    check_age,
    check_gender,
    check_name,
    check_note_content,
    check_note_title,
    check_phone,
    check_vaccination,
    validate_note,
    validate_patient_fields,
)


class TestFieldRules:

    @pytest.mark.parametrize("name", ["Ana", "José", "Mary-Jane", "De la Cruz", "Zoë"])
    def test_valid_names(self, name):
        assert check_name(name) is None

    @pytest.mark.parametrize("name", ["A", "x" * 51, "R2D2", "O'Brien", "", "Ana\nMaria", "Ana\tMaria"])
    def test_invalid_names(self, name):
        error = check_name(name, "lastName")
        assert error is not None
        assert error.field == "lastName"

    def test_non_string_name(self):
        assert check_name(42).message == "First name must be a string"

    @pytest.mark.parametrize("phone", ["555-0001", "+502 5555 1234", "(555) 123-4567"])
    def test_valid_phones(self, phone):
        assert check_phone(phone) is None

    @pytest.mark.parametrize("phone", ["12345", "1" * 21, "555-CALL-NOW"])
    def test_invalid_phones(self, phone):
        assert check_phone(phone).field == "phone"

    def test_address_optional_but_bounded(self):
        assert check_address(None) is None
        assert check_address("Zona 1, Guatemala City") is None
        assert "at least 10" in check_address("short").message
        assert "exceed 200" in check_address("x" * 201).message

    @pytest.mark.parametrize("age", [0, 35, 150, None])
    def test_valid_ages(self, age):
        assert check_age(age) is None

    @pytest.mark.parametrize("age", [-1, 151, 3.5, "12", True])
    def test_invalid_ages(self, age):
        assert check_age(age).field == "age"

    def test_gender(self):
        assert check_gender("child") is None
        assert check_gender("other").message == "Gender must be one of: male, female, child"

    def test_vaccination(self):
        assert check_vaccination(["BCG", "Polio"]) is None
        assert check_vaccination(["BCG", "  "]) is not None

    def test_note_limits(self):
        assert check_note_title("t") is None
        assert check_note_title("   ") is not None
        assert check_note_title("x" * 101) is not None
        assert check_note_content("x" * 1000) is None
        assert check_note_content("x" * 1001) is not None
        assert [e.field for e in validate_note("", "")] == ["title", "content"]


class TestValidatePatientFields:

    def test_valid_payload(self):
        fields = {"firstName": "Ana", "lastName": "Lopez", "phone": "555-0001", "gender": "female", "age": 30}
        assert validate_patient_fields(fields) == []

    def test_reports_every_offending_field(self):
        fields = {"firstName": "A", "lastName": "Lopez", "phone": "abc", "gender": "female", "age": 200}
        errors = validate_patient_fields(fields)
        assert sorted(e.field for e in errors) == ["age", "firstName", "phone"]

    def test_missing_required_fields(self):
        errors = validate_patient_fields({"firstName": "Ana"})
        assert sorted(e.field for e in errors) == ["gender", "lastName", "phone"]

    def test_partial_only_checks_present_fields(self):
        assert validate_patient_fields({"phone": "555-9999"}, partial=True) == []
        errors = validate_patient_fields({"lastName": None}, partial=True)
        assert [e.field for e in errors] == ["lastName"]
