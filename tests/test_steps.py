import pytest

from leasedesk.forms.steps import STEPS, VALIDATION_SCHEMAS, check_schema_map, initial_values, validate_step


def test_every_step_has_a_schema():
    assert [step.id for step in STEPS] == [1, 2, 3, 4, 5]
    assert set(VALIDATION_SCHEMAS) == {1, 2, 3, 4, 5}
    assert STEPS[4].title == "Review & Submit"


def test_schema_map_mismatch_is_rejected():
    with pytest.raises(ValueError):
        check_schema_map(STEPS, {1: object})


def test_basic_information_requires_fields():
    errors = validate_step(1, initial_values())
    assert "title" not in errors  # defaults to "Basic Information"
    assert errors["property_address"] == "Property Address is required"
    assert errors["landlord_email"] == "Landlord Email is required"
    assert errors["tenant_name"] == "Tenant Name is required"


def test_invalid_email_message():
    values = initial_values().model_copy(
        update={
            "property_address": "1 Main St",
            "landlord_name": "Lana",
            "landlord_email": "not-an-email",
            "tenant_name": "Tom",
            "tenant_email": "tom@example.com",
        }
    )
    assert validate_step(1, values) == {"landlord_email": "Invalid email"}


def test_start_date_must_be_a_date():
    values = {
        "rent_amount": "5000",
        "security_deposit": "10000",
        "property_type": "Office",
        "lease_duration": "1 year",
        "start_date": "2025-13-45",
    }
    assert validate_step(2, values) == {"start_date": "Start Date must be a valid date"}
    values["start_date"] = "2025-02-01"
    assert validate_step(2, values) == {}


def test_improvement_allowance_limit():
    assert validate_step(4, {"improvement_allowance": "x" * 1001}) == {"improvement_allowance": "Too long"}
    assert validate_step(4, {"improvement_allowance": "x" * 1000}) == {}
    assert "improvement_allowance" in validate_step(4, {"improvement_allowance": "  "})


def test_terms_must_be_accepted():
    assert validate_step(5, {"terms": False}) == {"terms": "You must accept the terms and conditions"}
    assert validate_step(5, {"terms": True}) == {}


def test_validation_is_local_to_the_step():
    # Step 1 is entirely blank, step 3 still validates on its own fields.
    values = initial_values().model_copy(update={"property_size": "1200", "intended_use": "Office"})
    assert validate_step(1, values)
    assert validate_step(3, values) == {}
