import pytest

from leasedesk.forms.transform import to_api_payload
from leasedesk.forms.wizard import LOIWizard, WizardOutcome
from leasedesk.models.loi import LOIFormValues, SubmitStatus
from leasedesk.state import Fulfilled, LOISlice, Rejected

COMPLETE = dict(
    title="Office LOI",
    property_address="1 Main St",
    landlord_name="Lana Lord",
    landlord_email="lana@example.com",
    tenant_name="Tom Tenant",
    tenant_email="tom@example.com",
    rent_amount="5000",
    security_deposit="10000",
    property_type="Office",
    lease_duration="3 years",
    start_date="2025-01-01",
    property_size="2000",
    intended_use="Office",
    improvement_allowance="None requested",
)


def recording_submit(calls, record_id="loi-1"):
    def submit(payload):
        calls.append(payload)
        return Fulfilled(LOISlice.Action.SUBMIT, {"id": record_id, **payload.wire()})

    return submit


def failing_submit(payload):
    return Rejected(LOISlice.Action.SUBMIT, "Server unavailable", 503)


def fill(wizard, **overrides):
    for name, value in {**COMPLETE, **overrides}.items():
        wizard.set_field(name, value)


def test_blank_step_is_invalid():
    calls = []
    wizard = LOIWizard(recording_submit(calls))
    assert wizard.on_advance() is WizardOutcome.INVALID
    assert wizard.current_step == 1
    assert "property_address" in wizard.errors
    assert calls == []


def test_advances_step_by_step_and_submits():
    calls = []
    wizard = LOIWizard(recording_submit(calls))
    fill(wizard)
    for expected in (2, 3, 4, 5):
        assert wizard.on_advance() is WizardOutcome.ADVANCED
        assert wizard.current_step == expected

    assert wizard.on_advance() is WizardOutcome.INVALID
    assert wizard.errors == {"terms": "You must accept the terms and conditions"}
    assert calls == []

    wizard.set_field("terms", True)
    assert "terms" not in wizard.errors
    assert wizard.on_advance() is WizardOutcome.SUBMITTED
    assert len(calls) == 1
    assert calls[0].submit_status is SubmitStatus.SUBMITTED
    assert wizard.loi_id == "loi-1"
    assert wizard.last_saved is not None
    assert wizard.submitting is False


def test_step_validation_ignores_other_steps():
    wizard = LOIWizard(recording_submit([]))
    wizard.stepper.go_to_step(3)
    wizard.set_field("property_size", "900")
    wizard.set_field("intended_use", "Storage")
    assert wizard.on_advance() is WizardOutcome.ADVANCED
    assert wizard.current_step == 4


def test_active_schema_follows_step():
    wizard = LOIWizard(recording_submit([]))
    first = wizard.active_schema
    wizard.stepper.next_step()
    assert wizard.active_schema is not first
    assert wizard.active_step.title == "Lease Terms"


def test_save_draft_skips_validation_and_keeps_id():
    calls = []
    wizard = LOIWizard(recording_submit(calls, record_id="draft-9"))
    assert wizard.on_save_draft() is WizardOutcome.SAVED
    assert calls[0].submit_status is SubmitStatus.DRAFT
    assert calls[0].doc_id is None
    assert wizard.loi_id == "draft-9"

    wizard.on_save_draft()
    assert calls[1].doc_id == "draft-9"
    assert wizard.current_step == 1


def test_failed_submit_keeps_values():
    wizard = LOIWizard(failing_submit)
    fill(wizard, terms=True)
    wizard.stepper.go_to_step(5)
    assert wizard.on_advance() is WizardOutcome.FAILED
    assert wizard.submit_error == "Server unavailable"
    assert wizard.values.property_address == "1 Main St"
    assert wizard.last_saved is None


def test_utility_flags_and_unknown_fields():
    wizard = LOIWizard(recording_submit([]))
    wizard.set_field("utilities.hvac", True)
    assert wizard.field_value("utilities.hvac") is True
    assert wizard.payload().property_details.utilities == ["HVAC"]
    with pytest.raises(KeyError):
        wizard.set_field("no_such_field", "x")


def test_unknown_utility_flag_is_rejected():
    wizard = LOIWizard(recording_submit([]))
    with pytest.raises(KeyError):
        wizard.set_field("utilities.bogus", True)
    assert "bogus" not in wizard.values.utilities.model_dump()
    assert wizard.payload().property_details.utilities == []


def test_prev_step_clears_errors():
    wizard = LOIWizard(recording_submit([]))
    wizard.stepper.go_to_step(2)
    wizard.on_advance()
    assert wizard.errors
    assert wizard.prev_step() == 1
    assert wizard.errors == {}


def test_edit_mode_needs_id():
    with pytest.raises(ValueError):
        LOIWizard(recording_submit([]), mode="edit")


def test_edit_mode_loads_record():
    values = LOIFormValues(**{**COMPLETE, "start_date": "2025-01-01T00:00:00"})
    record = {"id": "loi-5", **to_api_payload(values, doc_id="loi-5").wire()}
    calls = []
    wizard = LOIWizard(recording_submit(calls, record_id="loi-5"), mode="edit", loi_id="loi-5")
    assert wizard.loading and not wizard.ready

    assert wizard.load(lambda: Fulfilled(LOISlice.Action.GET, record))
    assert wizard.ready
    assert wizard.values.start_date == "2025-01-01"
    assert wizard.values.tenant_name == "Tom Tenant"

    wizard.set_field("tenant_name", "Someone Else")
    wizard.reset()
    assert wizard.values.tenant_name == "Tom Tenant"

    wizard.on_save_draft()
    assert calls[0].doc_id == "loi-5"


def test_edit_mode_load_failure():
    wizard = LOIWizard(recording_submit([]), mode="edit", loi_id="missing")
    assert not wizard.load(lambda: Rejected(LOISlice.Action.GET, "LOI missing not found", 404))
    assert wizard.load_error == "LOI missing not found"
    assert not wizard.loading
    assert not wizard.ready


def test_reset_in_create_mode():
    wizard = LOIWizard(recording_submit([]))
    fill(wizard)
    wizard.stepper.go_to_step(4)
    wizard.reset()
    assert wizard.current_step == 1
    assert wizard.values == LOIFormValues()


def test_summary_uses_wire_keys():
    wizard = LOIWizard(recording_submit([]))
    fill(wizard)
    summary = wizard.summary()
    assert summary["leaseTerms"]["leaseDuration"] == "3 years"
    assert summary["propertyAddress"] == "1 Main St"
