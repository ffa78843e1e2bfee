import pytest
from pydantic import ValidationError

from leasedesk.forms.transform import from_api_record, parking_amenities, to_api_payload
from leasedesk.models.loi import LeaseTerms, LOIFormValues, PartyInfo, SubmitStatus, Utilities


def _values(**overrides):
    base = dict(
        title="Suite 400 LOI",
        property_address="400 Market St",
        landlord_name="Lana Lord",
        landlord_email="lana@example.com",
        tenant_name="Tom Tenant",
        tenant_email="tom@example.com",
        rent_amount="5200",
        security_deposit="10400",
        property_type="Office",
        lease_duration="3 years",
        start_date="2025-03-01",
        property_size="2400",
        intended_use="Office",
        parking_spaces="4",
        utilities=Utilities(hvac=True, electricity=True),
        improvement_allowance="$20/sf",
        special_conditions="Signage rights",
        financing_approval=True,
        insurance_approval=True,
        renewal_option=True,
    )
    base.update(overrides)
    return LOIFormValues(**base)


def test_payload_groups_sections():
    wire = to_api_payload(_values()).wire()
    assert wire["doc_id"] is None
    assert wire["submit_status"] == "Submitted"
    assert wire["propertyAddress"] == "400 Market St"
    assert wire["partyInfo"]["tenant_email"] == "tom@example.com"
    assert wire["leaseTerms"]["monthlyRent"] == "5200"
    assert wire["leaseTerms"]["startDate"] == "2025-03-01"
    assert wire["leaseTerms"]["leaseType"] == wire["propertyDetails"]["propertyType"] == "Office"
    assert wire["additionalDetails"]["renewalOption"] is True
    assert wire["additionalDetails"]["tenantImprovement"] == "$20/sf"


def test_utilities_and_contingencies_follow_label_order():
    wire = to_api_payload(_values()).wire()
    assert wire["propertyDetails"]["utilities"] == ["Electricity", "HVAC"]
    assert wire["additionalDetails"]["contingencies"] == "Financing Approval, Insurance Approval"


def test_no_contingencies_is_empty_string():
    values = _values(financing_approval=False, insurance_approval=False)
    assert to_api_payload(values).wire()["additionalDetails"]["contingencies"] == ""


def test_parking_amenity():
    assert to_api_payload(_values()).wire()["propertyDetails"]["amenities"] == ["4 Parking Spaces"]
    assert parking_amenities("0") == []
    assert parking_amenities("") == []
    assert parking_amenities("abc") == []


def test_draft_status_and_doc_id():
    payload = to_api_payload(_values(), doc_id="loi-7", submit_status=SubmitStatus.DRAFT)
    assert payload.wire()["doc_id"] == "loi-7"
    assert payload.wire()["submit_status"] == "Draft"


def test_record_back_to_form_values():
    wire = to_api_payload(_values(start_date="2025-03-01T00:00:00Z")).wire()
    record = {"id": "loi-1", "owner_id": "u-1", **wire}
    values = from_api_record(record)
    assert values.start_date == "2025-03-01"
    assert values.utilities.hvac and values.utilities.electricity
    assert not values.utilities.water_sewer
    assert values.financing_approval and values.insurance_approval
    assert not values.zoning_compliance
    assert values.parking_spaces == "4"
    assert values.property_type == "Office"
    assert values.improvement_allowance == "$20/sf"
    assert values.terms is False


def test_wire_sections_have_no_defaults():
    with pytest.raises(ValidationError):
        PartyInfo(landlord_name="Lana")
    with pytest.raises(ValidationError):
        LeaseTerms(monthlyRent="1", securityDeposit="2", leaseType="Office", leaseDuration="1 year")
