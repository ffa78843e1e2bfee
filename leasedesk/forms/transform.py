"""Mapping between the flat wizard form and the nested LOI payload the API stores."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from ..models.loi import (
    AdditionalDetails,
    LeaseTerms,
    LOIFormValues,
    LOIPayload,
    PartyInfo,
    PropertyDetails,
    SubmitStatus,
    Utilities,
)
from ..utils.coerce import to_int, to_str

# Canonical label order; payload lists and strings follow it.
UTILITY_LABELS: Tuple[Tuple[str, str], ...] = (
    ("electricity", "Electricity"),
    ("water_sewer", "Water/Sewer"),
    ("natural_gas", "Natural Gas"),
    ("internet_cable", "Internet/Cable"),
    ("hvac", "HVAC"),
    ("security_system", "Security System"),
)

CONTINGENCY_LABELS: Tuple[Tuple[str, str], ...] = (
    ("financing_approval", "Financing Approval"),
    ("environmental_assessment", "Environmental Assessment"),
    ("zoning_compliance", "Zoning Compliance"),
    ("permits_licenses", "Permits & Licenses"),
    ("property_inspection", "Property Inspection"),
    ("insurance_approval", "Insurance Approval"),
)

PARKING_SUFFIX = "Parking Spaces"


def selected_utilities(utilities: Utilities) -> List[str]:
    return [label for field, label in UTILITY_LABELS if getattr(utilities, field)]


def selected_contingencies(values: LOIFormValues) -> List[str]:
    return [label for field, label in CONTINGENCY_LABELS if getattr(values, field)]


def parking_amenities(parking_spaces: str) -> List[str]:
    spaces = to_int(parking_spaces)
    if spaces and spaces > 0:
        return [f"{spaces} {PARKING_SUFFIX}"]
    return []


def to_api_payload(
    values: LOIFormValues,
    doc_id: Optional[str] = None,
    submit_status: SubmitStatus = SubmitStatus.SUBMITTED,
) -> LOIPayload:
    """Group the flat form into ``partyInfo``/``leaseTerms``/``propertyDetails``/``additionalDetails``."""

    return LOIPayload(
        doc_id=doc_id,
        title=values.title,
        property_address=values.property_address,
        party_info=PartyInfo(
            landlord_name=values.landlord_name,
            landlord_email=values.landlord_email,
            tenant_name=values.tenant_name,
            tenant_email=values.tenant_email,
        ),
        lease_terms=LeaseTerms(
            monthly_rent=values.rent_amount,
            security_deposit=values.security_deposit,
            lease_type=values.property_type,
            lease_duration=values.lease_duration,
            start_date=values.start_date,
        ),
        property_details=PropertyDetails(
            property_size=values.property_size,
            intended_use=values.intended_use,
            property_type=values.property_type,
            amenities=parking_amenities(values.parking_spaces),
            utilities=selected_utilities(values.utilities),
        ),
        additional_details=AdditionalDetails(
            renewal_option=values.renewal_option,
            tenant_improvement=values.improvement_allowance,
            special_conditions=values.special_conditions,
            contingencies=", ".join(selected_contingencies(values)),
        ),
        submit_status=submit_status,
    )


def _parking_from_amenities(amenities: List[str]) -> str:
    for amenity in amenities:
        if "parking" in amenity.lower():
            return amenity.split(" ")[0]
    return ""


def from_api_record(record: Union[LOIPayload, Dict[str, Any]]) -> LOIFormValues:
    """Edit-mode adapter: rebuild wizard values from a stored LOI."""

    if not isinstance(record, LOIPayload):
        record = LOIPayload.model_validate(record)

    utility_labels = set(record.property_details.utilities)
    contingencies = record.additional_details.contingencies or ""
    start_date = to_str(record.lease_terms.start_date).split("T")[0]

    return LOIFormValues(
        title=record.title,
        property_address=record.property_address,
        landlord_name=record.party_info.landlord_name,
        landlord_email=record.party_info.landlord_email,
        tenant_name=record.party_info.tenant_name,
        tenant_email=record.party_info.tenant_email,
        rent_amount=record.lease_terms.monthly_rent,
        security_deposit=record.lease_terms.security_deposit,
        property_type=record.lease_terms.lease_type,
        lease_duration=record.lease_terms.lease_duration,
        start_date=start_date,
        property_size=record.property_details.property_size,
        intended_use=record.property_details.intended_use,
        parking_spaces=_parking_from_amenities(record.property_details.amenities),
        utilities=Utilities(**{field: label in utility_labels for field, label in UTILITY_LABELS}),
        renewal_option=record.additional_details.renewal_option,
        improvement_allowance=record.additional_details.tenant_improvement,
        special_conditions=record.additional_details.special_conditions,
        terms=False,
        **{field: label in contingencies for field, label in CONTINGENCY_LABELS},
    )


__all__ = [
    "UTILITY_LABELS",
    "CONTINGENCY_LABELS",
    "to_api_payload",
    "from_api_record",
    "selected_utilities",
    "selected_contingencies",
    "parking_amenities",
]
