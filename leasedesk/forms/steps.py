"""LOI wizard steps and the validation schema bound to each one.

Each schema lists only the fields its own step introduces; advancing from a
step never re-validates earlier steps.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Mapping, Type

from ..models.loi import LOIFormValues, Step
from .validation import (
    FieldErrors,
    FormSchema,
    email,
    iso_date,
    max_length,
    must_be_true,
    required,
    validate_form,
)

STEPS: List[Step] = [
    Step(id=1, title="Basic Information", subtitle="Property and party details"),
    Step(id=2, title="Lease Terms", subtitle="Key lease particulars"),
    Step(id=3, title="Property Details", subtitle="Size and specifications"),
    Step(id=4, title="Additional Terms", subtitle="Deposit and timelines"),
    Step(id=5, title="Review & Submit", subtitle="Final review"),
]


class BasicInformationSchema(FormSchema):
    title: Annotated[str, required("LOI Title is required")]
    property_address: Annotated[str, required("Property Address is required")]
    landlord_name: Annotated[str, required("Landlord Name is required")]
    landlord_email: Annotated[str, required("Landlord Email is required"), email()]
    tenant_name: Annotated[str, required("Tenant Name is required")]
    tenant_email: Annotated[str, required("Tenant Email is required"), email()]


class LeaseTermsSchema(FormSchema):
    rent_amount: Annotated[str, required("Monthly Rent is required")]
    security_deposit: Annotated[str, required("Security Deposit is required")]
    property_type: Annotated[str, required("Property Type is required")]
    lease_duration: Annotated[str, required("Lease Duration is required")]
    start_date: Annotated[str, required("Start Date is required"), iso_date("Start Date must be a valid date")]


class PropertyDetailsSchema(FormSchema):
    property_size: Annotated[str, required("Property Size is required")]
    intended_use: Annotated[str, required("Intended Use is required")]


class AdditionalTermsSchema(FormSchema):
    improvement_allowance: Annotated[
        str,
        required("Improvement allowance is required"),
        max_length(1000, "Too long"),
    ]


class ReviewSubmitSchema(FormSchema):
    terms: Annotated[bool, must_be_true("You must accept the terms and conditions")]


VALIDATION_SCHEMAS: Dict[int, Type[FormSchema]] = {
    1: BasicInformationSchema,
    2: LeaseTermsSchema,
    3: PropertyDetailsSchema,
    4: AdditionalTermsSchema,
    5: ReviewSubmitSchema,
}

# Field options rendered as selects by the wizard views.
PROPERTY_TYPES = ["Office", "Retail", "Industrial", "Warehouse", "Mixed Use", "Restaurant", "Medical"]
LEASE_DURATIONS = ["6 months", "1 year", "2 years", "3 years", "5 years", "10 years"]
INTENDED_USES = ["Office", "Retail Store", "Restaurant", "Storage", "Manufacturing", "Clinic", "Other"]


def initial_values() -> LOIFormValues:
    return LOIFormValues()


def schema_fields(step_id: int) -> List[str]:
    return list(VALIDATION_SCHEMAS[step_id].model_fields)


def validate_step(step_id: int, values: LOIFormValues | Mapping[str, Any]) -> FieldErrors:
    """Validate ``values`` against the schema registered for ``step_id`` only."""

    if isinstance(values, LOIFormValues):
        values = values.model_dump()
    return validate_form(VALIDATION_SCHEMAS[step_id], values)


def check_schema_map(steps: List[Step], schemas: Mapping[int, Any]) -> None:
    """Every step needs exactly one schema; raise early when the two drift apart."""

    step_ids = {step.id for step in steps}
    if step_ids != set(schemas):
        raise ValueError(f"Schema map {sorted(schemas)} does not match steps {sorted(step_ids)}")


check_schema_map(STEPS, VALIDATION_SCHEMAS)

__all__ = [
    "STEPS",
    "VALIDATION_SCHEMAS",
    "PROPERTY_TYPES",
    "LEASE_DURATIONS",
    "INTENDED_USES",
    "initial_values",
    "schema_fields",
    "validate_step",
    "check_schema_map",
]
