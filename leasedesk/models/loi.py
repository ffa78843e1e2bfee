"""Pydantic schemas for Letters of Intent: wizard form values and the API wire shape."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubmitStatus(str, Enum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    SENT = "Sent"
    APPROVED = "Approved"


class Step(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    subtitle: str


class Utilities(BaseModel):
    electricity: bool = False
    water_sewer: bool = False
    natural_gas: bool = False
    internet_cable: bool = False
    hvac: bool = False
    security_system: bool = False


class LOIFormValues(BaseModel):
    """Every field the five wizard steps edit, kept flat except for utilities."""

    title: str = "Basic Information"
    property_address: str = ""
    landlord_name: str = ""
    landlord_email: str = ""
    tenant_name: str = ""
    tenant_email: str = ""
    rent_amount: str = ""
    security_deposit: str = ""
    property_type: str = ""
    lease_duration: str = ""
    start_date: str = ""
    property_size: str = ""
    intended_use: str = ""
    parking_spaces: str = ""
    utilities: Utilities = Field(default_factory=Utilities)
    renewal_option: bool = False
    improvement_allowance: str = ""
    special_conditions: str = ""
    financing_approval: bool = False
    environmental_assessment: bool = False
    zoning_compliance: bool = False
    permits_licenses: bool = False
    property_inspection: bool = False
    insurance_approval: bool = False
    terms: bool = False


# ---------------------------------------------------------------------------
# Wire shape. Nothing below has a default so a mapper that forgets a field
# fails at construction time instead of sending a partial payload.


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class PartyInfo(WireModel):
    landlord_name: str
    landlord_email: str
    tenant_name: str
    tenant_email: str


class LeaseTerms(WireModel):
    monthly_rent: str = Field(alias="monthlyRent")
    security_deposit: str = Field(alias="securityDeposit")
    lease_type: str = Field(alias="leaseType")
    lease_duration: str = Field(alias="leaseDuration")
    start_date: Optional[str] = Field(alias="startDate")


class PropertyDetails(WireModel):
    property_size: str = Field(alias="propertySize")
    intended_use: str = Field(alias="intendedUse")
    property_type: str = Field(alias="propertyType")
    amenities: List[str]
    utilities: List[str]


class AdditionalDetails(WireModel):
    renewal_option: bool = Field(alias="renewalOption")
    tenant_improvement: str = Field(alias="tenantImprovement")
    special_conditions: str = Field(alias="specialConditions")
    contingencies: str


class LOIPayload(WireModel):
    doc_id: Optional[str] = None
    title: str
    property_address: str = Field(alias="propertyAddress")
    party_info: PartyInfo = Field(alias="partyInfo")
    lease_terms: LeaseTerms = Field(alias="leaseTerms")
    property_details: PropertyDetails = Field(alias="propertyDetails")
    additional_details: AdditionalDetails = Field(alias="additionalDetails")
    submit_status: SubmitStatus


class LOIRecord(LOIPayload):
    id: str
    owner_id: str
    assignee: str = ""
    created_at: datetime
    updated_at: datetime
