"""Write a demo account with sample LOIs and credentials into the JSON store."""

from __future__ import annotations

from dotenv import load_dotenv

from ..models.credential import CredentialCreate, Exchange
from ..models.user import RegisterRequest
from ..services import credential_service, loi_service, user_service
from ..forms.transform import to_api_payload
from ..models.loi import LOIFormValues, SubmitStatus, Utilities
from ..utils.logging import get_logger
from .repo import Repo

LOGGER = get_logger("db.seed")

DEMO_EMAIL = "demo@leasedesk.local"
DEMO_PASSWORD = "demo-password"

SAMPLE_LOIS = [
    ("Downtown Office Suite", "123 Main St, Suite 1A", "Office", SubmitStatus.SUBMITTED),
    ("Riverside Retail Unit", "48 River Rd", "Retail", SubmitStatus.DRAFT),
    ("Northgate Warehouse", "900 Industrial Pkwy", "Warehouse", SubmitStatus.APPROVED),
]


def _sample_values(title: str, address: str, property_type: str) -> LOIFormValues:
    return LOIFormValues(
        title=title,
        property_address=address,
        landlord_name="Harbor Properties LLC",
        landlord_email="leasing@harborprops.example",
        tenant_name="Acme Analytics",
        tenant_email="facilities@acme.example",
        rent_amount="12500",
        security_deposit="25000",
        property_type=property_type,
        lease_duration="3 years",
        start_date="2025-01-01",
        property_size="4200",
        intended_use="Office",
        parking_spaces="6",
        utilities=Utilities(electricity=True, water_sewer=True, hvac=True),
        renewal_option=True,
        improvement_allowance="$40/sq ft tenant improvement allowance",
        financing_approval=True,
        property_inspection=True,
    )


def seed_demo(repo: Repo) -> dict:
    existing = repo.find_user_by_email(DEMO_EMAIL)
    if existing is not None:
        LOGGER.info("Demo account already present user_id=%s", existing["id"])
        return existing

    profile = user_service.register(
        repo,
        RegisterRequest(first_name="Demo", last_name="User", email=DEMO_EMAIL, password=DEMO_PASSWORD),
    )
    user = repo.get_user(profile.id)

    LOGGER.info("Loading sample LOIs")
    for title, address, property_type, status in SAMPLE_LOIS:
        payload = to_api_payload(_sample_values(title, address, property_type), submit_status=status)
        loi_service.submit_loi(repo, user, payload)

    LOGGER.info("Loading sample credentials")
    credential_service.create_credential(
        repo,
        user,
        CredentialCreate(exchange=Exchange.BINANCE, label="Treasury desk", api_key="demo-binance-key-0001"),
    )
    credential_service.create_credential(
        repo,
        user,
        CredentialCreate(exchange=Exchange.BYBIT, label="Reporting", api_key="demo-bybit-key-0002"),
    )
    LOGGER.info("Seed complete user=%s", DEMO_EMAIL)
    return user


def seed() -> None:
    load_dotenv()
    seed_demo(Repo(mode="json"))


if __name__ == "__main__":
    seed()
