"""Lease document data builder.

Maps lease, tenant, unit and property records to the catalog variable
names, formats them for display, and drives full lease generation
(main template plus addenda merged into one document).
"""

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field

from docgen.engine.catalog import format_variable_value
from docgen.engine.merger import merge_docx_documents
from docgen.engine.renderer import render_template

logger = logging.getLogger(__name__)

# Minnesota statutory late fee cap
MN_LATE_FEE_CAP = 50

DecimalLike = Decimal | float | int | str


# =============================================================================
# Source Records
# =============================================================================


class TenantRecord(BaseModel):
    """Tenant fields used by lease documents."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    ssn: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None


class PropertyRecord(BaseModel):
    """Property fields used by lease documents."""

    name: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    zip: str
    year_built: int | None = None


class UnitRecord(BaseModel):
    """Unit fields used by lease documents."""

    unit_number: str
    bedrooms: int = 0
    bathrooms: DecimalLike | None = None
    sq_ft: int | None = None
    floor: int | None = None


class LeaseRecord(BaseModel):
    """Lease terms used by lease documents.

    Money and rate fields accept anything Decimal-like; the deposit
    interest rate is a fraction (0.01 for 1%).
    """

    start_date: date
    end_date: date
    move_in_date: date | None = None
    signed_date: date | None = None
    monthly_rent: DecimalLike | None = None
    security_deposit: DecimalLike | None = None
    late_fee_amount: DecimalLike | None = None
    late_fee_grace_days: int = 0
    rent_due_day: int = 1
    deposit_interest_rate: DecimalLike | None = None
    deposit_bank_name: str | None = None
    pets_allowed: bool = False
    pet_deposit: DecimalLike | None = None
    pet_rent: DecimalLike | None = None
    parking_included: bool = False
    parking_fee: DecimalLike | None = None
    utilities_tenant_pays: list[str] = Field(default_factory=list)
    utilities_owner_pays: list[str] = Field(default_factory=list)


# =============================================================================
# Helper Functions
# =============================================================================


def _to_number_or_none(value: DecimalLike | None) -> float | None:
    if value is None:
        return None
    try:
        return float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        return None


def _to_number(value: DecimalLike | None, default: float = 0) -> float:
    number = _to_number_or_none(value)
    # Zero falls back to the default as well
    return number if number else default


def calculate_lease_term_months(start_date: date, end_date: date) -> int:
    """Return the calendar month difference between two dates, at least 1."""
    months = (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)
    return max(1, months)


def format_full_address(property_: PropertyRecord) -> str:
    """Format 'line1[, line2], City, ST ZIP'."""
    parts = [property_.address_line1]
    if property_.address_line2:
        parts.append(property_.address_line2)
    parts.append(f"{property_.city}, {property_.state} {property_.zip}")
    return ", ".join(parts)


def extract_ssn_last4(ssn: str | None) -> str:
    if not ssn:
        return ""
    return re.sub(r"\D", "", ssn)[-4:]


# =============================================================================
# Public API
# =============================================================================


def build_lease_document_data(
    lease: LeaseRecord,
    tenant: TenantRecord,
    unit: UnitRecord,
    property_: PropertyRecord,
) -> dict[str, Any]:
    """Build template variable data from lease records.

    Args:
        lease: Lease terms.
        tenant: Primary tenant.
        unit: Leased unit.
        property_: Property containing the unit.

    Returns:
        Mapping of catalog variable names to raw (unformatted) values.
    """
    return {
        # Tenant
        "tenant_name": f"{tenant.first_name} {tenant.last_name}",
        "tenant_first_name": tenant.first_name,
        "tenant_last_name": tenant.last_name,
        "tenant_email": tenant.email,
        "tenant_phone": tenant.phone or "",
        "tenant_ssn_last4": extract_ssn_last4(tenant.ssn),
        "tenant_emergency_contact_name": tenant.emergency_contact_name or "",
        "tenant_emergency_contact_phone": tenant.emergency_contact_phone or "",
        # Property
        "property_name": property_.name,
        "property_address": property_.address_line1,
        "property_address_line2": property_.address_line2 or "",
        "property_city": property_.city,
        "property_state": property_.state,
        "property_zip": property_.zip,
        "property_full_address": format_full_address(property_),
        "property_year_built": property_.year_built or 0,
        # Unit
        "unit_number": unit.unit_number,
        "unit_bedrooms": unit.bedrooms,
        "unit_bathrooms": _to_number(unit.bathrooms, default=1),
        "unit_sqft": unit.sq_ft or 0,
        "unit_floor": unit.floor or 0,
        # Lease terms
        "lease_start_date": lease.start_date,
        "lease_end_date": lease.end_date,
        "lease_term_months": calculate_lease_term_months(lease.start_date, lease.end_date),
        "move_in_date": lease.move_in_date,
        "signed_date": lease.signed_date,
        # Financial terms
        "monthly_rent": _to_number(lease.monthly_rent),
        "security_deposit": _to_number(lease.security_deposit),
        "late_fee_amount": _to_number(lease.late_fee_amount),
        "grace_period_days": lease.late_fee_grace_days,
        "rent_due_day": lease.rent_due_day,
        # Compliance
        "security_deposit_interest_rate": _to_number(lease.deposit_interest_rate) * 100,
        "deposit_bank_name": lease.deposit_bank_name or "",
        "late_fee_cap": MN_LATE_FEE_CAP,
        # Pets
        "pets_allowed": lease.pets_allowed,
        "pet_deposit": _to_number_or_none(lease.pet_deposit),
        "pet_rent": _to_number_or_none(lease.pet_rent),
        # Parking
        "parking_included": lease.parking_included,
        "parking_fee": _to_number_or_none(lease.parking_fee),
        # Utilities
        "utilities_tenant_pays": ", ".join(lease.utilities_tenant_pays),
        "utilities_owner_pays": ", ".join(lease.utilities_owner_pays),
    }


# Optional values that render blank instead of "$0.00" or an empty date
_BLANK_WHEN_FALSY = frozenset(
    {"move_in_date", "signed_date", "pet_deposit", "pet_rent", "parking_fee"}
)


def format_lease_document_data(data: Mapping[str, Any]) -> dict[str, str]:
    """Format built lease data for template rendering.

    Dates, currency, numbers and booleans are formatted through the
    catalog; strings pass through unchanged.
    """
    formatted: dict[str, str] = {}
    for name, value in data.items():
        if name in _BLANK_WHEN_FALSY and not value:
            formatted[name] = ""
        elif isinstance(value, str):
            formatted[name] = value
        else:
            formatted[name] = format_variable_value(value, name)
    return formatted


def generate_lease_document(
    main_template: bytes,
    addenda: Sequence[bytes],
    data: Mapping[str, Any],
) -> bytes:
    """Render a lease and its addenda with the same data and merge them.

    Args:
        main_template: The main lease DOCX template.
        addenda: Addendum DOCX templates, in output order.
        data: Template data, usually from format_lease_document_data().

    Returns:
        A single DOCX containing the lease followed by each addendum.

    Raises:
        RenderError: If any template fails to render.
        MergeError: If the rendered documents cannot be merged.
    """
    logger.info(f"Generating lease document with {len(addenda)} addenda")

    rendered = [render_template(main_template, data)]
    rendered.extend(render_template(addendum, data) for addendum in addenda)
    return merge_docx_documents(rendered)
