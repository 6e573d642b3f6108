"""Unit tests for lease document data building and generation."""

from datetime import date
from decimal import Decimal

import pytest

from docgen.engine.lease_data import (
    LeaseRecord,
    PropertyRecord,
    TenantRecord,
    UnitRecord,
    build_lease_document_data,
    calculate_lease_term_months,
    extract_ssn_last4,
    format_lease_document_data,
    generate_lease_document,
)
from tests.conftest import paragraph_texts


@pytest.fixture
def lease():
    return LeaseRecord(
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        move_in_date=date(2026, 1, 1),
        monthly_rent=Decimal("1250.00"),
        security_deposit="1250",
        late_fee_amount=50,
        late_fee_grace_days=5,
        rent_due_day=1,
        deposit_interest_rate=Decimal("0.01"),
        deposit_bank_name="First National Bank",
        pets_allowed=True,
        pet_deposit=250,
        utilities_tenant_pays=["Electric", "Gas"],
        utilities_owner_pays=["Water", "Sewer", "Trash"],
    )


@pytest.fixture
def tenant():
    return TenantRecord(
        first_name="John",
        last_name="Smith",
        email="john.smith@email.com",
        ssn="123-45-6789",
    )


@pytest.fixture
def unit():
    return UnitRecord(unit_number="101", bedrooms=2, bathrooms="1.5", sq_ft=850)


@pytest.fixture
def property_():
    return PropertyRecord(
        name="Humboldt Court Community",
        address_line1="123 Main Street",
        city="Brooklyn Center",
        state="MN",
        zip="55430",
    )


# =============================================================================
# Build Tests
# =============================================================================


class TestBuildLeaseDocumentData:
    """Test suite for build_lease_document_data."""

    def test_tenant_fields(self, lease, tenant, unit, property_):
        """Test derived tenant values."""
        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["tenant_name"] == "John Smith"
        assert data["tenant_ssn_last4"] == "6789"
        assert data["tenant_phone"] == ""

    def test_property_fields(self, lease, tenant, unit, property_):
        """Test the full address and null year built."""
        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["property_full_address"] == "123 Main Street, Brooklyn Center, MN 55430"
        assert data["property_year_built"] == 0

    def test_full_address_with_second_line(self, lease, tenant, unit, property_):
        """Test that the second address line is included when present."""
        property_.address_line2 = "Suite 100"

        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["property_full_address"] == (
            "123 Main Street, Suite 100, Brooklyn Center, MN 55430"
        )

    def test_numbers_are_coerced(self, lease, tenant, unit, property_):
        """Test Decimal-like coercion and null defaults."""
        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["monthly_rent"] == 1250.0
        assert data["security_deposit"] == 1250.0
        assert data["unit_bathrooms"] == 1.5
        assert data["unit_floor"] == 0
        assert data["security_deposit_interest_rate"] == pytest.approx(1.0)
        assert data["late_fee_cap"] == 50

    def test_bathrooms_default(self, lease, tenant, property_):
        """Test that missing bathrooms default to one."""
        data = build_lease_document_data(lease, tenant, UnitRecord(unit_number="1"), property_)

        assert data["unit_bathrooms"] == 1

    def test_optional_fees_stay_none(self, lease, tenant, unit, property_):
        """Test that absent optional fees are None rather than zero."""
        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["pet_deposit"] == 250.0
        assert data["pet_rent"] is None
        assert data["parking_fee"] is None

    def test_utilities_joined(self, lease, tenant, unit, property_):
        """Test that utility lists are joined."""
        data = build_lease_document_data(lease, tenant, unit, property_)

        assert data["utilities_tenant_pays"] == "Electric, Gas"
        assert data["utilities_owner_pays"] == "Water, Sewer, Trash"

    @pytest.mark.parametrize(
        ("start", "end", "months"),
        [
            (date(2026, 1, 1), date(2026, 12, 31), 11),
            (date(2026, 1, 1), date(2027, 1, 1), 12),
            (date(2026, 3, 15), date(2026, 3, 30), 1),
        ],
    )
    def test_lease_term_months(self, start, end, months):
        """Test the calendar month difference with a minimum of one."""
        assert calculate_lease_term_months(start, end) == months

    def test_ssn_last4(self):
        """Test digit extraction from formatted SSNs."""
        assert extract_ssn_last4("123 45 6789") == "6789"
        assert extract_ssn_last4(None) == ""


# =============================================================================
# Format Tests
# =============================================================================


class TestFormatLeaseDocumentData:
    """Test suite for format_lease_document_data."""

    def test_formats_by_type(self, lease, tenant, unit, property_):
        """Test that values are formatted through the catalog."""
        formatted = format_lease_document_data(
            build_lease_document_data(lease, tenant, unit, property_)
        )

        assert formatted["lease_start_date"] == "January 1, 2026"
        assert formatted["monthly_rent"] == "$1,250.00"
        assert formatted["pets_allowed"] == "Yes"
        assert formatted["parking_included"] == "No"
        assert formatted["unit_sqft"] == "850"
        assert formatted["security_deposit_interest_rate"] == "1"
        assert formatted["tenant_name"] == "John Smith"

    def test_optional_values_blank(self, lease, tenant, unit, property_):
        """Test that falsy optional dates and fees become empty strings."""
        formatted = format_lease_document_data(
            build_lease_document_data(lease, tenant, unit, property_)
        )

        assert formatted["signed_date"] == ""
        assert formatted["pet_rent"] == ""
        assert formatted["parking_fee"] == ""
        assert formatted["pet_deposit"] == "$250.00"

    def test_all_values_are_strings(self, lease, tenant, unit, property_):
        """Test that every formatted value is text."""
        formatted = format_lease_document_data(
            build_lease_document_data(lease, tenant, unit, property_)
        )

        assert all(isinstance(value, str) for value in formatted.values())


# =============================================================================
# Generation Tests
# =============================================================================


class TestGenerateLeaseDocument:
    """Test suite for generate_lease_document."""

    def test_main_and_addenda(self, make_docx):
        """Test that the lease and each addendum are rendered and merged in order."""
        main = make_docx("Lease for {{tenant_name}}")
        addenda = [make_docx("Pet addendum: {{pet_name}}"), make_docx("Parking: {{parking_fee}}")]

        output = generate_lease_document(main, addenda, {"tenant_name": "Jane", "pet_name": "Rex"})

        texts = [text for text in paragraph_texts(output) if text.strip()]
        assert texts == ["Lease for Jane", "Pet addendum: Rex", "Parking: [parking_fee]"]

    def test_main_only(self, make_docx):
        """Test generation without addenda."""
        output = generate_lease_document(make_docx("{{unit_number}}"), [], {"unit_number": "7"})

        assert paragraph_texts(output) == ["7"]
