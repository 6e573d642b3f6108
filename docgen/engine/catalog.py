"""Lease template variable catalog.

Static registry of the placeholder names lease templates may use, with
their semantic type, category, required flag and an example value.
The catalog is built once at import time and never mutated.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

from docgen.engine.models import (
    VARIABLE_CATEGORIES,
    VariableDefinition,
    VariableSchema,
    VariableValidationResult,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "MMMM D, YYYY"
CURRENCY_FORMAT = "$0,0.00"
CURRENCY_SYMBOL = "$"


def _var(name: str, description: str, type_: str, category: str, **kwargs: Any) -> VariableDefinition:
    return VariableDefinition(
        name=name, description=description, type=type_, category=category, **kwargs
    )


STANDARD_VARIABLES: tuple[VariableDefinition, ...] = (
    # Tenant
    _var("tenant_name", "Full name of the primary tenant", "string", "tenant",
         required=True, example="John Smith"),
    _var("tenant_first_name", "First name of the primary tenant", "string", "tenant",
         example="John"),
    _var("tenant_last_name", "Last name of the primary tenant", "string", "tenant",
         example="Smith"),
    _var("tenant_email", "Email address of the primary tenant", "string", "tenant",
         required=True, example="john.smith@email.com"),
    _var("tenant_phone", "Phone number of the primary tenant", "string", "tenant",
         example="(612) 555-1234"),
    _var("tenant_ssn_last4", "Last 4 digits of tenant SSN (for identification)", "string",
         "tenant", example="1234"),
    _var("tenant_emergency_contact_name", "Name of tenant emergency contact", "string",
         "tenant", example="Jane Smith"),
    _var("tenant_emergency_contact_phone", "Phone of tenant emergency contact", "string",
         "tenant", example="(612) 555-5678"),
    # Property
    _var("property_name", "Name of the property", "string", "property",
         required=True, example="Humboldt Court Community"),
    _var("property_address", "Full street address of the property", "string", "property",
         required=True, example="123 Main Street"),
    _var("property_address_line2", "Second line of property address (if applicable)",
         "string", "property", example="Suite 100"),
    _var("property_city", "City where the property is located", "string", "property",
         required=True, example="Brooklyn Center"),
    _var("property_state", "State where the property is located", "string", "property",
         required=True, example="MN"),
    _var("property_zip", "ZIP code of the property", "string", "property",
         required=True, example="55430"),
    _var("property_full_address", "Complete formatted address", "string", "property",
         example="123 Main Street, Brooklyn Center, MN 55430"),
    _var("property_year_built", "Year the property was built", "number", "property",
         example=1975),
    # Unit
    _var("unit_number", "Unit number or identifier", "string", "unit",
         required=True, example="101"),
    _var("unit_bedrooms", "Number of bedrooms", "number", "unit", example=2),
    _var("unit_bathrooms", "Number of bathrooms", "number", "unit", example=1),
    _var("unit_sqft", "Square footage of the unit", "number", "unit", example=850),
    _var("unit_floor", "Floor number of the unit", "number", "unit", example=1),
    # Lease terms
    _var("lease_start_date", "Start date of the lease", "date", "lease",
         format=DATE_FORMAT, required=True, example="January 1, 2026"),
    _var("lease_end_date", "End date of the lease", "date", "lease",
         format=DATE_FORMAT, required=True, example="December 31, 2026"),
    _var("lease_term_months", "Length of lease in months", "number", "lease", example=12),
    _var("move_in_date", "Move-in date", "date", "lease",
         format=DATE_FORMAT, example="January 1, 2026"),
    _var("signed_date", "Date the lease was signed", "date", "lease",
         format=DATE_FORMAT, example="December 15, 2025"),
    # Financial terms
    _var("monthly_rent", "Monthly rent amount", "currency", "financial",
         format=CURRENCY_FORMAT, required=True, example=1250.0),
    _var("security_deposit", "Security deposit amount", "currency", "financial",
         format=CURRENCY_FORMAT, required=True, example=1250.0),
    _var("late_fee_amount", "Late fee amount (MN cap: $50)", "currency", "financial",
         format=CURRENCY_FORMAT, example=50.0),
    _var("grace_period_days", "Grace period before late fee applies (days)", "number",
         "financial", example=5),
    _var("rent_due_day", "Day of month rent is due", "number", "financial", example=1),
    # Minnesota compliance
    _var("security_deposit_interest_rate", "Security deposit interest rate (MN: 1%)",
         "number", "compliance", format="0.00%", example=1),
    _var("late_fee_cap", "Maximum late fee per MN statute ($50)", "currency", "compliance",
         format=CURRENCY_FORMAT, example=50.0),
    _var("deposit_bank_name", "Bank where security deposit is held", "string", "compliance",
         example="First National Bank"),
    # Pets
    _var("pets_allowed", "Whether pets are allowed", "boolean", "pet", example=True),
    _var("pet_deposit", "Pet deposit amount", "currency", "pet",
         format=CURRENCY_FORMAT, example=250.0),
    _var("pet_rent", "Monthly pet rent", "currency", "pet",
         format=CURRENCY_FORMAT, example=25.0),
    _var("pet_name", "Name of the pet", "string", "pet", example="Buddy"),
    _var("pet_type", "Type of pet (dog, cat, etc.)", "string", "pet", example="Dog"),
    _var("pet_breed", "Breed of the pet", "string", "pet", example="Golden Retriever"),
    _var("pet_weight", "Weight of the pet in pounds", "number", "pet", example=65),
    # Parking
    _var("parking_included", "Whether parking is included", "boolean", "parking",
         example=True),
    _var("parking_fee", "Monthly parking fee", "currency", "parking",
         format=CURRENCY_FORMAT, example=50.0),
    _var("parking_space_number", "Assigned parking space number", "string", "parking",
         example="P-12"),
    # Utilities
    _var("utilities_tenant_pays", "Utilities paid by tenant", "string", "utilities",
         example="Electric, Gas"),
    _var("utilities_owner_pays", "Utilities paid by owner", "string", "utilities",
         example="Water, Sewer, Trash"),
)

_BY_NAME: Mapping[str, VariableDefinition] = MappingProxyType(
    {definition.name: definition for definition in STANDARD_VARIABLES}
)

if len(_BY_NAME) != len(STANDARD_VARIABLES):
    raise RuntimeError("Duplicate variable names in STANDARD_VARIABLES")


def get_available_variable_names() -> list[str]:
    """Return every catalog name in catalog order."""
    return [definition.name for definition in STANDARD_VARIABLES]


def all_variable_names() -> frozenset[str]:
    return frozenset(_BY_NAME)


def get_required_variable_names() -> list[str]:
    """Return the names a main lease template is expected to contain."""
    return [definition.name for definition in STANDARD_VARIABLES if definition.required]


def get_variable_definition(name: str) -> VariableDefinition | None:
    return _BY_NAME.get(name)


def build_variable_schema() -> VariableSchema:
    """Group catalog definitions by category.

    Every category is present, even when empty, and every definition
    appears exactly once in catalog order.
    """
    categories: dict[str, list[VariableDefinition]] = {
        category: [] for category in VARIABLE_CATEGORIES
    }
    for definition in STANDARD_VARIABLES:
        categories[definition.category].append(definition)

    return VariableSchema(variables=list(STANDARD_VARIABLES), categories=categories)


def get_sample_data() -> dict[str, Any]:
    """Return example values for every definition that has one.

    Used for template previews.
    """
    return {
        definition.name: definition.example
        for definition in STANDARD_VARIABLES
        if definition.example is not None
    }


def validate_variables(template_variables: Iterable[str]) -> VariableValidationResult:
    """Check template variables against the catalog.

    Unknown names and absent required names are reported as warnings only;
    the result is always valid.

    Args:
        template_variables: Variable names extracted from a template.

    Returns:
        VariableValidationResult listing unknown and missing required names.
    """
    names = list(template_variables)
    present = set(names)
    result = VariableValidationResult()

    for name in names:
        if name not in _BY_NAME and name not in result.unknown_variables:
            result.unknown_variables.append(name)
            result.warnings.append(f"Unknown variable: {{{{{name}}}}}")

    result.missing_required = [
        name for name in get_required_variable_names() if name not in present
    ]
    if result.missing_required:
        listed = ", ".join(f"{{{{{name}}}}}" for name in result.missing_required)
        result.warnings.append(f"Missing recommended variables: {listed}")

    logger.debug(
        f"Validated {len(names)} variables: {len(result.unknown_variables)} unknown, "
        f"{len(result.missing_required)} required missing"
    )
    return result


def format_variable_value(value: Any, variable_name: str) -> str:
    """Format a raw value for display according to its catalog definition.

    Args:
        value: The raw value.
        variable_name: Catalog name whose type drives formatting.

    Returns:
        The display string. None always formats to an empty string and
        names outside the catalog are stringified unchanged.
    """
    if value is None:
        return ""

    definition = _BY_NAME.get(variable_name)
    if definition is None:
        return str(value)

    match definition.type:
        case "currency":
            return _format_currency(value)
        case "boolean":
            return "Yes" if value else "No"
        case "number":
            return _format_number(value)
        case "date":
            return _format_date(value)
        case _:
            return str(value)


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _format_currency(value: Any) -> str:
    number = _to_float(value)
    if number is None:
        return str(value)
    sign = "-" if number < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(number):,.2f}"


def _format_number(value: Any) -> str:
    number = _to_float(value)
    if number is None:
        return str(value)
    if number.is_integer():
        return f"{int(number):,}"
    # Up to three fraction digits, trailing zeros dropped
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def _format_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return f"{value:%B} {value.day}, {value.year}"
    return str(value)
