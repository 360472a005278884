"""Tax profiles, line items and the derived VAT rule / calculation models.

Profiles and line items are supplied per calculation call and never
persisted here. ``VATRule`` and ``InvoiceCalculation`` are derived values.
All money is ``Decimal``; JSON output renders amounts as decimal strings and
uses camelCase keys.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from vat_engine.models.reference import VatRateType


class TaxModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _normalize_country(value: str) -> str:
    value = value.strip().upper()
    if len(value) != 2 or not value.isalpha():
        raise ValueError("country must be an ISO 3166-1 alpha-2 code")
    return value


CountryCode = Annotated[str, AfterValidator(_normalize_country)]

# Upper bounds keep line amounts within the default 28-digit decimal context
MAX_QUANTITY = Decimal("1000000000")
MAX_UNIT_PRICE = Decimal("1000000000000")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class SupplierTaxProfile(TaxModel):
    country: CountryCode
    is_vat_registered: bool = True


class CustomerTaxProfile(TaxModel):
    country: CountryCode
    vat_number: str | None = None
    vat_number_validated: bool = False
    is_business: bool = True

    @field_validator("vat_number")
    @classmethod
    def _blank_vat_number(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class LineItem(TaxModel):
    description: str = ""
    quantity: Decimal = Field(ge=0, le=MAX_QUANTITY)
    unit_price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    vat_category_code: str = "STANDARD"

    @field_validator("vat_category_code")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("vatCategoryCode must not be empty")
        return value


# ---------------------------------------------------------------------------
# Derived
# ---------------------------------------------------------------------------


class RuleKind(StrEnum):
    DOMESTIC = "DOMESTIC"
    INTRA_EU_REVERSE_CHARGE = "INTRA_EU_REVERSE_CHARGE"
    INTRA_EU_DISTANCE_SALE = "INTRA_EU_DISTANCE_SALE"
    EXPORT = "EXPORT"
    NON_TAXABLE = "NON_TAXABLE"
    FALLBACK = "FALLBACK"


class VATRule(TaxModel):
    """The VAT treatment determined for a supplier/customer pair."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    kind: RuleKind
    scenario: str
    rate_country: str
    charge_vat: bool
    reverse_charge: bool = False
    is_export: bool = False
    requires_vat_number_validation: bool = False
    requires_ec_sales_list: bool = False
    requires_export_documentation: bool = False
    manual_review: bool = False
    note: str
    warning: str | None = None


class LineCalculation(TaxModel):
    description: str
    quantity: Decimal
    unit_price: Decimal
    vat_category_code: str
    net_amount: Decimal
    vat_rate: Decimal
    rate_type: VatRateType | None = None
    vat_amount: Decimal
    line_total: Decimal


class VatBreakdownEntry(TaxModel):
    vat_rate: Decimal
    taxable_base: Decimal
    vat_amount: Decimal


class InvoiceCalculation(TaxModel):
    currency: str
    as_of_date: date
    line_items: list[LineCalculation]
    subtotal: Decimal
    vat_total: Decimal
    total: Decimal
    vat_breakdown: list[VatBreakdownEntry] = Field(default_factory=list)
    is_mixed_vat_rates: bool = False
    reverse_charge_note: str | None = None


class ValidationResult(TaxModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class VatCalculationOutcome(TaxModel):
    vat_rule: VATRule
    calculation: InvoiceCalculation
    validation: ValidationResult
