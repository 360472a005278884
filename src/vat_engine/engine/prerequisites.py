"""Prerequisite checks for a determined VAT rule.

A read-only gate consulted before an invoice is calculated or persisted.
Every problem is collected; nothing here raises or fails fast. Errors block
the calculation, warnings are surfaced for display only.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date

import structlog

from ..models.tax import (
    CustomerTaxProfile,
    LineItem,
    RuleKind,
    SupplierTaxProfile,
    ValidationResult,
    VATRule,
)
from ..reference.store import ReferenceDataStore, get_default_store
from ..vat_numbers import check_vat_number_format

logger = structlog.get_logger(__name__)


def describe_line_item(index: int, item: LineItem) -> str:
    """Human label for a line item, e.g. ``Line 2 ("Consulting")``."""
    if item.description:
        return f'Line {index + 1} ("{item.description}")'
    return f"Line {index + 1}"


def validate_invoice_prerequisites(
    rule: VATRule,
    customer: CustomerTaxProfile,
    supplier: SupplierTaxProfile,
    line_items: Sequence[LineItem] | None = None,
    as_of_date: date | None = None,
    store: ReferenceDataStore | None = None,
) -> ValidationResult:
    """Check that *rule*'s legal and data requirements are satisfied.

    Line items are optional; when given, each item's VAT category must be
    known and, for rules that charge VAT, must have a rate in force for the
    rate-basis country on *as_of_date* (defaults to today).
    """
    store = store or get_default_store()
    as_of_date = as_of_date or date.today()
    errors: list[str] = []
    warnings: list[str] = []

    if rule.charge_vat and not supplier.is_vat_registered:
        errors.append("Supplier must be VAT registered to charge VAT on this invoice")

    if rule.kind == RuleKind.INTRA_EU_REVERSE_CHARGE:
        _check_reverse_charge(customer, errors, warnings)
    elif rule.kind == RuleKind.INTRA_EU_DISTANCE_SALE:
        if not store.is_eu_member(customer.country):
            errors.append(
                f"Customer country {customer.country} must be an EU member state for an intra-EU distance sale"
            )
        if customer.vat_number and not customer.vat_number_validated:
            warnings.append(
                "Customer has a VAT number that is not yet validated - the sale is treated as B2C; "
                "validate the VAT number if the customer is a business"
            )
    elif rule.kind == RuleKind.EXPORT:
        warnings.append("Export documentation (customs declaration, CMR) must be retained")
    elif rule.kind == RuleKind.FALLBACK:
        warnings.append("VAT treatment could not be determined automatically and is flagged for manual review")

    if rule.warning and rule.warning not in warnings:
        warnings.append(rule.warning)

    for index, item in enumerate(line_items or ()):
        label = describe_line_item(index, item)
        if store.get_category(item.vat_category_code) is None:
            errors.append(f"{label}: unknown VAT category {item.vat_category_code}")
            continue
        if not rule.charge_vat:
            continue
        if store.find_rate(rule.rate_country, item.vat_category_code, as_of_date) is None:
            errors.append(
                f"{label}: no VAT rate found for country {rule.rate_country} and category "
                f"{item.vat_category_code} on {as_of_date.isoformat()}"
            )

    result = ValidationResult(valid=not errors, errors=errors, warnings=warnings)
    if not result.valid:
        logger.info("prerequisites_failed", kind=rule.kind, errors=len(errors), warnings=len(warnings))
    return result


def _check_reverse_charge(customer: CustomerTaxProfile, errors: list[str], warnings: list[str]) -> None:
    if not customer.vat_number:
        errors.append("Customer VAT number is required for an intra-EU reverse charge invoice")
        return
    if not customer.vat_number_validated:
        errors.append(
            f"Customer VAT number {customer.vat_number} has not been validated; "
            "reverse charge requires a validated VAT number"
        )
    check = check_vat_number_format(customer.vat_number, customer.country)
    if not check.format_valid:
        warnings.append(check.message)
    warnings.append("Reverse charge supply must be reported in the EC Sales List")
