"""VAT rule determination for a supplier/customer pair.

Rules are tried in a fixed precedence order:

1. supplier not VAT registered -> non-taxable
2. same country                -> domestic
3. EU supplier, other EU customer
   - business -> intra-EU reverse charge (needs a validated VAT number)
   - consumer -> distance sale taxed at the customer's country rate
4. customer outside the EU/EEA -> export, zero-rated
5. anything else               -> supplier-country rates, flagged for review

Determination is pure: it only reads EU/EEA membership from the reference
store and never depends on the invoice date.
"""
from __future__ import annotations

import structlog

from ..models.tax import CustomerTaxProfile, RuleKind, SupplierTaxProfile, VATRule
from ..reference.store import ReferenceDataStore, get_default_store

logger = structlog.get_logger(__name__)


def _customer_segment(customer: CustomerTaxProfile) -> str:
    return "B2B" if customer.is_business else "B2C"


def determine_vat_rule(
    supplier: SupplierTaxProfile,
    customer: CustomerTaxProfile,
    store: ReferenceDataStore | None = None,
) -> VATRule:
    """Decide which VAT treatment applies to a sale from *supplier* to *customer*."""
    store = store or get_default_store()
    rule = _determine(supplier, customer, store)
    logger.debug(
        "vat_rule_determined",
        supplier_country=supplier.country,
        customer_country=customer.country,
        kind=rule.kind,
        scenario=rule.scenario,
        rate_country=rule.rate_country,
    )
    return rule


def _determine(
    supplier: SupplierTaxProfile,
    customer: CustomerTaxProfile,
    store: ReferenceDataStore,
) -> VATRule:
    if not supplier.is_vat_registered:
        return VATRule(
            kind=RuleKind.NON_TAXABLE,
            scenario=f"NON_VAT_REGISTERED_{_customer_segment(customer)}",
            rate_country=supplier.country,
            charge_vat=False,
            note="Supplier is not VAT registered - no VAT is charged",
        )

    if supplier.country == customer.country:
        return VATRule(
            kind=RuleKind.DOMESTIC,
            scenario=f"DOMESTIC_{_customer_segment(customer)}",
            rate_country=supplier.country,
            charge_vat=True,
            note=f"Domestic transaction - {supplier.country} VAT rates apply by category",
        )

    supplier_in_eu = store.is_eu_member(supplier.country)
    customer_in_eu = store.is_eu_member(customer.country)

    if supplier_in_eu and customer_in_eu:
        if customer.is_business:
            return VATRule(
                kind=RuleKind.INTRA_EU_REVERSE_CHARGE,
                scenario="INTRA_EU_B2B_REVERSE_CHARGE",
                rate_country=customer.country,
                charge_vat=False,
                reverse_charge=True,
                requires_vat_number_validation=True,
                requires_ec_sales_list=True,
                note="Intra-EU B2B supply - reverse charge, VAT accounted for by the customer",
            )
        return VATRule(
            kind=RuleKind.INTRA_EU_DISTANCE_SALE,
            scenario="INTRA_EU_B2C_DISTANCE_SALE",
            rate_country=customer.country,
            charge_vat=True,
            note=f"Intra-EU distance sale - destination country ({customer.country}) VAT rates apply",
        )

    customer_country = store.get_country(customer.country)
    if customer_country is not None and not store.is_eu_or_eea(customer.country):
        return VATRule(
            kind=RuleKind.EXPORT,
            scenario=f"EXPORT_{_customer_segment(customer)}",
            rate_country=supplier.country,
            charge_vat=False,
            is_export=True,
            requires_export_documentation=True,
            note=f"Export to {customer_country.name_en} - zero-rated (0% VAT)",
        )

    if customer_country is None or store.get_country(supplier.country) is None:
        reason = "Country data for supplier or customer is unknown"
    elif not supplier_in_eu:
        reason = f"Supplier country {supplier.country} is outside the EU"
    else:
        reason = f"Customer country {customer.country} is in the EEA but not in the EU"
    return VATRule(
        kind=RuleKind.FALLBACK,
        scenario="FALLBACK_SUPPLIER_RATES",
        rate_country=supplier.country,
        charge_vat=True,
        manual_review=True,
        note=f"No specific rule applies - {supplier.country} VAT rates used",
        warning=f"{reason}; VAT treatment needs manual review",
    )
