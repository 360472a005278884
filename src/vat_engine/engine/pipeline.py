"""Calculation service: determine rule -> validate prerequisites -> calculate."""
from __future__ import annotations

import time
from collections.abc import Sequence
from datetime import date

import structlog

from ..errors import InputError, PrerequisiteError
from ..models.tax import (
    CustomerTaxProfile,
    LineItem,
    SupplierTaxProfile,
    ValidationResult,
    VatCalculationOutcome,
    VATRule,
)
from ..reference.store import ReferenceDataStore, get_default_store
from .calculator import calculate_invoice_with_vat
from .prerequisites import validate_invoice_prerequisites
from .rules import determine_vat_rule

logger = structlog.get_logger(__name__)


class VatCalculationService:
    """Runs the full VAT pipeline against one reference data store.

    Stateless apart from the read-only store, so a single instance can serve
    concurrent requests.
    """

    def __init__(self, store: ReferenceDataStore | None = None, default_currency: str = "EUR"):
        self.store = store or get_default_store()
        self.default_currency = default_currency

    def preview_rule(self, supplier: SupplierTaxProfile, customer: CustomerTaxProfile) -> VATRule:
        return determine_vat_rule(supplier, customer, self.store)

    def validate(
        self,
        supplier: SupplierTaxProfile,
        customer: CustomerTaxProfile,
        line_items: Sequence[LineItem],
        invoice_date: date | None = None,
    ) -> tuple[VATRule, ValidationResult]:
        rule = determine_vat_rule(supplier, customer, self.store)
        validation = validate_invoice_prerequisites(
            rule, customer, supplier,
            line_items=line_items,
            as_of_date=invoice_date,
            store=self.store,
        )
        return rule, validation

    def calculate(
        self,
        supplier: SupplierTaxProfile,
        customer: CustomerTaxProfile,
        line_items: Sequence[LineItem],
        invoice_date: date | None = None,
        currency: str | None = None,
    ) -> VatCalculationOutcome:
        """Calculate an invoice, or raise if its prerequisites are not met.

        Raises:
            InputError: *line_items* is empty.
            PrerequisiteError: validation found errors; carries all errors
                and warnings. No partial calculation is returned.
        """
        if not line_items:
            raise InputError("At least one line item is required")
        start = time.monotonic()
        invoice_date = invoice_date or date.today()

        rule, validation = self.validate(supplier, customer, line_items, invoice_date)
        if not validation.valid:
            raise PrerequisiteError(validation.errors, validation.warnings)

        calculation = calculate_invoice_with_vat(
            line_items, rule, invoice_date,
            store=self.store, currency=currency, default_currency=self.default_currency,
        )
        logger.info(
            "vat_calculation_completed",
            kind=rule.kind,
            scenario=rule.scenario,
            rate_country=rule.rate_country,
            lines=len(line_items),
            total=str(calculation.total),
            currency=calculation.currency,
            warnings=len(validation.warnings),
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return VatCalculationOutcome(vat_rule=rule, calculation=calculation, validation=validation)
