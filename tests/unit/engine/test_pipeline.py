"""Test the end-to-end calculation service."""
import pytest
from datetime import date
from decimal import Decimal

from vat_engine.engine.pipeline import VatCalculationService
from vat_engine.errors import InputError, PrerequisiteError
from vat_engine.models.tax import RuleKind
from tests.factories import make_customer, make_line_item, make_rate, make_small_store, make_supplier

JUNE = date(2024, 6, 15)


class TestCalculate:
    def test_reverse_charge_invoice(self, service):
        customer = make_customer("FR", vat_number="FR12345678901", validated=True)
        outcome = service.calculate(make_supplier("DE"), customer, [make_line_item(quantity="2")], JUNE)
        assert outcome.vat_rule.kind == RuleKind.INTRA_EU_REVERSE_CHARGE
        assert outcome.calculation.subtotal == Decimal("200.00")
        assert outcome.calculation.vat_total == Decimal("0.00")
        assert outcome.calculation.total == Decimal("200.00")
        assert outcome.calculation.reverse_charge_note is not None
        assert outcome.validation.valid is True
        assert outcome.validation.warnings

    def test_domestic_b2c(self, service):
        outcome = service.calculate(
            make_supplier("BG"), make_customer("BG", business=False),
            [make_line_item(unit_price="50.00")], JUNE,
        )
        assert outcome.vat_rule.scenario == "DOMESTIC_B2C"
        assert outcome.calculation.vat_total == Decimal("10.00")
        assert outcome.calculation.total == Decimal("60.00")

    def test_distance_sale_uses_destination_rate(self, service):
        outcome = service.calculate(
            make_supplier("DE"), make_customer("FR", business=False),
            [make_line_item(category="BOOKS")], JUNE,
        )
        assert outcome.vat_rule.rate_country == "FR"
        assert outcome.calculation.line_items[0].vat_rate == Decimal("5.50")
        assert outcome.calculation.vat_total == Decimal("5.50")

    def test_deterministic(self, service):
        args = (make_supplier("DE"), make_customer("DE"), [make_line_item(unit_price="10.01")], JUNE)
        assert service.calculate(*args) == service.calculate(*args)

    def test_as_of_date_recorded(self, service):
        outcome = service.calculate(make_supplier("DE"), make_customer("DE"), [make_line_item()], JUNE)
        assert outcome.calculation.as_of_date == JUNE


class TestCalculateFailures:
    def test_empty_line_items(self, service):
        with pytest.raises(InputError):
            service.calculate(make_supplier("DE"), make_customer("DE"), [], JUNE)

    def test_missing_vat_number_blocks_calculation(self, service):
        with pytest.raises(PrerequisiteError) as exc_info:
            service.calculate(make_supplier("DE"), make_customer("FR"), [make_line_item()], JUNE)
        assert exc_info.value.errors == [
            "Customer VAT number is required for an intra-EU reverse charge invoice"
        ]

    def test_missing_rate_blocks_calculation(self, service):
        with pytest.raises(PrerequisiteError) as exc_info:
            service.calculate(
                make_supplier("AT"), make_customer("AT"),
                [make_line_item(category="BOOKS")], JUNE,
            )
        assert "no VAT rate found for country AT and category BOOKS" in exc_info.value.errors[0]

    def test_warnings_travel_with_errors(self, service):
        customer = make_customer("FR", vat_number="FR123")
        with pytest.raises(PrerequisiteError) as exc_info:
            service.calculate(make_supplier("DE"), customer, [make_line_item()], JUNE)
        assert exc_info.value.warnings


class TestValidateAndPreview:
    def test_preview_rule(self, service):
        rule = service.preview_rule(make_supplier("DE"), make_customer("US"))
        assert rule.kind == RuleKind.EXPORT

    def test_validate_does_not_raise(self, service):
        rule, validation = service.validate(make_supplier("DE"), make_customer("FR"), [make_line_item()], JUNE)
        assert rule.kind == RuleKind.INTRA_EU_REVERSE_CHARGE
        assert validation.valid is False

    def test_custom_store(self):
        store = make_small_store([
            make_rate("DE", "STANDARD", "16.00", date(2020, 7, 1), effective_until=date(2020, 12, 31)),
            make_rate("DE", "STANDARD", "19.00", date(2021, 1, 1)),
        ])
        service = VatCalculationService(store)
        outcome = service.calculate(
            make_supplier("DE"), make_customer("DE"), [make_line_item()], date(2020, 10, 1),
        )
        assert outcome.calculation.vat_total == Decimal("16.00")
