"""Test prerequisite validation of a determined VAT rule."""
from datetime import date

from vat_engine.engine.prerequisites import describe_line_item, validate_invoice_prerequisites
from vat_engine.engine.rules import determine_vat_rule
from vat_engine.models.tax import RuleKind, VATRule
from tests.factories import make_customer, make_line_item, make_supplier

JUNE = date(2024, 6, 15)


def _validate(store, supplier, customer, items=None, as_of=JUNE):
    rule = determine_vat_rule(supplier, customer, store)
    return validate_invoice_prerequisites(rule, customer, supplier, items, as_of, store)


class TestReverseCharge:
    def test_missing_vat_number(self, store):
        result = _validate(store, make_supplier("DE"), make_customer("FR"))
        assert result.valid is False
        assert result.errors == ["Customer VAT number is required for an intra-EU reverse charge invoice"]

    def test_unvalidated_vat_number(self, store):
        result = _validate(store, make_supplier("DE"), make_customer("FR", vat_number="FR12345678901"))
        assert result.valid is False
        assert "has not been validated" in result.errors[0]

    def test_validated_vat_number(self, store):
        customer = make_customer("FR", vat_number="FR12345678901", validated=True)
        result = _validate(store, make_supplier("DE"), customer, [make_line_item()])
        assert result.valid is True
        assert result.errors == []
        assert any("EC Sales List" in w for w in result.warnings)

    def test_bad_format_is_warning_only(self, store):
        customer = make_customer("FR", vat_number="FR123", validated=True)
        result = _validate(store, make_supplier("DE"), customer)
        assert result.valid is True
        assert any("does not match the FR format" in w for w in result.warnings)

    def test_no_rate_needed_for_reverse_charge(self, store):
        # Austria has no BOOKS row, but nothing is charged
        customer = make_customer("AT", vat_number="ATU12345678", validated=True)
        result = _validate(store, make_supplier("DE"), customer, [make_line_item(category="BOOKS")])
        assert result.valid is True


class TestDistanceSale:
    def test_valid(self, store):
        customer = make_customer("FR", business=False)
        result = _validate(store, make_supplier("DE"), customer, [make_line_item(category="BOOKS")])
        assert result.valid is True

    def test_unvalidated_vat_number_warns(self, store):
        customer = make_customer("FR", vat_number="FR12345678901", business=False)
        result = _validate(store, make_supplier("DE"), customer)
        assert result.valid is True
        assert any("not yet validated" in w for w in result.warnings)

    def test_customer_outside_eu(self, store):
        rule = VATRule(
            kind=RuleKind.INTRA_EU_DISTANCE_SALE,
            scenario="INTRA_EU_B2C_DISTANCE_SALE",
            rate_country="NO",
            charge_vat=True,
            note="test",
        )
        customer = make_customer("NO", business=False)
        result = validate_invoice_prerequisites(rule, customer, make_supplier("DE"), store=store)
        assert result.valid is False
        assert "must be an EU member state" in result.errors[0]


class TestOtherRules:
    def test_export_warns_about_documentation(self, store):
        result = _validate(store, make_supplier("DE"), make_customer("US"), [make_line_item()])
        assert result.valid is True
        assert any("Export documentation" in w for w in result.warnings)

    def test_fallback_warns(self, store):
        result = _validate(store, make_supplier("DE"), make_customer("NO"), [make_line_item()])
        assert result.valid is True
        assert any("manual review" in w for w in result.warnings)
        assert len(result.warnings) == len(set(result.warnings))

    def test_charging_rule_needs_registered_supplier(self, store):
        rule = VATRule(
            kind=RuleKind.DOMESTIC,
            scenario="DOMESTIC_B2B",
            rate_country="DE",
            charge_vat=True,
            note="test",
        )
        supplier = make_supplier("DE", registered=False)
        result = validate_invoice_prerequisites(rule, make_customer("DE"), supplier, store=store)
        assert result.errors == ["Supplier must be VAT registered to charge VAT on this invoice"]

    def test_non_taxable_is_valid(self, store):
        supplier = make_supplier("DE", registered=False)
        result = _validate(store, supplier, make_customer("DE"), [make_line_item(category="BOOKS")])
        assert result.valid is True


class TestLineItems:
    def test_unknown_category(self, store):
        items = [make_line_item(category="WEAPONS", description="Sword")]
        result = _validate(store, make_supplier("DE"), make_customer("DE"), items)
        assert result.errors == ['Line 1 ("Sword"): unknown VAT category WEAPONS']

    def test_missing_rate_for_charging_rule(self, store):
        items = [make_line_item(), make_line_item(category="BOOKS", description="Novel")]
        result = _validate(store, make_supplier("AT"), make_customer("AT"), items)
        assert result.valid is False
        assert result.errors == [
            'Line 2 ("Novel"): no VAT rate found for country AT and category BOOKS on 2024-06-15'
        ]

    def test_all_errors_collected(self, store):
        items = [
            make_line_item(category="BOOKS", description="Novel"),
            make_line_item(category="UNKNOWN", description="Gadget"),
        ]
        result = _validate(store, make_supplier("AT"), make_customer("AT"), items)
        assert len(result.errors) == 2

    def test_rate_before_seed_date(self, store):
        result = _validate(store, make_supplier("DE"), make_customer("DE"), [make_line_item()], date(2023, 1, 1))
        assert result.valid is False
        assert "on 2023-01-01" in result.errors[0]


class TestDescribeLineItem:
    def test_with_description(self):
        assert describe_line_item(0, make_line_item(description="Consulting")) == 'Line 1 ("Consulting")'

    def test_without_description(self):
        assert describe_line_item(2, make_line_item(description="")) == "Line 3"
