"""Test VAT rule determination."""
from vat_engine.engine.rules import determine_vat_rule
from vat_engine.models.tax import RuleKind
from tests.factories import make_customer, make_supplier


class TestNonTaxable:
    def test_unregistered_supplier(self, store):
        rule = determine_vat_rule(make_supplier("DE", registered=False), make_customer("FR"), store)
        assert rule.kind == RuleKind.NON_TAXABLE
        assert rule.scenario == "NON_VAT_REGISTERED_B2B"
        assert rule.charge_vat is False
        assert rule.rate_country == "DE"

    def test_unregistered_wins_over_domestic(self, store):
        rule = determine_vat_rule(
            make_supplier("BG", registered=False), make_customer("BG", business=False), store,
        )
        assert rule.kind == RuleKind.NON_TAXABLE
        assert rule.scenario == "NON_VAT_REGISTERED_B2C"
        assert rule.rate_country == "BG"


class TestDomestic:
    def test_same_country(self, store):
        rule = determine_vat_rule(make_supplier("BG"), make_customer("BG", business=False), store)
        assert rule.kind == RuleKind.DOMESTIC
        assert rule.scenario == "DOMESTIC_B2C"
        assert rule.rate_country == "BG"
        assert rule.charge_vat is True
        assert rule.reverse_charge is False

    def test_domestic_outside_eu(self, store):
        rule = determine_vat_rule(make_supplier("GB"), make_customer("GB"), store)
        assert rule.kind == RuleKind.DOMESTIC
        assert rule.scenario == "DOMESTIC_B2B"


class TestIntraEu:
    def test_b2b_reverse_charge(self, store):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("FR"), store)
        assert rule.kind == RuleKind.INTRA_EU_REVERSE_CHARGE
        assert rule.scenario == "INTRA_EU_B2B_REVERSE_CHARGE"
        assert rule.charge_vat is False
        assert rule.reverse_charge is True
        assert rule.requires_vat_number_validation is True
        assert rule.requires_ec_sales_list is True
        assert rule.rate_country == "FR"

    def test_b2c_distance_sale(self, store):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("FR", business=False), store)
        assert rule.kind == RuleKind.INTRA_EU_DISTANCE_SALE
        assert rule.charge_vat is True
        assert rule.reverse_charge is False
        assert rule.rate_country == "FR"


class TestExport:
    def test_eu_to_third_country(self, store):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("US"), store)
        assert rule.kind == RuleKind.EXPORT
        assert rule.scenario == "EXPORT_B2B"
        assert rule.is_export is True
        assert rule.charge_vat is False
        assert rule.requires_export_documentation is True
        assert "United States" in rule.note

    def test_export_b2c(self, store):
        rule = determine_vat_rule(make_supplier("FR"), make_customer("CH", business=False), store)
        assert rule.kind == RuleKind.EXPORT
        assert rule.scenario == "EXPORT_B2C"


class TestFallback:
    def test_eea_customer_needs_review(self, store):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("NO"), store)
        assert rule.kind == RuleKind.FALLBACK
        assert rule.manual_review is True
        assert rule.charge_vat is True
        assert rule.rate_country == "DE"
        assert "EEA" in rule.warning

    def test_non_eu_supplier_into_eu(self, store):
        rule = determine_vat_rule(make_supplier("US"), make_customer("DE"), store)
        assert rule.kind == RuleKind.FALLBACK
        assert "outside the EU" in rule.warning

    def test_unknown_countries(self, store):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("ZZ"), store)
        assert rule.kind == RuleKind.FALLBACK
        assert rule.warning.startswith("Country data for supplier or customer is unknown")


class TestDeterminism:
    def test_same_inputs_same_rule(self, store):
        supplier, customer = make_supplier("DE"), make_customer("FR")
        assert determine_vat_rule(supplier, customer, store) == determine_vat_rule(supplier, customer, store)

    def test_uses_default_store(self):
        rule = determine_vat_rule(make_supplier("DE"), make_customer("DE"))
        assert rule.kind == RuleKind.DOMESTIC
