"""Invoice VAT calculation.

Applies a determined ``VATRule`` to line items. Line VAT is computed from the
unrounded ``quantity * unit_price``; net and VAT are then rounded half-up per
line to the currency minor unit, and totals are sums of the rounded line
figures, so printed lines always add up to the totals.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation

import structlog

from ..errors import InputError, RateNotFoundError
from ..models.reference import VatRateType
from ..models.tax import (
    InvoiceCalculation,
    LineCalculation,
    LineItem,
    RuleKind,
    VatBreakdownEntry,
    VATRule,
)
from ..reference.store import ReferenceDataStore, get_default_store
from .money import percent_of, quantize_money, to_decimal
from .prerequisites import describe_line_item

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
RATE_PRECISION = Decimal("0.01")

REVERSE_CHARGE_NOTE = (
    "Reverse charge: VAT to be accounted for by the recipient "
    "(Article 196, Council Directive 2006/112/EC)"
)


def _zero_rate_type(rule: VATRule) -> VatRateType | None:
    """Rate type recorded on lines of rules that never charge VAT."""
    if rule.kind in (RuleKind.EXPORT, RuleKind.INTRA_EU_REVERSE_CHARGE):
        return VatRateType.ZERO
    if rule.kind in (RuleKind.NON_TAXABLE, RuleKind.DOMESTIC, RuleKind.INTRA_EU_DISTANCE_SALE, RuleKind.FALLBACK):
        return None
    raise ValueError(f"Unhandled VAT rule kind: {rule.kind}")


def calculate_invoice_with_vat(
    line_items: Sequence[LineItem],
    rule: VATRule,
    as_of_date: date | None = None,
    store: ReferenceDataStore | None = None,
    currency: str | None = None,
    default_currency: str = "EUR",
) -> InvoiceCalculation:
    """Compute per-line and invoice-level VAT for *line_items* under *rule*.

    Rates are resolved for ``rule.rate_country`` on *as_of_date* (today by
    default). The currency defaults to that country's currency, then to
    *default_currency*. Rules that do not charge VAT force every rate to
    zero without touching the rate table.

    Raises:
        InputError: no line items, a negative quantity or unit price, or a
            line amount too large to represent.
        RateNotFoundError: a VAT-charging rule has no rate for an item's
            category; the validator reports this before calculation.
    """
    if not line_items:
        raise InputError("At least one line item is required")
    store = store or get_default_store()
    as_of_date = as_of_date or date.today()
    if currency is None:
        country = store.get_country(rule.rate_country)
        currency = (country.currency_code if country else None) or default_currency
    zero_rate_type = _zero_rate_type(rule)

    lines: list[LineCalculation] = []
    breakdown: dict[Decimal, list[Decimal]] = {}
    subtotal = ZERO
    vat_total = ZERO

    for index, item in enumerate(line_items):
        quantity = to_decimal(item.quantity)
        unit_price = to_decimal(item.unit_price)
        if quantity < 0 or unit_price < 0:
            raise InputError(f"{describe_line_item(index, item)}: quantity and unit price must not be negative")

        exact_net = quantity * unit_price
        if rule.charge_vat:
            try:
                rate_row = store.lookup_rate(rule.rate_country, item.vat_category_code, as_of_date)
            except RateNotFoundError as exc:
                raise RateNotFoundError(
                    exc.country_id, exc.category_code, exc.as_of,
                    item_label=describe_line_item(index, item),
                ) from exc
            vat_rate = rate_row.vat_rate
            rate_type: VatRateType | None = rate_row.rate_type
        else:
            vat_rate = ZERO.quantize(RATE_PRECISION)
            rate_type = zero_rate_type

        try:
            net = quantize_money(exact_net, currency)
            vat_amount = percent_of(exact_net, vat_rate, currency)
        except InvalidOperation as exc:
            raise InputError(f"{describe_line_item(index, item)}: amount is too large to calculate") from exc
        lines.append(LineCalculation(
            description=item.description,
            quantity=quantity,
            unit_price=unit_price,
            vat_category_code=item.vat_category_code,
            net_amount=net,
            vat_rate=vat_rate,
            rate_type=rate_type,
            vat_amount=vat_amount,
            line_total=net + vat_amount,
        ))
        subtotal += net
        vat_total += vat_amount

        bucket = breakdown.setdefault(vat_rate.quantize(RATE_PRECISION), [ZERO, ZERO])
        bucket[0] += net
        bucket[1] += vat_amount

    vat_breakdown = [
        VatBreakdownEntry(vat_rate=rate, taxable_base=base, vat_amount=vat)
        for rate, (base, vat) in sorted(breakdown.items(), key=lambda kv: kv[0], reverse=True)
    ]

    calculation = InvoiceCalculation(
        currency=currency,
        as_of_date=as_of_date,
        line_items=lines,
        subtotal=subtotal,
        vat_total=vat_total,
        total=subtotal + vat_total,
        vat_breakdown=vat_breakdown,
        is_mixed_vat_rates=len(vat_breakdown) > 1,
        reverse_charge_note=REVERSE_CHARGE_NOTE if rule.reverse_charge else None,
    )
    logger.debug(
        "invoice_calculated",
        kind=rule.kind,
        lines=len(lines),
        subtotal=str(calculation.subtotal),
        vat_total=str(calculation.vat_total),
        currency=currency,
    )
    return calculation
