#!/usr/bin/env python3
"""Run a VAT calculation request (same JSON body as POST /vat/calculate) from a file."""
import json
import sys
from pathlib import Path

from vat_engine.api.routes.vat import CalculateRequest
from vat_engine.engine.pipeline import VatCalculationService
from vat_engine.errors import PrerequisiteError


def main(json_path: str) -> None:
    """Calculate a single invoice and print the result."""
    path = Path(json_path)
    if not path.exists():
        print(f"Error: File not found: {json_path}")
        sys.exit(1)

    with open(path) as f:
        request = CalculateRequest.model_validate(json.load(f))

    service = VatCalculationService()
    try:
        outcome = service.calculate(
            request.supplier, request.customer, request.line_items,
            invoice_date=request.invoice_date, currency=request.currency,
        )
    except PrerequisiteError as e:
        print("Invoice validation failed:")
        for error in e.errors:
            print(f"  ERROR   {error}")
        for warning in e.warnings:
            print(f"  WARNING {warning}")
        sys.exit(2)

    rule = outcome.vat_rule
    calc = outcome.calculation
    print(f"Rule: {rule.kind} ({rule.scenario})")
    print(f"Note: {rule.note}")
    print("-" * 50)
    for line in calc.line_items:
        print(f"{line.description[:28]:<28} {line.net_amount:>10} {line.vat_rate:>6}% {line.vat_amount:>10}")
    print("-" * 50)
    print(f"Subtotal: {calc.subtotal} {calc.currency}")
    print(f"VAT:      {calc.vat_total} {calc.currency}")
    print(f"Total:    {calc.total} {calc.currency}")
    if calc.reverse_charge_note:
        print(calc.reverse_charge_note)
    for warning in outcome.validation.warnings:
        print(f"WARNING {warning}")

    output_path = path.with_suffix(".result.json")
    with open(output_path, "w") as f:
        json.dump(outcome.model_dump(mode="json", by_alias=True), f, indent=2)
    print(f"\nFull result saved to: {output_path}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/calculate_invoice.py <path-to-request-json>")
        sys.exit(1)

    main(sys.argv[1])
