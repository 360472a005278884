"""Exception hierarchy for the VAT engine."""
from __future__ import annotations

from datetime import date


class VatEngineError(Exception):
    """Base class for all VAT engine errors."""


class InputError(VatEngineError, ValueError):
    """Structurally invalid input (empty line items, negative amounts, ...)."""


class ReferenceDataError(VatEngineError):
    """Reference tables are inconsistent (duplicate or dangling rate rows)."""


class PrerequisiteError(VatEngineError):
    """The determined VAT rule's legal or data requirements are not met.

    Carries the complete list of problems so callers can show all of them
    at once.
    """

    def __init__(self, errors: list[str], warnings: list[str] | None = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__("; ".join(self.errors) or "Invoice validation failed")


class RateNotFoundError(PrerequisiteError):
    """No VAT rate row for a (country, category, date) combination."""

    def __init__(
        self,
        country_id: str,
        category_code: str,
        as_of: date,
        item_label: str | None = None,
    ):
        self.country_id = country_id
        self.category_code = category_code
        self.as_of = as_of
        self.item_label = item_label
        message = (
            f"No VAT rate found for country {country_id} and category "
            f"{category_code} on {as_of.isoformat()}"
        )
        if item_label:
            message = f"{item_label}: {message}"
        super().__init__([message])
