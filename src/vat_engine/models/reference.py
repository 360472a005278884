"""Reference data models: countries, VAT categories and country rates.

These are immutable, loaded once per process and only read at request time.
New rates are appended with a later ``effective_from`` rather than mutating
existing rows, so historical invoices can always be recalculated.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ReferenceModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class VatRateType(StrEnum):
    STANDARD = "STANDARD"
    REDUCED = "REDUCED"
    SUPER_REDUCED = "SUPER_REDUCED"
    ZERO = "ZERO"
    PARKING = "PARKING"


class Country(ReferenceModel):
    """A country with its EU/EEA membership and tax metadata."""

    id: str = Field(min_length=2, max_length=2)
    alpha3: str | None = None
    name_en: str
    name_local: str | None = None
    is_eu_member: bool = False
    is_eea_member: bool = False
    standard_vat_rate: Decimal | None = None  # None for non-VAT jurisdictions
    currency_code: str | None = None
    region: str | None = None
    active: bool = True

    @field_validator("id")
    @classmethod
    def _upper_id(cls, value: str) -> str:
        return value.upper()


class VatCategory(ReferenceModel):
    """A class of goods/services that may carry its own rate."""

    code: str
    name_en: str
    name_bg: str | None = None
    description: str | None = None
    annex_iii_category: int | None = Field(default=None, ge=1, le=30)

    @property
    def is_reduced_rate_eligible(self) -> bool:
        """Annex III categories may be taxed at a reduced rate."""
        return self.annex_iii_category is not None


class CountryVatRate(ReferenceModel):
    """Rate of one category in one country, valid from ``effective_from``."""

    country_id: str
    category_code: str
    rate_type: VatRateType
    vat_rate: Decimal = Field(ge=0, le=100)
    effective_from: date
    effective_until: date | None = None
    notes: str | None = None

    def is_effective_on(self, day: date) -> bool:
        if day < self.effective_from:
            return False
        return self.effective_until is None or day <= self.effective_until
