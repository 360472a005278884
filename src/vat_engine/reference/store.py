"""Immutable in-memory reference data store.

Countries, categories and rates are loaded once per process (from the seed
tables or the database) and are read concurrently without locking. Rates are
indexed by ``(country, category)`` and sorted by ``effective_from`` so the
historical lookup is a binary search.
"""
from __future__ import annotations

import bisect
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from functools import lru_cache
from types import MappingProxyType

import structlog

from ..errors import RateNotFoundError, ReferenceDataError
from ..models.reference import Country, CountryVatRate, VatCategory
from . import seed

logger = structlog.get_logger(__name__)


class ReferenceDataStore:
    """Read-only view over countries, VAT categories and country rates."""

    def __init__(
        self,
        countries: Iterable[Country],
        categories: Iterable[VatCategory],
        rates: Iterable[CountryVatRate],
    ):
        self._countries = MappingProxyType({c.id: c for c in countries})
        self._categories = MappingProxyType({c.code: c for c in categories})

        grouped: dict[tuple[str, str], list[CountryVatRate]] = defaultdict(list)
        for rate in rates:
            if rate.country_id not in self._countries:
                raise ReferenceDataError(f"Rate references unknown country {rate.country_id}")
            if rate.category_code not in self._categories:
                raise ReferenceDataError(f"Rate references unknown VAT category {rate.category_code}")
            grouped[(rate.country_id, rate.category_code)].append(rate)

        index: dict[tuple[str, str], tuple[CountryVatRate, ...]] = {}
        for key, rows in grouped.items():
            rows.sort(key=lambda r: r.effective_from)
            for earlier, later in zip(rows, rows[1:]):
                if earlier.effective_from == later.effective_from:
                    raise ReferenceDataError(
                        f"Two rates for {key[0]}/{key[1]} start on {later.effective_from.isoformat()}"
                    )
            index[key] = tuple(rows)
        self._rates = MappingProxyType(index)
        self._starts = MappingProxyType(
            {key: tuple(r.effective_from for r in rows) for key, rows in index.items()}
        )

    @classmethod
    def from_seed(cls) -> ReferenceDataStore:
        """Build a store from the bundled seed tables."""
        store = cls(
            countries=[Country(**row) for row in seed.COUNTRIES],
            categories=[VatCategory(**row) for row in seed.VAT_CATEGORIES],
            rates=[CountryVatRate(**row) for row in seed.COUNTRY_VAT_RATES],
        )
        logger.info(
            "reference_data_loaded",
            source="seed",
            countries=len(store._countries),
            categories=len(store._categories),
            rates=sum(len(rows) for rows in store._rates.values()),
        )
        return store

    # ── Countries ─────────────────────────────────────────────────────────

    def get_country(self, country_id: str | None) -> Country | None:
        if not country_id:
            return None
        return self._countries.get(country_id.upper())

    def is_eu_member(self, country_id: str | None) -> bool:
        country = self.get_country(country_id)
        return country is not None and country.is_eu_member

    def is_eu_or_eea(self, country_id: str | None) -> bool:
        country = self.get_country(country_id)
        return country is not None and (country.is_eu_member or country.is_eea_member)

    def list_countries(self, *, eu_only: bool = False, active_only: bool = False) -> list[Country]:
        countries = self._countries.values()
        if eu_only:
            countries = [c for c in countries if c.is_eu_member]
        if active_only:
            countries = [c for c in countries if c.active]
        return sorted(countries, key=lambda c: c.name_en)

    # ── Categories ────────────────────────────────────────────────────────

    def get_category(self, code: str | None) -> VatCategory | None:
        if not code:
            return None
        return self._categories.get(code.upper())

    def list_categories(self) -> list[VatCategory]:
        return sorted(self._categories.values(), key=lambda c: c.code)

    # ── Rates ─────────────────────────────────────────────────────────────

    def rates_for_country(self, country_id: str) -> list[CountryVatRate]:
        """All rate rows of a country, by category then effective date."""
        country_id = country_id.upper()
        rows = [
            rate
            for (cid, _), history in self._rates.items()
            if cid == country_id
            for rate in history
        ]
        return sorted(rows, key=lambda r: (r.category_code, r.effective_from))

    def find_rate(self, country_id: str, category_code: str, as_of: date) -> CountryVatRate | None:
        """Return the rate in force on *as_of*, or None.

        Picks the row with the latest ``effective_from <= as_of``. A row
        whose ``effective_until`` has passed is not in force.
        """
        key = (country_id.upper(), category_code.upper())
        starts = self._starts.get(key)
        if not starts:
            return None
        position = bisect.bisect_right(starts, as_of)
        if position == 0:
            return None
        rate = self._rates[key][position - 1]
        if not rate.is_effective_on(as_of):
            return None
        return rate

    def lookup_rate(self, country_id: str, category_code: str, as_of: date) -> CountryVatRate:
        """Like :meth:`find_rate` but raises ``RateNotFoundError``."""
        rate = self.find_rate(country_id, category_code, as_of)
        if rate is None:
            raise RateNotFoundError(country_id.upper(), category_code.upper(), as_of)
        return rate


@lru_cache(maxsize=1)
def get_default_store() -> ReferenceDataStore:
    """Process-wide store built from the seed tables."""
    return ReferenceDataStore.from_seed()
