"""Async repositories for the VAT reference tables."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vat_engine.models import reference as ref
from vat_engine.reference.store import ReferenceDataStore
from vat_engine.storage.models import Country, CountryVatRate, VatCategory


class ReferenceDataRepo:
    """Read (and seed) operations for countries, categories and rates."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_countries(self, *, eu_only: bool = False, active_only: bool = False) -> list[Country]:
        stmt = select(Country)
        if eu_only:
            stmt = stmt.where(Country.is_eu_member.is_(True))
        if active_only:
            stmt = stmt.where(Country.active.is_(True))
        stmt = stmt.order_by(Country.name_en)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_categories(self) -> list[VatCategory]:
        stmt = select(VatCategory).order_by(VatCategory.code)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_rates(self, country_id: str | None = None) -> list[CountryVatRate]:
        stmt = select(CountryVatRate)
        if country_id is not None:
            stmt = stmt.where(CountryVatRate.country_id == country_id.upper())
        stmt = stmt.order_by(
            CountryVatRate.country_id, CountryVatRate.category_code, CountryVatRate.effective_from,
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def upsert_seed(self, countries: list[dict], categories: list[dict], rates: list[dict]) -> int:
        """Insert or update reference rows; rate rows are only ever appended.

        Returns the number of newly inserted rate rows.
        """
        for row in countries:
            await self._session.merge(Country(**row))
        for row in categories:
            await self._session.merge(VatCategory(**row))
        await self._session.flush()

        existing = {
            (r.country_id, r.category_code, r.effective_from)
            for r in await self.list_rates()
        }
        inserted = 0
        for row in rates:
            key = (row["country_id"], row["category_code"], row["effective_from"])
            if key in existing:
                continue
            self._session.add(CountryVatRate(**row))
            existing.add(key)
            inserted += 1
        await self._session.flush()
        return inserted


def country_from_row(row: Country) -> ref.Country:
    return ref.Country(
        id=row.id,
        alpha3=row.alpha3,
        name_en=row.name_en,
        name_local=row.name_local,
        is_eu_member=row.is_eu_member,
        is_eea_member=row.is_eea_member,
        standard_vat_rate=row.standard_vat_rate,
        currency_code=row.currency_code,
        region=row.region,
        active=row.active,
    )


def category_from_row(row: VatCategory) -> ref.VatCategory:
    return ref.VatCategory(
        code=row.code,
        name_en=row.name_en,
        name_bg=row.name_bg,
        description=row.description,
        annex_iii_category=row.annex_iii_category,
    )


def rate_from_row(row: CountryVatRate) -> ref.CountryVatRate:
    return ref.CountryVatRate(
        country_id=row.country_id,
        category_code=row.category_code,
        rate_type=row.rate_type,
        vat_rate=row.vat_rate,
        effective_from=row.effective_from,
        effective_until=row.effective_until,
        notes=row.notes,
    )


async def load_reference_store(session: AsyncSession) -> ReferenceDataStore:
    """Read all reference tables once and freeze them into a store."""
    repo = ReferenceDataRepo(session)
    countries = await repo.list_countries()
    categories = await repo.list_categories()
    rates = await repo.list_rates()
    return ReferenceDataStore(
        countries=[country_from_row(c) for c in countries],
        categories=[category_from_row(c) for c in categories],
        rates=[rate_from_row(r) for r in rates],
    )
