#!/usr/bin/env python3
"""Seed the reference tables (countries, VAT categories, rates) into the database."""
import asyncio
import sys

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from vat_engine.config import Settings
from vat_engine.reference import seed
from vat_engine.storage.repositories import ReferenceDataRepo


async def main() -> None:
    """Upsert countries and categories, append any missing rate rows."""
    settings = Settings()
    engine = create_async_engine(settings.database_url.get_secret_value())
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        repo = ReferenceDataRepo(session)
        inserted = await repo.upsert_seed(seed.COUNTRIES, seed.VAT_CATEGORIES, seed.COUNTRY_VAT_RATES)
        await session.commit()

    await engine.dispose()

    print(f"Seeded {len(seed.COUNTRIES)} countries")
    print(f"Seeded {len(seed.VAT_CATEGORIES)} VAT categories")
    print(f"Inserted {inserted} new rate rows ({len(seed.COUNTRY_VAT_RATES)} in seed)")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        print(f"Error seeding reference data: {e}")
        sys.exit(1)
