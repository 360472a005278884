"""Reference data API routes - countries and VAT categories."""
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Query
from ...reference.store import ReferenceDataStore
from .vat import get_reference_store

router = APIRouter()


@router.get("/countries")
async def list_countries(
    eu_only: bool = Query(False, alias="euOnly"),
    active: bool = Query(False),
    store: ReferenceDataStore = Depends(get_reference_store),
):
    """List countries with their VAT metadata, ordered by English name."""
    countries = store.list_countries(eu_only=eu_only, active_only=active)
    return {
        "success": True,
        "data": [c.model_dump(mode="json", by_alias=True) for c in countries],
        "count": len(countries),
    }


@router.get("/countries/{country_id}")
async def get_country(country_id: str, store: ReferenceDataStore = Depends(get_reference_store)):
    """Get one country with all of its rate rows (current and historical)."""
    country = store.get_country(country_id)
    if country is None:
        raise HTTPException(status_code=404, detail=f"Country not found: {country_id.upper()}")
    data = country.model_dump(mode="json", by_alias=True)
    data["vatRates"] = [r.model_dump(mode="json", by_alias=True) for r in store.rates_for_country(country.id)]
    return {"success": True, "data": data}


@router.get("/categories")
async def list_categories(store: ReferenceDataStore = Depends(get_reference_store)):
    """List all VAT categories."""
    categories = store.list_categories()
    return {
        "success": True,
        "data": [
            {**c.model_dump(mode="json", by_alias=True), "reducedRateEligible": c.is_reduced_rate_eligible}
            for c in categories
        ],
        "count": len(categories),
    }
