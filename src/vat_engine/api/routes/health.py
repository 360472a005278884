"""Health check endpoint."""
from __future__ import annotations
from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Basic health check, including whether reference data is loaded."""
    store = request.app.state.reference_store
    return {
        "status": "ok",
        "service": "vat-engine-api",
        "countries": len(store.list_countries()),
        "categories": len(store.list_categories()),
    }
