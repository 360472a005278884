"""VAT calculation API routes."""
from __future__ import annotations
from datetime import date
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import Field, field_validator
from ...engine.pipeline import VatCalculationService
from ...errors import InputError, PrerequisiteError
from ...models.tax import CustomerTaxProfile, LineItem, SupplierTaxProfile, TaxModel
from ...reference.store import ReferenceDataStore
from ...vat_numbers import check_vat_number_format, country_for_vat_prefix, normalize_vat_number

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_vat_service(request: Request) -> VatCalculationService:
    return request.app.state.vat_service


def get_reference_store(request: Request) -> ReferenceDataStore:
    return request.app.state.reference_store


class PreviewRuleRequest(TaxModel):
    supplier: SupplierTaxProfile
    customer: CustomerTaxProfile


class CalculateRequest(TaxModel):
    supplier: SupplierTaxProfile
    customer: CustomerTaxProfile
    line_items: list[LineItem] = Field(min_length=1)
    invoice_date: date | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator("invoice_date", mode="before")
    @classmethod
    def _date_part(cls, value):
        # Accept full ISO timestamps from browser clients
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class VatNumberRequest(TaxModel):
    vat_number: str = Field(min_length=1)
    country_code: str | None = Field(default=None, min_length=2, max_length=2)


@router.post("/calculate")
async def calculate(payload: CalculateRequest, service: VatCalculationService = Depends(get_vat_service)):
    """Determine the VAT rule, validate prerequisites and calculate totals."""
    try:
        outcome = service.calculate(
            payload.supplier,
            payload.customer,
            payload.line_items,
            invoice_date=payload.invoice_date,
            currency=payload.currency.upper() if payload.currency else None,
        )
    except PrerequisiteError as e:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Invoice validation failed",
                "errors": e.errors,
                "warnings": e.warnings,
            },
        )
    except InputError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    except Exception as e:
        logger.error("vat_calculation_error", error=str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to calculate invoice"},
        )

    data = outcome.model_dump(mode="json", by_alias=True)
    data["validation"].pop("valid", None)
    return {"success": True, "data": data}


@router.post("/preview-rule")
async def preview_rule(payload: PreviewRuleRequest, service: VatCalculationService = Depends(get_vat_service)):
    """Preview the VAT rule for a supplier/customer pair without line items."""
    rule = service.preview_rule(payload.supplier, payload.customer)
    return {"success": True, "data": rule.model_dump(mode="json", by_alias=True)}


@router.post("/validate-number")
async def validate_number(payload: VatNumberRequest, store: ReferenceDataStore = Depends(get_reference_store)):
    """Check the format of an EU VAT number.

    Registration itself is confirmed through VIES by the caller; this only
    rejects numbers that cannot be valid for the member state.
    """
    number = normalize_vat_number(payload.vat_number)
    country_code = (payload.country_code or country_for_vat_prefix(number[:2])).upper()
    country = store.get_country(country_code)
    if country is None:
        raise HTTPException(status_code=404, detail=f"Country not found: {country_code}")
    if not country.is_eu_member:
        raise HTTPException(
            status_code=400,
            detail=f"VAT number checks are only available for EU countries. {country.name_en} is not an EU member.",
        )
    check = check_vat_number_format(number, country_code)
    return {"success": True, "data": check.to_dict()}


@router.get("/rates/{country}/{category}")
async def get_rate(
    country: str,
    category: str,
    on: date | None = Query(None, alias="date"),
    store: ReferenceDataStore = Depends(get_reference_store),
):
    """Get the VAT rate in force for a country and category on a date."""
    as_of = on or date.today()
    country_code = country.upper()
    category_code = category.upper()
    if store.get_country(country_code) is None:
        raise HTTPException(status_code=404, detail=f"Country not found: {country_code}")
    if store.get_category(category_code) is None:
        raise HTTPException(status_code=404, detail=f"VAT category not found: {category_code}")

    rate = store.find_rate(country_code, category_code, as_of)
    if rate is None:
        raise HTTPException(
            status_code=404,
            detail=f"No VAT rate found for {country_code} and category {category_code} on {as_of.isoformat()}",
        )
    return {
        "success": True,
        "data": {
            "country": country_code,
            "category": category_code,
            "rate": str(rate.vat_rate),
            "rateType": rate.rate_type.value,
            "effectiveFrom": rate.effective_from.isoformat(),
            "date": as_of.isoformat(),
        },
    }
