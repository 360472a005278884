"""Seed tables for countries, VAT categories and country rates.

Rates are percentages. Every rate row carries an ``effective_from`` date;
rate changes are appended as new rows (see FI, EE and SK below) so that
invoices dated before a change still resolve the old rate.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

SEED_EFFECTIVE_FROM = date(2024, 1, 1)

# (id, alpha3, name_en, name_local, is_eu, is_eea, standard_rate, currency, region)
_COUNTRY_ROWS: list[tuple] = [
    # EU member states
    ("AT", "AUT", "Austria", None, True, True, "20.00", "EUR", "Europe"),
    ("BE", "BEL", "Belgium", None, True, True, "21.00", "EUR", "Europe"),
    ("BG", "BGR", "Bulgaria", "България", True, True, "20.00", "BGN", "Europe"),
    ("HR", "HRV", "Croatia", None, True, True, "25.00", "EUR", "Europe"),
    ("CY", "CYP", "Cyprus", None, True, True, "19.00", "EUR", "Europe"),
    ("CZ", "CZE", "Czech Republic", None, True, True, "21.00", "CZK", "Europe"),
    ("DK", "DNK", "Denmark", None, True, True, "25.00", "DKK", "Europe"),
    ("EE", "EST", "Estonia", None, True, True, "24.00", "EUR", "Europe"),
    ("FI", "FIN", "Finland", None, True, True, "25.50", "EUR", "Europe"),
    ("FR", "FRA", "France", None, True, True, "20.00", "EUR", "Europe"),
    ("DE", "DEU", "Germany", "Deutschland", True, True, "19.00", "EUR", "Europe"),
    ("GR", "GRC", "Greece", None, True, True, "24.00", "EUR", "Europe"),
    ("HU", "HUN", "Hungary", None, True, True, "27.00", "HUF", "Europe"),
    ("IE", "IRL", "Ireland", None, True, True, "23.00", "EUR", "Europe"),
    ("IT", "ITA", "Italy", None, True, True, "22.00", "EUR", "Europe"),
    ("LV", "LVA", "Latvia", None, True, True, "21.00", "EUR", "Europe"),
    ("LT", "LTU", "Lithuania", None, True, True, "21.00", "EUR", "Europe"),
    ("LU", "LUX", "Luxembourg", None, True, True, "17.00", "EUR", "Europe"),
    ("MT", "MLT", "Malta", None, True, True, "18.00", "EUR", "Europe"),
    ("NL", "NLD", "Netherlands", None, True, True, "21.00", "EUR", "Europe"),
    ("PL", "POL", "Poland", None, True, True, "23.00", "PLN", "Europe"),
    ("PT", "PRT", "Portugal", None, True, True, "23.00", "EUR", "Europe"),
    ("RO", "ROU", "Romania", None, True, True, "19.00", "RON", "Europe"),
    ("SK", "SVK", "Slovakia", None, True, True, "23.00", "EUR", "Europe"),
    ("SI", "SVN", "Slovenia", None, True, True, "22.00", "EUR", "Europe"),
    ("ES", "ESP", "Spain", None, True, True, "21.00", "EUR", "Europe"),
    ("SE", "SWE", "Sweden", None, True, True, "25.00", "SEK", "Europe"),
    # EEA members outside the EU
    ("IS", "ISL", "Iceland", None, False, True, "24.00", "ISK", "Europe"),
    ("LI", "LIE", "Liechtenstein", None, False, True, "8.10", "CHF", "Europe"),
    ("NO", "NOR", "Norway", None, False, True, "25.00", "NOK", "Europe"),
    # Other major trading partners
    ("GB", "GBR", "United Kingdom", None, False, False, "20.00", "GBP", "Europe"),
    ("CH", "CHE", "Switzerland", None, False, False, "8.10", "CHF", "Europe"),
    ("US", "USA", "United States", None, False, False, None, "USD", "Americas"),
    ("CA", "CAN", "Canada", None, False, False, "5.00", "CAD", "Americas"),
    ("AU", "AUS", "Australia", None, False, False, "10.00", "AUD", "Oceania"),
    ("JP", "JPN", "Japan", None, False, False, "10.00", "JPY", "Asia"),
    ("CN", "CHN", "China", None, False, False, "13.00", "CNY", "Asia"),
    ("IN", "IND", "India", None, False, False, "18.00", "INR", "Asia"),
]

COUNTRIES: list[dict] = [
    {
        "id": cid,
        "alpha3": alpha3,
        "name_en": name_en,
        "name_local": name_local,
        "is_eu_member": is_eu,
        "is_eea_member": is_eea,
        "standard_vat_rate": Decimal(rate) if rate is not None else None,
        "currency_code": currency,
        "region": region,
    }
    for cid, alpha3, name_en, name_local, is_eu, is_eea, rate, currency, region in _COUNTRY_ROWS
]

VAT_CATEGORIES: list[dict] = [
    {"code": "STANDARD", "name_en": "Standard Products/Services", "name_bg": "Стандартни продукти/услуги", "annex_iii_category": None},
    {"code": "ELECTRONICS", "name_en": "Electronics and Appliances", "name_bg": "Електроника и уреди", "annex_iii_category": None},
    {"code": "BOOKS", "name_en": "Books and Periodicals", "name_bg": "Книги и периодични издания", "annex_iii_category": 6},
    {"code": "BABY_PRODUCTS", "name_en": "Baby Food and Hygiene", "name_bg": "Бебешки продукти и хигиена", "annex_iii_category": 10},
    {"code": "HOTEL", "name_en": "Hotel Accommodation", "name_bg": "Хотелско настаняване", "annex_iii_category": 8},
    {"code": "RESTAURANT", "name_en": "Restaurant and Catering", "name_bg": "Ресторант и кетъринг", "annex_iii_category": 12},
    {"code": "FOOD_GENERAL", "name_en": "General Food Products", "name_bg": "Общи хранителни продукти", "annex_iii_category": 1},
    {"code": "FOOD_ESSENTIAL", "name_en": "Essential Foodstuffs", "name_bg": "Основни хранителни продукти", "annex_iii_category": 1},
    {"code": "MEDICINE", "name_en": "Pharmaceutical Products", "name_bg": "Лекарства", "annex_iii_category": 2},
    {"code": "TRANSPORT", "name_en": "Passenger Transport", "name_bg": "Пътнически транспорт", "annex_iii_category": 7},
    {"code": "CULTURAL", "name_en": "Cultural Events and Services", "name_bg": "Културни събития", "annex_iii_category": 5},
]

# Full per-category tables: country -> {category: (rate, rate_type)}
_CATEGORY_RATES: dict[str, dict[str, tuple[str, str]]] = {
    "BG": {
        "STANDARD": ("20.00", "STANDARD"),
        "ELECTRONICS": ("20.00", "STANDARD"),
        "BOOKS": ("9.00", "REDUCED"),
        "BABY_PRODUCTS": ("9.00", "REDUCED"),
        "HOTEL": ("9.00", "REDUCED"),
        "RESTAURANT": ("20.00", "STANDARD"),
        "FOOD_GENERAL": ("20.00", "STANDARD"),
        "FOOD_ESSENTIAL": ("20.00", "STANDARD"),
        "MEDICINE": ("20.00", "STANDARD"),
        "TRANSPORT": ("20.00", "STANDARD"),
        "CULTURAL": ("20.00", "STANDARD"),
    },
    "DE": {
        "STANDARD": ("19.00", "STANDARD"),
        "ELECTRONICS": ("19.00", "STANDARD"),
        "BOOKS": ("7.00", "REDUCED"),
        "BABY_PRODUCTS": ("19.00", "STANDARD"),
        "HOTEL": ("7.00", "REDUCED"),
        "RESTAURANT": ("19.00", "STANDARD"),
        "FOOD_GENERAL": ("7.00", "REDUCED"),
        "FOOD_ESSENTIAL": ("7.00", "REDUCED"),
        "MEDICINE": ("19.00", "STANDARD"),
        "TRANSPORT": ("7.00", "REDUCED"),
        "CULTURAL": ("7.00", "REDUCED"),
    },
    "FR": {
        "STANDARD": ("20.00", "STANDARD"),
        "ELECTRONICS": ("20.00", "STANDARD"),
        "BOOKS": ("5.50", "REDUCED"),
        "BABY_PRODUCTS": ("5.50", "REDUCED"),
        "HOTEL": ("10.00", "REDUCED"),
        "RESTAURANT": ("10.00", "REDUCED"),
        "FOOD_GENERAL": ("5.50", "REDUCED"),
        "FOOD_ESSENTIAL": ("5.50", "REDUCED"),
        "MEDICINE": ("2.10", "SUPER_REDUCED"),
        "TRANSPORT": ("10.00", "REDUCED"),
        "CULTURAL": ("5.50", "REDUCED"),
    },
    # Denmark applies a flat 25% to everything
    "DK": {category["code"]: ("25.00", "STANDARD") for category in VAT_CATEGORIES},
    "IE": {
        "STANDARD": ("23.00", "STANDARD"),
        "ELECTRONICS": ("23.00", "STANDARD"),
        "BOOKS": ("0.00", "ZERO"),
        "BABY_PRODUCTS": ("0.00", "ZERO"),
        "HOTEL": ("9.00", "REDUCED"),
        "RESTAURANT": ("13.50", "REDUCED"),
        "FOOD_GENERAL": ("0.00", "ZERO"),
        "FOOD_ESSENTIAL": ("0.00", "ZERO"),
        "MEDICINE": ("0.00", "ZERO"),
        "TRANSPORT": ("13.50", "REDUCED"),
        "CULTURAL": ("9.00", "REDUCED"),
    },
}

# Standard-rate changes after the seed date: country -> (old rate, new rate, changed on)
_STANDARD_RATE_CHANGES: dict[str, tuple[str, str, date]] = {
    "FI": ("24.00", "25.50", date(2024, 9, 1)),
    "EE": ("22.00", "24.00", date(2025, 7, 1)),
    "SK": ("20.00", "23.00", date(2025, 1, 1)),
}


def _build_rates() -> list[dict]:
    rows: list[dict] = []
    for country_id, table in _CATEGORY_RATES.items():
        for category_code, (rate, rate_type) in table.items():
            rows.append({
                "country_id": country_id,
                "category_code": category_code,
                "vat_rate": Decimal(rate),
                "rate_type": rate_type,
                "effective_from": SEED_EFFECTIVE_FROM,
            })

    # Every other VAT jurisdiction gets at least its standard rate
    for country in COUNTRIES:
        country_id = country["id"]
        if country_id in _CATEGORY_RATES or country["standard_vat_rate"] is None:
            continue
        if country_id in _STANDARD_RATE_CHANGES:
            before, after, changed_on = _STANDARD_RATE_CHANGES[country_id]
            rows.append({
                "country_id": country_id,
                "category_code": "STANDARD",
                "vat_rate": Decimal(before),
                "rate_type": "STANDARD",
                "effective_from": SEED_EFFECTIVE_FROM,
            })
            rows.append({
                "country_id": country_id,
                "category_code": "STANDARD",
                "vat_rate": Decimal(after),
                "rate_type": "STANDARD",
                "effective_from": changed_on,
            })
            continue
        rows.append({
            "country_id": country_id,
            "category_code": "STANDARD",
            "vat_rate": country["standard_vat_rate"],
            "rate_type": "STANDARD",
            "effective_from": SEED_EFFECTIVE_FROM,
        })
    return rows


COUNTRY_VAT_RATES: list[dict] = _build_rates()
