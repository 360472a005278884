"""EU VAT number normalisation and format checks.

A format check only tells whether a number *could* be valid for a member
state. Whether it is actually registered is decided by VIES, outside this
service; callers pass that outcome in as ``vat_number_validated``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

# Greece uses its ISO 639 language code in VAT numbers
_COUNTRY_TO_PREFIX = {"GR": "EL"}
_PREFIX_TO_COUNTRY = {prefix: country for country, prefix in _COUNTRY_TO_PREFIX.items()}

# Patterns for the part after the two-letter prefix
VAT_NUMBER_PATTERNS: dict[str, str] = {
    "AT": r"U\d{8}",
    "BE": r"[01]\d{9}",
    "BG": r"\d{9,10}",
    "CY": r"\d{8}[A-Z]",
    "CZ": r"\d{8,10}",
    "DE": r"\d{9}",
    "DK": r"\d{8}",
    "EE": r"\d{9}",
    "EL": r"\d{9}",
    "ES": r"[A-Z0-9]\d{7}[A-Z0-9]",
    "FI": r"\d{8}",
    "FR": r"[A-HJ-NP-Z0-9]{2}\d{9}",
    "HR": r"\d{11}",
    "HU": r"\d{8}",
    "IE": r"\d{7}[A-W][A-I]?|\d[A-Z+*]\d{5}[A-W]",
    "IT": r"\d{11}",
    "LT": r"\d{9}|\d{12}",
    "LU": r"\d{8}",
    "LV": r"\d{11}",
    "MT": r"\d{8}",
    "NL": r"\d{9}B\d{2}",
    "PL": r"\d{10}",
    "PT": r"\d{9}",
    "RO": r"\d{2,10}",
    "SE": r"\d{12}",
    "SI": r"\d{8}",
    "SK": r"\d{10}",
}

_COMPILED = {prefix: re.compile(rf"(?:{pattern})") for prefix, pattern in VAT_NUMBER_PATTERNS.items()}
_SEPARATORS = re.compile(r"[\s.\-/]")


@dataclass(frozen=True)
class VatNumberCheck:
    vat_number: str
    country_code: str | None
    format_valid: bool
    message: str

    def to_dict(self) -> dict:
        return {
            "vatNumber": self.vat_number,
            "countryCode": self.country_code,
            "formatValid": self.format_valid,
            "message": self.message,
        }


def normalize_vat_number(raw: str) -> str:
    """Strip separators and upper-case: ``"de 123.456.789"`` -> ``"DE123456789"``."""
    return _SEPARATORS.sub("", raw).upper()


def vat_prefix_for_country(country_code: str) -> str:
    country_code = country_code.upper()
    return _COUNTRY_TO_PREFIX.get(country_code, country_code)


def country_for_vat_prefix(prefix: str) -> str:
    prefix = prefix.upper()
    return _PREFIX_TO_COUNTRY.get(prefix, prefix)


def check_vat_number_format(vat_number: str, country_code: str | None = None) -> VatNumberCheck:
    """Check *vat_number* against the member-state format.

    When *country_code* is omitted the country is inferred from the prefix.
    A number given without prefix is checked against *country_code*.
    """
    number = normalize_vat_number(vat_number)
    if not number:
        return VatNumberCheck(number, country_code, False, "VAT number is empty")

    if country_code:
        prefix = vat_prefix_for_country(country_code)
        body = number[2:] if number.startswith(prefix) else number
        country = country_code.upper()
    else:
        prefix = number[:2]
        body = number[2:]
        country = country_for_vat_prefix(prefix)

    pattern = _COMPILED.get(prefix)
    if pattern is None:
        return VatNumberCheck(number, country, False, f"No EU VAT number format known for {country}")

    if not pattern.fullmatch(body):
        return VatNumberCheck(
            number, country, False,
            f"VAT number {number} does not match the {country} format",
        )
    return VatNumberCheck(f"{prefix}{body}", country, True, "Format is valid")
