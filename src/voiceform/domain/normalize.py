"""Value normalization — spoken values to their stored representation.

Normalization is best-effort and never raises. When no rule applies the
trimmed raw value is stored as-is; format enforcement happens at submit
time (see :mod:`voiceform.domain.validation`).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from voiceform.domain.types import FieldKind

# --- Dates ---

MONTHS: dict[str, int] = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

_MONTH_NAME_DATE = re.compile(
    r"\b(?P<month>" + "|".join(MONTHS) + r")\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?,?\s+(?P<year>\d{4})\b",
    re.IGNORECASE,
)
_MONTH_FIRST_DATE = re.compile(r"\b(?P<month>\d{1,2})[/.-](?P<day>\d{1,2})[/.-](?P<year>\d{4})\b")
_YEAR_FIRST_DATE = re.compile(r"\b(?P<year>\d{4})[/.-](?P<month>\d{1,2})[/.-](?P<day>\d{1,2})\b")


def normalize_date(raw: str) -> str:
    """Convert a spoken or typed date to ``YYYY-MM-DD``.

    Examples:
        >>> normalize_date("May 15th 1980")
        '1980-05-15'
        >>> normalize_date("5/15/1980")
        '1980-05-15'
        >>> normalize_date("1980-5-1")
        '1980-05-01'
    """
    value = raw.strip()
    for pattern in (_MONTH_NAME_DATE, _MONTH_FIRST_DATE, _YEAR_FIRST_DATE):
        match = pattern.search(value)
        if match is None:
            continue
        month = match.group("month")
        month_num = MONTHS[month.lower()] if month.isalpha() else int(month)
        return f"{match.group('year')}-{month_num:02d}-{int(match.group('day')):02d}"
    return value


# --- SSN ---

_NON_DIGIT = re.compile(r"\D")


def normalize_ssn(raw: str) -> str:
    """Format nine digits as ``DDD-DD-DDDD``; other lengths pass through."""
    value = raw.strip()
    digits = _NON_DIGIT.sub("", value)
    if len(digits) != 9:
        return value
    return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"


# --- Currency ---

# Checked in order; the first word that follows a number wins.
CURRENCY_MULTIPLIERS: tuple[tuple[str, int], ...] = (
    ("thousand", 1_000),
    ("k", 1_000),
    ("million", 1_000_000),
    ("mill", 1_000_000),
    ("m", 1_000_000),
)

_CURRENCY_NOISE = re.compile(r"[$,]")


def _format_amount(amount: Decimal) -> str:
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def normalize_currency(raw: str) -> str:
    """Strip ``$``/``,`` and expand multiplier words.

    Examples:
        >>> normalize_currency("$50,000")
        '50000'
        >>> normalize_currency("50k")
        '50000'
        >>> normalize_currency("2 million")
        '2000000'
    """
    value = _CURRENCY_NOISE.sub("", raw.strip())
    for word, multiplier in CURRENCY_MULTIPLIERS:
        match = re.search(rf"(\d+(?:\.\d+)?|\.\d+)\s*{word}\b", value, re.IGNORECASE)
        if match is None:
            continue
        try:
            amount = Decimal(match.group(1)) * multiplier
        except InvalidOperation:
            continue
        return _format_amount(amount)
    return value


# --- Filing status ---

# Longer phrases precede their prefixes, so "married filing separately"
# maps to Separately instead of being captured by the bare "married" key
# (which would otherwise win as the first, shortest match). A bare
# "married" still means Jointly.
FILING_STATUS_PHRASES: tuple[tuple[str, str], ...] = (
    ("married filing separately", "Married Filing Separately"),
    ("separately", "Married Filing Separately"),
    ("married filing jointly", "Married Filing Jointly"),
    ("jointly", "Married Filing Jointly"),
    ("married", "Married Filing Jointly"),
    ("head of household", "Head of Household"),
    ("household", "Head of Household"),
    ("qualifying widower", "Qualifying Widow(er)"),
    ("qualifying widow", "Qualifying Widow(er)"),
    ("widower", "Qualifying Widow(er)"),
    ("widow", "Qualifying Widow(er)"),
    ("single", "Single"),
)


def normalize_filing_status(raw: str) -> str:
    """Map a spoken filing status onto its canonical label."""
    value = raw.strip()
    lowered = value.lower()
    for phrase, label in FILING_STATUS_PHRASES:
        if phrase in lowered:
            return label
    return value


# --- Dispatch ---

_NORMALIZERS: dict[FieldKind, Callable[[str], str]] = {
    FieldKind.DATE: normalize_date,
    FieldKind.SSN: normalize_ssn,
    FieldKind.CURRENCY: normalize_currency,
    FieldKind.ENUMERATION: normalize_filing_status,
}


def normalize(kind: FieldKind | str, raw: str) -> str:
    """Normalize *raw* for a field of *kind*.

    Kinds without a rule (free text, email, counts) and unknown kind
    strings return the trimmed value.
    """
    try:
        field_kind = FieldKind(kind)
    except ValueError:
        return raw.strip()
    normalizer = _NORMALIZERS.get(field_kind)
    if normalizer is None:
        return raw.strip()
    return normalizer(raw)
