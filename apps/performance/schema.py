"""Field table for normalizing loosely-typed upstream rows into PerformanceRecord values."""

import logging
from collections import namedtuple
from decimal import Decimal, InvalidOperation

from django.utils import timezone

from .exceptions import RecordValidationError

logger = logging.getLogger(__name__)

MONTH_MAP = {
    'jan': 1, 'january': 1,
    'feb': 2, 'february': 2,
    'mar': 3, 'march': 3,
    'apr': 4, 'april': 4,
    'may': 5,
    'jun': 6, 'june': 6,
    'jul': 7, 'july': 7,
    'aug': 8, 'august': 8,
    'sep': 9, 'sept': 9, 'september': 9,
    'oct': 10, 'october': 10,
    'nov': 11, 'november': 11,
    'dec': 12, 'december': 12,
}

EMPTY_VALUES = (None, '', 'NA')


# Upper bounds of the PerformanceRecord columns each value is stored in
MAX_YEAR = 32767
MAX_COUNT = 2 ** 31 - 1
MAX_PERSON_DAYS = 2 ** 63 - 1
MAX_PERCENTAGE = Decimal('99999.99')
MAX_AMOUNT = Decimal('9999999999999999.99')


def parse_month(value):
    """Parse a month number or name ("6", "Jun", "june") into 1-12."""
    text = str(value).strip().lower()
    if text in MONTH_MAP:
        return MONTH_MAP[text]
    month = int(float(text))
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return month


def parse_year(value):
    """Parse a calendar or financial year ("2024", "2024-2025") to the starting year."""
    text = str(value).strip()
    if '-' in text:
        text = text.split('-')[0]
    year = int(float(text))
    if not 1 <= year <= MAX_YEAR:
        raise ValueError(f"invalid year: {year}")
    return year


def parse_count(value, limit=MAX_COUNT):
    count = int(float(str(value).strip()))
    if count < 0:
        raise ValueError(f"negative count: {count}")
    if count > limit:
        raise ValueError(f"count too large: {count}")
    return count


def parse_person_days(value):
    return parse_count(value, limit=MAX_PERSON_DAYS)


def parse_amount(value, limit=MAX_AMOUNT):
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"invalid amount: {amount}")
    if amount > limit:
        raise ValueError(f"amount too large: {amount}")
    return amount


def parse_percentage(value):
    return parse_amount(value, limit=MAX_PERCENTAGE)


def current_month():
    return timezone.localdate().month


def current_year():
    return timezone.localdate().year


Field = namedtuple('Field', ['name', 'source', 'parse', 'default'])

# (model field, upstream key, parser, default factory)
RECORD_FIELDS = (
    Field('month', 'month', parse_month, current_month),
    Field('year', 'year', parse_year, current_year),
    Field('total_households', 'total_households', parse_count, lambda: 0),
    Field('total_workers', 'total_workers', parse_count, lambda: 0),
    Field('person_days', 'person_days', parse_person_days, lambda: 0),
    Field('women_participation_pct', 'women_participation', parse_percentage, lambda: Decimal('0')),
    Field('scst_participation_pct', 'scst_participation', parse_percentage, lambda: Decimal('0')),
    Field('total_funds', 'total_funds', parse_amount, lambda: Decimal('0')),
    Field('funds_utilized', 'funds_utilized', parse_amount, lambda: Decimal('0')),
)


def normalize_record(raw, district_id, strict=False):
    """Map one upstream row to a dict of PerformanceRecord field values.

    Missing values take the field default. A present value that fails to
    parse also falls back to the default and is logged, unless ``strict``
    is set, in which case RecordValidationError is raised.
    """
    normalized = {
        'district_id': str(raw.get('district_id') or district_id).strip(),
    }

    for field in RECORD_FIELDS:
        value = raw.get(field.source)
        if value in EMPTY_VALUES:
            normalized[field.name] = field.default()
            continue
        try:
            normalized[field.name] = field.parse(value)
        except (ValueError, TypeError, OverflowError):
            if strict:
                raise RecordValidationError(field.source, value)
            logger.warning(
                f"Coercing malformed '{field.source}'={value!r} to default for district {normalized['district_id']}"
            )
            normalized[field.name] = field.default()

    if normalized['funds_utilized'] > normalized['total_funds']:
        logger.warning(
            f"funds_utilized exceeds total_funds for {normalized['district_id']} "
            f"{normalized['year']}/{normalized['month']}"
        )

    return normalized
