import datetime
from decimal import Decimal
from unittest import mock

import pytest

from apps.performance.exceptions import RecordValidationError
from apps.performance.schema import normalize_record, parse_month, parse_year

from .utils import upstream_record


@pytest.mark.parametrize('value, expected', [('6', 6), (11, 11), ('Jun', 6), ('september', 9), ('3.0', 3)])
def test_parse_month(value, expected):
    assert parse_month(value) == expected


@pytest.mark.parametrize('value', ['13', '0', 'Smarch'])
def test_parse_month_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_month(value)


@pytest.mark.parametrize('value, expected', [('2024', 2024), ('2024-2025', 2024), (2023, 2023)])
def test_parse_year(value, expected):
    assert parse_year(value) == expected


def test_normalize_full_record():
    normalized = normalize_record(upstream_record(), 'pune')

    assert normalized == {
        'district_id': 'pune',
        'month': 6,
        'year': 2024,
        'total_households': 12000,
        'total_workers': 8000,
        'person_days': 150000,
        'women_participation_pct': Decimal('52.5'),
        'scst_participation_pct': Decimal('24.1'),
        'total_funds': Decimal('3750000'),
        'funds_utilized': Decimal('3500000'),
    }


@mock.patch('apps.performance.schema.timezone.localdate', return_value=datetime.date(2025, 3, 15))
def test_missing_fields_take_defaults(localdate):
    normalized = normalize_record({}, 'nagpur')

    assert normalized['district_id'] == 'nagpur'
    assert normalized['month'] == 3
    assert normalized['year'] == 2025
    assert normalized['total_workers'] == 0
    assert normalized['funds_utilized'] == Decimal('0')


@mock.patch('apps.performance.schema.timezone.localdate', return_value=datetime.date(2025, 3, 15))
def test_unparsable_values_are_coerced_and_logged(localdate, caplog):
    raw = upstream_record(month='??', total_workers='lots', total_funds='-5', women_participation='NA')

    normalized = normalize_record(raw, 'pune')

    assert normalized['month'] == 3
    assert normalized['total_workers'] == 0
    assert normalized['total_funds'] == Decimal('0')
    assert normalized['women_participation_pct'] == Decimal('0')
    assert "Coercing malformed 'total_workers'='lots'" in caplog.text


def test_strict_mode_rejects_malformed_values():
    with pytest.raises(RecordValidationError) as exc_info:
        normalize_record(upstream_record(person_days='n/a'), 'pune', strict=True)

    assert exc_info.value.field == 'person_days'


def test_strict_mode_still_defaults_missing_values():
    raw = upstream_record()
    del raw['scst_participation']

    assert normalize_record(raw, 'pune', strict=True)['scst_participation_pct'] == Decimal('0')


@pytest.mark.parametrize('field, value, column', [
    ('person_days', '1e20', 'person_days'),
    ('total_workers', str(2 ** 31), 'total_workers'),
    ('total_funds', '1e17', 'total_funds'),
    ('women_participation', '100000', 'women_participation_pct'),
])
def test_values_beyond_column_limits_are_malformed(field, value, column):
    normalized = normalize_record(upstream_record(**{field: value}), 'pune')
    assert normalized[column] == 0

    with pytest.raises(RecordValidationError) as exc_info:
        normalize_record(upstream_record(**{field: value}), 'pune', strict=True)
    assert exc_info.value.field == field


def test_person_days_beyond_int32_accepted():
    assert normalize_record(upstream_record(person_days=str(2 ** 40)), 'pune')['person_days'] == 2 ** 40


@mock.patch('apps.performance.schema.timezone.localdate', return_value=datetime.date(2025, 3, 15))
def test_year_beyond_column_limit_falls_back_to_current(localdate):
    assert normalize_record(upstream_record(year='40000'), 'pune')['year'] == 2025
