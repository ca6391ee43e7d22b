from unittest import mock

import pytest
from django.db import DatabaseError

from apps.performance.client import MGNREGAApiClient
from apps.performance.exceptions import (
    NoDataError,
    RecordValidationError,
    StorageError,
    UpstreamUnavailableError,
    ValidationError,
)
from apps.performance.models import PerformanceRecord
from apps.performance.services import MGNREGADataService

from .utils import make_response, upstream_record


def fake_client(*payloads):
    client = mock.create_autospec(MGNREGAApiClient, instance=True)
    client.fetch_district_performance_with_retry.side_effect = list(payloads)
    return client


@pytest.mark.django_db
def test_sync_creates_records(pune):
    client = fake_client({'records': [upstream_record(month='5'), upstream_record(month='6')]})

    result = MGNREGADataService.sync_district('pune', client=client)

    assert result.count == 2
    assert [r.month for r in result.records] == [5, 6]
    client.fetch_district_performance_with_retry.assert_called_once_with('pune')
    assert PerformanceRecord.objects.filter(district=pune).count() == 2


@pytest.mark.django_db
def test_sync_is_idempotent_and_overwrites(pune):
    client = fake_client(
        {'records': [upstream_record(total_workers='8000')]},
        {'records': [upstream_record(total_workers='9100', funds_utilized='3600000')]},
    )

    MGNREGADataService.sync_district('pune', client=client)
    MGNREGADataService.sync_district('pune', client=client)

    records = PerformanceRecord.objects.filter(district_id='pune', month=6, year=2024)
    assert records.count() == 1
    record = records.get()
    assert record.total_workers == 9100
    assert float(record.funds_utilized) == 3600000


@pytest.mark.django_db
def test_missing_district_id_in_record_defaults_to_requested(pune):
    raw = upstream_record()
    del raw['district_id']

    result = MGNREGADataService.sync_district('pune', client=fake_client({'records': [raw]}))

    assert result.records[0].district_id == 'pune'


@pytest.mark.parametrize('district_id', [None, '', '   '])
def test_missing_district_id_rejected_before_fetch(district_id):
    client = fake_client()

    with pytest.raises(ValidationError):
        MGNREGADataService.sync_district(district_id, client=client)

    client.fetch_district_performance_with_retry.assert_not_called()


@pytest.mark.parametrize('payload', [None, {}, {'records': None}, {'records': []}, {'records': 'nope'}])
def test_no_records_raises_no_data(payload):
    with pytest.raises(NoDataError):
        MGNREGADataService.sync_district('pune', client=fake_client(payload))


def test_upstream_failure_surfaces_message():
    client = fake_client(UpstreamUnavailableError())

    with pytest.raises(UpstreamUnavailableError, match='No response from API server'):
        MGNREGADataService.sync_district('pune', client=client)


@pytest.mark.django_db
def test_unknown_district_fails_whole_batch(pune):
    records = [upstream_record(month='1'), upstream_record(month='2', district_id='atlantis')]

    with pytest.raises(StorageError, match='atlantis'):
        MGNREGADataService.sync_district('pune', client=fake_client({'records': records}))

    assert PerformanceRecord.objects.count() == 0


@pytest.mark.django_db
def test_storage_failure_rolls_back_batch(pune):
    records = [upstream_record(month=str(m)) for m in (1, 2, 3)]
    real_upsert = PerformanceRecord.objects.update_or_create
    calls = []

    def flaky_upsert(**kwargs):
        calls.append(kwargs)
        if len(calls) == 3:
            raise DatabaseError('disk full')
        return real_upsert(**kwargs)

    with mock.patch.object(PerformanceRecord.objects, 'update_or_create', side_effect=flaky_upsert):
        with pytest.raises(StorageError, match='disk full'):
            MGNREGADataService.sync_district('pune', client=fake_client({'records': records}))

    assert len(calls) == 3
    assert PerformanceRecord.objects.count() == 0


@pytest.mark.django_db
def test_strict_mode_persists_nothing(pune, settings):
    settings.MGNREGA_STRICT_RECORDS = True
    records = [upstream_record(month='1'), upstream_record(month='2', total_funds='lots')]

    with pytest.raises(RecordValidationError):
        MGNREGADataService.sync_district('pune', client=fake_client({'records': records}))

    assert PerformanceRecord.objects.count() == 0


@pytest.mark.django_db
def test_sync_uses_retrying_http_client(pune):
    client = MGNREGAApiClient()
    responses = [
        make_response(500, {}, reason='Server Error'),
        make_response(200, {'records': [upstream_record()]}),
    ]
    with mock.patch.object(client.session, 'get', side_effect=responses), \
            mock.patch('apps.performance.client.time.sleep') as sleep:
        result = MGNREGADataService.sync_district('pune', client=client)

    assert result.count == 1
    sleep.assert_called_once_with(1.0)


@pytest.mark.django_db
def test_sync_districts_isolates_failures(pune, nagpur):
    client = MGNREGAApiClient()

    def fake_get(url, params=None, timeout=None):
        district = params['filters[district]']
        if district == 'nagpur':
            return make_response(500, {}, reason='Server Error')
        return make_response(200, {'records': [upstream_record(district_id=district)]})

    with mock.patch.object(client.session, 'get', side_effect=fake_get):
        outcomes = MGNREGADataService.sync_districts(['pune', 'nagpur'], client=client)

    assert outcomes == [
        {'district_id': 'pune', 'count': 1, 'error': None},
        {'district_id': 'nagpur', 'count': 0, 'error': 'API error: 500 - Server Error'},
    ]
    assert PerformanceRecord.objects.filter(district_id='pune').count() == 1
    assert PerformanceRecord.objects.filter(district_id='nagpur').count() == 0


@pytest.mark.django_db
def test_import_districts_upserts_reference_rows(pune):
    client = mock.create_autospec(MGNREGAApiClient, instance=True)
    client.fetch_all_districts.return_value = {'records': [
        {'district_name': 'PUNE', 'state_name': 'MAHARASHTRA'},
        {'district_name': 'Bangalore Urban', 'state_name': 'Karnataka'},
        {'district_name': '', 'state_name': 'Karnataka'},
    ]}

    created, updated = MGNREGADataService.import_districts(client=client)

    assert (created, updated) == (1, 1)
    pune.refresh_from_db()
    assert pune.state == 'Maharashtra'
    assert pune.__class__.objects.get(district_id='bangalore-urban').name == 'Bangalore Urban'


@pytest.mark.django_db
def test_oversize_count_is_coerced_not_overflowed(pune):
    result = MGNREGADataService.sync_district('pune', client=fake_client({'records': [upstream_record(person_days='1e20')]}))

    assert result.count == 1
    assert PerformanceRecord.objects.get(district_id='pune').person_days == 0


@pytest.mark.django_db
def test_driver_overflow_becomes_storage_error(pune):
    with mock.patch.object(PerformanceRecord.objects, 'update_or_create',
                           side_effect=OverflowError('Python int too large to convert to SQLite INTEGER')):
        with pytest.raises(StorageError, match='too large'):
            MGNREGADataService.sync_district('pune', client=fake_client({'records': [upstream_record()]}))

    assert PerformanceRecord.objects.count() == 0


@pytest.mark.django_db
def test_sync_districts_keeps_going_after_empty_district(pune, nagpur):
    client = mock.create_autospec(MGNREGAApiClient, instance=True)
    client.fetch_multiple_districts.return_value = [
        {'district_id': 'nagpur', 'data': {'records': []}, 'error': None},
        {'district_id': 'pune', 'data': {'records': [upstream_record()]}, 'error': None},
    ]

    outcomes = MGNREGADataService.sync_districts(['nagpur', 'pune'], client=client)

    assert outcomes[0]['district_id'] == 'nagpur'
    assert outcomes[0]['count'] == 0
    assert 'No data received' in outcomes[0]['error']
    assert outcomes[1] == {'district_id': 'pune', 'count': 1, 'error': None}
    assert PerformanceRecord.objects.filter(district_id='pune').count() == 1


@pytest.mark.django_db
def test_sync_districts_keeps_going_after_storage_failure(pune, nagpur):
    client = mock.create_autospec(MGNREGAApiClient, instance=True)
    client.fetch_multiple_districts.return_value = [
        {'district_id': 'nagpur', 'data': {'records': [upstream_record(district_id='nagpur')]}, 'error': None},
        {'district_id': 'pune', 'data': {'records': [upstream_record()]}, 'error': None},
    ]
    real_upsert = PerformanceRecord.objects.update_or_create

    def overflow_for_nagpur(**kwargs):
        if kwargs['district_id'] == 'nagpur':
            raise OverflowError('Python int too large to convert to SQLite INTEGER')
        return real_upsert(**kwargs)

    with mock.patch.object(PerformanceRecord.objects, 'update_or_create', side_effect=overflow_for_nagpur):
        outcomes = MGNREGADataService.sync_districts(['nagpur', 'pune'], client=client)

    assert outcomes[0]['error'].startswith('Failed to store records')
    assert outcomes[1] == {'district_id': 'pune', 'count': 1, 'error': None}
    assert PerformanceRecord.objects.filter(district_id='nagpur').count() == 0
    assert PerformanceRecord.objects.filter(district_id='pune').count() == 1
