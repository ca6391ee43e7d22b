import logging
from collections import namedtuple
from decimal import InvalidOperation

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils.text import slugify

from apps.districts.models import District
from .client import MGNREGAApiClient
from .exceptions import MGNREGAError, NoDataError, RecordValidationError, StorageError, ValidationError
from .models import PerformanceRecord
from .schema import normalize_record

logger = logging.getLogger(__name__)

SyncResult = namedtuple('SyncResult', ['count', 'records'])


class MGNREGADataService:
    """Sync MGNREGA performance data from the government API into the database"""

    @staticmethod
    def extract_records(district_id, api_response):
        """Return the upstream record list, raising NoDataError if there is none."""
        if not api_response or not isinstance(api_response, dict):
            raise NoDataError(district_id)

        records = api_response.get('records')
        if not isinstance(records, list) or not records:
            raise NoDataError(district_id)

        return records

    @staticmethod
    def normalize_records(district_id, records):
        strict = settings.MGNREGA_STRICT_RECORDS
        normalized = []
        for record in records:
            if not isinstance(record, dict):
                if strict:
                    raise RecordValidationError('record', record)
                logger.warning(f"Skipping non-object record for district {district_id}: {record!r}")
                continue
            normalized.append(normalize_record(record, district_id, strict=strict))
        return normalized

    @staticmethod
    def upsert_records(normalized):
        """Persist normalized records in one transaction, keyed by (district, month, year)."""
        try:
            with transaction.atomic():
                district_ids = {data['district_id'] for data in normalized}
                known = set(
                    District.objects.filter(district_id__in=district_ids).values_list('district_id', flat=True)
                )
                unknown = district_ids - known
                if unknown:
                    raise StorageError(f"Unknown district(s): {', '.join(sorted(unknown))}")

                results = []
                for data in normalized:
                    defaults = {k: v for k, v in data.items() if k not in ('district_id', 'month', 'year')}
                    record, created = PerformanceRecord.objects.update_or_create(
                        district_id=data['district_id'],
                        month=data['month'],
                        year=data['year'],
                        defaults=defaults,
                    )
                    results.append(record)

                    if created:
                        logger.debug(f"Created new record for {record.district_id} - {record.year}/{record.month}")
                    else:
                        logger.debug(f"Updated record for {record.district_id} - {record.year}/{record.month}")
        except (DatabaseError, OverflowError, InvalidOperation) as e:
            logger.error(f"Batch upsert failed, rolled back: {e}")
            raise StorageError(f"Failed to store records: {e}") from e

        return results

    @staticmethod
    def sync_district(district_id, client=None):
        """Fetch, normalize and upsert all upstream records for one district."""
        if not district_id or not str(district_id).strip():
            raise ValidationError('District ID required')
        district_id = str(district_id).strip()

        client = client or MGNREGAApiClient()
        api_response = client.fetch_district_performance_with_retry(district_id)

        records = MGNREGADataService.extract_records(district_id, api_response)
        normalized = MGNREGADataService.normalize_records(district_id, records)
        results = MGNREGADataService.upsert_records(normalized)

        logger.info(f"Synced {len(results)} records for district {district_id}")
        return SyncResult(len(results), results)

    @staticmethod
    def sync_districts(district_ids, client=None):
        """Sync several districts, fetching them concurrently.

        Each district is normalized and stored in its own transaction, so one
        district's failure never rolls back another's records.
        """
        client = client or MGNREGAApiClient()
        outcomes = []

        for fetched in client.fetch_multiple_districts(district_ids):
            district_id = fetched['district_id']
            if fetched['error']:
                outcomes.append({'district_id': district_id, 'count': 0, 'error': fetched['error']})
                continue

            try:
                records = MGNREGADataService.extract_records(district_id, fetched['data'])
                normalized = MGNREGADataService.normalize_records(district_id, records)
                count = len(MGNREGADataService.upsert_records(normalized))
            except MGNREGAError as e:
                logger.warning(f"Sync failed for district {district_id}: {e}")
                outcomes.append({'district_id': district_id, 'count': 0, 'error': str(e)})
                continue
            except Exception as e:
                logger.exception(f"Unexpected error syncing district {district_id}: {e}")
                outcomes.append({'district_id': district_id, 'count': 0, 'error': str(e)})
                continue

            logger.info(f"Synced {count} records for district {district_id}")
            outcomes.append({'district_id': district_id, 'count': count, 'error': None})

        return outcomes

    @staticmethod
    def import_districts(client=None):
        """Create or update District reference rows from the upstream district list."""
        client = client or MGNREGAApiClient()
        data = client.fetch_all_districts()
        records = (data or {}).get('records') or []

        created_count = 0
        updated_count = 0

        with transaction.atomic():
            for record in records:
                name = (record.get('district_name') or record.get('district') or '').strip()
                state = (record.get('state_name') or record.get('state') or '').strip()
                if not name or not state:
                    continue

                district_id = slugify(record.get('district_id') or name)
                if not district_id:
                    continue

                district, created = District.objects.update_or_create(
                    district_id=district_id,
                    defaults={'name': name.title(), 'state': state.title()},
                )
                if created:
                    created_count += 1
                else:
                    updated_count += 1

        logger.info(f"Imported districts: {created_count} created, {updated_count} updated")
        return created_count, updated_count

    @staticmethod
    def list_performance(district_id, year=None):
        """Records for a district, most recent first, optionally limited to one year."""
        queryset = PerformanceRecord.objects.filter(district_id=district_id)
        if year is not None:
            queryset = queryset.filter(year=year)
        return queryset.select_related('district').order_by('-year', '-month')
