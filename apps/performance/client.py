import logging
import time
from concurrent.futures import ThreadPoolExecutor

import requests
from django.conf import settings

from .cache import MISSING, performance_cache
from .exceptions import UpstreamError, UpstreamUnavailableError, ValidationError

logger = logging.getLogger(__name__)


class MGNREGAApiClient:
    """Client for the data.gov.in MGNREGA district performance resource.

    Responses are cached per (district, year) and the retrying fetch wraps the
    cache-aware one, so a retry right after a successful write is a cache hit.
    """

    def __init__(self, cache=None, session=None):
        self.cache = cache if cache is not None else performance_cache
        self.base_url = settings.MGNREGA_API_BASE_URL
        self.resource_id = settings.MGNREGA_RESOURCE_IDS.get('district_performance')
        self.timeout = settings.MGNREGA_API_TIMEOUT
        self.cache_ttl_ms = settings.MGNREGA_CACHE_TTL_MS
        self.district_list_ttl_ms = settings.MGNREGA_DISTRICT_LIST_TTL_MS
        self.retry_attempts = settings.MGNREGA_RETRY_ATTEMPTS
        self.retry_base_delay = settings.MGNREGA_RETRY_BASE_DELAY_MS / 1000
        self.max_workers = settings.MGNREGA_MAX_WORKERS

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'api-key': settings.MGNREGA_API_KEY or '',
        })

    @property
    def url(self):
        return f"{self.base_url}/{self.resource_id}"

    def _fetch_with_cache(self, params, cache_key, ttl_ms=None):
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            logger.info(f"Returning cached data for {cache_key}")
            return cached

        logger.info(f"Fetching {cache_key} from API: {self.url}")
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"API error for {cache_key}: {e}")
            raise UpstreamError(e.response.status_code, e.response.reason) from e
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"No response from API for {cache_key}: {e}")
            raise UpstreamUnavailableError() from e

        data = response.json()
        self.cache.set(cache_key, data, ttl_ms if ttl_ms is not None else self.cache_ttl_ms)
        return data

    def fetch_district_performance(self, district_id, year=None):
        cache_key = f"district-{district_id}-{year or 'all'}"

        params = {
            'filters[district]': district_id,
            'format': 'json',
        }
        if year:
            params['filters[year]'] = year

        return self._fetch_with_cache(params, cache_key)

    def fetch_district_performance_with_retry(self, district_id, year=None, max_attempts=None):
        if max_attempts is None:
            max_attempts = self.retry_attempts
        if max_attempts < 1:
            raise ValidationError('max_attempts must be at least 1')

        for attempt in range(1, max_attempts + 1):
            try:
                return self.fetch_district_performance(district_id, year)
            except Exception as e:
                if attempt == max_attempts:
                    logger.error(f"All {max_attempts} attempts failed for district {district_id}: {e}")
                    raise
                delay = self.retry_base_delay * attempt
                logger.warning(f"Attempt {attempt} failed for district {district_id}, retrying in {delay:g}s: {e}")
                time.sleep(delay)

    def fetch_multiple_districts(self, district_ids, year=None):
        """Fetch several districts concurrently.

        Returns one ``{'district_id', 'data', 'error'}`` dict per input id, in
        input order. A failed district carries its error message and does not
        affect the others.
        """
        district_ids = list(district_ids)
        if not district_ids:
            return []

        workers = min(self.max_workers, len(district_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.fetch_district_performance, district_id, year)
                for district_id in district_ids
            ]

            results = []
            for district_id, future in zip(district_ids, futures):
                try:
                    results.append({'district_id': district_id, 'data': future.result(), 'error': None})
                except Exception as e:
                    logger.warning(f"Fetch failed for district {district_id}: {e}")
                    results.append({'district_id': district_id, 'data': None, 'error': str(e)})

        return results

    def fetch_all_districts(self):
        params = {
            'fields': 'district',
            'format': 'json',
            'limit': 1000,
        }
        return self._fetch_with_cache(params, 'all-districts', self.district_list_ttl_ms)
