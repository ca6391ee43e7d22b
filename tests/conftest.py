import pytest

from apps.districts.models import District
from apps.performance.cache import performance_cache


@pytest.fixture(autouse=True)
def clear_response_cache():
    performance_cache.clear()
    yield
    performance_cache.clear()


@pytest.fixture
def pune(db):
    return District.objects.create(
        district_id='pune', name='Pune', state='Maharashtra', latitude=18.5204, longitude=73.8567
    )


@pytest.fixture
def nagpur(db):
    return District.objects.create(district_id='nagpur', name='Nagpur', state='Maharashtra')
