import logging

from django.db.models import Count
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.performance.exceptions import json_errors
from .models import District

logger = logging.getLogger(__name__)


@require_GET
@json_errors('Failed to fetch districts')
def district_list(request):
    """All reference districts with the number of synced records for each"""
    districts = District.objects.annotate(
        data_count=Count('performance_records')
    ).order_by('state', 'name')

    state = request.GET.get('state')
    if state:
        districts = districts.filter(state__iexact=state)

    data = []
    for district in districts:
        item = district.to_dict()
        item['recordCount'] = district.data_count
        data.append(item)

    logger.info(f"Listing {len(data)} districts")
    return JsonResponse({'success': True, 'data': data})
