import json

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .exceptions import ValidationError, json_errors
from .services import MGNREGADataService


@csrf_exempt
@require_POST
@json_errors('Sync failed')
def sync_district(request):
    """Pull upstream records for ``districtId`` and upsert them."""
    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        raise ValidationError('Invalid JSON body')
    if not isinstance(payload, dict):
        raise ValidationError('Invalid JSON body')

    result = MGNREGADataService.sync_district(payload.get('districtId'))

    return JsonResponse({
        'success': True,
        'message': f"Synced {result.count} records",
        'data': [record.to_dict() for record in result.records],
    })


@require_GET
@json_errors('Failed to fetch data')
def district_performance(request):
    district_id = request.GET.get('districtId')
    if not district_id:
        raise ValidationError('District ID required')

    year = request.GET.get('year')
    if year:
        try:
            year = int(year)
        except ValueError:
            raise ValidationError(f"Invalid year: {year}")
    else:
        year = None

    records = MGNREGADataService.list_performance(district_id, year)

    return JsonResponse({
        'success': True,
        'data': [record.to_dict(include_district=True) for record in records],
    })
