import json

import requests


def make_response(status_code=200, body=None, reason=None, url='https://api.data.gov.in/resource/test'):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason or ('OK' if status_code < 400 else 'Error')
    response.url = url
    response.headers['Content-Type'] = 'application/json'
    response._content = json.dumps(body if body is not None else {}).encode('utf-8')
    return response


def upstream_record(**overrides):
    record = {
        'district_id': 'pune',
        'month': '6',
        'year': '2024',
        'total_households': '12000',
        'total_workers': '8000',
        'person_days': '150000',
        'women_participation': '52.5',
        'scst_participation': '24.1',
        'total_funds': '3750000',
        'funds_utilized': '3500000',
    }
    record.update(overrides)
    return record
