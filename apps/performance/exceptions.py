"""Exceptions raised by the sync pipeline, each carrying the HTTP status it maps to."""

import logging
from functools import wraps

from django.http import JsonResponse

logger = logging.getLogger(__name__)


class MGNREGAError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message, status_code=500):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(MGNREGAError):
    def __init__(self, message):
        super().__init__(message, status_code=400)


class NoDataError(MGNREGAError):
    def __init__(self, district_id):
        super().__init__(f"No data received from API for district {district_id}", status_code=404)
        self.district_id = district_id


class UpstreamError(MGNREGAError):
    """Upstream responded with a non-2xx status."""

    def __init__(self, upstream_status, reason):
        super().__init__(f"API error: {upstream_status} - {reason}")
        self.upstream_status = upstream_status
        self.reason = reason


class UpstreamUnavailableError(MGNREGAError):
    """Request was sent but no response came back."""

    def __init__(self, message='No response from API server. Please try again later.'):
        super().__init__(message)


class RecordValidationError(MGNREGAError):
    def __init__(self, field, value):
        super().__init__(f"Malformed value for '{field}': {value!r}")
        self.field = field
        self.value = value


class StorageError(MGNREGAError):
    pass


def json_errors(default_message):
    """Convert exceptions raised by a view into ``{success: false, error}`` responses."""

    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except MGNREGAError as e:
                logger.warning(f"{view.__name__} failed: {e}")
                return JsonResponse({'success': False, 'error': str(e)}, status=e.status_code)
            except Exception as e:
                logger.exception(f"Unhandled error in {view.__name__}: {e}")
                return JsonResponse({'success': False, 'error': default_message}, status=500)

        return wrapper

    return decorator
