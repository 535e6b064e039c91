import logging

from rest_framework.views import exception_handler as drf_exception_handler

from records.responses import api_response

logger = logging.getLogger(__name__)


def _first_message(data):
    """Pull one human readable message out of DRF error data."""
    if isinstance(data, dict):
        if 'detail' in data:
            return _first_message(data['detail'])
        if 'non_field_errors' in data:
            return _first_message(data['non_field_errors'])
        for key, value in data.items():
            return f"{key}: {_first_message(value)}"
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("unhandled error in %s", type(view).__name__ if view else 'view', exc_info=exc)
        return api_response(500, False, 'Internal server error')
    out = api_response(resp.status_code, False, _first_message(resp.data))
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out
