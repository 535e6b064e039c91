from rest_framework.response import Response


def api_response(status: int, success: bool, message: str = '', data=None) -> Response:
    """Wrap ``data`` in the ``{success, message, data}`` envelope.

    ``data`` is omitted from the body when it is ``None``.
    """
    body = {'success': success, 'message': message}
    if data is not None:
        body['data'] = data
    return Response(body, status=status)
