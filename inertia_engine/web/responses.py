"""Redirect and error responses that respect the protocol."""

import logging
import traceback

from typing import Any, Iterable, Mapping

from flask import Response, current_app, jsonify, redirect, request, session
from markupsafe import escape

from inertia_engine.directives import is_inertia_request
from inertia_engine.domain.constants import DEFAULT_ERROR_BAG, LOCATION
from inertia_engine.session import error_messages, flash, store_validation_errors

logger = logging.getLogger(__name__)

_SEE_OTHER_METHODS = ('PUT', 'PATCH', 'DELETE')

_ERROR_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{name}</title></head>
<body>
<h1>{name}</h1>
<p>{message}</p>
<p><code>{method} {url}</code></p>
<pre>{trace}</pre>
</body>
</html>
"""


def location(url: str) -> Response:
    """Send the client to ``url``.

    Inertia requests get a 409 with ``X-Inertia-Location`` so the client
    performs a full visit; everything else gets a regular redirect.
    """
    if is_inertia_request(request.headers):
        return Response('', 409, {LOCATION: url})
    if request.method in _SEE_OTHER_METHODS:
        return redirect(url, 303)
    return redirect(url)


def back(fallback: str = '/') -> Response:
    """Redirect to the referring page, or ``fallback`` without one."""
    target = request.headers.get('Referer') or fallback
    code = 303 if request.method in _SEE_OTHER_METHODS else 302
    return redirect(target, code)


def render_error_page(error: BaseException) -> str:
    trace = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    return _ERROR_PAGE.format(
        name=escape(type(error).__name__),
        message=escape(str(error)),
        method=escape(request.method),
        url=escape(request.url),
        trace=escape(trace),
    )


def handle_server_error(error: BaseException) -> Response:
    """Error handler for unhandled exceptions.

    Register with ``app.register_error_handler(500, handle_server_error)``.
    """
    error = getattr(error, 'original_exception', None) or error
    logger.error("Unhandled error during %s %s", request.method, request.path, exc_info=error)

    if not is_inertia_request(request.headers):
        return Response('Internal Server Error', 500, mimetype='text/plain')

    if current_app.debug:
        return Response(render_error_page(error), 500, mimetype='text/html')

    if current_app.secret_key:
        flash(session, 'error', 'An unexpected error occurred. Please try again.')
    return redirect(request.headers.get('Referer') or '/', 303)


def handle_bad_request(
    errors: str | Iterable[str] | Mapping[str, Any],
    bag: str = DEFAULT_ERROR_BAG,
) -> Response:
    """Reject a submission that failed validation.

    Inertia requests get the errors queued in the session under ``bag`` and
    a 303 back to the referring page, where they show up in the ``errors``
    prop. Other requests get a 400 with the errors as JSON.
    """
    if not is_inertia_request(request.headers):
        response = jsonify({'errors': {bag: error_messages(errors)}})
        response.status_code = 400
        return response

    messages = store_validation_errors(session, errors, bag)
    logger.info("Validation failed for %s %s (%d errors in %r)", request.method, request.path, len(messages), bag)
    return redirect(request.headers.get('Referer') or '/', 303)
