"""Partial-reload directive parsing from request headers."""

import logging
from typing import Iterable, Mapping

from werkzeug.datastructures import Headers

from inertia_engine.domain.constants import (
    ERROR_BAG,
    EXCEPT_ONCE_PROPS,
    INERTIA,
    PARTIAL_COMPONENT,
    PARTIAL_DATA,
    PARTIAL_EXCEPT,
    RESET,
)
from inertia_engine.domain.models import RequestDirectives

logger = logging.getLogger(__name__)


def _as_headers(headers: Mapping[str, str] | Headers | None) -> Headers:
    if isinstance(headers, Headers):
        return headers
    return Headers(dict(headers or {}))


def parse_list(value: str | None) -> list[str]:
    """Split a comma-separated header value, dropping blank entries.

    Order is kept and duplicates are removed.
    """
    if not value:
        return []
    seen: dict[str, None] = {}
    for part in value.split(','):
        part = part.strip()
        if part:
            seen.setdefault(part, None)
    return list(seen)


def is_inertia_request(headers: Mapping[str, str] | Headers | None) -> bool:
    return INERTIA in _as_headers(headers)


def error_bag(headers: Mapping[str, str] | Headers | None) -> str | None:
    return _as_headers(headers).get(ERROR_BAG) or None


class DirectiveParser:
    """Derives the ``RequestDirectives`` of one request.

    Header lookups are case-insensitive; malformed or missing headers fall
    back to a plain full page load and never raise.
    """

    def parse(
        self,
        headers: Mapping[str, str] | Headers | None,
        component: str,
        forced_refresh_once_keys: Iterable[str] = (),
    ) -> RequestDirectives:
        """Parse the directives for a render of ``component``.

        Args:
            headers: Request headers.
            component: Component the server is about to render.
            forced_refresh_once_keys: Once-prop keys the server wants resent
                regardless of the client cache.

        Returns:
            Immutable directives for this request.
        """
        headers = _as_headers(headers)
        is_partial = headers.get(PARTIAL_COMPONENT) == component

        only = except_ = None
        if is_partial:
            # An empty or all-blank Partial-Data/Except header counts as absent,
            # not as an empty selection.
            only = tuple(parse_list(headers.get(PARTIAL_DATA))) or None
            except_ = tuple(parse_list(headers.get(PARTIAL_EXCEPT))) or None

        directives = RequestDirectives(
            is_partial_reload=is_partial,
            only=only,
            except_=except_,
            reset_keys=frozenset(parse_list(headers.get(RESET))),
            client_once_keys=frozenset(parse_list(headers.get(EXCEPT_ONCE_PROPS))),
            server_forced_refresh_once_keys=frozenset(forced_refresh_once_keys),
        )
        logger.debug("Directives for %s: %s", component, directives)
        return directives
