"""Assertions for page responses in application tests.

Usage::

    client = InertiaTestClient(app.test_client(), version='1')
    (client.request('/users')
        .assert_component('Users/Index')
        .assert_has('users', length=3)
        .assert_missing('stats'))
"""

import html
import json
import re
from typing import Any, Iterable, Mapping

from inertia_engine.domain.constants import (
    DEFAULT_DEFER_GROUP,
    FLASH_PROP,
    INERTIA,
    PARTIAL_COMPONENT,
    PARTIAL_DATA,
    PARTIAL_EXCEPT,
    VERSION,
)

_DATA_PAGE_RE = re.compile(r'data-page="([^"]*)"')
_MISSING = object()


def _lookup(data: Any, path: str) -> Any:
    """Follow a dot path through nested dicts and lists."""
    current = data
    for part in path.split('.'):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return _MISSING
    return current


class InertiaTestResponse:
    """Wraps a test client response and exposes its page object.

    Works for JSON page responses and for full HTML loads, where the page is
    read back from the root element's ``data-page`` attribute.
    """

    def __init__(self, response: Any) -> None:
        self.response = response
        self._page: dict[str, Any] | None = None

    @property
    def page(self) -> dict[str, Any]:
        if self._page is None:
            self._page = self._extract_page()
        return self._page

    @property
    def props(self) -> dict[str, Any]:
        return self.page.get('props', {})

    def _extract_page(self) -> dict[str, Any]:
        if self.response.headers.get(INERTIA) == 'true':
            return self.response.get_json()
        match = _DATA_PAGE_RE.search(self.response.get_data(as_text=True))
        if not match:
            raise AssertionError("Response is not a page response")
        return json.loads(html.unescape(match.group(1)))

    # ── Response ─────────────────────────────────────────────────────────

    def assert_status(self, status: int) -> 'InertiaTestResponse':
        actual = self.response.status_code
        assert actual == status, f"Expected status {status}, got {actual}"
        return self

    def assert_component(self, component: str) -> 'InertiaTestResponse':
        actual = self.page.get('component')
        assert actual == component, f"Expected component {component!r}, got {actual!r}"
        return self

    def assert_url(self, url: str) -> 'InertiaTestResponse':
        actual = self.page.get('url')
        assert actual == url, f"Expected url {url!r}, got {actual!r}"
        return self

    # ── Props ────────────────────────────────────────────────────────────

    def assert_has(self, key: str, length: int | None = None) -> 'InertiaTestResponse':
        value = _lookup(self.props, key)
        assert value is not _MISSING, f"Expected prop {key!r} to be present"
        if length is not None:
            assert len(value) == length, f"Expected {key!r} to have {length} items, got {len(value)}"
        return self

    def assert_missing(self, key: str) -> 'InertiaTestResponse':
        assert _lookup(self.props, key) is _MISSING, f"Expected prop {key!r} to be absent"
        return self

    def assert_prop(self, key: str, expected: Any) -> 'InertiaTestResponse':
        value = _lookup(self.props, key)
        assert value is not _MISSING, f"Expected prop {key!r} to be present"
        assert value == expected, f"Expected {key!r} to equal {expected!r}, got {value!r}"
        return self

    def assert_props(self, expected: Mapping[str, Any]) -> 'InertiaTestResponse':
        for key, value in expected.items():
            self.assert_prop(key, value)
        return self

    def assert_flash(self, key: str, expected: Any = _MISSING) -> 'InertiaTestResponse':
        flash = self.props.get(FLASH_PROP) or {}
        assert key in flash, f"Expected flash {key!r}, got {sorted(flash)}"
        if expected is not _MISSING:
            assert flash[key] == expected, f"Expected flash {key!r} to equal {expected!r}, got {flash[key]!r}"
        return self

    def assert_no_flash(self) -> 'InertiaTestResponse':
        assert not self.props.get(FLASH_PROP), f"Expected no flash data, got {self.props.get(FLASH_PROP)!r}"
        return self

    # ── Metadata ─────────────────────────────────────────────────────────

    def _assert_contains(self, field: str, keys: Iterable[str], found: Iterable[str]) -> None:
        found = list(found)
        for key in keys:
            assert key in found, f"Expected {key!r} in {field}, got {found}"

    def assert_merge_props(self, *keys: str) -> 'InertiaTestResponse':
        self._assert_contains('mergeProps', keys, self.page.get('mergeProps', []))
        return self

    def assert_deep_merge_props(self, *keys: str) -> 'InertiaTestResponse':
        self._assert_contains('deepMergeProps', keys, self.page.get('deepMergeProps', []))
        return self

    def assert_deferred_props(self, keys: Iterable[str], group: str = DEFAULT_DEFER_GROUP) -> 'InertiaTestResponse':
        groups = self.page.get('deferredProps', {})
        assert group in groups, f"Expected deferred group {group!r}, got {sorted(groups)}"
        self._assert_contains(f"deferredProps[{group!r}]", keys, groups[group])
        return self

    def assert_once_props(self, *keys: str) -> 'InertiaTestResponse':
        self._assert_contains('onceProps', keys, self.page.get('onceProps', {}))
        return self


class InertiaTestClient:
    """Sends Inertia requests through a Flask test client.

    Args:
        client: ``app.test_client()``.
        version: Asset version to send, if any.
    """

    def __init__(self, client: Any, version: str | None = None) -> None:
        self.client = client
        self.version = version

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {INERTIA: 'true'}
        if self.version is not None:
            headers[VERSION] = str(self.version)
        headers.update(extra or {})
        return headers

    def request(self, path: str, method: str = 'GET', headers: Mapping[str, str] | None = None,
                **kwargs: Any) -> InertiaTestResponse:
        response = self.client.open(path, method=method, headers=self._headers(headers), **kwargs)
        return InertiaTestResponse(response)

    def partial_request(self, path: str, component: str, only: Iterable[str],
                        headers: Mapping[str, str] | None = None, **kwargs: Any) -> InertiaTestResponse:
        extra = {PARTIAL_COMPONENT: component, PARTIAL_DATA: ','.join(only), **(headers or {})}
        return self.request(path, headers=extra, **kwargs)

    def partial_except_request(self, path: str, component: str, except_: Iterable[str],
                               headers: Mapping[str, str] | None = None, **kwargs: Any) -> InertiaTestResponse:
        extra = {PARTIAL_COMPONENT: component, PARTIAL_EXCEPT: ','.join(except_), **(headers or {})}
        return self.request(path, headers=extra, **kwargs)
