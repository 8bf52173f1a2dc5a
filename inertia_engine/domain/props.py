"""Prop variants: the tagged union of page property types.

Every variant is a frozen dataclass carrying a ``kind`` discriminant. The
descriptive fields (group, key, ttl, pagination numbers) can be read without
invoking the resolver; only the resolver stage ever calls ``resolve``.

Configuration methods never mutate: ``once(fn).as_key('perms').until(60)``
builds a new ``OnceProp`` at every step.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Union

from inertia_engine.domain.constants import DEFAULT_DEFER_GROUP
from inertia_engine.domain.enums import PropKind

Resolver = Callable[[], Union[Any, Awaitable[Any]]]


class _Undefined:
    """Placeholder for a requested prop that has no source value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNDEFINED'

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def _require_callable(resolve: Any, variant: str) -> None:
    if not callable(resolve):
        raise TypeError(f"{variant} expects a callable resolver, got {type(resolve).__name__}")


@dataclass(frozen=True)
class PlainProp:
    """An already-materialized value. Always included, never merged."""

    value: Any
    kind: PropKind = field(default=PropKind.PLAIN, init=False)


@dataclass(frozen=True)
class LazyProp:
    """A bare callable from the props map, invoked only when selected."""

    resolve: Resolver
    kind: PropKind = field(default=PropKind.LAZY, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'LazyProp')


@dataclass(frozen=True)
class AlwaysProp:
    """Resolved on every request, even when a partial reload excludes it."""

    resolve: Resolver
    kind: PropKind = field(default=PropKind.ALWAYS, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'AlwaysProp')


@dataclass(frozen=True)
class MergeProp:
    """Merged with the client's cached value instead of replacing it."""

    resolve: Resolver
    deep: bool = False
    kind: PropKind = field(default=PropKind.MERGE, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'MergeProp')

    def deep_merge(self) -> 'MergeProp':
        return replace(self, deep=True)


@dataclass(frozen=True)
class DeferProp:
    """Left out of the first load and fetched by a follow-up partial reload."""

    resolve: Resolver
    group: str = DEFAULT_DEFER_GROUP
    kind: PropKind = field(default=PropKind.DEFER, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'DeferProp')


@dataclass(frozen=True)
class OnceProp:
    """Sent once and then cached by the client until it expires or is refreshed.

    Args:
        resolve: Callable producing the value.
        key: Cache key shared with the client; defaults to the prop's own key.
        ttl_seconds: Lifetime of the client-side copy, ``None`` for no expiry.
        force_refresh: Send the value even when the client reports holding it.
    """

    resolve: Resolver
    key: str | None = None
    ttl_seconds: float | None = None
    force_refresh: bool = False
    kind: PropKind = field(default=PropKind.ONCE, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'OnceProp')

    def as_key(self, key: str) -> 'OnceProp':
        return replace(self, key=key)

    def until(self, seconds: float) -> 'OnceProp':
        return replace(self, ttl_seconds=seconds)

    def fresh(self, value: bool = True) -> 'OnceProp':
        return replace(self, force_refresh=value)

    def effective_key(self, prop_key: str) -> str:
        return self.key or prop_key

    def expires_at(self, now_ms: int) -> int | None:
        """Expiry timestamp in epoch milliseconds, relative to ``now_ms``."""
        if self.ttl_seconds is None:
            return None
        return int(now_ms + self.ttl_seconds * 1000)


@dataclass(frozen=True)
class OptionalProp:
    """Only evaluated when a partial reload asks for it by name."""

    resolve: Resolver
    kind: PropKind = field(default=PropKind.OPTIONAL, init=False)

    def __post_init__(self):
        _require_callable(self.resolve, 'OptionalProp')


@dataclass(frozen=True)
class ScrollProp:
    """Paginated merge prop for infinite scrolling.

    ``page`` is 0-based as handed in by the data layer; everything reported
    to the client is 1-based. The resolved value is wrapped as
    ``{wrapper_key: data, 'meta': {...}}``.

    Args:
        resolve: Callable returning the page of data, or the data itself.
        page: 0-based page index.
        per_page: Items per page, must be positive.
        total: Total number of items across all pages.
        page_name: Query parameter the client uses to request pages.
        wrapper_key: Key the data is stored under in the resolved value.
        deep: Report the prop for deep rather than shallow merging.
    """

    resolve: Any
    page: int = 0
    per_page: int = 10
    total: int = 0
    page_name: str = 'page'
    wrapper_key: str = 'data'
    deep: bool = False
    kind: PropKind = field(default=PropKind.SCROLL, init=False)

    def __post_init__(self):
        if self.per_page <= 0:
            raise ValueError(f"per_page must be positive, got {self.per_page}")
        if self.page < 0:
            raise ValueError(f"page must not be negative, got {self.page}")

    @property
    def current_page(self) -> int:
        return self.page + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) or 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def next_page(self) -> int | None:
        return self.current_page + 1 if self.has_next else None

    @property
    def previous_page(self) -> int | None:
        return self.current_page - 1 if self.has_previous else None

    def deep_merge(self) -> 'ScrollProp':
        return replace(self, deep=True)

    def meta(self) -> dict[str, Any]:
        """Pagination block embedded next to the data in the resolved value."""
        return {
            'current_page': self.current_page,
            'per_page': self.per_page,
            'total': self.total,
            'last_page': self.total_pages,
            'next_page': self.next_page,
            'prev_page': self.previous_page,
            'page_name': self.page_name,
        }

    def wrap(self, data: Any) -> dict[str, Any]:
        return {self.wrapper_key: data, 'meta': self.meta()}


Prop = Union[
    PlainProp, LazyProp, AlwaysProp, MergeProp,
    DeferProp, OnceProp, OptionalProp, ScrollProp,
]

PROP_TYPES = (
    PlainProp, LazyProp, AlwaysProp, MergeProp,
    DeferProp, OnceProp, OptionalProp, ScrollProp,
)


def is_prop(value: Any) -> bool:
    return isinstance(value, PROP_TYPES)


def coerce_prop(value: Any) -> Prop:
    """Wrap a raw props-map value into its variant.

    Variants pass through, bare callables become ``LazyProp`` and anything
    else becomes ``PlainProp``.
    """
    if is_prop(value):
        return value
    if callable(value):
        return LazyProp(value)
    return PlainProp(value)


# ── Factories ────────────────────────────────────────────────────────────

def optional(resolve: Resolver) -> OptionalProp:
    return OptionalProp(resolve)


def always(resolve: Resolver) -> AlwaysProp:
    return AlwaysProp(resolve)


def merge(resolve: Resolver) -> MergeProp:
    return MergeProp(resolve)


def deep_merge(resolve: Resolver) -> MergeProp:
    return MergeProp(resolve, deep=True)


def defer(resolve: Resolver, group: str = DEFAULT_DEFER_GROUP) -> DeferProp:
    return DeferProp(resolve, group=group)


def once(resolve: Resolver) -> OnceProp:
    return OnceProp(resolve)


def scroll(
    resolve: Any,
    page: int = 0,
    per_page: int = 10,
    total: int = 0,
    page_name: str = 'page',
    wrapper: str = 'data',
) -> ScrollProp:
    return ScrollProp(
        resolve,
        page=page,
        per_page=per_page,
        total=total,
        page_name=page_name,
        wrapper_key=wrapper,
    )
