"""Shared data models used across the engine modules."""

from dataclasses import dataclass, field
from typing import Any, Mapping

from inertia_engine.domain.props import UNDEFINED


@dataclass(frozen=True)
class RequestDirectives:
    """Partial-reload intent extracted from one request's headers."""

    is_partial_reload: bool = False
    only: tuple[str, ...] | None = None
    except_: tuple[str, ...] | None = None
    reset_keys: frozenset[str] = frozenset()
    client_once_keys: frozenset[str] = frozenset()
    server_forced_refresh_once_keys: frozenset[str] = frozenset()


@dataclass(frozen=True)
class PageRequest:
    """The parts of an HTTP request the page builder reads."""

    path: str
    method: str = 'GET'
    headers: Mapping[str, str] = field(default_factory=dict)
    query_string: str = ''


@dataclass(frozen=True)
class OnceDescriptor:
    """Client cache entry for a once prop."""

    prop: str
    expires_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {'prop': self.prop, 'expiresAt': self.expires_at}


@dataclass(frozen=True)
class ScrollDescriptor:
    """Pagination state reported for an infinite-scroll prop."""

    page_name: str
    current_page: int
    previous_page: int | None
    next_page: int | None
    reset: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            'pageName': self.page_name,
            'currentPage': self.current_page,
            'previousPage': self.previous_page,
            'nextPage': self.next_page,
            'reset': self.reset,
        }


@dataclass
class PageMetadata:
    """Merge/defer/once/scroll descriptors for one page response."""

    merge_props: list[str] = field(default_factory=list)
    deep_merge_props: list[str] = field(default_factory=list)
    deferred_props: dict[str, list[str]] = field(default_factory=dict)
    once_props: dict[str, OnceDescriptor] = field(default_factory=dict)
    scroll_props: dict[str, ScrollDescriptor] = field(default_factory=dict)


@dataclass
class PageObject:
    """The page payload sent to the client.

    ``props`` may hold ``UNDEFINED`` placeholders for keys a partial reload
    asked for but the page does not define; ``to_dict`` leaves those out, as
    JSON has no way to carry them.
    """

    component: str
    url: str
    version: str | int
    props: dict[str, Any]
    clear_history: bool = False
    encrypt_history: bool = False
    metadata: PageMetadata = field(default_factory=PageMetadata)

    def to_dict(self) -> dict[str, Any]:
        """Wire format with empty optional fields omitted."""
        page: dict[str, Any] = {
            'component': self.component,
            'url': self.url,
            'version': self.version,
            'props': {k: v for k, v in self.props.items() if v is not UNDEFINED},
            'clearHistory': self.clear_history,
            'encryptHistory': self.encrypt_history,
        }
        meta = self.metadata
        if meta.merge_props:
            page['mergeProps'] = list(meta.merge_props)
        if meta.deep_merge_props:
            page['deepMergeProps'] = list(meta.deep_merge_props)
        if meta.deferred_props:
            page['deferredProps'] = {g: list(keys) for g, keys in meta.deferred_props.items()}
        if meta.once_props:
            page['onceProps'] = {k: d.to_dict() for k, d in meta.once_props.items()}
        if meta.scroll_props:
            page['scrollProps'] = {k: d.to_dict() for k, d in meta.scroll_props.items()}
        return page
