"""Request-scoped state.

Middleware and views collect per-request data (shared props, history flags,
once-prop refreshes) on a ``RequestScope``. The scope is bound to a
``ContextVar`` only while its request runs, so concurrent requests each see
their own scope, and it is unbound in ``finally`` even when the request
fails. The page builder never reads the variable: it is handed an immutable
``RequestContext`` snapshot instead.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, MutableMapping

_current_scope: ContextVar['RequestScope | None'] = ContextVar('inertia_request_scope', default=None)


@dataclass(frozen=True)
class RequestContext:
    """Read-only view of a request's scoped state, passed to the page builder.

    ``session`` is the request's session mapping; the page builder drains
    flash data from it.
    """

    shared_props: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    encrypt_history: bool | None = None
    clear_history: bool = False
    refresh_once_keys: frozenset[str] = frozenset()
    root_view: str | None = None
    session: MutableMapping[str, Any] | None = None


@dataclass
class RequestScope:
    """Mutable state collected while one request is handled."""

    session: MutableMapping[str, Any] | None = None
    shared_props: dict[str, Any] = field(default_factory=dict)
    view_data: dict[str, Any] = field(default_factory=dict)
    encrypt_history: bool | None = None
    clear_history: bool = False
    refresh_once_keys: list[str] = field(default_factory=list)
    root_view: str | None = None

    def add_refresh_once(self, key: str) -> None:
        if key not in self.refresh_once_keys:
            self.refresh_once_keys.append(key)

    def snapshot(self) -> RequestContext:
        return RequestContext(
            shared_props=MappingProxyType(dict(self.shared_props)),
            encrypt_history=self.encrypt_history,
            clear_history=self.clear_history,
            refresh_once_keys=frozenset(self.refresh_once_keys),
            root_view=self.root_view,
            session=self.session,
        )


def current_scope() -> RequestScope | None:
    """The scope of the request running in this context, if any."""
    return _current_scope.get()


def require_scope(action: str) -> RequestScope:
    scope = _current_scope.get()
    if scope is None:
        raise RuntimeError(f"{action} requires an active request scope")
    return scope


def open_scope(session: MutableMapping[str, Any] | None = None) -> tuple[RequestScope, Token]:
    """Bind a fresh scope; pair every call with ``close_scope``."""
    scope = RequestScope(session=session)
    return scope, _current_scope.set(scope)


def close_scope(token: Token) -> None:
    _current_scope.reset(token)


@contextmanager
def request_scope(session: MutableMapping[str, Any] | None = None) -> Iterator[RequestScope]:
    """Bind a fresh ``RequestScope`` for the duration of the block."""
    scope, token = open_scope(session)
    try:
        yield scope
    finally:
        close_scope(token)
