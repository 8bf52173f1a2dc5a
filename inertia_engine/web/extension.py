"""Flask integration for the page protocol engine.

Usage::

    app = Flask(__name__)
    inertia = Inertia(app)

    @app.route('/users')
    def users():
        return inertia.render('Users/Index', {
            'users': lambda: User.list(),
            'stats': inertia.defer(compute_stats),
        })
"""

import json
import logging
from typing import Any, Callable, Iterable, Mapping

from flask import (
    Flask,
    Response,
    current_app,
    g,
    has_request_context,
    jsonify,
    make_response,
    render_template,
    request,
)
from flask import session as flask_session
from flask.sessions import NullSession
from markupsafe import Markup, escape

from inertia_engine.config import InertiaConfig
from inertia_engine.context import (
    RequestContext,
    RequestScope,
    close_scope,
    current_scope,
    open_scope,
    require_scope,
)
from inertia_engine.directives import error_bag, is_inertia_request
from inertia_engine.domain import props as prop_factories
from inertia_engine.domain.constants import INERTIA, LOCATION, VERSION
from inertia_engine.domain.models import PageObject, PageRequest
from inertia_engine.domain.props import AlwaysProp, OnceProp
from inertia_engine.output.page_builder import PageObjectBuilder
from inertia_engine.session import flash as session_flash
from inertia_engine.session import peek_flash, resolve_validation_errors
from inertia_engine.web import responses

logger = logging.getLogger(__name__)

_SCOPE_TOKEN = '_inertia_scope_token'


def inertia_root(page: Mapping[str, Any], element_id: str = 'app') -> Markup:
    """Root element carrying the initial page object, for the root template."""
    data = escape(json.dumps(page))
    return Markup(f'<div id="{escape(element_id)}" data-page="{data}"></div>')


def _usable_session() -> Any:
    """The Flask session, or None when sessions are not configured."""
    session = flask_session._get_current_object()
    if isinstance(session, NullSession):
        return None
    return session


def _page_request() -> PageRequest:
    return PageRequest(
        path=request.script_root + request.path,
        method=request.method,
        headers=request.headers,
        query_string=request.query_string.decode('utf-8', 'replace'),
    )


class Inertia:
    """Flask extension binding request scopes and rendering page objects.

    Global shared props and view data live on the extension and are meant to
    be set at startup; everything set while a request runs goes to that
    request's scope.
    """

    optional = staticmethod(prop_factories.optional)
    always = staticmethod(prop_factories.always)
    merge = staticmethod(prop_factories.merge)
    deep_merge = staticmethod(prop_factories.deep_merge)
    defer = staticmethod(prop_factories.defer)
    once = staticmethod(prop_factories.once)
    scroll = staticmethod(prop_factories.scroll)

    location = staticmethod(responses.location)
    back = staticmethod(responses.back)
    handle_bad_request = staticmethod(responses.handle_bad_request)

    def __init__(self, app: Flask | None = None) -> None:
        self.global_shared: dict[str, Any] = {}
        self.global_view_data: dict[str, Any] = {}
        self.config = InertiaConfig()
        self.builder = PageObjectBuilder(self.config)
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.config = InertiaConfig.from_mapping(app.config)
        self.builder = PageObjectBuilder(self.config)
        app.extensions['inertia'] = self
        # Scope must be open before any other before_request hook runs.
        app.before_request_funcs.setdefault(None, []).insert(0, self._before_request)
        app.after_request(self._after_request)
        app.teardown_request(self._teardown_request)
        app.context_processor(lambda: {'inertia_root': inertia_root})

    # ── Request lifecycle ────────────────────────────────────────────────

    def _before_request(self) -> Response | None:
        scope, token = open_scope(_usable_session())
        setattr(g, _SCOPE_TOKEN, token)

        if not is_inertia_request(request.headers):
            return None

        client_version = request.headers.get(VERSION)
        current_version = str(self.config.current_version())
        if request.method == 'GET' and client_version is not None and client_version != current_version:
            logger.info("Asset version mismatch (%s != %s), forcing reload", client_version, current_version)
            return Response('', 409, {LOCATION: request.url})

        errors = resolve_validation_errors(scope.session, error_bag(request.headers))
        scope.shared_props['errors'] = AlwaysProp(lambda: errors)
        return None

    def _after_request(self, response: Response) -> Response:
        if is_inertia_request(request.headers):
            if response.status_code == 302 and request.method in ('PUT', 'PATCH', 'DELETE'):
                response.status_code = 303
            response.vary.add(INERTIA)
        return response

    def _teardown_request(self, exc: BaseException | None) -> None:
        token = g.pop(_SCOPE_TOKEN, None)
        if token is not None:
            close_scope(token)

    # ── Shared props and view data ───────────────────────────────────────

    @staticmethod
    def _scope_or_global(action: str) -> RequestScope | None:
        """The active scope; None outside a request, where globals apply."""
        scope = current_scope()
        if scope is None and has_request_context():
            raise RuntimeError(f"{action} called during a request with no open request scope")
        return scope

    def share(self, key: str, value: Any = None) -> Any:
        """Share a prop with the current request, or globally outside one."""
        scope = self._scope_or_global('share')
        if scope is not None:
            scope.shared_props[key] = value
        else:
            self.global_shared[key] = value
        return value

    def share_globally(self, key: str, value: Any = None) -> Any:
        if current_scope() is not None:
            logger.warning("share_globally(%r) called while handling a request", key)
        self.global_shared[key] = value
        return value

    def share_once(self, key: str, resolve: Callable[[], Any]) -> OnceProp:
        prop = OnceProp(resolve)
        self.share(key, prop)
        return prop

    def get_shared(self, key: str | None = None) -> Any:
        scope = current_scope()
        merged = {**self.global_shared, **(scope.shared_props if scope else {})}
        return merged.get(key) if key else merged

    def flush_shared(self, key: str | None = None, globally: bool = False) -> None:
        scope = current_scope()
        if key:
            if scope is not None:
                scope.shared_props.pop(key, None)
            if globally:
                self.global_shared.pop(key, None)
        else:
            if scope is not None:
                scope.shared_props.clear()
            if globally:
                self.global_shared.clear()

    def view_data(self, key: str, value: Any) -> Any:
        scope = self._scope_or_global('view_data')
        if scope is not None:
            scope.view_data[key] = value
        else:
            self.global_view_data[key] = value
        return value

    def view_data_globally(self, key: str, value: Any) -> Any:
        self.global_view_data[key] = value
        return value

    def get_view_data(self, key: str | None = None) -> Any:
        scope = current_scope()
        merged = {**self.global_view_data, **(scope.view_data if scope else {})}
        return merged.get(key) if key else merged

    # ── Request-scoped flags ─────────────────────────────────────────────

    def refresh_once(self, keys: str | Iterable[str]) -> 'Inertia':
        """Resend the named once props even if the client has them cached."""
        scope = require_scope('refresh_once')
        for key in [keys] if isinstance(keys, str) else keys:
            scope.add_refresh_once(key)
        return self

    def flash(self, key: str | Mapping[str, Any], value: Any = None) -> 'Inertia':
        scope = require_scope('flash')
        if scope.session is None:
            raise RuntimeError("flash requires a configured session (set SECRET_KEY)")
        session_flash(scope.session, key, value)
        return self

    def get_flash(self) -> dict[str, Any]:
        scope = current_scope()
        return peek_flash(scope.session if scope else None)

    def encrypt_history(self, encrypt: bool = True) -> None:
        scope = self._scope_or_global('encrypt_history')
        if scope is not None:
            scope.encrypt_history = encrypt
        else:
            self.config.encrypt_history = encrypt

    def clear_history(self) -> None:
        require_scope('clear_history').clear_history = True

    def set_root_view(self, view: str) -> 'Inertia':
        require_scope('set_root_view').root_view = view
        return self

    def get_root_view(self) -> str:
        scope = current_scope()
        return (scope.root_view if scope else None) or self.config.root_view

    # ── Rendering ────────────────────────────────────────────────────────

    def render(
        self,
        component: str,
        props: Mapping[str, Any] | None = None,
        view_data: Mapping[str, Any] | None = None,
    ) -> Response:
        """Render ``component`` from a synchronous view."""
        context = self._context()
        build = current_app.async_to_sync(self.builder.build)
        page = build(_page_request(), component, props, context, self.global_shared)
        return self._respond(page, view_data)

    async def render_async(
        self,
        component: str,
        props: Mapping[str, Any] | None = None,
        view_data: Mapping[str, Any] | None = None,
    ) -> Response:
        """Render ``component`` from an ``async def`` view."""
        context = self._context()
        page = await self.builder.build(_page_request(), component, props, context, self.global_shared)
        return self._respond(page, view_data)

    @staticmethod
    def _context() -> RequestContext:
        scope = current_scope()
        return scope.snapshot() if scope is not None else RequestContext()

    def _respond(self, page: PageObject, view_data: Mapping[str, Any] | None) -> Response:
        payload = page.to_dict()
        if is_inertia_request(request.headers):
            response = jsonify(payload)
            response.headers[INERTIA] = 'true'
        else:
            all_view_data = {**self.get_view_data(), **(view_data or {})}
            html = render_template(f"{self.get_root_view()}.html", page=payload, view_data=all_view_data)
            response = make_response(html)
        response.vary.add(INERTIA)
        return response
