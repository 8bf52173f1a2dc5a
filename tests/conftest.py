"""Shared test fixtures."""

import jinja2
import pytest
from flask import Flask, redirect, session

from inertia_engine.domain.models import RequestDirectives
from inertia_engine.domain.props import AlwaysProp, DeferProp, MergeProp, OnceProp, OptionalProp, ScrollProp
from inertia_engine.web.extension import Inertia


# ── Sample Templates ─────────────────────────────────────────────────────

ROOT_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head><title>{{ view_data.get('title', 'App') }}</title></head>
<body>{{ inertia_root(page) }}</body>
</html>
"""

ADMIN_TEMPLATE = """\
<html><body class="admin">{{ inertia_root(page) }}</body></html>
"""


@pytest.fixture
def full_load():
    """Directives of a plain (non-partial) page load."""
    return RequestDirectives()


@pytest.fixture
def partial_directives():
    """Factory for partial-reload directives."""
    def make(only=None, except_=None, reset=(), client_once=(), forced=()):
        return RequestDirectives(
            is_partial_reload=True,
            only=tuple(only) if only is not None else None,
            except_=tuple(except_) if except_ is not None else None,
            reset_keys=frozenset(reset),
            client_once_keys=frozenset(client_once),
            server_forced_refresh_once_keys=frozenset(forced),
        )
    return make


@pytest.fixture
def mixed_props():
    """One prop of every variant, keyed by its role."""
    return {
        'title': 'Dashboard',
        'users': lambda: ['ada', 'grace'],
        'auth': AlwaysProp(lambda: {'id': 1}),
        'feed': MergeProp(lambda: [1, 2]),
        'stats': DeferProp(lambda: {'visits': 10}),
        'charts': DeferProp(lambda: [], group='charts'),
        'plans': OnceProp(lambda: ['free', 'pro']),
        'export': OptionalProp(lambda: 'csv'),
        'posts': ScrollProp(lambda: ['p1', 'p2'], page=0, per_page=2, total=5),
    }


@pytest.fixture
def app():
    """Flask app with the extension and a few routes."""
    app = Flask(__name__)
    app.config.update(SECRET_KEY='test-secret', INERTIA_VERSION='abc123', TESTING=True)
    app.jinja_loader = jinja2.DictLoader({'app.html': ROOT_TEMPLATE, 'admin.html': ADMIN_TEMPLATE})
    inertia = Inertia(app)

    @app.route('/dashboard')
    def dashboard():
        inertia.share('user', {'name': 'Ada'})
        return inertia.render('Dashboard', {
            'title': 'Dashboard',
            'stats': inertia.defer(lambda: {'visits': 10}),
            'plans': inertia.once(lambda: ['free', 'pro']),
            'feed': inertia.merge(lambda: [1, 2]),
        })

    @app.route('/async')
    async def async_page():
        async def load():
            return ['a', 'b']
        return await inertia.render_async('Async/Page', {'items': load})

    @app.route('/flash', methods=['POST'])
    def flash_and_redirect():
        inertia.flash('message', 'Saved!')
        return inertia.back()

    @app.route('/items/<int:item_id>', methods=['PUT', 'DELETE'])
    def update_item(item_id):
        return inertia.location('/items')

    @app.route('/legacy', methods=['PUT'])
    def legacy_update():
        return redirect('/done')

    @app.route('/admin')
    def admin():
        inertia.set_root_view('admin')
        inertia.clear_history()
        inertia.encrypt_history()
        return inertia.render('Admin/Index', {'section': 'users'})

    @app.route('/errors')
    def with_errors():
        session['errors'] = {'default': ['The "email" field is required.'], 'login': ['Bad password']}
        return 'stored'

    @app.route('/refresh')
    def refresh():
        inertia.refresh_once('plans')
        return inertia.render('Plans', {'plans': inertia.once(lambda: ['free', 'pro'])})

    @app.route('/boom')
    def boom():
        def explode():
            raise ValueError('resolver failed')
        return inertia.render('Boom', {'data': explode})

    return app


@pytest.fixture
def inertia(app):
    """The extension bound to ``app``."""
    return app.extensions['inertia']


@pytest.fixture
def client(app):
    return app.test_client()
