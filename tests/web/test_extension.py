"""Tests for the Flask extension."""

import logging

import pytest
from flask import Flask, request

from inertia_engine.context import current_scope, request_scope
from inertia_engine.web.extension import Inertia

INERTIA_HEADERS = {'X-Inertia': 'true', 'X-Inertia-Version': 'abc123'}


class TestRender:
    """Page responses for Inertia and full loads."""

    def test_inertia_request_returns_json(self, client):
        response = client.get('/dashboard', headers=INERTIA_HEADERS)
        assert response.status_code == 200
        assert response.headers['X-Inertia'] == 'true'
        assert 'X-Inertia' in response.headers['Vary']

        page = response.get_json()
        assert page['component'] == 'Dashboard'
        assert page['url'] == '/dashboard'
        assert page['version'] == 'abc123'
        assert page['props']['title'] == 'Dashboard'
        assert page['props']['user'] == {'name': 'Ada'}
        assert page['props']['plans'] == ['free', 'pro']
        assert 'stats' not in page['props']
        assert page['deferredProps'] == {'default': ['stats']}
        assert page['mergeProps'] == ['feed']
        assert page['onceProps'] == {'plans': {'prop': 'plans', 'expiresAt': None}}

    def test_full_load_renders_root_template(self, client):
        response = client.get('/dashboard?tab=team')
        assert response.status_code == 200
        assert response.mimetype == 'text/html'
        html = response.get_data(as_text=True)
        assert '<div id="app" data-page="' in html
        assert '&#34;component&#34;: &#34;Dashboard&#34;' in html
        assert '/dashboard?tab=team' in html

    def test_partial_reload(self, client):
        headers = {
            **INERTIA_HEADERS,
            'X-Inertia-Partial-Component': 'Dashboard',
            'X-Inertia-Partial-Data': 'stats',
        }
        page = client.get('/dashboard', headers=headers).get_json()
        assert set(page['props']) == {'stats', 'errors'}
        assert page['props']['stats'] == {'visits': 10}
        assert 'deferredProps' not in page

    def test_once_prop_cached_by_client(self, client):
        headers = {**INERTIA_HEADERS, 'X-Inertia-Except-Once-Props': 'plans'}
        page = client.get('/dashboard', headers=headers).get_json()
        assert 'plans' not in page['props']
        assert 'onceProps' not in page

    def test_refresh_once_overrides_cache(self, client):
        headers = {**INERTIA_HEADERS, 'X-Inertia-Except-Once-Props': 'plans'}
        page = client.get('/refresh', headers=headers).get_json()
        assert page['props']['plans'] == ['free', 'pro']

    def test_async_view(self, client):
        page = client.get('/async', headers=INERTIA_HEADERS).get_json()
        assert page['component'] == 'Async/Page'
        assert page['props']['items'] == ['a', 'b']

    def test_root_view_and_history_flags(self, client):
        html = client.get('/admin').get_data(as_text=True)
        assert 'class="admin"' in html

        page = client.get('/admin', headers=INERTIA_HEADERS).get_json()
        assert page['clearHistory'] is True
        assert page['encryptHistory'] is True

    def test_resolver_failure_propagates_and_scope_closes(self, client):
        with pytest.raises(ValueError, match='resolver failed'):
            client.get('/boom', headers=INERTIA_HEADERS)
        assert current_scope() is None


class TestProtocolMiddleware:
    """Version checks, redirects and validation errors."""

    def test_version_mismatch_forces_reload(self, client):
        response = client.get('/dashboard', headers={'X-Inertia': 'true', 'X-Inertia-Version': 'stale'})
        assert response.status_code == 409
        assert response.headers['X-Inertia-Location'] == 'http://localhost/dashboard'

    def test_missing_version_header_is_not_a_mismatch(self, client):
        assert client.get('/dashboard', headers={'X-Inertia': 'true'}).status_code == 200

    def test_redirect_after_put_becomes_303(self, client):
        response = client.put('/legacy', headers=INERTIA_HEADERS)
        assert response.status_code == 303

    def test_redirect_after_put_unchanged_without_inertia(self, client):
        assert client.put('/legacy').status_code == 302

    def test_validation_errors_shared(self, client):
        client.get('/errors')
        page = client.get('/dashboard', headers=INERTIA_HEADERS).get_json()
        assert page['props']['errors'] == {'default': 'The email field is required.'}

        # drained after one response
        page = client.get('/dashboard', headers=INERTIA_HEADERS).get_json()
        assert page['props']['errors'] == {}

    def test_error_bag_header(self, client):
        client.get('/errors')
        headers = {**INERTIA_HEADERS, 'X-Inertia-Error-Bag': 'login'}
        page = client.get('/dashboard', headers=headers).get_json()
        assert page['props']['errors'] == {'login': 'Bad password'}

    def test_errors_survive_partial_reload(self, client):
        headers = {
            **INERTIA_HEADERS,
            'X-Inertia-Partial-Component': 'Dashboard',
            'X-Inertia-Partial-Data': 'title',
        }
        page = client.get('/dashboard', headers=headers).get_json()
        assert set(page['props']) == {'title', 'errors'}


class TestFlash:
    """Flash data carried to the next page."""

    def test_flash_then_render(self, client):
        response = client.post('/flash', headers={**INERTIA_HEADERS, 'Referer': '/dashboard'})
        assert response.status_code == 302
        assert response.headers['Location'] == '/dashboard'

        page = client.get('/dashboard', headers=INERTIA_HEADERS).get_json()
        assert page['props']['flash'] == {'message': 'Saved!'}

        page = client.get('/dashboard', headers=INERTIA_HEADERS).get_json()
        assert 'flash' not in page['props']

    def test_flash_requires_scope(self, inertia):
        with pytest.raises(RuntimeError):
            inertia.flash('message', 'x')

    def test_flash_requires_session(self, inertia):
        with request_scope():
            with pytest.raises(RuntimeError, match='session'):
                inertia.flash('message', 'x')


class TestSharedState:
    """Shared props, view data and scoped flags."""

    def test_share_outside_request_is_global(self, inertia):
        inertia.share('app_name', 'Demo')
        assert inertia.global_shared['app_name'] == 'Demo'
        assert inertia.get_shared('app_name') == 'Demo'

    def test_share_inside_scope_stays_scoped(self, inertia):
        with request_scope() as scope:
            inertia.share('user', 'ada')
            assert scope.shared_props == {'user': 'ada'}
            assert inertia.get_shared('user') == 'ada'
        assert 'user' not in inertia.global_shared
        assert inertia.get_shared('user') is None

    def test_scoped_share_overrides_global(self, inertia):
        inertia.share_globally('locale', 'en')
        with request_scope():
            inertia.share('locale', 'de')
            assert inertia.get_shared() == {'locale': 'de'}

    def test_share_globally_inside_scope_warns(self, inertia, caplog):
        with request_scope():
            with caplog.at_level(logging.WARNING, logger='inertia_engine.web.extension'):
                inertia.share_globally('x', 1)
        assert inertia.global_shared['x'] == 1
        assert 'share_globally' in caplog.text

    def test_share_once(self, inertia):
        with request_scope() as scope:
            prop = inertia.share_once('perms', lambda: ['read'])
            assert scope.shared_props['perms'] is prop

    def test_flush_shared(self, inertia):
        inertia.share_globally('g', 1)
        with request_scope() as scope:
            inertia.share('a', 1)
            inertia.share('b', 2)
            inertia.flush_shared('a')
            assert scope.shared_props == {'b': 2}
            inertia.flush_shared()
            assert scope.shared_props == {}
        assert inertia.global_shared == {'g': 1}
        inertia.flush_shared(globally=True)
        assert inertia.global_shared == {}

    def test_view_data(self, inertia):
        inertia.view_data_globally('title', 'App')
        with request_scope():
            inertia.view_data('title', 'Users')
            assert inertia.get_view_data('title') == 'Users'
        assert inertia.get_view_data('title') == 'App'

    def test_refresh_once_accepts_list(self, inertia):
        with request_scope() as scope:
            inertia.refresh_once(['plans', 'perms']).refresh_once('plans')
            assert scope.refresh_once_keys == ['plans', 'perms']

    def test_scoped_flags_require_scope(self, inertia):
        with pytest.raises(RuntimeError):
            inertia.refresh_once('plans')
        with pytest.raises(RuntimeError):
            inertia.clear_history()
        with pytest.raises(RuntimeError):
            inertia.set_root_view('admin')

    def test_encrypt_history_outside_scope_sets_default(self, inertia):
        inertia.encrypt_history()
        assert inertia.config.encrypt_history is True

    def test_root_view(self, inertia):
        assert inertia.get_root_view() == 'app'
        with request_scope():
            inertia.set_root_view('admin')
            assert inertia.get_root_view() == 'admin'
        assert inertia.get_root_view() == 'app'

    def test_hook_registered_before_init_app_shares_per_request(self):
        app = Flask(__name__)
        inertia = Inertia()

        @app.before_request
        def load_user():
            if 'user' in request.args:
                inertia.share('user', request.args['user'])

        inertia.init_app(app)

        @app.route('/page')
        def page():
            return inertia.render('Page')

        client = app.test_client()
        first = client.get('/page?user=ada', headers={'X-Inertia': 'true'}).get_json()
        assert first['props']['user'] == 'ada'

        second = client.get('/page', headers={'X-Inertia': 'true'}).get_json()
        assert 'user' not in second['props']
        assert inertia.global_shared == {}

    def test_writes_during_request_without_scope_raise(self, app, inertia):
        with app.test_request_context('/dashboard'):
            assert current_scope() is None
            with pytest.raises(RuntimeError, match='share'):
                inertia.share('user', 'ada')
            with pytest.raises(RuntimeError, match='view_data'):
                inertia.view_data('title', 'Users')
            with pytest.raises(RuntimeError, match='encrypt_history'):
                inertia.encrypt_history()
        assert inertia.global_shared == {}
        assert inertia.global_view_data == {}
