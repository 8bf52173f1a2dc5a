"""Tests for request scoping."""

import asyncio

import pytest

from inertia_engine.context import RequestContext, close_scope, current_scope, open_scope, request_scope, require_scope


class TestRequestScope:
    """Binding and unbinding of scopes."""

    def test_no_scope_outside_request(self):
        assert current_scope() is None

    def test_scope_bound_inside_block(self):
        with request_scope() as scope:
            assert current_scope() is scope
        assert current_scope() is None

    def test_scope_cleared_after_exception(self):
        with pytest.raises(ValueError):
            with request_scope():
                raise ValueError('handler failed')
        assert current_scope() is None

    def test_nested_scopes_restore_outer(self):
        with request_scope() as outer:
            with request_scope() as inner:
                assert current_scope() is inner
            assert current_scope() is outer

    def test_open_and_close(self):
        scope, token = open_scope({'k': 'v'})
        try:
            assert current_scope() is scope
            assert scope.session == {'k': 'v'}
        finally:
            close_scope(token)
        assert current_scope() is None

    def test_require_scope(self):
        with pytest.raises(RuntimeError, match='refresh_once'):
            require_scope('refresh_once')
        with request_scope() as scope:
            assert require_scope('refresh_once') is scope

    def test_add_refresh_once_dedupes(self):
        with request_scope() as scope:
            scope.add_refresh_once('plans')
            scope.add_refresh_once('plans')
            scope.add_refresh_once('perms')
            assert scope.refresh_once_keys == ['plans', 'perms']


class TestSnapshot:
    """Immutable RequestContext snapshots."""

    def test_snapshot_copies_state(self):
        with request_scope() as scope:
            scope.shared_props['user'] = 'ada'
            scope.clear_history = True
            scope.add_refresh_once('plans')
            snapshot = scope.snapshot()

        assert snapshot.shared_props == {'user': 'ada'}
        assert snapshot.clear_history is True
        assert snapshot.refresh_once_keys == frozenset({'plans'})

    def test_snapshot_isolated_from_later_changes(self):
        with request_scope() as scope:
            snapshot = scope.snapshot()
            scope.shared_props['late'] = 1
        assert 'late' not in snapshot.shared_props

    def test_snapshot_shared_props_read_only(self):
        with request_scope() as scope:
            snapshot = scope.snapshot()
        with pytest.raises(TypeError):
            snapshot.shared_props['x'] = 1

    def test_default_context(self):
        context = RequestContext()
        assert context.encrypt_history is None
        assert context.session is None


class TestConcurrentRequests:
    """Interleaved requests never see each other's state."""

    def test_interleaved_tasks_isolated(self):
        async def handle(name, delay):
            with request_scope() as scope:
                scope.shared_props['who'] = name
                await asyncio.sleep(delay)
                return current_scope().shared_props['who']

        async def main():
            return await asyncio.gather(handle('a', 0.03), handle('b', 0.01), handle('c', 0.02))

        assert asyncio.run(main()) == ['a', 'b', 'c']
        assert current_scope() is None
