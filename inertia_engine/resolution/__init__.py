"""Asynchronous prop resolution."""

from inertia_engine.resolution.prop_resolver import PropResolver, call_resolver

__all__ = ['PropResolver', 'call_resolver']
