"""Prop selection for full and partial page loads."""

from inertia_engine.selection.prop_selector import PropSelector

__all__ = ['PropSelector']
