"""Server-side engine for the Inertia page protocol.

Decides which props a page response carries, resolves them, and describes
their client-side behavior (merging, deferral, once caching, infinite
scroll) in the page object.
"""

from inertia_engine.config import InertiaConfig
from inertia_engine.context import RequestContext, request_scope
from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.models import PageObject, PageRequest
from inertia_engine.domain.props import (
    UNDEFINED,
    always,
    deep_merge,
    defer,
    merge,
    once,
    optional,
    scroll,
)
from inertia_engine.output.page_builder import PageObjectBuilder, build_page_object
from inertia_engine.web.extension import Inertia

__version__ = '0.1.0'

__all__ = [
    'Inertia', 'InertiaConfig', 'PageObject', 'PageObjectBuilder', 'PageRequest',
    'PropKind', 'RequestContext', 'UNDEFINED', 'always', 'build_page_object',
    'deep_merge', 'defer', 'merge', 'once', 'optional', 'request_scope', 'scroll',
]
