"""Domain model: prop variants, request directives and page objects."""

from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.models import (
    OnceDescriptor,
    PageMetadata,
    PageObject,
    PageRequest,
    RequestDirectives,
    ScrollDescriptor,
)
from inertia_engine.domain.props import (
    UNDEFINED,
    AlwaysProp,
    DeferProp,
    LazyProp,
    MergeProp,
    OnceProp,
    OptionalProp,
    PlainProp,
    Prop,
    ScrollProp,
    coerce_prop,
    is_prop,
)

__all__ = [
    'PropKind', 'OnceDescriptor', 'PageMetadata', 'PageObject',
    'PageRequest', 'RequestDirectives', 'ScrollDescriptor',
    'UNDEFINED', 'AlwaysProp', 'DeferProp', 'LazyProp', 'MergeProp',
    'OnceProp', 'OptionalProp', 'PlainProp', 'Prop', 'ScrollProp',
    'coerce_prop', 'is_prop',
]
