"""Builds the scrollProps pagination descriptors."""

from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.models import ScrollDescriptor
from inertia_engine.domain.props import Prop


class ScrollPropsBuilder:
    """Describes the pagination state of each scroll prop for the client."""

    def build(self, props: dict[str, Prop], reset_keys: frozenset[str]) -> dict[str, ScrollDescriptor]:
        scroll_props: dict[str, ScrollDescriptor] = {}
        for key, prop in props.items():
            if prop.kind is not PropKind.SCROLL:
                continue
            scroll_props[key] = ScrollDescriptor(
                page_name=prop.page_name,
                current_page=prop.current_page,
                previous_page=prop.previous_page,
                next_page=prop.next_page,
                reset=key in reset_keys,
            )
        return scroll_props
