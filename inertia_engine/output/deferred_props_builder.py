"""Builds the deferredProps group → keys map."""

from collections import defaultdict

from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.props import Prop


class DeferredPropsBuilder:
    """Groups deferred props so the client can fetch each group in one request."""

    def build(self, props: dict[str, Prop], is_partial_reload: bool) -> dict[str, list[str]]:
        # Partial reloads never announce deferred props again.
        if is_partial_reload:
            return {}
        groups: dict[str, list[str]] = defaultdict(list)
        for key, prop in props.items():
            if prop.kind is PropKind.DEFER:
                groups[prop.group].append(key)
        return dict(groups)
