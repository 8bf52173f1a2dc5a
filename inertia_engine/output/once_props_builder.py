"""Builds the onceProps cache descriptors."""

import logging

from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.models import OnceDescriptor
from inertia_engine.domain.props import Prop

logger = logging.getLogger(__name__)


class OncePropsBuilder:
    """Maps each once prop's cache key to the prop it fills and its expiry.

    Two props sharing a cache key collapse into one descriptor; the later
    prop in iteration order wins.
    """

    def build(self, props: dict[str, Prop], now_ms: int) -> dict[str, OnceDescriptor]:
        once_props: dict[str, OnceDescriptor] = {}
        for key, prop in props.items():
            if prop.kind is not PropKind.ONCE:
                continue
            cache_key = prop.effective_key(key)
            if cache_key in once_props:
                logger.warning(
                    "Once props %r and %r share cache key %r; keeping %r",
                    once_props[cache_key].prop, key, cache_key, key,
                )
            once_props[cache_key] = OnceDescriptor(prop=key, expires_at=prop.expires_at(now_ms))
        return once_props
