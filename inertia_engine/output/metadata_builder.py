"""Coordinates the merge/defer/once/scroll metadata builders.

Every builder reads the descriptive fields of the prop variants only; no
resolver is called here, so metadata can be built before or alongside
resolution.
"""

from typing import Any, Mapping

from inertia_engine.domain.models import PageMetadata, RequestDirectives
from inertia_engine.domain.props import Prop, coerce_prop
from inertia_engine.output.deferred_props_builder import DeferredPropsBuilder
from inertia_engine.output.merge_props_builder import MergePropsBuilder
from inertia_engine.output.once_props_builder import OncePropsBuilder
from inertia_engine.output.scroll_props_builder import ScrollPropsBuilder


class MetadataBuilder:
    """Builds the ``PageMetadata`` of one response."""

    def __init__(
        self,
        merge_builder: MergePropsBuilder | None = None,
        deferred_builder: DeferredPropsBuilder | None = None,
        once_builder: OncePropsBuilder | None = None,
        scroll_builder: ScrollPropsBuilder | None = None,
    ):
        self._merge_builder = merge_builder or MergePropsBuilder()
        self._deferred_builder = deferred_builder or DeferredPropsBuilder()
        self._once_builder = once_builder or OncePropsBuilder()
        self._scroll_builder = scroll_builder or ScrollPropsBuilder()

    def build(
        self,
        selected: dict[str, Prop],
        candidates: Mapping[str, Any],
        directives: RequestDirectives,
        now_ms: int,
    ) -> PageMetadata:
        """Build metadata for a response.

        Args:
            selected: Surviving props from the selection engine.
            candidates: The full candidate map. Deferred groups come from
                here, since a full load has already dropped deferred props
                from ``selected``.
            directives: Directives of this request.
            now_ms: Current time in epoch milliseconds for once-prop expiry.
        """
        merge_props, deep_merge_props = self._merge_builder.build(selected, directives.reset_keys)
        all_props = {key: coerce_prop(value) for key, value in candidates.items()}
        return PageMetadata(
            merge_props=merge_props,
            deep_merge_props=deep_merge_props,
            deferred_props=self._deferred_builder.build(all_props, directives.is_partial_reload),
            once_props=self._once_builder.build(selected, now_ms),
            scroll_props=self._scroll_builder.build(selected, directives.reset_keys),
        )
