"""Builds the mergeProps / deepMergeProps key lists."""

from inertia_engine.domain.constants import MERGEABLE
from inertia_engine.domain.props import Prop


class MergePropsBuilder:
    """Splits surviving merge and scroll props into shallow and deep lists.

    Keys named in the reset header are left out of both lists so the client
    replaces its cached value.
    """

    def build(self, props: dict[str, Prop], reset_keys: frozenset[str]) -> tuple[list[str], list[str]]:
        shallow: list[str] = []
        deep: list[str] = []
        for key, prop in props.items():
            if prop.kind not in MERGEABLE or key in reset_keys:
                continue
            (deep if prop.deep else shallow).append(key)
        return shallow, deep
