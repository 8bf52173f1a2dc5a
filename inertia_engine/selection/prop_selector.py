"""Selection of the props a response has to resolve.

Applies the request directives to the full candidate map in a fixed order:

  1. first-load filter   drop deferred/optional props on a full load
  2. only filter         keep exactly the requested keys
  3. except filter       remove the excluded keys
  4. always override     put every always prop back
  5. once filter         skip once props the client already holds

Later steps may re-add keys that earlier ones removed, so the order is part
of the protocol.
"""

import logging
from typing import Any, Mapping

from inertia_engine.domain.constants import FIRST_LOAD_HIDDEN
from inertia_engine.domain.enums import PropKind
from inertia_engine.domain.models import RequestDirectives
from inertia_engine.domain.props import UNDEFINED, PlainProp, Prop, coerce_prop

logger = logging.getLogger(__name__)


class PropSelector:
    """Filters candidate props according to the request directives."""

    def select(self, candidates: Mapping[str, Any], directives: RequestDirectives) -> dict[str, Prop]:
        """Return the surviving props, keyed like the candidates.

        Args:
            candidates: Merged shared and page props; raw values are allowed.
            directives: Directives parsed for this request.

        Returns:
            A new dict; ``candidates`` is never modified.
        """
        props = {key: coerce_prop(value) for key, value in candidates.items()}

        selected = props
        if not directives.is_partial_reload:
            selected = self._drop_first_load_hidden(selected)
        if directives.only is not None:
            selected = self._apply_only(selected, directives.only)
        if directives.except_ is not None:
            selected = self._apply_except(selected, directives.except_)
        selected = self._apply_always(selected, props)
        selected = self._apply_once(selected, directives)

        logger.debug(
            "Selected %d of %d props (partial=%s)",
            len(selected), len(props), directives.is_partial_reload,
        )
        return selected

    # ── Steps ────────────────────────────────────────────────────────────

    @staticmethod
    def _drop_first_load_hidden(props: dict[str, Prop]) -> dict[str, Prop]:
        return {k: v for k, v in props.items() if v.kind not in FIRST_LOAD_HIDDEN}

    @staticmethod
    def _apply_only(props: dict[str, Prop], only: tuple[str, ...]) -> dict[str, Prop]:
        """Keep the listed keys; unknown keys become UNDEFINED placeholders."""
        return {key: props.get(key, PlainProp(UNDEFINED)) for key in only}

    @staticmethod
    def _apply_except(props: dict[str, Prop], except_: tuple[str, ...]) -> dict[str, Prop]:
        excluded = set(except_)
        return {k: v for k, v in props.items() if k not in excluded}

    @staticmethod
    def _apply_always(selected: dict[str, Prop], props: dict[str, Prop]) -> dict[str, Prop]:
        result = dict(selected)
        for key, prop in props.items():
            if prop.kind is PropKind.ALWAYS:
                result[key] = prop
        return result

    @staticmethod
    def _apply_once(props: dict[str, Prop], directives: RequestDirectives) -> dict[str, Prop]:
        result: dict[str, Prop] = {}
        for key, prop in props.items():
            if prop.kind is PropKind.ONCE and PropSelector._client_holds(key, prop, directives):
                continue
            result[key] = prop
        return result

    @staticmethod
    def _client_holds(key: str, prop: Any, directives: RequestDirectives) -> bool:
        """True when a once prop can be skipped because the client has it cached."""
        if prop.force_refresh:
            return False
        effective = prop.effective_key(key)
        forced = directives.server_forced_refresh_once_keys
        if effective in forced or key in forced:
            return False
        return effective in directives.client_once_keys
