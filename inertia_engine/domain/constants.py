"""Shared constants: protocol headers, session keys and variant groupings.

Centralizes the header names and the variant classifications that the
directive parser, selection engine and metadata builders agree on.
"""

from inertia_engine.domain.enums import PropKind

# ── Protocol Headers ─────────────────────────────────────────────────────

INERTIA = 'X-Inertia'
VERSION = 'X-Inertia-Version'
PARTIAL_COMPONENT = 'X-Inertia-Partial-Component'
PARTIAL_DATA = 'X-Inertia-Partial-Data'
PARTIAL_EXCEPT = 'X-Inertia-Partial-Except'
RESET = 'X-Inertia-Reset'
EXCEPT_ONCE_PROPS = 'X-Inertia-Except-Once-Props'
ERROR_BAG = 'X-Inertia-Error-Bag'
LOCATION = 'X-Inertia-Location'

PROTOCOL_HEADERS: dict[str, str] = {
    INERTIA: 'Request expects a JSON page object instead of HTML',
    VERSION: 'Asset version cached by the client',
    PARTIAL_COMPONENT: 'Component targeted by a partial reload',
    PARTIAL_DATA: 'Comma-separated props to include in a partial reload',
    PARTIAL_EXCEPT: 'Comma-separated props to exclude from a partial reload',
    RESET: 'Comma-separated merge props to resend without merging',
    EXCEPT_ONCE_PROPS: 'Comma-separated once props the client already holds',
    ERROR_BAG: 'Validation error bag to select',
    LOCATION: 'Response header forcing a full client-side visit',
}

# ── Session Keys ─────────────────────────────────────────────────────────

FLASH_SESSION_KEY = '_inertia_flash'
ERRORS_SESSION_KEY = 'errors'

# ── Defaults ─────────────────────────────────────────────────────────────

DEFAULT_DEFER_GROUP = 'default'
DEFAULT_ROOT_VIEW = 'app'
DEFAULT_VERSION = 1
DEFAULT_ERROR_BAG = 'default'
FLASH_PROP = 'flash'

# ── Variant Groupings ────────────────────────────────────────────────────

# Dropped from a full (non-partial) page load.
FIRST_LOAD_HIDDEN: frozenset[PropKind] = frozenset({PropKind.DEFER, PropKind.OPTIONAL})

# Variants reported in mergeProps / deepMergeProps.
MERGEABLE: frozenset[PropKind] = frozenset({PropKind.MERGE, PropKind.SCROLL})

# Variants carrying a resolver that must be invoked.
RESOLVABLE: frozenset[PropKind] = frozenset({
    PropKind.LAZY,
    PropKind.ALWAYS,
    PropKind.MERGE,
    PropKind.DEFER,
    PropKind.ONCE,
    PropKind.OPTIONAL,
    PropKind.SCROLL,
})
