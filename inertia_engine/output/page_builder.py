"""Assembles the page object for one response.

Orchestration: merge shared and page props → parse directives → select →
build metadata → resolve → attach flash → ``PageObject``.

Pending session flash replaces any prop named ``flash`` before selection, so
that prop is neither resolved nor listed in the page metadata.
"""

import logging
import time
from typing import Any, Mapping

from inertia_engine.config import InertiaConfig
from inertia_engine.context import RequestContext
from inertia_engine.directives import DirectiveParser
from inertia_engine.domain.constants import FLASH_PROP
from inertia_engine.domain.models import PageObject, PageRequest
from inertia_engine.output.metadata_builder import MetadataBuilder
from inertia_engine.resolution.prop_resolver import PropResolver
from inertia_engine.selection.prop_selector import PropSelector
from inertia_engine.session import consume_flash, peek_flash

logger = logging.getLogger(__name__)


def build_url(request: PageRequest) -> str:
    """Request path, plus the query string for GET requests."""
    url = request.path
    if request.method.upper() == 'GET' and request.query_string and '?' not in url:
        url = f"{url}?{request.query_string}"
    return url


class PageObjectBuilder:
    """Builds ``PageObject`` instances.

    Holds no per-request state, so one instance can serve every request.

    Args:
        config: Engine configuration (version, history defaults).
    """

    def __init__(
        self,
        config: InertiaConfig | None = None,
        parser: DirectiveParser | None = None,
        selector: PropSelector | None = None,
        resolver: PropResolver | None = None,
        metadata_builder: MetadataBuilder | None = None,
    ):
        self.config = config or InertiaConfig()
        self._parser = parser or DirectiveParser()
        self._selector = selector or PropSelector()
        self._resolver = resolver or PropResolver()
        self._metadata_builder = metadata_builder or MetadataBuilder()

    async def build(
        self,
        request: PageRequest,
        component: str,
        page_props: Mapping[str, Any] | None = None,
        context: RequestContext | None = None,
        global_shared: Mapping[str, Any] | None = None,
        now_ms: int | None = None,
    ) -> PageObject:
        """Build the page object for ``component``.

        Args:
            request: Path, method, headers and query of the request.
            component: Client-side component to render.
            page_props: Props returned by the page handler.
            context: Request-scoped state snapshot.
            global_shared: Process-wide shared props.
            now_ms: Clock override in epoch milliseconds.

        Returns:
            The assembled page object.

        Raises:
            Exception: Whatever a prop resolver raises; no page is built.
        """
        context = context or RequestContext()
        candidates = {**(global_shared or {}), **context.shared_props, **(page_props or {})}
        if peek_flash(context.session):
            # Session flash owns the key; a prop of the same name is dropped.
            candidates.pop(FLASH_PROP, None)

        directives = self._parser.parse(request.headers, component, context.refresh_once_keys)
        selected = self._selector.select(candidates, directives)

        if now_ms is None:
            now_ms = int(time.time() * 1000)
        metadata = self._metadata_builder.build(selected, candidates, directives, now_ms)
        props = await self._resolver.resolve_all(selected)

        flash = consume_flash(context.session)
        if flash:
            props[FLASH_PROP] = flash

        encrypt_history = context.encrypt_history
        if encrypt_history is None:
            encrypt_history = self.config.encrypt_history

        page = PageObject(
            component=component,
            url=build_url(request),
            version=self.config.current_version(),
            props=props,
            clear_history=context.clear_history,
            encrypt_history=encrypt_history,
            metadata=metadata,
        )
        logger.debug("Built page %s (%d props) for %s", component, len(props), page.url)
        return page


async def build_page_object(
    request: PageRequest,
    component: str,
    page_props: Mapping[str, Any] | None = None,
    context: RequestContext | None = None,
    config: InertiaConfig | None = None,
    *,
    global_shared: Mapping[str, Any] | None = None,
    now_ms: int | None = None,
) -> PageObject:
    """Functional entry point around ``PageObjectBuilder``."""
    builder = PageObjectBuilder(config)
    return await builder.build(
        request, component, page_props, context,
        global_shared=global_shared, now_ms=now_ms,
    )
