"""Session-backed one-shot data: flash messages and validation errors."""

import re
from typing import Any, Iterable, Mapping, MutableMapping

from inertia_engine.domain.constants import DEFAULT_ERROR_BAG, ERRORS_SESSION_KEY, FLASH_SESSION_KEY

_QUOTED_RE = re.compile(r'"([^"]+)"')


def flash(session: MutableMapping[str, Any], key: str | Mapping[str, Any], value: Any = None) -> None:
    """Store flash data for the next page response.

    Args:
        session: The request's session mapping.
        key: A single key, or a mapping merged into the pending flash data.
        value: Value for ``key`` when it is a string.
    """
    pending = dict(session.get(FLASH_SESSION_KEY) or {})
    if isinstance(key, Mapping):
        pending.update(key)
    else:
        pending[key] = value
    session[FLASH_SESSION_KEY] = pending


def peek_flash(session: Mapping[str, Any] | None) -> dict[str, Any]:
    if session is None:
        return {}
    return dict(session.get(FLASH_SESSION_KEY) or {})


def consume_flash(session: MutableMapping[str, Any] | None) -> dict[str, Any]:
    """Remove and return the pending flash data (``{}`` when there is none)."""
    if session is None:
        return {}
    return dict(session.pop(FLASH_SESSION_KEY, None) or {})


def error_messages(errors: str | Iterable[str] | Mapping[str, Any]) -> list[Any]:
    """Flatten one message, a list, or a field-to-message mapping to a list."""
    if isinstance(errors, str):
        return [errors]
    if isinstance(errors, Mapping):
        return list(errors.values())
    return list(errors)


def store_validation_errors(
    session: MutableMapping[str, Any],
    errors: str | Iterable[str] | Mapping[str, Any],
    bag: str = DEFAULT_ERROR_BAG,
) -> list[Any]:
    """Queue validation errors under ``bag`` for the next page response.

    ``errors`` is flattened with ``error_messages``. Other bags already
    pending in the session are kept; the named bag is replaced.

    Returns:
        The messages stored for ``bag``.
    """
    messages = error_messages(errors)
    pending = dict(session.get(ERRORS_SESSION_KEY) or {})
    pending[bag] = messages
    session[ERRORS_SESSION_KEY] = pending
    return messages


def _clean_message(message: Any) -> Any:
    if isinstance(message, str):
        return _QUOTED_RE.sub(r'\1', message, count=1)
    return message


def resolve_validation_errors(
    session: MutableMapping[str, Any] | None,
    error_bag: str | None = None,
) -> dict[str, Any]:
    """Drain validation errors from the session and shape them for the page.

    Errors are stored as ``{bag: [messages]}``. A bag holding a single
    message is unwrapped to that message. When ``error_bag`` names a bag that
    has errors only that bag is returned; otherwise the default bag when
    present, otherwise every bag.

    Args:
        session: The request's session mapping.
        error_bag: Value of the error-bag request header.

    Returns:
        The errors to expose under the ``errors`` prop.
    """
    if session is None:
        return {}
    stored = session.pop(ERRORS_SESSION_KEY, None)
    if not stored or not isinstance(stored, Mapping):
        return {}

    collected: dict[str, Any] = {}
    for bag, messages in stored.items():
        if isinstance(messages, (list, tuple)):
            cleaned = [_clean_message(m) for m in messages]
            if not cleaned:
                continue
            collected[bag] = cleaned if len(cleaned) > 1 else cleaned[0]
        else:
            collected[bag] = _clean_message(messages)

    if error_bag and error_bag in collected:
        return {error_bag: collected[error_bag]}
    if DEFAULT_ERROR_BAG in collected:
        return {DEFAULT_ERROR_BAG: collected[DEFAULT_ERROR_BAG]}
    return collected
