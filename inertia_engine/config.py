"""Engine configuration."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from inertia_engine.domain.constants import DEFAULT_ROOT_VIEW, DEFAULT_VERSION
from inertia_engine.version import AssetVersion

VersionSource = Union[str, int, Callable[[], Union[str, int]]]

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass
class InertiaConfig:
    """Process-wide settings read at startup.

    Attributes:
        root_view: Template rendered for full (non-Inertia) page loads.
        version: Asset version, or a zero-argument callable computing it.
        encrypt_history: Default for the page's ``encryptHistory`` flag.
        manifest_path: Build manifest hashed for the asset version when no
            explicit version is configured.
    """

    root_view: str = DEFAULT_ROOT_VIEW
    version: VersionSource = DEFAULT_VERSION
    encrypt_history: bool = False
    manifest_path: str | None = None

    def current_version(self) -> str | int:
        return self.version() if callable(self.version) else self.version

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> 'InertiaConfig':
        """Build from ``INERTIA_*`` keys, e.g. a Flask ``app.config``."""
        manifest_path = config.get('INERTIA_MANIFEST_PATH')
        version = config.get('INERTIA_VERSION')
        if version is None:
            version = AssetVersion(manifest_path) if manifest_path else DEFAULT_VERSION
        return cls(
            root_view=config.get('INERTIA_ROOT_VIEW') or DEFAULT_ROOT_VIEW,
            version=version,
            encrypt_history=_as_bool(config.get('INERTIA_ENCRYPT_HISTORY', False)),
            manifest_path=manifest_path,
        )
