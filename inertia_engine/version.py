"""Asset version derived from the frontend build manifest."""

import hashlib
import logging
import time

logger = logging.getLogger(__name__)

_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def _base36(number: int) -> str:
    if number == 0:
        return '0'
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(_DIGITS[rem])
    return ''.join(reversed(out))


def manifest_version(manifest_path: str) -> str:
    """Return the first 8 hex characters of the manifest's MD5 hash."""
    with open(manifest_path, 'rb') as f:
        return hashlib.md5(f.read()).hexdigest()[:8]


class AssetVersion:
    """Zero-argument version provider backed by a manifest file.

    The manifest is re-hashed on every call so a rebuild is picked up without
    a restart. While the manifest does not exist (first boot, no frontend
    build) the startup timestamp in base 36 is used instead.

    Args:
        manifest_path: Path of the build manifest.
    """

    def __init__(self, manifest_path: str) -> None:
        self.manifest_path = manifest_path
        self.fallback = _base36(int(time.time() * 1000))

    def __call__(self) -> str:
        try:
            return manifest_version(self.manifest_path)
        except FileNotFoundError:
            return self.fallback
        except OSError as e:
            logger.warning("Could not read %s for asset versioning: %s", self.manifest_path, e)
            return self.fallback
