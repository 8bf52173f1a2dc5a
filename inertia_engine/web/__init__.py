"""Flask integration."""

from inertia_engine.web.extension import Inertia, inertia_root
from inertia_engine.web.responses import back, handle_bad_request, handle_server_error, location

__all__ = ['Inertia', 'back', 'handle_bad_request', 'handle_server_error', 'inertia_root', 'location']
