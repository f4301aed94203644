"""Build configuration resolution."""

from .service import GOOGLE_SERVICES_PLUGIN_IDS, order_plugins, resolve

__all__ = ["GOOGLE_SERVICES_PLUGIN_IDS", "order_plugins", "resolve"]
