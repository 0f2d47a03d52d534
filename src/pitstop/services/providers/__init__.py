"""Workshop capability services."""

from .service import ProviderCapabilities

__all__ = ["ProviderCapabilities"]
