"""Workshop discovery services."""

from .service import DiscoveryEngine

__all__ = ["DiscoveryEngine"]
