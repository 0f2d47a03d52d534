"""Workshop discovery and pricing core."""

from .main import PitstopServices, create_services

__all__ = ["PitstopServices", "create_services"]
