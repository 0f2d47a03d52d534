"""Address book services."""

from .book import AddressBook, default_address

__all__ = ["AddressBook", "default_address"]
