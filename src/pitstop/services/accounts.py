"""Serialized read-modify-write of stored accounts.

Address book and capability updates for one account share a lock stripe,
reload the stored record inside it and only touch the caller's object once
the save succeeded.
"""

from __future__ import annotations

import copy
import dataclasses
import threading
from contextlib import contextmanager
from typing import Iterator, TypeVar

from ..data.account_store import AccountStore
from ..models.domain import Customer, Provider

AccountT = TypeVar("AccountT", Customer, Provider)

LOCK_STRIPES = 64


class AccountLocks:
    """Fixed pool of locks; an account id always maps to the same stripe."""

    def __init__(self, stripes: int = LOCK_STRIPES) -> None:
        if stripes < 1:
            raise ValueError("At least one lock stripe is required.")
        self._stripes = tuple(threading.Lock() for _ in range(stripes))

    def __len__(self) -> int:
        return len(self._stripes)

    def stripe_for(self, account_id: str) -> threading.Lock:
        return self._stripes[hash(account_id) % len(self._stripes)]

    @contextmanager
    def hold(self, account_id: str) -> Iterator[None]:
        with self.stripe_for(account_id):
            yield


account_locks = AccountLocks()


def reload_account(store: AccountStore, account: AccountT) -> AccountT:
    """Fresh stored copy of ``account``, or a private copy when it is not stored."""
    stored = store.find_account_by_username(account.username)
    if isinstance(stored, type(account)) and stored.id == account.id:
        return stored
    return copy.deepcopy(account)


def sync_account(target: AccountT, source: AccountT) -> None:
    for item in dataclasses.fields(source):
        setattr(target, item.name, getattr(source, item.name))
