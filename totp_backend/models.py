"""
In-memory account list for the tile screen.

The list owns the Credentials for as long as the user keeps the account;
totp_core only ever receives a Credential by value and returns a code by
value. Nothing here is persisted: restarting the server empties the list.
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Dict, Iterator, List

from totp_core import Credential, countdown, generate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    id: str
    credential: Credential

    def to_dict(self) -> dict:
        """Public view of the account; the secret is never included."""
        c = self.credential
        return {
            "id": self.id,
            "issuer": c.issuer,
            "account_name": c.account_name,
            "algorithm": c.algorithm.value,
            "digits": c.digits,
            "period": c.period,
        }


@dataclass(frozen=True)
class TileState:
    """What one tile shows during one tick."""

    id: str
    issuer: str
    account_name: str
    code: str
    remaining: int
    fraction: float
    expiring: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "issuer": self.issuer,
            "account_name": self.account_name,
            "code": self.code,
            "remaining": self.remaining,
            "fraction": self.fraction,
            "expiring": self.expiring,
        }


class AccountList:
    """
    Ordered collection of accounts keyed by a stable id.

    - Insertion order is display order.
    - Adding the same credential twice gives two accounts with different ids.
    - Safe to share between Flask request threads.
    """

    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.Lock()

    def add(self, credential: Credential) -> Account:
        account = Account(id=uuid.uuid4().hex, credential=credential)
        with self._lock:
            self._accounts[account.id] = account
        logger.info("Added account %s (%s)", account.id, credential.label)
        return account

    def get(self, account_id: str) -> Account:
        """Raises KeyError for an unknown id."""
        with self._lock:
            return self._accounts[account_id]

    def remove(self, account_id: str) -> Account:
        """Remove and return an account. Raises KeyError for an unknown id."""
        with self._lock:
            account = self._accounts.pop(account_id)
        logger.info("Removed account %s (%s)", account.id, account.credential.label)
        return account

    def __iter__(self) -> Iterator[Account]:
        with self._lock:
            return iter(list(self._accounts.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)

    def __contains__(self, account_id) -> bool:
        with self._lock:
            return account_id in self._accounts


def tile_state(account: Account, at_time: int) -> TileState:
    credential = account.credential
    left = countdown(at_time, credential.period)
    return TileState(
        id=account.id,
        issuer=credential.issuer,
        account_name=credential.account_name,
        code=generate(credential, at_time),
        remaining=left.remaining,
        fraction=left.fraction,
        expiring=left.expiring,
    )


def snapshot(accounts: AccountList, at_time: int) -> List[TileState]:
    """One tick: the code and countdown of every account, in display order."""
    return [tile_state(account, at_time) for account in accounts]
