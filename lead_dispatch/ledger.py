"""Credit balance shared by every dispatch request."""
from __future__ import annotations

import json
import logging
import threading
from typing import Optional

from .persistence import KeyValueStore

LOGGER = logging.getLogger(__name__)

DEFAULT_LEDGER_KEY = "lead_dispatch.credits"
DEFAULT_LOW_BALANCE_THRESHOLD = 50


class CreditLedger:
    """Non-negative credit balance with an atomic check-and-debit."""

    def __init__(
        self,
        balance: int = 0,
        *,
        unlimited: bool = False,
        low_balance_threshold: int = DEFAULT_LOW_BALANCE_THRESHOLD,
    ) -> None:
        if balance < 0:
            raise ValueError("Credit balance cannot be negative")
        self._balance = int(balance)
        self._unlimited = unlimited
        self._low_balance_threshold = low_balance_threshold
        self._lock = threading.Lock()

    @property
    def balance(self) -> int:
        with self._lock:
            return self._balance

    @property
    def unlimited(self) -> bool:
        return self._unlimited

    @property
    def is_low(self) -> bool:
        return not self._unlimited and self.balance <= self._low_balance_threshold

    @property
    def is_out(self) -> bool:
        return not self._unlimited and self.balance <= 0

    def try_debit(self, amount: int) -> Optional[int]:
        """Debit ``amount`` if the balance covers it.

        Returns ``None`` on success, otherwise the shortfall. The balance check
        and the debit happen under one lock so concurrent callers cannot both
        spend the same credits.
        """

        if amount < 0:
            raise ValueError("Debit amount cannot be negative")
        if self._unlimited or amount == 0:
            return None
        with self._lock:
            if amount > self._balance:
                return amount - self._balance
            self._balance -= amount
            remaining = self._balance
        LOGGER.debug("Debited %s credits, %s remaining", amount, remaining)
        return None

    def top_up(self, amount: int) -> int:
        """Add purchased credits and return the new balance."""

        if amount <= 0:
            raise ValueError("Top-up amount must be positive")
        with self._lock:
            self._balance += amount
            balance = self._balance
        LOGGER.info("Added %s credits, balance is now %s", amount, balance)
        return balance

    def save(self, store: KeyValueStore, key: str = DEFAULT_LEDGER_KEY) -> None:
        payload = {"balance": self.balance, "unlimited": self._unlimited}
        store.set(key, json.dumps(payload))

    @classmethod
    def restore(
        cls,
        store: KeyValueStore,
        key: str = DEFAULT_LEDGER_KEY,
        *,
        default_balance: int = 0,
        low_balance_threshold: int = DEFAULT_LOW_BALANCE_THRESHOLD,
    ) -> "CreditLedger":
        payload = store.get(key)
        balance, unlimited = default_balance, False
        if payload:
            try:
                data = json.loads(payload)
                balance = max(0, int(data.get("balance", default_balance)))
                unlimited = bool(data.get("unlimited", False))
            except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
                LOGGER.warning("Ignoring unreadable persisted credits under %s", key)
        return cls(balance, unlimited=unlimited, low_balance_threshold=low_balance_threshold)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"CreditLedger(balance={self.balance}, unlimited={self._unlimited})"


__all__ = ["CreditLedger", "DEFAULT_LEDGER_KEY", "DEFAULT_LOW_BALANCE_THRESHOLD"]
