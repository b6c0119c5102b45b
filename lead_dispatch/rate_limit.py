"""Per-lead send quotas for outreach channels (for example 50 emails an hour)."""
from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence

from .channels.base import LeadLike
from .models import ChannelResult, LeadOutcome

LOGGER = logging.getLogger(__name__)


class SendQuota:
    """Sliding window allowing at most ``max_leads`` sends per ``per_seconds``.

    ``max_leads=None`` disables the quota.
    """

    def __init__(
        self,
        max_leads: Optional[int],
        per_seconds: float = 3600.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_leads is not None and max_leads < 0:
            raise ValueError("max_leads cannot be negative")
        if per_seconds <= 0:
            raise ValueError("per_seconds must be positive")
        self._max_leads = max_leads
        self._per_seconds = float(per_seconds)
        self._clock = clock
        self._sent: Deque[float] = deque()
        self._lock = threading.Lock()

    @property
    def max_leads(self) -> Optional[int]:
        return self._max_leads

    @property
    def per_seconds(self) -> float:
        return self._per_seconds

    def remaining(self) -> Optional[int]:
        if self._max_leads is None:
            return None
        with self._lock:
            self._expire(self._clock())
            return self._max_leads - len(self._sent)

    def reserve(self, count: int) -> int:
        """Claim up to ``count`` sends from the window and return how many were granted."""

        if self._max_leads is None:
            return count
        with self._lock:
            now = self._clock()
            self._expire(now)
            granted = max(0, min(count, self._max_leads - len(self._sent)))
            self._sent.extend([now] * granted)
            return granted

    def _expire(self, now: float) -> None:
        cutoff = now - self._per_seconds
        while self._sent and self._sent[0] <= cutoff:
            self._sent.popleft()


class RateLimitedChannel:
    """Channel wrapper that forwards only the leads the quota allows.

    Leads beyond the quota are not sent; they come back as failed outcomes so
    the dispatch reports a partial failure for them.
    """

    def __init__(
        self,
        channel,
        *,
        display_name: Optional[str] = None,
        quota: Optional[SendQuota] = None,
    ) -> None:
        self._channel = channel
        self._display_name = display_name
        self._quota = quota or SendQuota(None)

    @property
    def name(self) -> str:
        if self._display_name:
            return self._display_name
        return getattr(self._channel, "name", self._channel.__class__.__name__)

    @property
    def wrapped(self):
        return self._channel

    @property
    def quota(self) -> SendQuota:
        return self._quota

    def send(self, action: str, leads: Sequence[LeadLike]) -> ChannelResult:
        granted = self._quota.reserve(len(leads))
        targets = list(leads)
        allowed, held_back = targets[:granted], targets[granted:]

        outcomes: List[LeadOutcome] = []
        if allowed:
            outcomes.extend(self._channel.send(action, allowed).outcomes)
        if held_back:
            detail = f"send quota reached ({self._quota.max_leads} per {self._quota.per_seconds:g}s)"
            LOGGER.warning(
                "%s held back %s of %s leads for '%s': %s", self.name, len(held_back), len(targets), action, detail
            )
            for item in held_back:
                outcomes.append(LeadOutcome(lead_id=item.id, success=False, detail=detail))
        return ChannelResult(channel=self.name, action=action, outcomes=outcomes)

    def __getattr__(self, item):  # pragma: no cover - simple delegation
        return getattr(self._channel, item)


__all__ = ["RateLimitedChannel", "SendQuota"]
