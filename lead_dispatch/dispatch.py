"""Credit-gated dispatch of bulk actions to outreach channels."""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Set, Tuple

from .channels.base import ChannelProtocol, LeadLike, uniform_result
from .ledger import CreditLedger
from .models import ACTION_VERIFY, ACTIONS, ChannelResult

LOGGER = logging.getLogger(__name__)


class DispatchState(str, Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    APPROVED = "approved"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    REJECTED = "rejected"
    EXECUTING = "executing"
    COMPLETED = "completed"
    PARTIAL_FAILURE = "partial_failure"


class DispatchError(RuntimeError):
    """Base class for dispatch requests that cannot proceed."""


class EmptySelectionError(DispatchError):
    """Raised when an action is requested without any target leads."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Select at least one lead before running '{action}'")
        self.action = action


class InsufficientCreditsError(DispatchError):
    """Raised when the ledger cannot cover the credits an action needs."""

    def __init__(self, action: str, required: int, balance: int) -> None:
        self.action = action
        self.required = required
        self.balance = balance
        self.shortfall = required - balance
        super().__init__(
            f"'{action}' needs {required} credits but only {balance} remain ({self.shortfall} short)"
        )


@dataclass
class CostModel:
    """Credits charged per target lead, keyed by action."""

    per_lead: Dict[str, int] = field(default_factory=lambda: {ACTION_VERIFY: 1})

    @classmethod
    def from_mapping(cls, costs: Optional[Mapping[str, object]]) -> "CostModel":
        per_lead: Dict[str, int] = {ACTION_VERIFY: 1}
        for action, cost in (costs or {}).items():
            if action not in ACTIONS:
                raise ValueError(f"Unknown action '{action}' in cost table")
            value = int(cost)  # type: ignore[call-overload]
            if value < 0:
                raise ValueError(f"Cost for '{action}' cannot be negative")
            per_lead[action] = value
        return cls(per_lead=per_lead)

    def credits_required(self, action: str, leads: Sequence[LeadLike]) -> int:
        return self.per_lead.get(action, 0) * len(leads)


@dataclass(frozen=True)
class DispatchRequest:
    action: str
    target_leads: Tuple[LeadLike, ...]
    credits_required: int
    token: int = 0


@dataclass(frozen=True)
class DispatchDecision:
    """Tagged result of a dispatch request."""

    request: DispatchRequest
    state: DispatchState
    balance: int
    shortfall: int = 0
    result: Optional[ChannelResult] = None

    @property
    def approved(self) -> bool:
        return self.state in {
            DispatchState.APPROVED,
            DispatchState.EXECUTING,
            DispatchState.COMPLETED,
            DispatchState.PARTIAL_FAILURE,
        }

    def raise_for_status(self) -> "DispatchDecision":
        """Raise the matching :class:`DispatchError` for blocked requests."""

        if self.state is DispatchState.REJECTED:
            raise EmptySelectionError(self.request.action)
        if self.state is DispatchState.INSUFFICIENT_CREDITS:
            raise InsufficientCreditsError(self.request.action, self.request.credits_required, self.balance)
        return self


class DispatchEngine:
    """Decides whether bulk actions may run and hands approved ones to channels."""

    def __init__(
        self,
        ledger: CreditLedger,
        channels: Optional[Mapping[str, ChannelProtocol]] = None,
        *,
        cost_model: Optional[CostModel] = None,
        raise_on_error: bool = False,
    ) -> None:
        self._ledger = ledger
        self._channels: Dict[str, ChannelProtocol] = dict(channels or {})
        self._cost_model = cost_model or CostModel()
        self._raise_on_error = raise_on_error
        self._tokens = itertools.count(1)
        # approvals that were debited but not yet executed
        self._pending: Set[int] = set()
        self._lock = threading.Lock()

    @property
    def ledger(self) -> CreditLedger:
        return self._ledger

    @property
    def cost_model(self) -> CostModel:
        return self._cost_model

    def register_channel(self, action: str, channel: ChannelProtocol) -> None:
        _check_action(action)
        self._channels[action] = channel

    def request(self, action: str, target_leads: Sequence[LeadLike]) -> DispatchDecision:
        """Approve (and debit) or block a request; nothing is executed yet."""

        _check_action(action)
        targets = tuple(target_leads)
        required = self._cost_model.credits_required(action, targets)
        request = DispatchRequest(action=action, target_leads=targets, credits_required=required)

        if not targets:
            LOGGER.info("Rejected '%s': no leads selected", action)
            return DispatchDecision(request, DispatchState.REJECTED, balance=self._ledger.balance)

        shortfall = self._ledger.try_debit(required)
        if shortfall is not None:
            balance = required - shortfall
            LOGGER.info(
                "Blocked '%s' for %s leads: %s credits required, %s short",
                action,
                len(targets),
                required,
                shortfall,
            )
            return DispatchDecision(request, DispatchState.INSUFFICIENT_CREDITS, balance=balance, shortfall=shortfall)

        with self._lock:
            token = next(self._tokens)
            self._pending.add(token)
        balance = self._ledger.balance
        LOGGER.info("Approved '%s' for %s leads (%s credits, %s left)", action, len(targets), required, balance)
        return DispatchDecision(replace(request, token=token), DispatchState.APPROVED, balance=balance)

    def execute(self, decision: DispatchDecision) -> DispatchDecision:
        """Hand an approved request to its channel and record the outcome.

        Each approval runs at most once. Credits already debited are kept
        whatever the channel reports.
        """

        if decision.state is not DispatchState.APPROVED:
            raise ValueError(f"Only approved requests can be executed (state is '{decision.state.value}')")
        with self._lock:
            if decision.request.token not in self._pending:
                raise ValueError(
                    f"Approval for '{decision.request.action}' was already executed or was not issued by this engine"
                )
            self._pending.discard(decision.request.token)

        action = decision.request.action
        leads = decision.request.target_leads
        channel = self._channels.get(action)
        if channel is None:
            LOGGER.debug("No channel registered for '%s'; approval only", action)
            return replace(decision, state=DispatchState.COMPLETED)

        try:
            LOGGER.debug("Running channel %s for %s leads", channel.name, len(leads))
            result = channel.send(action, leads)
        except Exception as exc:
            LOGGER.exception("Channel %s failed while running '%s'", channel.name, action)
            if self._raise_on_error:
                raise
            result = uniform_result(channel.name, action, leads, success=False, detail=str(exc))

        failures = result.failures
        if failures:
            LOGGER.warning(
                "Channel %s reported %s failures out of %s leads for '%s'",
                channel.name,
                len(failures),
                len(leads),
                action,
            )
            state = DispatchState.PARTIAL_FAILURE
        else:
            state = DispatchState.COMPLETED
        return replace(decision, state=state, balance=self._ledger.balance, result=result)

    def dispatch(self, action: str, target_leads: Sequence[LeadLike]) -> DispatchDecision:
        decision = self.request(action, target_leads)
        if decision.state is not DispatchState.APPROVED:
            return decision
        return self.execute(decision)


def _check_action(action: str) -> None:
    if action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}'. Expected one of {list(ACTIONS)}")


__all__ = [
    "CostModel",
    "DispatchDecision",
    "DispatchEngine",
    "DispatchError",
    "DispatchRequest",
    "DispatchState",
    "EmptySelectionError",
    "InsufficientCreditsError",
]
