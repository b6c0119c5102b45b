"""Interface shared by outreach channel collaborators."""
from __future__ import annotations

from typing import Protocol, Sequence, Union

from ..models import ChannelResult, ClassifiedLead, LeadOutcome, LeadRecord

LeadLike = Union[LeadRecord, ClassifiedLead]


class ChannelProtocol(Protocol):
    """Protocol that telephony, SMTP, CRM, and export adapters follow."""

    name: str

    def send(self, action: str, leads: Sequence[LeadLike]) -> ChannelResult:  # pragma: no cover - runtime protocol
        """Run ``action`` for every lead and report a per-lead outcome."""


def as_lead_record(lead: LeadLike) -> LeadRecord:
    if isinstance(lead, ClassifiedLead):
        return lead.lead
    return lead


def uniform_result(
    channel: str, action: str, leads: Sequence[LeadLike], *, success: bool, detail: str = ""
) -> ChannelResult:
    """Build a result that reports the same outcome for every lead."""

    return ChannelResult(
        channel=channel,
        action=action,
        outcomes=[LeadOutcome(lead_id=lead.id, success=success, detail=detail) for lead in leads],
    )
