"""Example channel implementations that do not leave the process."""
from __future__ import annotations

from typing import List, Sequence

from ..models import ChannelResult, LeadOutcome
from .base import LeadLike, as_lead_record


class EchoChannel:
    """Channel that reports every lead with a usable contact as delivered.

    With ``require_contact`` enabled, ``call`` needs a phone number and
    ``email`` needs an email address; other leads are reported as failures.
    """

    name = "echo"

    def __init__(self, require_contact: bool = False) -> None:
        self._require_contact = require_contact
        self.sent: List[str] = []

    def send(self, action: str, leads: Sequence[LeadLike]) -> ChannelResult:
        outcomes: List[LeadOutcome] = []
        for item in leads:
            lead = as_lead_record(item)
            missing = self._missing_contact(action, lead)
            if missing:
                outcomes.append(LeadOutcome(lead_id=lead.id, success=False, detail=f"no {missing}"))
                continue
            self.sent.append(lead.id)
            outcomes.append(LeadOutcome(lead_id=lead.id, success=True, detail=action))
        return ChannelResult(channel=self.name, action=action, outcomes=outcomes)

    def _missing_contact(self, action: str, lead) -> str:
        if not self._require_contact:
            return ""
        if action == "call" and not lead.phone:
            return "phone"
        if action == "email" and not lead.email:
            return "email"
        return ""
