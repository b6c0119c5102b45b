"""Unified data models for lead scoring, selection, and action dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


TIER_HOT = "hot"
TIER_WARM = "warm"
TIER_COLD = "cold"
TIERS = (TIER_HOT, TIER_WARM, TIER_COLD)

ACTION_VERIFY = "verify"
ACTION_CALL = "call"
ACTION_EMAIL = "email"
ACTION_EXPORT = "export"
ACTIONS = (ACTION_VERIFY, ACTION_CALL, ACTION_EMAIL, ACTION_EXPORT)


# --- Core Input Models ---

@dataclass(frozen=True, slots=True)
class WebsiteAnalysis:
    """Result of the website audit attached to a scraped business."""

    has_website: Optional[bool] = None
    platform: Optional[str] = None
    needs_upgrade: bool = False
    issues: Tuple[str, ...] = ()
    mobile_score: Optional[float] = None


@dataclass(frozen=True, slots=True)
class LeadRecord:
    """Normalized business record consumed by the scoring engine."""

    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    website_analysis: Optional[WebsiteAnalysis] = None
    best_time_to_call: Optional[str] = None
    ready_to_call: bool = False
    warnings: Tuple[str, ...] = ()

    def display_name(self) -> str:
        """Return a readable name for logs."""
        return f"{self.name} ({self.id})"


# --- Classification Models ---

@dataclass(frozen=True, slots=True)
class ScoreResult:
    """Score and the reasons of every rule that fired, in rule order."""

    score: int
    reasons: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassifiedLead:
    """A lead together with its score, tier, and scoring reasons."""

    lead: LeadRecord
    score: int
    tier: str
    reasons: Tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.lead.id

    @property
    def name(self) -> str:
        return self.lead.name

    def as_row(self) -> Dict[str, Any]:
        """Return a serialisable representation of the classified lead."""
        analysis = self.lead.website_analysis
        return {
            "Name": self.lead.name,
            "Address": self.lead.address or "",
            "Phone": self.lead.phone or "",
            "Website": self.lead.website or "",
            "Rating": self.lead.rating if self.lead.rating is not None else "",
            "Platform": (analysis.platform if analysis else None) or "",
            "Issues": "; ".join(analysis.issues) if analysis else "",
            "Tier": self.tier,
            "Score": self.score,
            "Reasons": "; ".join(self.reasons),
        }


@dataclass
class LeadGroups:
    """Tiered and derived views over one classified lead collection."""

    hot: List[ClassifiedLead] = field(default_factory=list)
    warm: List[ClassifiedLead] = field(default_factory=list)
    cold: List[ClassifiedLead] = field(default_factory=list)
    ready_to_call: List[ClassifiedLead] = field(default_factory=list)
    no_website: List[ClassifiedLead] = field(default_factory=list)
    all: List[ClassifiedLead] = field(default_factory=list)

    def get(self, name: str) -> List[ClassifiedLead]:
        key = name.strip().lower().replace("-", "_")
        if key not in {"hot", "warm", "cold", "ready_to_call", "no_website", "all"}:
            raise KeyError(f"Unknown lead group '{name}'")
        return getattr(self, key)

    def counts(self) -> Dict[str, int]:
        return {
            "hot": len(self.hot),
            "warm": len(self.warm),
            "cold": len(self.cold),
            "ready_to_call": len(self.ready_to_call),
            "no_website": len(self.no_website),
            "all": len(self.all),
        }


# --- Channel Results ---

@dataclass(slots=True)
class LeadOutcome:
    """Per-lead result reported back by a channel collaborator."""

    lead_id: str
    success: bool
    detail: str = ""


@dataclass
class ChannelResult:
    """Combined outcome of handing one batch to a channel."""

    channel: str
    action: str
    outcomes: List[LeadOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[LeadOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)


# --- Scheduling ---

@dataclass(frozen=True, slots=True)
class TimeSlot:
    """Candidate email send time scored against the selected leads."""

    hour: int
    label: str
    base_score: int
    matched_lead_count: int
    final_score: int
    reason: str = ""
