"""Top-level package for the lead scoring and action dispatch engine."""

from . import models  # noqa: F401
from .classification import classify, group_leads, sort_by_score  # noqa: F401
from .dispatch import (  # noqa: F401
    CostModel,
    DispatchDecision,
    DispatchEngine,
    DispatchError,
    DispatchState,
    EmptySelectionError,
    InsufficientCreditsError,
)
from .ledger import CreditLedger  # noqa: F401
from .models import (  # noqa: F401
    ClassifiedLead,
    LeadGroups,
    LeadRecord,
    TimeSlot,
    WebsiteAnalysis,
)
from .normalize import ValidationError, normalize, normalize_batch  # noqa: F401
from .scheduling import recommend  # noqa: F401
from .scoring import classify_lead, score_lead, tier_for_score  # noqa: F401
from .selection import ReconciliationLoss, SelectionManager  # noqa: F401

__all__ = [
    "ClassifiedLead",
    "CostModel",
    "CreditLedger",
    "DispatchDecision",
    "DispatchEngine",
    "DispatchError",
    "DispatchState",
    "EmptySelectionError",
    "InsufficientCreditsError",
    "LeadGroups",
    "LeadRecord",
    "ReconciliationLoss",
    "SelectionManager",
    "TimeSlot",
    "ValidationError",
    "WebsiteAnalysis",
    "classify",
    "classify_lead",
    "group_leads",
    "normalize",
    "normalize_batch",
    "recommend",
    "score_lead",
    "sort_by_score",
    "tier_for_score",
    "channels",
    "ingestion",
    "orchestrator",
]
