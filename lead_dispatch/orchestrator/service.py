"""Workflow orchestration for one lead dashboard session."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..classification import classify, group_leads
from ..config import ConfigurationError, EngineSettings
from ..dispatch import CostModel, DispatchDecision, DispatchEngine
from ..factory import build_channels
from ..ledger import CreditLedger
from ..merge import merge_lead_batches
from ..models import ClassifiedLead, LeadGroups, LeadRecord, TimeSlot
from ..normalize import ValidationError, normalize_batch
from ..persistence import KeyValueStore
from ..scheduling import recommend
from ..selection import DEFAULT_SELECTION_KEY, ReconciliationLoss, SelectionManager

LOGGER = logging.getLogger(__name__)


class LeadWorkflow:
    """Ingests lead batches and keeps classification, selection, and dispatch in step."""

    def __init__(
        self,
        engine: DispatchEngine,
        *,
        selection: Optional[SelectionManager] = None,
        store: Optional[KeyValueStore] = None,
        selection_key: str = DEFAULT_SELECTION_KEY,
    ) -> None:
        self._engine = engine
        self._selection = selection or SelectionManager()
        self._store = store
        self._selection_key = selection_key
        self._leads: List[LeadRecord] = []
        self._classified: List[ClassifiedLead] = []
        self._groups = LeadGroups()
        self.last_loss: Optional[ReconciliationLoss] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any], *, store: Optional[KeyValueStore] = None) -> "LeadWorkflow":
        settings = EngineSettings.from_config(config)
        ledger = CreditLedger(
            settings.balance,
            unlimited=settings.unlimited,
            low_balance_threshold=settings.low_balance_threshold,
        )
        try:
            cost_model = CostModel.from_mapping(settings.costs)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        engine = DispatchEngine(ledger, build_channels(config), cost_model=cost_model)
        return cls(engine, store=store)

    @property
    def engine(self) -> DispatchEngine:
        return self._engine

    @property
    def selection(self) -> SelectionManager:
        return self._selection

    @property
    def store(self) -> Optional[KeyValueStore]:
        return self._store

    @property
    def leads(self) -> List[LeadRecord]:
        return list(self._leads)

    @property
    def classified(self) -> List[ClassifiedLead]:
        return list(self._classified)

    @property
    def groups(self) -> LeadGroups:
        return self._groups

    def ingest(self, raw_batch: Iterable[Mapping[str, Any]]) -> List[ValidationError]:
        """Add a (possibly partial) batch of raw leads to the session."""

        leads, errors = normalize_batch(raw_batch)
        self._leads = merge_lead_batches(self._leads, leads)
        self._refresh()
        LOGGER.info("Ingested %s leads (%s rejected); %s in session", len(leads), len(errors), len(self._leads))
        return errors

    def replace_leads(self, raw_leads: Iterable[Mapping[str, Any]]) -> List[ValidationError]:
        """Swap the whole universe, for example after a new search."""

        leads, errors = normalize_batch(raw_leads)
        self._leads = merge_lead_batches([], leads)
        self._refresh()
        return errors

    def _refresh(self) -> None:
        self._classified = classify(self._leads)
        self._groups = group_leads(self._classified)
        self.last_loss = self._selection.reconcile(self._classified)

    def restore_selection(self) -> Optional[ReconciliationLoss]:
        """Load the persisted selection and reconcile it with the current leads."""

        if self._store is None:
            return None
        self.last_loss = self._selection.load(self._store, self._classified, self._selection_key)
        return self.last_loss

    def save_selection(self) -> None:
        if self._store is not None:
            self._selection.save(self._store, self._selection_key)

    def toggle(self, lead_id: str) -> bool:
        """Flip ``lead_id``; ids outside the current leads are ignored."""

        if lead_id not in self._selection and not any(item.id == lead_id for item in self._classified):
            LOGGER.warning("Ignoring toggle of unknown lead %s", lead_id)
            return False
        return self._selection.toggle(lead_id)

    def select_all(self, group: str = "all") -> None:
        self._selection.select_all(self._groups.get(group))

    def select_group(self, group: str) -> List[ClassifiedLead]:
        """Switch to a tab: every lead of ``group`` becomes selected."""

        members = self._groups.get(group)
        self._selection.auto_select_group(members)
        return list(members)

    def selected(self) -> List[ClassifiedLead]:
        return self._selection.selected_leads(self._classified)

    def dispatch_selected(self, action: str) -> DispatchDecision:
        return self._engine.dispatch(action, self.selected())

    def recommend_send_times(self) -> List[TimeSlot]:
        return recommend(self.selected())
