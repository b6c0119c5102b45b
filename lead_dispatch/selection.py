"""Selection tracking for a lead list that can change underneath the user."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Protocol, Set, Tuple, TypeVar

from .persistence import KeyValueStore

LOGGER = logging.getLogger(__name__)

DEFAULT_SELECTION_KEY = "lead_dispatch.selection"


class HasId(Protocol):
    @property
    def id(self) -> str:  # pragma: no cover - runtime protocol
        ...


LeadT = TypeVar("LeadT", bound=HasId)


@dataclass(frozen=True)
class ReconciliationLoss:
    """Reported when selected leads disappear from the current universe."""

    removed_ids: Tuple[str, ...]
    remaining: int
    previous: int

    @property
    def fully_invalidated(self) -> bool:
        return self.previous > 0 and self.remaining == 0


ReconciliationListener = Callable[[ReconciliationLoss], None]


@dataclass
class SelectionManager:
    """Holds the ids of the currently chosen leads.

    Every id refers to a lead of the current universe as long as callers run
    :meth:`reconcile` whenever the universe changes. Universes are any
    iterables of objects exposing an ``id`` (lead records or classified
    leads).
    """

    selected: Set[str] = field(default_factory=set)
    listeners: List[ReconciliationListener] = field(default_factory=list)

    @property
    def selected_ids(self) -> frozenset[str]:
        return frozenset(self.selected)

    def __contains__(self, lead_id: object) -> bool:
        return lead_id in self.selected

    def __len__(self) -> int:
        return len(self.selected)

    def add_listener(self, listener: ReconciliationListener) -> None:
        self.listeners.append(listener)

    def toggle(self, lead_id: str) -> bool:
        """Flip membership of ``lead_id`` and return whether it is now selected."""

        if lead_id in self.selected:
            self.selected.discard(lead_id)
            return False
        self.selected.add(lead_id)
        return True

    def select_all(self, universe: Iterable[HasId]) -> None:
        """Select the whole universe, or clear when it is already fully selected."""

        universe_ids = {lead.id for lead in universe}
        if self.selected == universe_ids:
            self.selected = set()
        else:
            self.selected = universe_ids

    def auto_select_group(self, group: Iterable[HasId]) -> None:
        """Replace the selection with every lead of ``group`` (tab switch)."""

        self.selected = {lead.id for lead in group}

    def clear(self) -> None:
        self.selected = set()

    def reconcile(self, new_universe: Iterable[HasId]) -> Optional[ReconciliationLoss]:
        """Drop selected ids that are no longer part of ``new_universe``."""

        universe_ids = {lead.id for lead in new_universe}
        previous = len(self.selected)
        removed = self.selected - universe_ids
        if not removed:
            return None

        self.selected = self.selected & universe_ids
        loss = ReconciliationLoss(
            removed_ids=tuple(sorted(removed)),
            remaining=len(self.selected),
            previous=previous,
        )
        if loss.fully_invalidated:
            LOGGER.warning("Selection of %s leads was entirely invalidated", previous)
        else:
            LOGGER.info("Pruned %s stale leads from the selection", len(removed))
        for listener in self.listeners:
            listener(loss)
        return loss

    def selected_leads(self, universe: Iterable[LeadT]) -> List[LeadT]:
        """Return the selected members of ``universe`` in universe order."""

        return [lead for lead in universe if lead.id in self.selected]

    def save(self, store: KeyValueStore, key: str = DEFAULT_SELECTION_KEY) -> None:
        store.set(key, json.dumps(sorted(self.selected)))

    def load(
        self, store: KeyValueStore, universe: Iterable[HasId], key: str = DEFAULT_SELECTION_KEY
    ) -> Optional[ReconciliationLoss]:
        """Replace the selection with the persisted one, reconciled against ``universe``."""

        ids: object = []
        payload = store.get(key)
        if payload:
            try:
                ids = json.loads(payload)
            except json.JSONDecodeError:
                LOGGER.warning("Ignoring unreadable persisted selection under %s", key)
        self.selected = {str(item) for item in ids} if isinstance(ids, list) else set()
        return self.reconcile(universe)

    @classmethod
    def restore(
        cls,
        store: KeyValueStore,
        universe: Iterable[HasId],
        key: str = DEFAULT_SELECTION_KEY,
        listeners: Optional[List[ReconciliationListener]] = None,
    ) -> "SelectionManager":
        """Create a manager from persisted state; it is never trusted unreconciled."""

        manager = cls(listeners=list(listeners or []))
        manager.load(store, universe, key)
        return manager


__all__ = ["DEFAULT_SELECTION_KEY", "ReconciliationLoss", "SelectionManager"]
