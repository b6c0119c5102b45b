"""Export channel writing the dispatched leads to a spreadsheet."""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from ..ingestion.exporters import export_classified_leads
from ..models import ChannelResult, ClassifiedLead
from ..scoring import classify_lead
from .base import LeadLike, uniform_result

LOGGER = logging.getLogger(__name__)


class FileExportChannel:
    """Write each batch to ``path`` (CSV, TSV, or XLSX).

    When ``path`` is a directory, a dated file name such as
    ``leads-export-2024-05-01.csv`` is generated inside it.
    """

    name = "file-export"

    def __init__(self, path: str | Path, label: str = "export", file_format: str = "csv") -> None:
        self._path = Path(path)
        self._label = label
        self._file_format = file_format.lstrip(".").lower()
        self.last_path: Optional[Path] = None

    def send(self, action: str, leads: Sequence[LeadLike]) -> ChannelResult:
        classified: List[ClassifiedLead] = [
            lead if isinstance(lead, ClassifiedLead) else classify_lead(lead) for lead in leads
        ]
        destination = self._destination()
        export_classified_leads(classified, destination)
        self.last_path = destination
        LOGGER.info("Exported %s leads to %s", len(classified), destination)
        return uniform_result(self.name, action, leads, success=True, detail=str(destination))

    def _destination(self) -> Path:
        if self._path.suffix:
            return self._path
        return self._path / f"leads-{self._label}-{date.today().isoformat()}.{self._file_format}"
