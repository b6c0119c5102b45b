"""Export utilities for classified lead data."""
from __future__ import annotations

from pathlib import Path
from typing import MutableMapping, Optional, Sequence, Union

import pandas as pd

from ..models import ClassifiedLead
from .loaders import UnsupportedFileTypeError

PathLike = Union[str, Path]

EXPORT_COLUMNS = ["Name", "Address", "Phone", "Website", "Rating", "Platform", "Issues", "Tier", "Score", "Reasons"]


def export_classified_leads(
    leads: Sequence[ClassifiedLead],
    path: PathLike,
    *,
    sheet_name: str = "Leads",
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write classified leads to a CSV, TSV, or Excel file."""

    dataframe = classified_to_dataframe(leads)
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_dataframe(dataframe, output_path, sheet_name=sheet_name, exporter_kwargs=exporter_kwargs)
    return output_path


def classified_to_dataframe(leads: Sequence[ClassifiedLead]) -> pd.DataFrame:
    """Convert classified leads into a :class:`pandas.DataFrame`."""

    return pd.DataFrame([lead.as_row() for lead in leads], columns=EXPORT_COLUMNS)


def _write_dataframe(
    dataframe: pd.DataFrame,
    path: Path,
    *,
    sheet_name: str,
    exporter_kwargs: Optional[MutableMapping[str, object]],
) -> None:
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = path.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        dataframe.to_csv(path, index=False, **exporter_kwargs)
        return

    if suffix in {".xlsx", ".xlsm"}:
        engine = exporter_kwargs.pop("engine", None) or "openpyxl"
        dataframe.to_excel(path, index=False, sheet_name=sheet_name, engine=engine, **exporter_kwargs)
        return

    raise UnsupportedFileTypeError(f"Unsupported export file extension: {suffix}")


__all__ = ["EXPORT_COLUMNS", "classified_to_dataframe", "export_classified_leads"]
