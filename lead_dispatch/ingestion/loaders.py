"""Utilities for loading raw lead rows from spreadsheets and JSON dumps."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence, Union

import pandas as pd

PathLike = Union[str, Path]

_FIELD_SYNONYMS: Mapping[str, Sequence[str]] = {
    "id": ("id", "lead_id", "place_id", "record_id"),
    "name": ("name", "business_name", "company", "title"),
    "phone": ("phone", "phone_number", "primary_phone"),
    "email": ("email", "email_address", "primary_email"),
    "website": ("website", "url", "site"),
    "address": ("address", "formatted_address"),
    "rating": ("rating", "stars"),
    "best_time_to_call": ("best_time_to_call", "besttimetocall", "best_time"),
    "ready_to_call": ("ready_to_call", "readytocall"),
}

_ANALYSIS_PREFIXES = ("website_analysis.", "websiteanalysis.")
_ISSUE_SEPARATOR = ";"


class UnsupportedFileTypeError(ValueError):
    """Raised when an unsupported file format is passed to the loader."""


def load_raw_leads(
    path: PathLike,
    *,
    column_mapping: Optional[Mapping[str, str]] = None,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Load raw lead mappings ready for :func:`lead_dispatch.normalize.normalize`.

    Parameters
    ----------
    path:
        Path to a CSV/TSV/XLSX spreadsheet or a JSON file holding a list of
        lead objects (or ``{"leads": [...]}``).
    column_mapping:
        Optional mapping of lead field names to spreadsheet column names.
        Columns not mentioned are resolved through common synonyms.
    sheet_name:
        Sheet selector passed to :func:`pandas.read_excel`. Ignored for other
        formats.
    loader_kwargs:
        Extra keyword arguments forwarded to :func:`pandas.read_csv` or
        :func:`pandas.read_excel`.
    """

    path_obj = Path(path)
    if path_obj.suffix.lower() == ".json":
        return _load_json(path_obj)

    dataframe = _read_dataframe(path_obj, sheet_name=sheet_name, loader_kwargs=loader_kwargs)
    mapping = dict(column_mapping or {})
    rows: List[Dict[str, Any]] = []
    for _, row in dataframe.iterrows():
        if _row_is_empty(row):
            continue
        rows.append(_row_to_raw(row, list(dataframe.columns), mapping))
    return rows


def _load_json(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, Mapping):
        data = data.get("leads", [])
    if not isinstance(data, list):
        raise ValueError(f"JSON lead file '{path}' must contain a list of leads")
    return [dict(item) for item in data if isinstance(item, Mapping)]


def _read_dataframe(
    path: Path,
    *,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> pd.DataFrame:
    loader_kwargs = dict(loader_kwargs or {})
    suffix = path.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            loader_kwargs.setdefault("sep", "\t")
        loader_kwargs.setdefault("dtype", str)
        return pd.read_csv(path, **loader_kwargs)

    if suffix in {".xls", ".xlsx", ".xlsm", ".xlsb"}:
        return pd.read_excel(path, sheet_name=sheet_name, engine=loader_kwargs.pop("engine", None) or "openpyxl", **loader_kwargs)

    raise UnsupportedFileTypeError(f"Unsupported file extension: {path.suffix}")


def _row_is_empty(row: pd.Series) -> bool:
    return all(pd.isna(value) or (isinstance(value, str) and not value.strip()) for value in row.values)


def _row_to_raw(row: pd.Series, columns: Sequence[str], mapping: Mapping[str, str]) -> Dict[str, Any]:
    raw: Dict[str, Any] = {}
    for field in _FIELD_SYNONYMS:
        column = mapping.get(field) or _resolve_column(field, columns)
        if column is None or column not in row:
            continue
        value = _clean_value(row[column])
        if value is not None:
            raw[field] = value

    analysis: Dict[str, Any] = {}
    for column in columns:
        lowered = str(column).strip().lower()
        for prefix in _ANALYSIS_PREFIXES:
            if lowered.startswith(prefix):
                value = _clean_value(row[column])
                if value is not None:
                    analysis[str(column).strip()[len(prefix):]] = value
                break
    if analysis:
        issues = analysis.get("issues")
        if isinstance(issues, str):
            analysis["issues"] = [item.strip() for item in issues.split(_ISSUE_SEPARATOR) if item.strip()]
        raw["website_analysis"] = analysis
    return raw


def _resolve_column(field: str, columns: Sequence[str]) -> Optional[str]:
    synonyms = _FIELD_SYNONYMS.get(field, (field,))
    by_key = {str(column).strip().lower().replace(" ", "_"): column for column in columns}
    for synonym in synonyms:
        if synonym in by_key:
            return by_key[synonym]
    return None


def _clean_value(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


__all__ = ["load_raw_leads", "UnsupportedFileTypeError"]
