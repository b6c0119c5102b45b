"""Loading raw lead files and exporting classified leads."""
from __future__ import annotations

from .exporters import EXPORT_COLUMNS, classified_to_dataframe, export_classified_leads
from .loaders import UnsupportedFileTypeError, load_raw_leads

__all__ = [
    "EXPORT_COLUMNS",
    "UnsupportedFileTypeError",
    "classified_to_dataframe",
    "export_classified_leads",
    "load_raw_leads",
]
