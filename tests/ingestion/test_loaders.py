import json

import pandas as pd
import pytest

from lead_dispatch.ingestion.loaders import UnsupportedFileTypeError, load_raw_leads
from lead_dispatch.normalize import normalize


@pytest.fixture()
def sample_dataframe():
    return pd.DataFrame(
        [
            {
                "Place ID": "p1",
                "Business Name": "Joe's Plumbing",
                "Phone": "555-1234",
                "Website": "",
                "Rating": "4.7",
                "website_analysis.hasWebsite": "",
                "website_analysis.issues": "",
            },
            {
                "Place ID": "p2",
                "Business Name": "Legacy Bakery",
                "Phone": "",
                "Website": "bakery.example",
                "Rating": "3.9",
                "website_analysis.hasWebsite": "true",
                "website_analysis.issues": "No SSL; Slow; Broken links",
            },
            {
                "Place ID": "",
                "Business Name": "",
                "Phone": "",
                "Website": "",
                "Rating": "",
                "website_analysis.hasWebsite": "",
                "website_analysis.issues": "",
            },
        ]
    )


def test_load_raw_leads_from_csv_resolves_synonyms(sample_dataframe, tmp_path) -> None:
    csv_path = tmp_path / "leads.csv"
    sample_dataframe.to_csv(csv_path, index=False)

    rows = load_raw_leads(csv_path)

    assert len(rows) == 2
    first, second = rows
    assert first == {"id": "p1", "name": "Joe's Plumbing", "phone": "555-1234", "rating": "4.7"}
    assert second["website"] == "bakery.example"
    assert second["website_analysis"] == {
        "hasWebsite": "true",
        "issues": ["No SSL", "Slow", "Broken links"],
    }

    lead = normalize(second)
    assert lead.website_analysis.has_website is True
    assert len(lead.website_analysis.issues) == 3


def test_load_raw_leads_with_explicit_mapping(tmp_path) -> None:
    csv_path = tmp_path / "custom.csv"
    pd.DataFrame([{"Ref": "42", "Shop": "Corner Store", "Tel": "555-0000"}]).to_csv(csv_path, index=False)

    rows = load_raw_leads(csv_path, column_mapping={"id": "Ref", "name": "Shop", "phone": "Tel"})

    assert rows == [{"id": "42", "name": "Corner Store", "phone": "555-0000"}]


def test_load_raw_leads_from_excel(sample_dataframe, tmp_path) -> None:
    pytest.importorskip("openpyxl", reason="Excel loading requires openpyxl")
    excel_path = tmp_path / "leads.xlsx"
    sample_dataframe.to_excel(excel_path, index=False)

    rows = load_raw_leads(excel_path)

    assert [row["id"] for row in rows] == ["p1", "p2"]


def test_load_raw_leads_from_json(tmp_path) -> None:
    json_path = tmp_path / "leads.json"
    json_path.write_text(
        json.dumps({"leads": [{"id": "1", "name": "A", "websiteAnalysis": {"hasWebsite": False}}, "junk"]}),
        encoding="utf-8",
    )

    rows = load_raw_leads(json_path)

    assert rows == [{"id": "1", "name": "A", "websiteAnalysis": {"hasWebsite": False}}]


def test_unsupported_file_extension(tmp_path) -> None:
    bad_path = tmp_path / "leads.txt"
    bad_path.write_text("id,name", encoding="utf-8")

    with pytest.raises(UnsupportedFileTypeError):
        load_raw_leads(bad_path)
