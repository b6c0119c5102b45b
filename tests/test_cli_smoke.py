"""Smoke tests for the CLI entry point."""
from __future__ import annotations

import json

import pandas as pd
import pytest

from lead_dispatch import __main__
from lead_dispatch.cli import main

_INPUT_CSV = (
    "id,name,phone,website,rating,best_time_to_call\n"
    "1,Joe's Plumbing,555-1234,,4.7,9:00\n"
    "2,Modern Dental,,dental.example,4.1,14:00\n"
    "3,Corner Cafe,555-9999,,3.2,\n"
    ",Missing Id,,,,\n"
)


@pytest.fixture()
def input_path(tmp_path):
    path = tmp_path / "input.csv"
    path.write_text(_INPUT_CSV, encoding="utf-8")
    return path


def test_cli_writes_selected_group(input_path, tmp_path) -> None:
    output_path = tmp_path / "hot.csv"

    exit_code = main([str(input_path), str(output_path), "--group", "hot", "--sort-by-score"])

    assert exit_code == 0
    frame = pd.read_csv(output_path)
    assert list(frame["Name"]) == ["Joe's Plumbing", "Corner Cafe"]
    assert list(frame["Score"]) == [105, 95]


def test_cli_dispatch_blocked_by_credits(input_path, tmp_path) -> None:
    exit_code = main(
        [str(input_path), str(tmp_path / "out.csv"), "--action", "verify", "--credits", "1"]
    )

    assert exit_code == 1


def test_cli_dispatch_with_configured_channel(input_path, tmp_path) -> None:
    export_path = tmp_path / "crm" / "export.csv"
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "credits": {"balance": 10},
                "channels": [
                    {
                        "name": "CRM export",
                        "action": "export",
                        "class": "lead_dispatch.channels.export.FileExportChannel",
                        "options": {"path": str(export_path)},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    exit_code = main(
        [str(input_path), str(tmp_path / "out.csv"), "--config", str(config_path), "--group", "cold", "--action", "export"]
    )

    assert exit_code == 0
    assert "Modern Dental" in export_path.read_text(encoding="utf-8")


def test_module_entry_point_delegates_to_cli(input_path, tmp_path) -> None:
    output_path = tmp_path / "results.csv"

    exit_code = __main__.main([str(input_path), str(output_path), "--action", "email"])

    assert exit_code == 0
    assert "Corner Cafe" in output_path.read_text(encoding="utf-8")


def test_module_entry_point_without_arguments_shows_help(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = __main__.main([])

    captured = capsys.readouterr()
    assert "python -m lead_dispatch" in captured.out
    assert exit_code == 2
