from datetime import date

import pandas as pd

from lead_dispatch.channels import EchoChannel, FileExportChannel
from lead_dispatch.classification import classify
from lead_dispatch.models import LeadRecord


def _leads():
    return [
        LeadRecord(id="1", name="Has phone", phone="555-1111", email="a@example.com"),
        LeadRecord(id="2", name="No contact"),
    ]


def test_echo_channel_reports_every_lead() -> None:
    channel = EchoChannel()

    result = channel.send("call", _leads())

    assert result.channel == "echo"
    assert result.succeeded == 2
    assert channel.sent == ["1", "2"]


def test_echo_channel_can_require_contact_details() -> None:
    channel = EchoChannel(require_contact=True)

    result = channel.send("email", _leads())

    assert [outcome.success for outcome in result.outcomes] == [True, False]
    assert result.failures[0].detail == "no email"


def test_file_export_channel_writes_file(tmp_path) -> None:
    target = tmp_path / "crm.csv"
    channel = FileExportChannel(target)

    result = channel.send("export", classify(_leads()))

    assert channel.last_path == target
    assert result.succeeded == 2
    frame = pd.read_csv(target)
    assert list(frame["Name"]) == ["Has phone", "No contact"]
    assert list(frame["Tier"]) == ["hot", "hot"]


def test_file_export_channel_generates_dated_name_in_directory(tmp_path) -> None:
    channel = FileExportChannel(tmp_path / "exports", label="hot")

    channel.send("export", _leads())

    expected = tmp_path / "exports" / f"leads-hot-{date.today().isoformat()}.csv"
    assert channel.last_path == expected
    assert expected.exists()
