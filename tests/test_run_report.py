import pytest

import run_report
from errors import NoMatchingState
from models import ReportRow
from report import assemble_report


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("CENSUS_API_KEY", "test-key")
    monkeypatch.setenv("EAVS_DATASET_URL", "https://eavs.example.test/EAVS_2018.csv")


def test_main_prints_report(monkeypatch, capsys):
    async def fake_build_report(settings):
        row = ReportRow(county_name="Adams", white_pct="70.00", black_pct="3.00", native_pct="1.00",
                        hispanic_pct="10.00", other_pct="16.00", registered_voters="123,456")
        return assemble_report([row], settings)

    monkeypatch.setattr(run_report, "build_report", fake_build_report)

    exit_code = run_report.main(["--state", "Washington", "--year", "2018", "--verbose"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert output.startswith("Washington county demographics and voter registration, 2018")
    assert "123,456" in output


def test_main_returns_nonzero_on_report_error(monkeypatch, capsys):
    async def failing_build_report(settings):
        raise NoMatchingState("no rows for Washington")

    monkeypatch.setattr(run_report, "build_report", failing_build_report)

    assert run_report.main(["--state", "Washington", "--verbose"]) == 1
    assert capsys.readouterr().out == ""
