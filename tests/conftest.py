import sys
from pathlib import Path

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import ReportSettings

# county FIPS -> (NAME, {variable: estimate})
WASHINGTON_COUNTIES = {
    "001": ("Adams County, Washington", {
        "B02001_001E": 1000, "B02001_002E": 700, "B02001_003E": 30, "B02001_004E": 10,
        "B03003_001E": 1000, "B03003_003E": 100,
    }),
    "033": ("King County, Washington", {
        "B02001_001E": 2000000, "B02001_002E": 1300000, "B02001_003E": 130000, "B02001_004E": 20000,
        "B03003_001E": 2000000, "B03003_003E": 190000,
    }),
    "075": ("Whitman County, Washington", {
        "B02001_001E": 48000, "B02001_002E": 40000, "B02001_003E": 1000, "B02001_004E": 500,
        "B03003_001E": 48000, "B03003_003E": 3000,
    }),
}

EAVS_CSV = """State_Full,FIPSCode,Jurisdiction_Name,A1a
WASHINGTON,5300100000,ADAMS COUNTY,123456
WASHINGTON,5303300000,KING COUNTY,1300000
WASHINGTON,5307500000,WHITMAN COUNTY,25000
OREGON,4100100000,BAKER COUNTY,12000
"""


def census_handler(counties=None, calls=None):
    """Builds a MockTransport handler answering Census county queries from `counties`."""
    counties = WASHINGTON_COUNTIES if counties is None else counties

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        requested = request.url.params["get"].split(",")
        variables = [name for name in requested if name != "NAME"]
        body = [requested + ["state", "county"]]
        for county_code, (name, values) in counties.items():
            row = [name] + [str(values[variable]) for variable in variables] + ["53", county_code]
            body.append(row)
        return httpx.Response(200, json=body)

    return handler


def csv_handler(content=EAVS_CSV, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content.encode("latin-1"))

    return handler


@pytest.fixture()
def settings():
    return ReportSettings(
        state="Washington",
        year=2018,
        census_api_key="test-key",
        eavs_url="https://eavs.example.test/EAVS_2018.csv",
    )


@pytest.fixture()
def track_temp_dirs(monkeypatch, tmp_path):
    """Records every TemporaryDirectory the registration client creates."""
    import tempfile

    created = []
    real_temporary_directory = tempfile.TemporaryDirectory

    def tracking(*args, **kwargs):
        kwargs.setdefault("dir", tmp_path)
        temp_dir = real_temporary_directory(*args, **kwargs)
        created.append(Path(temp_dir.name))
        return temp_dir

    monkeypatch.setattr(tempfile, "TemporaryDirectory", tracking)
    return created
