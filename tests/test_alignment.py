import pytest

from alignment import join_series
from errors import AlignmentMismatch
from models import GeoEstimate, RegistrationRecord

LABELS = {"53075": "Whitman County, Washington", "53033": "King County, Washington", "53001": "Adams County, Washington"}


def make_series(value, geo_ids=("53075", "53033", "53001")):
    return [GeoEstimate(geo_id=geo_id, label=LABELS.get(geo_id, geo_id), value=value) for geo_id in geo_ids]


def make_registration(geo_ids=("53075", "53033", "53001")):
    return [RegistrationRecord(geo_id=geo_id, registered_voters="1000") for geo_id in geo_ids]


@pytest.fixture()
def series():
    return {
        "white": make_series(0.7),
        "black": make_series(0.03),
        "native": make_series(0.01),
        "hispanic": make_series(0.1),
    }


def test_join_merges_by_geo_id(series):
    merged = join_series(series, make_registration())

    assert [row.geo_id for row in merged] == ["53075", "53033", "53001"]
    king = merged[1]
    assert king.label == "King County, Washington"
    assert (king.white, king.black, king.native, king.hispanic) == (0.7, 0.03, 0.01, 0.1)
    assert king.registered_voters == "1000"


def test_join_does_not_depend_on_input_order(series):
    series["black"] = list(reversed(series["black"]))
    series["black"][0] = GeoEstimate(geo_id="53001", label=LABELS["53001"], value=0.5)

    merged = join_series(series, list(reversed(make_registration())))

    by_id = {row.geo_id: row for row in merged}
    assert by_id["53001"].black == 0.5
    assert by_id["53075"].black == 0.03


def test_row_count_mismatch(series):
    series["native"] = make_series(0.01, geo_ids=("53075", "53033"))

    with pytest.raises(AlignmentMismatch, match="row counts"):
        join_series(series, make_registration())


def test_key_mismatch_with_registration(series):
    registration = make_registration(geo_ids=("53075", "53033", "53003"))

    with pytest.raises(AlignmentMismatch, match="registration"):
        join_series(series, registration)


def test_duplicate_geo_id(series):
    registration = make_registration(geo_ids=("53075", "53033", "53033"))

    with pytest.raises(AlignmentMismatch, match="Duplicate"):
        join_series(series, registration)


def test_missing_category(series):
    del series["hispanic"]

    with pytest.raises(AlignmentMismatch, match="hispanic"):
        join_series(series, make_registration())
