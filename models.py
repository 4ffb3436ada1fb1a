"""Typed records passed between pipeline stages."""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class GeoEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    geo_id: str = Field(..., description="State + county FIPS code, e.g. '53033'")
    label: str = Field(..., description="Census NAME, e.g. 'King County, Washington'")
    value: float = Field(..., ge=0, le=1, description="Numerator estimate divided by denominator estimate")


class RegistrationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    geo_id: str
    registered_voters: str = Field(..., description="Raw count text as it appears in the dataset")


class MergedRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    geo_id: str
    label: str
    white: float
    black: float
    native: float
    hispanic: float
    registered_voters: str


class ReportRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    county_name: str
    white_pct: str
    black_pct: str
    native_pct: str
    hispanic_pct: str
    other_pct: str
    registered_voters: str


class ReportTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: str
    year: int
    caption: str
    footnote: str
    columns: List[str]
    column_labels: List[str]
    rows: List[ReportRow]
