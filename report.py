"""Runs the county report pipeline and shapes its output for display."""
from typing import List

import httpx
import pandas as pd
from loguru import logger

from alignment import join_series
from census_api_client import CensusAPIClient
from config import ACS_CATEGORY_VARIABLES, REPORT_COLUMNS, SURVEY_NAMES, ReportSettings
from data_enricher import enrich_rows
from models import ReportRow, ReportTable
from registration_client import RegistrationClient

FOOTNOTE_TEMPLATE = (
    "Sources: U.S. Census Bureau, {survey_name} ({year}), tables B02001 and B03003; "
    "U.S. Election Assistance Commission, Election Administration and Voting Survey. "
    "Hispanic or Latino may be of any race, so Other can be negative."
)


def assemble_report(rows: List[ReportRow], settings: ReportSettings) -> ReportTable:
    """Orders rows by county name and attaches column labels, caption and footnote."""
    ordered = sorted(rows, key=lambda row: row.county_name)
    return ReportTable(
        state=settings.state,
        year=settings.year,
        caption=f"{settings.state} county demographics and voter registration, {settings.year}",
        footnote=FOOTNOTE_TEMPLATE.format(survey_name=SURVEY_NAMES[settings.survey], year=settings.year),
        columns=list(REPORT_COLUMNS.keys()),
        column_labels=list(REPORT_COLUMNS.values()),
        rows=ordered,
    )


async def build_report(
    settings: ReportSettings,
    census_transport: httpx.AsyncBaseTransport = None,
    registration_transport: httpx.AsyncBaseTransport = None,
) -> ReportTable:
    """
    Fetches every category series and the registration counts one after another,
    then joins, derives and assembles the report. Any failure aborts the run.
    """
    census = CensusAPIClient(settings, transport=census_transport)
    series = {}
    for category, codes in ACS_CATEGORY_VARIABLES.items():
        series[category] = await census.fetch_ratio_series(
            settings.state, settings.year, codes["variable"], codes["denominator"]
        )

    registration = await RegistrationClient(settings, transport=registration_transport).fetch(settings.state)

    merged = join_series(series, registration)
    report = assemble_report(enrich_rows(merged), settings)
    logger.info(f"Built report for {settings.state} {settings.year} with {len(report.rows)} counties")
    return report


def to_dataframe(report: ReportTable) -> pd.DataFrame:
    df = pd.DataFrame([row.model_dump() for row in report.rows], columns=report.columns)
    return df.rename(columns=dict(zip(report.columns, report.column_labels)))


def render_text(report: ReportTable) -> str:
    table = to_dataframe(report).to_string(index=False)
    return f"{report.caption}\n\n{table}\n\n{report.footnote}"
