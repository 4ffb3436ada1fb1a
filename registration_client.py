"""Registered-voter counts from the EAC Election Administration and Voting Survey CSV."""
import math
import tempfile
from pathlib import Path

import httpx
import pandas as pd
from loguru import logger

from config import ReportSettings
from errors import MalformedSource, NoMatchingState, SourceUnavailable
from models import RegistrationRecord

# EAVS encodes jurisdictions as a 10-digit code: state + county FIPS followed
# by a 5-digit sub-county part.
GEO_CODE_SCALE = 100000


def rescale_geo_code(raw_code) -> str:
    """Converts an EAVS jurisdiction code to a 5-digit county FIPS code."""
    try:
        scaled = float(str(raw_code).strip()) / GEO_CODE_SCALE
    except ValueError as e:
        raise MalformedSource(f"Non-numeric geographic code in registration data: {raw_code!r}") from e
    if not math.isfinite(scaled):
        raise MalformedSource(f"Missing geographic code in registration data: {raw_code!r}")
    if scaled.is_integer():
        return f"{int(scaled):05d}"
    # Sub-county jurisdictions; left as-is so the join reports them
    return repr(scaled)


class RegistrationClient:
    def __init__(self, settings: ReportSettings, transport: httpx.AsyncBaseTransport = None):
        self.url = settings.eavs_url
        self.state_column = settings.eavs_state_column
        self.geo_column = settings.eavs_geo_column
        self.count_column = settings.eavs_registration_column
        self.encoding = settings.eavs_encoding
        self.timeout = settings.timeout_seconds
        self._transport = transport

    async def _download(self, destination: Path) -> None:
        logger.info(f"Downloading registration dataset from {self.url}")
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout, follow_redirects=True) as client:
                async with client.stream("GET", self.url) as response:
                    response.raise_for_status()
                    with open(destination, "wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(f"Registration dataset download failed with status {e.response.status_code}") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise SourceUnavailable(f"Registration dataset download failed: {e}") from e

    def _read(self, path: Path) -> pd.DataFrame:
        columns = [self.state_column, self.geo_column, self.count_column]
        try:
            return pd.read_csv(path, usecols=columns, dtype=str, encoding=self.encoding)
        except pd.errors.EmptyDataError as e:
            raise MalformedSource("Registration dataset is empty") from e
        except ValueError as e:
            # missing usecols, ParserError and decode errors are all ValueErrors
            raise MalformedSource(f"Registration dataset is missing {columns} or cannot be parsed: {e}") from e

    async def fetch(self, state: str) -> list[RegistrationRecord]:
        """
        Downloads the national dataset and returns one record per jurisdiction of `state`,
        sorted by rescaled geo_id descending.
        """
        with tempfile.TemporaryDirectory(prefix="eavs_") as tmp_dir:
            path = Path(tmp_dir) / "eavs.csv"
            await self._download(path)
            df = self._read(path)

        target = state.strip().upper()
        matches = df[df[self.state_column].fillna("").str.strip().str.upper() == target]
        if matches.empty:
            raise NoMatchingState(f"No registration rows for state '{state}' in column {self.state_column}")

        records = [
            RegistrationRecord(
                geo_id=rescale_geo_code(row[self.geo_column]),
                registered_voters="" if pd.isna(row[self.count_column]) else str(row[self.count_column]),
            )
            for _, row in matches.iterrows()
        ]
        records.sort(key=lambda record: record.geo_id, reverse=True)
        logger.debug(f"Kept {len(records)} registration rows for {state}")
        return records
