import httpx
from loguru import logger

from config import STATE_FIPS_MAP, ReportSettings
from errors import EmptyResult, InvalidVariable, SourceUnavailable
from models import GeoEstimate


class CensusAPIClient:
    BASE_URL = "https://api.census.gov/data"

    def __init__(self, settings: ReportSettings, transport: httpx.AsyncBaseTransport = None):
        self.api_key = settings.census_api_key
        self.survey = settings.survey
        self.survey_years = settings.survey_years()
        self.timeout = settings.timeout_seconds
        self._transport = transport

    def _check_year(self, year: int) -> None:
        first_year, last_year = self.survey_years
        if not first_year <= year <= last_year:
            raise EmptyResult(
                f"No {self.survey} release for {year}; supported years are {first_year}-{last_year}"
            )

    async def fetch_ratio_series(self, state: str, year: int, variable: str, denominator_variable: str) -> list[GeoEstimate]:
        """
        Fetches one county-level proportion series for a state.

        Args:
            state: Full state name (case-insensitive), e.g. "Washington".
            year: The ACS release year.
            variable: Numerator variable ID (e.g. "B02001_002E").
            denominator_variable: Denominator variable ID (e.g. "B02001_001E").

        Returns:
            One GeoEstimate per county with value = numerator / denominator,
            sorted by geo_id descending.
        """
        state_fips = STATE_FIPS_MAP.get(state.strip().lower())
        if not state_fips:
            raise EmptyResult(f"Invalid state name: {state}")
        self._check_year(year)

        url = f"{self.BASE_URL}/{year}/{self.survey}"
        params = {
            "get": f"NAME,{variable},{denominator_variable}",
            "for": "county:*",
            "in": f"state:{state_fips}",
            "key": self.api_key,
        }
        logger.info(f"Requesting {variable}/{denominator_variable} for {state} counties from {url}")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.RequestError as e:
            raise SourceUnavailable(f"Census API request failed: {e}") from e

        if response.status_code in (204, 404):
            raise EmptyResult(f"Census API returned no data for {state} {year} ({self.survey})")
        if response.status_code == 400 and "variable" in response.text.lower():
            raise InvalidVariable(f"Census API rejected the query for {variable}/{denominator_variable}: {response.text.strip()}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(f"Census API error {response.status_code}: {response.text.strip()}") from e

        try:
            data = response.json()
        except ValueError as e:
            # An invalid key comes back as a 200 HTML page
            raise SourceUnavailable(f"Census API returned a non-JSON response: {response.text[:200]}") from e

        if not data or len(data) < 2:  # Expecting header row + data rows
            raise EmptyResult(f"Census API returned no county rows for {state} {year}")

        header = data[0]
        records = [dict(zip(header, row)) for row in data[1:]]
        series = [self._to_estimate(record, variable, denominator_variable) for record in records]
        series.sort(key=lambda estimate: estimate.geo_id, reverse=True)
        logger.debug(f"Received {len(series)} county rows for {variable}")
        return series

    @staticmethod
    def _to_estimate(record: dict, variable: str, denominator_variable: str) -> GeoEstimate:
        name = record.get("NAME", "")
        try:
            numerator = float(record[variable])
            denominator = float(record[denominator_variable])
            geo_id = f"{record['state']}{record['county']}"
        except (KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"Census API returned an unusable row for {name or 'unknown county'}: {record}") from e
        # Missing estimates come back as negative annotation codes such as -666666666
        if numerator < 0 or denominator < 0:
            raise SourceUnavailable(
                f"Census API returned a missing-value code for {name}: {variable}={record[variable]}, "
                f"{denominator_variable}={record[denominator_variable]}"
            )
        if denominator == 0:
            raise SourceUnavailable(f"Census API returned a zero {denominator_variable} for {name}")
        value = numerator / denominator
        if value > 1:
            raise SourceUnavailable(f"{variable} exceeds {denominator_variable} for {name}: ratio {value}")
        return GeoEstimate(geo_id=geo_id, label=name, value=value)
