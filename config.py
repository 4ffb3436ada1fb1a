import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from errors import ConfigurationError

# Maps each report category to its ACS numerator and denominator variable IDs.
# Race shares use the B02001 "alone" counts over the B02001 total; the
# Hispanic share uses B03003, which cuts across the race categories.
ACS_CATEGORY_VARIABLES = {
    "white": {"variable": "B02001_002E", "denominator": "B02001_001E"},     # White alone
    "black": {"variable": "B02001_003E", "denominator": "B02001_001E"},     # Black or African American alone
    "native": {"variable": "B02001_004E", "denominator": "B02001_001E"},    # American Indian and Alaska Native alone
    "hispanic": {"variable": "B03003_003E", "denominator": "B03003_001E"},  # Hispanic or Latino
}

# Maps state/territory names to their FIPS codes.
# Uses lowercase for easy, case-insensitive matching.
STATE_FIPS_MAP = {
    "alabama": "01", "alaska": "02", "arizona": "04", "arkansas": "05", "california": "06",
    "colorado": "08", "connecticut": "09", "delaware": "10", "district of columbia": "11",
    "florida": "12", "georgia": "13", "hawaii": "15", "idaho": "16", "illinois": "17",
    "indiana": "18", "iowa": "19", "kansas": "20", "kentucky": "21", "louisiana": "22",
    "maine": "23", "maryland": "24", "massachusetts": "25", "michigan": "26",
    "minnesota": "27", "mississippi": "28", "missouri": "29", "montana": "30",
    "nebraska": "31", "nevada": "32", "new hampshire": "33", "new jersey": "34",
    "new mexico": "35", "new york": "36", "north carolina": "37", "north dakota": "38",
    "ohio": "39", "oklahoma": "40", "oregon": "41", "pennsylvania": "42",
    "rhode island": "44", "south carolina": "45", "south dakota": "46", "tennessee": "47",
    "texas": "48", "utah": "49", "vermont": "50", "virginia": "51", "washington": "53",
    "west virginia": "54", "wisconsin": "55", "wyoming": "56",
    # --- Territories ---
    "puerto rico": "72",
}

# First and last year each ACS product was published for county geographies.
# The 3-year product was discontinued after the 2011-2013 release; the last
# year of the ongoing products can be raised with ACS_LAST_YEAR.
SURVEY_YEAR_RANGES = {
    "acs/acs1": (2005, 2024),
    "acs/acs3": (2007, 2013),
    "acs/acs5": (2009, 2024),
}

ONGOING_SURVEYS = ("acs/acs1", "acs/acs5")

SURVEY_NAMES = {
    "acs/acs1": "American Community Survey 1-Year Estimates",
    "acs/acs3": "American Community Survey 3-Year Estimates",
    "acs/acs5": "American Community Survey 5-Year Estimates",
}

# Output column keys and their display labels, in report order.
REPORT_COLUMNS = {
    "county_name": "County",
    "white_pct": "White (%)",
    "black_pct": "Black or African American (%)",
    "native_pct": "American Indian and Alaska Native (%)",
    "hispanic_pct": "Hispanic or Latino (%)",
    "other_pct": "Other (%)",
    "registered_voters": "Registered Voters",
}


class ReportSettings(BaseModel):
    """Everything one report run needs, passed explicitly to each stage."""

    state: str = Field(..., min_length=1, description="Full state name, e.g. 'Washington'")
    year: int = Field(..., description="ACS release year")
    census_api_key: str = Field(..., min_length=1)
    survey: str = Field(default="acs/acs5")
    eavs_url: str = Field(..., min_length=1, description="URL of the EAVS public release CSV")
    eavs_state_column: str = "State_Full"
    eavs_geo_column: str = "FIPSCode"
    eavs_registration_column: str = "A1a"
    eavs_encoding: str = "latin-1"
    timeout_seconds: float = 60.0
    acs_last_year: Optional[int] = Field(default=None, description="Latest published release of the ongoing ACS products")

    def survey_years(self) -> tuple[int, int]:
        first_year, last_year = SURVEY_YEAR_RANGES[self.survey]
        if self.acs_last_year is not None and self.survey in ONGOING_SURVEYS:
            last_year = self.acs_last_year
        return first_year, last_year


def load_settings(env_file: Optional[str] = None, **overrides) -> ReportSettings:
    """
    Builds ReportSettings from the environment (and an optional .env file).

    Keyword overrides win over environment values; None overrides are ignored.
    """
    load_dotenv(dotenv_path=env_file)

    values = {
        "state": os.getenv("REPORT_STATE", "Washington"),
        "year": os.getenv("REPORT_YEAR", "2018"),
        "census_api_key": os.getenv("CENSUS_API_KEY"),
        "survey": os.getenv("ACS_SURVEY", "acs/acs5"),
        "eavs_url": os.getenv("EAVS_DATASET_URL"),
        "eavs_state_column": os.getenv("EAVS_STATE_COLUMN", "State_Full"),
        "eavs_geo_column": os.getenv("EAVS_GEO_COLUMN", "FIPSCode"),
        "eavs_registration_column": os.getenv("EAVS_REGISTRATION_COLUMN", "A1a"),
        "eavs_encoding": os.getenv("EAVS_CSV_ENCODING", "latin-1"),
        "timeout_seconds": os.getenv("HTTP_TIMEOUT_SECONDS", "60"),
        "acs_last_year": os.getenv("ACS_LAST_YEAR") or None,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values["census_api_key"]:
        raise ConfigurationError("CENSUS_API_KEY not found in environment or .env file. Please add it.")
    if not values["eavs_url"]:
        raise ConfigurationError("EAVS_DATASET_URL not found in environment or .env file. Please add it.")
    if values["survey"] not in SURVEY_YEAR_RANGES:
        raise ConfigurationError(
            f"Unsupported survey '{values['survey']}'. Supported surveys are: {list(SURVEY_YEAR_RANGES.keys())}"
        )

    try:
        return ReportSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid report settings: {e}") from e
