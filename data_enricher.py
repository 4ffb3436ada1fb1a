from models import MergedRow, ReportRow
from errors import MalformedRegistrationValue

COUNTY_SUFFIX = " County"


def other_share(row: MergedRow) -> float:
    # Hispanic or Latino overlaps the race categories, so this can go negative; keep it.
    return 1 - (row.white + row.black + row.native + row.hispanic)


def county_name(label: str) -> str:
    return label.split(COUNTY_SUFFIX)[0]


def format_percentage(share: float) -> str:
    formatted = f"{share * 100:.2f}"
    # residuals a hair below zero round to "-0.00"
    return "0.00" if formatted == "-0.00" else formatted


def format_registered_voters(raw_value: str) -> str:
    """Formats a raw registration count as '123,456'."""
    text = str(raw_value).strip().replace(",", "")
    try:
        count = float(text)
    except ValueError as e:
        raise MalformedRegistrationValue(f"Registration count is not numeric: {raw_value!r}") from e
    if not count.is_integer() or count < 0:
        raise MalformedRegistrationValue(f"Registration count is not a non-negative whole number: {raw_value!r}")
    return f"{int(count):,}"


def derive_row(row: MergedRow) -> ReportRow:
    """
    Computes the residual share and display formatting for one merged row.

    Args:
        row: A MergedRow with four category shares and a raw registration count

    Returns:
        ReportRow with percentage strings and a thousands-grouped voter count
    """
    return ReportRow(
        county_name=county_name(row.label),
        white_pct=format_percentage(row.white),
        black_pct=format_percentage(row.black),
        native_pct=format_percentage(row.native),
        hispanic_pct=format_percentage(row.hispanic),
        other_pct=format_percentage(other_share(row)),
        registered_voters=format_registered_voters(row.registered_voters),
    )


def enrich_rows(rows: list[MergedRow]) -> list[ReportRow]:
    return [derive_row(row) for row in rows]
