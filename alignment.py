"""Merges the category series and registration counts into one row per county."""
from typing import Dict, List, Sequence

from loguru import logger

from config import ACS_CATEGORY_VARIABLES
from errors import AlignmentMismatch
from models import GeoEstimate, MergedRow, RegistrationRecord


def _index_by_geo_id(name: str, rows: Sequence) -> Dict[str, object]:
    indexed = {}
    for row in rows:
        if row.geo_id in indexed:
            raise AlignmentMismatch(f"Duplicate geo_id {row.geo_id} in {name}")
        indexed[row.geo_id] = row
    return indexed


def join_series(series: Dict[str, List[GeoEstimate]], registration: List[RegistrationRecord]) -> List[MergedRow]:
    """
    Joins every category series and the registration records on geo_id.

    All inputs must cover exactly the same counties. Any difference in row
    count, duplicate geo_id or differing key set raises AlignmentMismatch
    rather than producing a partial or shifted table.

    Returns:
        MergedRow list in geo_id descending order.
    """
    missing_categories = [category for category in ACS_CATEGORY_VARIABLES if category not in series]
    if missing_categories:
        raise AlignmentMismatch(f"Missing category series: {', '.join(missing_categories)}")

    inputs = {category: series[category] for category in ACS_CATEGORY_VARIABLES}
    inputs["registration"] = registration

    row_counts = {name: len(rows) for name, rows in inputs.items()}
    if len(set(row_counts.values())) > 1:
        raise AlignmentMismatch(f"Inputs have different row counts: {row_counts}")

    indexed = {name: _index_by_geo_id(name, rows) for name, rows in inputs.items()}

    reference_name = next(iter(ACS_CATEGORY_VARIABLES))
    reference_keys = set(indexed[reference_name])
    for name, rows_by_id in indexed.items():
        if set(rows_by_id) != reference_keys:
            only_here = sorted(set(rows_by_id) - reference_keys)
            only_reference = sorted(reference_keys - set(rows_by_id))
            raise AlignmentMismatch(
                f"{name} does not cover the same counties as {reference_name}: "
                f"extra {only_here}, missing {only_reference}"
            )

    merged = []
    for geo_id in sorted(reference_keys, reverse=True):
        merged.append(
            MergedRow(
                geo_id=geo_id,
                label=indexed[reference_name][geo_id].label,
                white=indexed["white"][geo_id].value,
                black=indexed["black"][geo_id].value,
                native=indexed["native"][geo_id].value,
                hispanic=indexed["hispanic"][geo_id].value,
                registered_voters=indexed["registration"][geo_id].registered_voters,
            )
        )
    logger.debug(f"Joined {len(merged)} counties across {len(inputs)} inputs")
    return merged
