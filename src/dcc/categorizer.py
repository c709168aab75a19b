# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Category assignment from numeric identifier sub-ranges."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY: str = "Unknown"

_ID_PARTS = re.compile(r"^([A-Za-z_]*)(\d+)$")


@dataclass(frozen=True)
class CategoryRange:
    """Represent one closed numeric range mapped to a category label."""

    low: int
    high: int
    label: str

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(
                f"Invalid category range: low={self.low} is greater than high={self.high}."
            )

    def contains(self, number: int) -> bool:
        return self.low <= number <= self.high


RangeTable = tuple[CategoryRange, ...]


def single_category(label: str) -> RangeTable:
    """Build a range table that labels every identifier the same way."""
    return (CategoryRange(low=0, high=10**9, label=label),)


def numeric_suffix(diagnostic_id: str) -> int | None:
    """Return the numeric suffix of an identifier.

    Args:
        diagnostic_id: Identifier such as ``SYSLIB0001``.

    Returns:
        Parsed suffix, or ``None`` when the identifier has no trailing digits.
    """
    match = _ID_PARTS.match(diagnostic_id)
    if match is None:
        return None
    return int(match.group(2))


def categorize(diagnostic_id: str, table: RangeTable) -> str:
    """Map an identifier to a category via an ordered range table.

    The first range containing the numeric suffix wins. Identifiers outside
    every range, or without a numeric suffix, are ``Unknown``.

    Args:
        diagnostic_id: Identifier to categorize.
        table: Ordered closed ranges for the identifier's family.

    Returns:
        Category label.
    """
    number = numeric_suffix(diagnostic_id)
    if number is None:
        logger.debug(f"Identifier has no numeric suffix (id={diagnostic_id})")
        return UNKNOWN_CATEGORY
    for category_range in table:
        if category_range.contains(number):
            return category_range.label
    return UNKNOWN_CATEGORY


def id_sort_key(diagnostic_id: str) -> tuple[str, int, str]:
    """Sort key ordering identifiers by prefix, then numeric suffix.

    Equals plain lexicographic order for fixed-width suffixes and keeps
    ``RDG10`` after ``RDG9`` for variable-width ones.
    """
    match = _ID_PARTS.match(diagnostic_id)
    if match is None:
        return (diagnostic_id, -1, diagnostic_id)
    return (match.group(1), int(match.group(2)), diagnostic_id)
