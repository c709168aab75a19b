# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Family assembly and index construction."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from dcc.model import DiagnosticRecord, Family, FamilyDescriptor
from dcc.reconciler import dedupe_first, sort_records

logger = logging.getLogger(__name__)

INDEX_VERSION: str = "1.0"


def family_file_name(prefix: str) -> str:
    return f"{prefix.lower()}.json"


def assemble_family(
    descriptor: FamilyDescriptor, records: Iterable[DiagnosticRecord]
) -> Family:
    """Package reconciled records under their family descriptor.

    Records whose identifier does not match the family pattern are dropped,
    the rest are deduplicated (first wins) and sorted by identifier.

    Args:
        descriptor: Family descriptor.
        records: Reconciled records.

    Returns:
        Immutable family output.
    """
    matching: list[DiagnosticRecord] = []
    for record in records:
        if not descriptor.matches(record.id):
            logger.debug(
                f"Dropping identifier outside family pattern "
                f"(prefix={descriptor.prefix} id={record.id} pattern={descriptor.pattern})"
            )
            continue
        matching.append(record)
    unique = dedupe_first(matching)
    return Family(descriptor=descriptor, records=tuple(sort_records(unique.values())))


def build_index(families: Sequence[Family]) -> dict[str, dict[str, Any]]:
    """Summarize families as ``prefix -> {file, repo, pattern, count, description}``."""
    return {
        family.prefix: {
            "file": family_file_name(family.prefix),
            "repo": family.descriptor.repo,
            "pattern": family.descriptor.pattern,
            "count": family.count,
            "description": family.descriptor.description,
        }
        for family in families
    }
